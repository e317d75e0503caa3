"""Database initialization utilities."""

from app import models  # noqa: F401
from app.db.base import Base
from app.db.store import DocumentStore


def init_db(store: DocumentStore) -> None:
    """Create tables that do not exist yet."""
    Base.metadata.create_all(bind=store.engine)
