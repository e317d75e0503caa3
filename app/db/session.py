"""Engine and store factories."""

from functools import lru_cache

from sqlalchemy import create_engine

from app.core.config import settings
from app.db.store import DocumentStore


def create_store(database_url: str | None = None) -> DocumentStore:
    """Build a DocumentStore for ``database_url`` (defaults to settings)."""
    engine = create_engine(str(database_url or settings.database_url), pool_pre_ping=True)
    return DocumentStore(
        engine,
        max_attempts=settings.transaction_max_attempts,
        retry_backoff=settings.transaction_retry_backoff,
    )


@lru_cache
def get_store() -> DocumentStore:
    """FastAPI dependency returning the application's store."""
    return create_store()
