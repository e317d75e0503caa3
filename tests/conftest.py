from __future__ import annotations

import pytest
from sqlalchemy import create_engine

from app.db.init_db import init_db
from app.db.store import DocumentStore
from app.models.restaurant import Restaurant


@pytest.fixture
def store(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'friendlyeats.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    store = DocumentStore(engine, max_attempts=10, retry_backoff=0.01)
    init_db(store)
    yield store
    store.close()


@pytest.fixture
def add_restaurant(store):
    """Insert a restaurant directly and return its id."""

    def _add(**fields) -> str:
        data = {"name": "Test Bistro", "category": "Italian", "city": "Seoul", "price": 2}
        data.update(fields)

        def insert(db):
            restaurant = Restaurant(**data)
            db.add(restaurant)
            db.flush()
            return restaurant.id

        return store.run_transaction(insert)

    return _add
