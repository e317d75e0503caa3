"""Document-style access to the database: retried transactions and live queries.

Every service receives a ``DocumentStore`` at construction time. The store owns
the session factory, runs read-modify-write units with optimistic conflict
detection (rows carry a ``version`` column) and re-delivers full query results
to subscribers after each committed write.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, TypeVar

from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import SubscriptionSetupError, TransactionConflict, Unavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_BACKOFF_SECONDS = 2.0


class Subscription:
    """Handle for a live query. ``unsubscribe`` may be called any number of times."""

    def __init__(
        self,
        store: "DocumentStore",
        fetch: Callable[[Session], Any],
        callback: Callable[[Any], None],
    ) -> None:
        self._store = store
        self._fetch = fetch
        self._callback = callback
        self._lock = threading.RLock()
        self._last: Any = None
        self._delivered = False
        self.active = True

    def refresh(self) -> None:
        """Re-run the query and hand the full result to the callback if it changed."""
        if not self.active:
            return
        with self._lock:
            with self._store.session() as db:
                result = self._fetch(db)
            if not self.active or (self._delivered and result == self._last):
                return
            self._last = result
            self._delivered = True
            self._callback(result)

    def unsubscribe(self) -> None:
        # waits for a delivery in progress on another thread
        with self._lock:
            self.active = False
        self._store._remove_listener(self)

    __call__ = unsubscribe


class DocumentStore:
    """Transactional store handle shared by the services."""

    def __init__(
        self,
        engine: Engine,
        max_attempts: int = 5,
        retry_backoff: float = 0.1,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.engine = engine
        self.max_attempts = max_attempts
        self.retry_backoff = retry_backoff
        self.session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        self._listeners: list[Subscription] = []
        self._listeners_lock = threading.Lock()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Read-only session; nothing is committed."""
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def run_transaction(self, fn: Callable[[Session], T]) -> T:
        """Run ``fn`` in its own session and commit, retrying conflicts.

        ``fn`` may be invoked several times and must not keep state between
        attempts. Anything other than a version conflict or an operational
        database error is rolled back and re-raised untouched.
        """
        last_error: Exception | None = None
        last_cause: Exception | None = None
        for attempt in range(1, self.max_attempts + 1):
            db = self.session_factory()
            try:
                result = fn(db)
                db.commit()
            except StaleDataError as exc:
                db.rollback()
                logger.info("Transaction conflict on attempt %d/%d: %s", attempt, self.max_attempts, exc)
                last_error, last_cause = TransactionConflict(str(exc)), exc
            except OperationalError as exc:
                db.rollback()
                logger.warning("Database unavailable on attempt %d/%d: %s", attempt, self.max_attempts, exc)
                last_error, last_cause = Unavailable(str(exc.orig)), exc
            except Exception:
                db.rollback()
                raise
            else:
                self._notify_listeners()
                return result
            finally:
                db.close()

            if attempt < self.max_attempts:
                self._sleep_before_retry(attempt)

        logger.error("Transaction failed after %d attempts", self.max_attempts)
        raise last_error from last_cause

    def _sleep_before_retry(self, attempt: int) -> None:
        delay = min(self.retry_backoff * (2 ** (attempt - 1)), MAX_BACKOFF_SECONDS)
        if delay > 0:
            time.sleep(random.uniform(0, delay))

    def watch(self, fetch: Callable[[Session], Any], callback: Callable[[Any], None]) -> Subscription:
        """Subscribe ``callback`` to the result of ``fetch``.

        The current result is delivered before this returns; afterwards the
        callback gets the whole result again whenever a committed write
        changes it.
        """
        if not callable(callback):
            raise SubscriptionSetupError("The callback parameter is not a function")
        subscription = Subscription(self, fetch, callback)
        with self._listeners_lock:
            self._listeners.append(subscription)
        try:
            subscription.refresh()
        except Exception:
            subscription.unsubscribe()
            raise
        return subscription

    def _remove_listener(self, subscription: Subscription) -> None:
        with self._listeners_lock:
            if subscription in self._listeners:
                self._listeners.remove(subscription)

    def _notify_listeners(self) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for subscription in listeners:
            try:
                subscription.refresh()
            except Exception:  # noqa: BLE001
                # a broken subscriber must not fail a write that already committed
                logger.exception("Live query refresh failed")

    def close(self) -> None:
        """Drop all subscriptions and release pooled connections."""
        with self._listeners_lock:
            listeners, self._listeners = self._listeners, []
        for subscription in listeners:
            subscription.active = False
        self.engine.dispose()
