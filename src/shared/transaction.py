"""Unit-of-work boundary for storefront operations.

A ``Transaction`` wraps one database connection with an open transaction.
It is created by ``TransactionCoordinator`` and handed explicitly to every
store and ledger call that belongs to the same unit of work; nothing in the
core reaches for a global connection.

Usage::

    with coordinator.transaction() as tx:
        snapshot = ledger.read(tx, product_id)
        ledger.decrement(tx, product_id, 2)

or, for a body that returns a value::

    order = coordinator.run(lambda tx: orders.find_by_id(tx, order_id))
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar
from uuid import uuid4

import structlog
from sqlalchemy import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from shared.errors import InternalError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class Transaction:
    """Handle for one all-or-nothing unit of work."""

    def __init__(self, connection: Connection) -> None:
        self.id = uuid4().hex[:12]
        self.connection = connection
        self.rollback_only = False

    def set_rollback_only(self) -> None:
        """Discard everything on exit even though the body returns normally."""
        self.rollback_only = True


class TransactionCoordinator:
    def __init__(self, engine: Engine, lock_timeout_ms: int | None = None) -> None:
        self.engine = engine
        self.lock_timeout_ms = lock_timeout_ms

    def _bound_lock_waits(self, connection: Connection) -> None:
        # SQLite is bounded by the driver's busy timeout (see shared.db)
        if self.lock_timeout_ms and connection.dialect.name == "postgresql":
            timeout = int(self.lock_timeout_ms)
            connection.exec_driver_sql(f"SET LOCAL lock_timeout = '{timeout}ms'")
            connection.exec_driver_sql(f"SET LOCAL statement_timeout = '{timeout * 2}ms'")

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        try:
            connection = self.engine.connect()
        except SQLAlchemyError as exc:
            logger.error("Could not acquire database connection", error=str(exc))
            raise InternalError() from exc

        try:
            db_transaction = connection.begin()
            tx = Transaction(connection)
            try:
                self._bound_lock_waits(connection)
                yield tx
            except BaseException as exc:
                db_transaction.rollback()
                logger.debug("Transaction rolled back", tx_id=tx.id, reason=type(exc).__name__)
                raise

            if tx.rollback_only:
                db_transaction.rollback()
                logger.debug("Transaction rolled back", tx_id=tx.id, reason="rollback_only")
            else:
                db_transaction.commit()
                logger.debug("Transaction committed", tx_id=tx.id)
        except SQLAlchemyError as exc:
            logger.error("Transaction failed", error_type=type(exc).__name__, error=str(exc))
            raise InternalError() from exc
        finally:
            connection.close()

    def run(self, body: Callable[[Transaction], T]) -> T:
        """Run ``body`` inside a transaction and return its result."""
        with self.transaction() as tx:
            return body(tx)
