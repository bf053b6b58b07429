"""
Transaction coordinator.

The only component that opens write transactions against the ledger and the
movement log. Work runs inside ``run_atomic``: it commits when the callable
returns and rolls back when it raises, so callers never observe a partial
movement.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.exceptions import StaleReferenceError
from stockledger.infrastructure.storage.sqlite.connection import ConnectionPool
from stockledger.infrastructure.storage.sqlite.ledger import SQLiteInventoryLedger
from stockledger.infrastructure.storage.sqlite.movement_log import SQLiteMovementLog

logger = get_logger(__name__)

T = TypeVar("T")


class UnitOfWork:
    """Ledger and log sharing one open transaction."""

    def __init__(self, conn: aiosqlite.Connection):
        self.conn = conn
        self.ledger = SQLiteInventoryLedger(conn)
        self.movements = SQLiteMovementLog(conn)


class TransactionCoordinator:
    """Wraps ledger/log work in all-or-nothing units of work."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[UnitOfWork]:
        async with self._pool.transaction() as conn:
            yield UnitOfWork(conn)

    async def run_atomic(self, fn: Callable[[UnitOfWork], Awaitable[T]]) -> T:
        """Run ``fn`` in a unit of work and return its result after commit.

        A foreign key failure means a catalog row was hard-deleted after the
        caller checked it, and surfaces as StaleReferenceError.
        """
        try:
            async with self.unit_of_work() as uow:
                return await fn(uow)
        except aiosqlite.IntegrityError as e:
            logger.info("unit_of_work_rolled_back", error_type=type(e).__name__)
            if "FOREIGN KEY" in str(e):
                raise StaleReferenceError("unit_of_work", str(e)) from e
            raise
        except Exception as e:
            logger.info("unit_of_work_rolled_back", error_type=type(e).__name__)
            raise
