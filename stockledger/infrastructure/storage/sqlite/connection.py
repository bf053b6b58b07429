"""
Async SQLite connection pool with aiosqlite.

Connections run in autocommit mode; write transactions are opened explicitly
with ``BEGIN IMMEDIATE`` so the write lock is taken up front and concurrent
writers serialise on it instead of failing at commit time.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from stockledger.config import get_logger, get_settings
from stockledger.core.exceptions import BusyError, DatabaseError

logger = get_logger(__name__)


def is_busy_error(exc: Exception) -> bool:
    """True for SQLite lock contention errors (SQLITE_BUSY / SQLITE_LOCKED)."""
    message = str(exc).lower()
    return "locked" in message or "busy" in message


class ConnectionPool:
    """
    Fixed-size set of autocommit connections to one SQLite file.

    Readers use ``acquire``; writers use ``transaction``, which holds the
    database write lock from BEGIN IMMEDIATE until COMMIT or ROLLBACK.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 5000,
        acquire_timeout: float = 10.0,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout
        self.acquire_timeout = acquire_timeout

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Open ``pool_size`` connections. Idempotent."""
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            for _ in range(self.pool_size):
                conn = await self._create_connection()
                self._connections.append(conn)
                await self._pool.put(conn)

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _create_connection(self) -> aiosqlite.Connection:
        """Open one autocommit connection with the store pragmas applied."""
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)

        # WAL lets readers proceed while a writer holds the lock
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=NORMAL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        await conn.execute("PRAGMA foreign_keys=ON")

        conn.row_factory = aiosqlite.Row

        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection from the pool.

        Raises BusyError if no connection frees up within ``acquire_timeout``.

        Usage:
            async with pool.acquire() as conn:
                await conn.execute(...)
        """
        if not self._initialized:
            await self.initialize()

        try:
            conn = await asyncio.wait_for(self._pool.get(), timeout=self.acquire_timeout)
        except asyncio.TimeoutError:
            logger.warning("connection_acquire_timeout", timeout=self.acquire_timeout)
            raise BusyError("acquire_connection", self.acquire_timeout) from None

        try:
            yield conn
        finally:
            await self._pool.put(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection inside a write transaction.

        Commits on success and rolls back on any exception, including
        cancellation, so no partial write outlives the block.
        """
        async with self.acquire() as conn:
            try:
                await conn.execute("BEGIN IMMEDIATE")
            except aiosqlite.OperationalError as e:
                if is_busy_error(e):
                    logger.warning("write_lock_timeout", busy_timeout_ms=self.busy_timeout)
                    raise BusyError("begin_transaction", self.busy_timeout / 1000) from e
                raise DatabaseError("begin_transaction", str(e)) from e

            try:
                yield conn
                await conn.execute("COMMIT")
            except aiosqlite.OperationalError as e:
                await self._rollback(conn)
                if is_busy_error(e):
                    raise BusyError("transaction", self.busy_timeout / 1000) from e
                raise DatabaseError("transaction", str(e)) from e
            except BaseException:
                await self._rollback(conn)
                raise

    async def _rollback(self, conn: aiosqlite.Connection) -> None:
        if conn.in_transaction:
            await conn.execute("ROLLBACK")
            logger.debug("transaction_rolled_back")

    async def close(self) -> None:
        """Close every connection. The pool can be initialized again afterwards."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._pool = asyncio.Queue(maxsize=self.pool_size)
            self._initialized = False
            logger.info("connection_pool_closed")


# Process-wide pool used by the API
_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Pool built from STORAGE_* settings, opened on first use."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = ConnectionPool(
            db_path=settings.storage.db_path,
            pool_size=settings.storage.pool_size,
            busy_timeout=settings.storage.busy_timeout,
            acquire_timeout=settings.storage.acquire_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    """Close the process-wide pool, if one was opened."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
