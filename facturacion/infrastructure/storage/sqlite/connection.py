"""
Async SQLite connection pool.

A fixed set of aiosqlite connections shared through an ``asyncio.Queue``.
Stores receive the pool in their constructor and borrow a connection per
operation, either plainly (``acquire``) or inside a transaction
(``transaction``).
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from facturacion.config import get_logger, get_settings

logger = get_logger(__name__)

# Applied to every new connection. foreign_keys is what makes
# facturas.cliente_id fall back to NULL when its client is deleted.
CONNECTION_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


class ConnectionPool:
    """Fixed-size pool of SQLite connections to one database file."""

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = Path(db_path)
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._connections: list[aiosqlite.Connection] = []
        self._lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return bool(self._connections)

    async def initialize(self) -> None:
        """Open every connection. Safe to call more than once."""
        async with self._lock:
            if self.initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            for _ in range(self.pool_size):
                conn = await self._connect()
                self._connections.append(conn)
                self._idle.put_nowait(conn)

        logger.info(
            "connection_pool_initialized",
            db_path=str(self.db_path),
            pool_size=self.pool_size,
        )

    async def _connect(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        for pragma in CONNECTION_PRAGMAS:
            await conn.execute(pragma)
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection, opening the pool on first use."""
        if not self.initialized:
            await self.initialize()

        conn = await self._idle.get()
        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection and commit on exit, rolling back on error."""
        async with self.acquire() as conn:
            try:
                yield conn
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise

    async def close(self) -> None:
        """Close every connection; the pool reopens on next use."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._idle = asyncio.Queue()
        logger.info("connection_pool_closed", db_path=str(self.db_path))


# Created on first use by the API; tests build their own pools
_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Pool for the database configured in settings."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            db_path=storage.db_path,
            pool_size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    """Close and forget the configured pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
