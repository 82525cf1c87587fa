"""Bounded async connection pool over a SQLAlchemy ``AsyncEngine``.

The engine's own pool is sized to ``size`` with no overflow; a semaphore in
front of it turns an exhausted pool into a suspended caller instead of a pool
timeout. The wait queue itself is unbounded.

Lifecycle (owned by the process entry point)::

    pool = ConnectionPool.from_settings(settings)
    await pool.open()        # single connectivity probe, never raises
    ...
    await pool.shutdown()    # drain in-flight work, then close everything
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine
from sqlalchemy.sql.expression import Executable
from sqlalchemy.sql.dml import Insert

from app.config import Settings
from app.domain.exceptions import ConfigurationError, PersistenceError, PoolClosedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecuteResult:
    """Outcome of a data-modifying statement."""

    rows_affected: int
    inserted_id: int | None = None


def _get_async_url(url: str) -> str:
    """Convert a sync SQLAlchemy URL to an async one."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def build_database_url(settings: Settings) -> URL:
    """Resolve the database URL from settings.

    ``database_url`` wins when set; otherwise host, user, password and
    database name are all required.
    """
    if settings.database_url:
        return make_url(_get_async_url(settings.database_url))

    required = {
        "DB_HOST": settings.db_host,
        "DB_USER": settings.db_user,
        "DB_PASSWORD": settings.db_password,
        "DB_DATABASE": settings.db_database,
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise ConfigurationError(
            f"Missing database configuration: {', '.join(missing)}"
        )

    return URL.create(
        drivername=settings.db_driver,
        username=settings.db_user,
        password=settings.db_password,
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_database,
    )


class ConnectionPool:
    """A fixed-size set of reusable database connections."""

    def __init__(self, url: str | URL, size: int = 10, *, echo: bool = False):
        if size < 1:
            raise ConfigurationError("Connection pool size must be at least 1")
        self._size = size
        self._engine = create_async_engine(
            url,
            echo=echo,
            pool_size=size,
            max_overflow=0,
            pool_pre_ping=True,
        )
        self._slots = asyncio.Semaphore(size)
        self._in_flight = 0
        self._drained = asyncio.Event()
        self._drained.set()
        self._probed = False
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConnectionPool":
        url = build_database_url(settings)
        logger.info(
            "Connection pool configured (driver=%s, size=%d)",
            url.drivername, settings.db_pool_size,
        )
        return cls(url, size=settings.db_pool_size, echo=settings.db_echo)

    @property
    def in_use(self) -> int:
        return self._in_flight

    @property
    def closed(self) -> bool:
        return self._closed

    async def open(self) -> bool:
        """Probe connectivity once. Logs the outcome and never raises."""
        if self._probed:
            return True
        self._probed = True
        try:
            async with self.connection() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as exc:
            logger.error("Database pool: initial connection probe failed: %s", exc)
            return False
        logger.info("Database pool: initial connection probe succeeded")
        return True

    async def acquire(self) -> AsyncConnection:
        """Wait for a free slot and hand out a live connection."""
        if self._closed:
            raise PoolClosedError()
        await self._slots.acquire()
        if self._closed:
            self._slots.release()
            raise PoolClosedError()
        self._in_flight += 1
        self._drained.clear()
        try:
            conn = await self._engine.connect()
        except Exception:
            self._free_slot()
            raise
        logger.debug("Connection acquired (%d/%d in use)", self._in_flight, self._size)
        return conn

    async def release(self, conn: AsyncConnection) -> None:
        """Return *conn* to the pool for reuse."""
        try:
            await conn.close()
        finally:
            self._free_slot()
            logger.debug("Connection released (%d/%d in use)", self._in_flight, self._size)

    def _free_slot(self) -> None:
        self._in_flight -= 1
        self._slots.release()
        if self._in_flight == 0:
            self._drained.set()

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[AsyncConnection]:
        conn = await self.acquire()
        try:
            yield conn
        finally:
            await self.release(conn)

    async def execute(
        self, statement: Executable, params: Mapping[str, Any] | None = None
    ) -> ExecuteResult:
        """Run a data-modifying statement in its own short transaction."""
        async with self.connection() as conn:
            try:
                result = await conn.execute(statement, params)
                inserted_id = None
                if isinstance(statement, Insert) and result.inserted_primary_key:
                    inserted_id = result.inserted_primary_key[0]
                rows_affected = result.rowcount
                await conn.commit()
            except Exception as exc:
                await conn.rollback()
                logger.error("SQL execution failed: %s | %s", statement, exc)
                raise PersistenceError("Database operation failed") from exc
        return ExecuteResult(rows_affected=rows_affected, inserted_id=inserted_id)

    async def query(
        self, statement: Executable, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Run a read statement and return its rows as plain dicts."""
        async with self.connection() as conn:
            try:
                result = await conn.execute(statement, params)
                rows = [dict(row) for row in result.mappings().all()]
                await conn.rollback()
            except Exception as exc:
                logger.error("SQL query failed: %s | %s", statement, exc)
                raise PersistenceError("Database query failed") from exc
        return rows

    async def shutdown(self) -> None:
        """Stop handing out connections, wait for in-flight work, close all."""
        if self._closed:
            return
        self._closed = True
        if self._in_flight:
            logger.info("Draining %d in-flight connection(s)", self._in_flight)
        await self._drained.wait()
        await self._engine.dispose()
        logger.info("Database connection pool closed")
