"""
PostgreSQL access for MulaBoard repositories.

One asyncpg pool per process. The API creates it lazily in
``api.dependencies``; CLI commands open and close their own. Repositories
only ever call the four query helpers below, which keeps them trivially
mockable with an ``AsyncMock`` in tests.
"""

import logging
from typing import Any

import asyncpg

from mulaboard.config.settings import get_settings

logger = logging.getLogger(__name__)

# Feedback writes are single-row inserts; anything slower is a stuck pool.
_COMMAND_TIMEOUT_SECONDS = 30


class Database:
    """
    Thin wrapper around an asyncpg pool.

    Usage:
        db = Database()
        await db.connect()
        row = await db.fetchrow("SELECT * FROM review_periods WHERE id = $1", pid)
        await db.close()
    """

    def __init__(
        self,
        database_url: str | None = None,
        min_size: int | None = None,
        max_size: int | None = None,
    ):
        settings = get_settings()

        self._dsn = database_url or str(settings.database_url)
        self._pool_bounds = (
            min_size or settings.db_pool_min_size,
            max_size or settings.db_pool_max_size,
        )
        self._pool: asyncpg.Pool | None = None

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database pool is not open; call connect() first")
        return self._pool

    async def connect(self) -> None:
        """Open the pool. A second call on a connected instance does nothing."""
        if self._pool is not None:
            return

        low, high = self._pool_bounds
        try:
            self._pool = await asyncpg.create_pool(
                self._dsn,
                min_size=low,
                max_size=high,
                command_timeout=_COMMAND_TIMEOUT_SECONDS,
            )
        except (OSError, asyncpg.PostgresError) as e:
            logger.error(f"Could not open PostgreSQL pool: {e}")
            raise
        logger.info(f"PostgreSQL pool open ({low}-{high} connections)")

    async def close(self) -> None:
        if self._pool is None:
            return
        await self._pool.close()
        self._pool = None
        logger.info("PostgreSQL pool closed")

    async def execute(self, query: str, *args: Any) -> str:
        """Run a statement and return its status tag, e.g. ``"UPDATE 1"``."""
        async with self.pool.acquire() as conn:
            return await conn.execute(query, *args)

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        async with self.pool.acquire() as conn:
            return await conn.fetch(query, *args)

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        async with self.pool.acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetchval(self, query: str, *args: Any) -> Any:
        async with self.pool.acquire() as conn:
            return await conn.fetchval(query, *args)

    async def health_check(self) -> bool:
        """True when a trivial query round-trips through the pool."""
        try:
            return await self.fetchval("SELECT 1") == 1
        except (RuntimeError, OSError, asyncpg.PostgresError) as e:
            logger.warning(f"PostgreSQL health check failed: {e}")
            return False
