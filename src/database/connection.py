"""
Database connection and pool management
"""

import asyncpg
import logging
from typing import Optional

from config.settings import DATABASE_URL, DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE, DB_COMMAND_TIMEOUT

logger = logging.getLogger(__name__)

USERS_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name TEXT NOT NULL CHECK (char_length(name) >= 2),
    age INTEGER NOT NULL CHECK (age >= 0),
    email TEXT NOT NULL UNIQUE,
    address TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""


class Database:
    """Owns the asyncpg pool for the lifetime of the application"""

    def __init__(self, dsn: str = DATABASE_URL):
        self.dsn = dsn
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Initialize database connection pool and make sure the users table exists"""
        self.pool = await asyncpg.create_pool(
            self.dsn,
            min_size=DB_POOL_MIN_SIZE,
            max_size=DB_POOL_MAX_SIZE,
            command_timeout=DB_COMMAND_TIMEOUT,
            statement_cache_size=0  # Fix for pgbouncer compatibility
        )

        async with self.pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
            await conn.execute(USERS_SCHEMA)

        logger.info("Database initialized successfully")

    async def close(self):
        """Close database connection pool"""
        if self.pool:
            await self.pool.close()
            self.pool = None
        logger.info("Database connections closed")

    async def ping(self) -> bool:
        if not self.pool:
            raise RuntimeError("Database pool not initialized")
        async with self.pool.acquire() as conn:
            return await conn.fetchval("SELECT 1") == 1
