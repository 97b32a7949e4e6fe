"""
SQL access for the users table
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

import asyncpg

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, name, age, email, address"
UPDATABLE_COLUMNS = ("name", "age", "email", "address")


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the search term matches literally"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _search_clause(search: str, param_index: int = 1) -> Tuple[str, List[Any]]:
    if not search:
        return "", []
    placeholder = f"${param_index}"
    clause = f" WHERE name ILIKE {placeholder} OR email ILIKE {placeholder} OR address ILIKE {placeholder}"
    return clause, [f"%{escape_like(search)}%"]


class PostgresUserStore:
    """Parameterized queries against the users table through an asyncpg pool"""

    def __init__(self, pool: asyncpg.Pool):
        if pool is None:
            raise RuntimeError("Database pool not initialized")
        self.pool = pool

    async def find_page(self, search: str, skip: int, limit: int) -> List[Dict[str, Any]]:
        where, params = _search_clause(search)
        offset_idx = len(params) + 1
        query = (
            f"SELECT {USER_COLUMNS} FROM users{where}"
            f" ORDER BY created_at, id OFFSET ${offset_idx} LIMIT ${offset_idx + 1}"
        )
        logger.debug(f"Executing READ query: {query}")
        rows = await self.pool.fetch(query, *params, skip, limit)
        return [dict(row) for row in rows]

    async def count(self, search: str) -> int:
        where, params = _search_clause(search)
        query = f"SELECT COUNT(*) FROM users{where}"
        logger.debug(f"Executing COUNT query: {query}")
        return await self.pool.fetchval(query, *params)

    async def find_by_id(self, user_id: UUID) -> Optional[Dict[str, Any]]:
        row = await self.pool.fetchrow(f"SELECT {USER_COLUMNS} FROM users WHERE id = $1", user_id)
        return dict(row) if row else None

    async def find_by_email(self, email: str, exclude_id: Optional[UUID] = None) -> Optional[Dict[str, Any]]:
        if exclude_id is None:
            row = await self.pool.fetchrow(f"SELECT {USER_COLUMNS} FROM users WHERE email = $1", email)
        else:
            row = await self.pool.fetchrow(
                f"SELECT {USER_COLUMNS} FROM users WHERE email = $1 AND id <> $2",
                email,
                exclude_id
            )
        return dict(row) if row else None

    async def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        query = (
            f"INSERT INTO users (name, age, email, address) VALUES ($1, $2, $3, $4)"
            f" RETURNING {USER_COLUMNS}"
        )
        logger.info(f"Executing INSERT: {query}")
        row = await self.pool.fetchrow(
            query,
            values["name"],
            values["age"],
            values["email"],
            values.get("address")
        )
        if not row:
            raise RuntimeError("Insert operation failed - no data returned")
        return dict(row)

    async def update(self, user_id: UUID, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        columns = [column for column in UPDATABLE_COLUMNS if column in values]
        if not columns:
            raise ValueError("No columns to update")

        assignments = ", ".join(f"{column} = ${i}" for i, column in enumerate(columns, start=2))
        query = f"UPDATE users SET {assignments} WHERE id = $1 RETURNING {USER_COLUMNS}"
        logger.info(f"Executing UPDATE: {query}")
        row = await self.pool.fetchrow(query, user_id, *(values[column] for column in columns))
        return dict(row) if row else None

    async def delete(self, user_id: UUID) -> bool:
        result = await self.pool.execute("DELETE FROM users WHERE id = $1", user_id)
        # asyncpg returns "DELETE N" where N is the number of rows
        deleted_count = int(result.split()[-1]) if result else 0
        return deleted_count > 0
