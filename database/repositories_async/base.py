"""Base repository with async PostgreSQL connection pooling

All repositories inherit from BaseRepository and share:
- Connection pool (no connection per-instance)
- Read helpers that translate driver errors into QueryError
- Logging infrastructure

Return Type Conventions
-----------------------
    get_X(id) -> Optional[T]
        Single entity lookup by primary key.
        Returns None if entity not found.

    get_Xs(...) -> List[T]
        Multiple entity retrieval with filters.
        Returns empty list [] if none match.

    count_X(...) -> int
        Row count with filters. Returns 0 if none match.

Every repository is read-only; the dashboard never writes.
"""

import asyncpg
from typing import Any, List, Optional, Tuple
from contextlib import asynccontextmanager

from config import get_logger
from exceptions import QueryError

logger = get_logger(__name__).bind(component="repository")


class BaseRepository:
    """Base class for async PostgreSQL repositories

    Design Principles:
    - Pool is passed in, not created (singleton pattern)
    - Queries use $1, $2 placeholders (PostgreSQL parameterization)
    - Driver errors never leave the repository layer
    """

    def __init__(self, pool: asyncpg.Pool):
        """Initialize repository with shared connection pool

        Args:
            pool: asyncpg connection pool (shared across all repositories)
        """
        self.pool = pool

    @asynccontextmanager
    async def _reading(self, query_name: str):
        """Acquire a pooled connection, translating driver failures

        Usage:
            async with self._reading("get_candidate") as conn:
                row = await conn.fetchrow(...)
        """
        try:
            async with self.pool.acquire() as conn:
                yield conn
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.error("query failed", query=query_name, error=str(e), error_type=type(e).__name__)
            raise QueryError(
                "Read against the vote store failed", query_name=query_name, original_error=e
            ) from e

    async def _fetchrow(self, query_name: str, query: str, *args: Any) -> Optional[asyncpg.Record]:
        """Execute query and fetch single row"""
        async with self._reading(query_name) as conn:
            return await conn.fetchrow(query, *args)

    async def _fetch(self, query_name: str, query: str, *args: Any) -> List[asyncpg.Record]:
        """Execute query and fetch all rows"""
        async with self._reading(query_name) as conn:
            return await conn.fetch(query, *args)

    async def _fetchval(self, query_name: str, query: str, *args: Any) -> Any:
        """Execute query and fetch the first column of the first row"""
        async with self._reading(query_name) as conn:
            return await conn.fetchval(query, *args)

    @staticmethod
    def _where(filters: List[Tuple[str, Any]]) -> Tuple[str, List[Any]]:
        """Build a WHERE clause from (column, value) pairs, skipping None values

        Returns:
            (clause, args) where clause is "" or "WHERE col = $1 AND ..."
        """
        clauses = []
        args: List[Any] = []
        for column, value in filters:
            if value is None:
                continue
            args.append(value)
            clauses.append(f"{column} = ${len(args)}")
        if not clauses:
            return "", args
        return "WHERE " + " AND ".join(clauses), args
