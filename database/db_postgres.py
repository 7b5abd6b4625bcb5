"""PostgreSQL Database Layer with Repository Pattern

Async repositories for all data access. The Database class owns the
connection pool and the few reads that combine repositories.
"""

import asyncpg
from pathlib import Path
from typing import List, NamedTuple, Optional

from config import get_logger, config
from database.models import AggregateRow
from database.repositories_async import (
    AggregateRepository,
    CandidateRepository,
    VoteRepository,
)
from database.vote_utils import aggregate_by_key, get_field, sum_aggregate_totals
from exceptions import DatabaseConnectionError

logger = get_logger(__name__).bind(component="database_postgres")

SOURCE_CACHE = "cache"
SOURCE_RAW = "raw"


class CountryVotes(NamedTuple):
    """Per-(country, candidate) totals and where they came from"""

    rows: List[AggregateRow]
    source: str  # SOURCE_CACHE or SOURCE_RAW


class Database:
    """Async PostgreSQL database with repository pattern

    Usage:
        db = await Database.create()
        candidate = await db.candidates.get_candidate(7)
        country_votes = await db.get_all_country_votes()
        await db.close()
    """

    pool: asyncpg.Pool

    candidates: CandidateRepository
    votes: VoteRepository
    aggregates: AggregateRepository

    def __init__(self, pool: asyncpg.Pool):
        """Initialize with connection pool and repositories

        Use Database.create() classmethod instead of direct instantiation.
        """
        self.pool = pool

        self.candidates = CandidateRepository(pool)
        self.votes = VoteRepository(pool)
        self.aggregates = AggregateRepository(pool)

        logger.info("database initialized with repositories")

    @classmethod
    async def create(
        cls,
        dsn: Optional[str] = None,
        min_size: int = config.POSTGRES_POOL_MIN_SIZE,
        max_size: int = config.POSTGRES_POOL_MAX_SIZE
    ) -> "Database":
        """Create database with connection pool

        Args:
            dsn: PostgreSQL connection string (defaults to config.get_postgres_dsn())
            min_size: Minimum pool size
            max_size: Maximum pool size
        """
        if dsn is None:
            dsn = config.get_postgres_dsn()

        try:
            pool = await asyncpg.create_pool(
                dsn,
                min_size=min_size,
                max_size=max_size,
                command_timeout=60,
            )
            logger.info("connection pool created", min_size=min_size, max_size=max_size)
            return cls(pool)
        except (asyncpg.PostgresError, OSError, ConnectionError) as e:
            logger.error("failed to create connection pool", error=str(e))
            raise DatabaseConnectionError(f"Failed to connect to PostgreSQL: {e}")

    async def close(self):
        """Close connection pool"""
        await self.pool.close()
        logger.info("connection pool closed")

    async def init_schema(self):
        """Create tables and aggregate views from schema_postgres.sql

        Safe to call multiple times (uses IF NOT EXISTS).
        """
        schema_path = Path(__file__).parent / "schema_postgres.sql"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema file not found: {schema_path}")

        async with self.pool.acquire() as conn:
            await conn.execute(schema_path.read_text())

        logger.info("schema initialized")

    async def ping(self) -> bool:
        """Round-trip a trivial query"""
        async with self.pool.acquire() as conn:
            return await conn.fetchval("SELECT 1") == 1

    # ==================
    # COMPOSITE READS
    # ==================

    async def get_all_country_votes(self, candidate_slug: Optional[str] = None) -> CountryVotes:
        """Per-(country, candidate) totals: the view, or raw votes if the view is empty

        Two tiers, never mixed: if the vote_by_country slice sums to zero the
        whole result is rebuilt from the votes table.

        Args:
            candidate_slug: Restrict both tiers to one candidate
        """
        cached = await self.aggregates.get_votes_by_country(candidate_slug)
        if sum_aggregate_totals(cached) > 0:
            return CountryVotes(rows=cached, source=SOURCE_CACHE)

        logger.info(
            "aggregate cache empty, falling back to raw count",
            dimension="country",
            candidate_slug=candidate_slug,
            cached_rows=len(cached),
        )
        votes = await self.votes.get_votes(candidate_slug=candidate_slug)
        groups = aggregate_by_key(votes, key_fn=lambda v: get_field(v, "country"))

        rows = [
            AggregateRow(
                total_votes=member.votes,
                candidate_id=member.id,
                candidate_slug=member.slug,
                candidate_name=member.name,
                candidate_photo_url=member.photo_url,
                country=group.key,
            )
            for group in groups
            for member in group.members
        ]
        return CountryVotes(rows=rows, source=SOURCE_RAW)

    async def get_stats(self) -> dict:
        """Counts for health checks"""
        candidates = await self.candidates.get_candidates()
        total_votes = await self.votes.count_votes()
        return {
            "candidates": len(candidates),
            "total_votes": total_votes,
        }
