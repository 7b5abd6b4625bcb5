"""Async AggregateRepository for precomputed vote views

Reads the vote_aggregates (per candidate) and vote_by_country (per
candidate and country) views. Both are materialized and may lag behind
the votes table, so callers must tolerate empty or zero results.
"""

from typing import List, Optional

from database.repositories_async.base import BaseRepository
from database.repositories_async.helpers import build_aggregate_row
from database.models import AggregateRow
from config import get_logger

logger = get_logger(__name__).bind(component="aggregate_repository")


class AggregateRepository(BaseRepository):
    """Repository for precomputed aggregate views"""

    async def get_aggregate_by_candidate(self, candidate_id: int) -> Optional[AggregateRow]:
        """Get one candidate's precomputed total, None if not materialized"""
        row = await self._fetchrow(
            "get_aggregate_by_candidate",
            """
            SELECT *
            FROM vote_aggregates
            WHERE candidate_id = $1
            """,
            candidate_id,
        )
        return build_aggregate_row(row) if row else None

    async def get_all_aggregates(self) -> List[AggregateRow]:
        """Get every candidate's precomputed total"""
        rows = await self._fetch(
            "get_all_aggregates",
            "SELECT * FROM vote_aggregates",
        )
        return [build_aggregate_row(row) for row in rows]

    async def get_votes_by_country(self, candidate_slug: Optional[str] = None) -> List[AggregateRow]:
        """Get per-(country, candidate) totals, largest first

        Args:
            candidate_slug: Restrict to one candidate
        """
        where, args = self._where([("candidate_slug", candidate_slug)])
        rows = await self._fetch(
            "get_votes_by_country",
            f"""
            SELECT *
            FROM vote_by_country
            {where}
            ORDER BY total_votes DESC
            """,
            *args,
        )
        return [build_aggregate_row(row) for row in rows]
