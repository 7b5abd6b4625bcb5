"""Async VoteRepository for raw ballot reads

Raw votes are the authoritative source. Services read them directly when
the precomputed aggregate views are empty.
"""

from typing import List, Optional

from database.repositories_async.base import BaseRepository
from database.repositories_async.helpers import build_vote
from database.models import Vote
from config import get_logger

logger = get_logger(__name__).bind(component="vote_repository")


class VoteRepository(BaseRepository):
    """Repository for raw vote reads

    Provides:
    - Filtered vote counts (candidate, country)
    - Vote rows joined with candidate name/slug/photo
    """

    async def count_votes(
        self,
        candidate_id: Optional[int] = None,
        country: Optional[str] = None,
    ) -> int:
        """Count raw votes, optionally filtered by candidate and/or country"""
        where, args = self._where([("candidate_id", candidate_id), ("country", country)])
        count = await self._fetchval(
            "count_votes",
            f"SELECT COUNT(*) FROM votes {where}",
            *args,
        )
        return int(count or 0)

    async def get_votes(
        self,
        candidate_id: Optional[int] = None,
        country: Optional[str] = None,
        candidate_slug: Optional[str] = None,
    ) -> List[Vote]:
        """Get raw votes joined with candidate info, ordered by vote id

        Votes whose candidate row is gone are kept; their candidate fields
        come back empty.
        """
        where, args = self._where([
            ("v.candidate_id", candidate_id),
            ("v.country", country),
            ("c.slug", candidate_slug),
        ])
        rows = await self._fetch(
            "get_votes",
            f"""
            SELECT
                v.id,
                v.candidate_id,
                v.country,
                v.region,
                c.name AS candidate_name,
                c.slug AS candidate_slug,
                c.photo_url AS candidate_photo_url
            FROM votes v
            LEFT JOIN candidates c ON c.id = v.candidate_id
            {where}
            ORDER BY v.id ASC
            """,
            *args,
        )
        return [build_vote(row) for row in rows]

    async def get_votes_with_region(self, country: str) -> List[Vote]:
        """Get one country's votes with region and candidate info"""
        return await self.get_votes(country=country)
