"""Async CandidateRepository for candidate lookups"""

from typing import List, Optional

from database.repositories_async.base import BaseRepository
from database.repositories_async.helpers import build_candidate
from database.models import Candidate
from config import get_logger

logger = get_logger(__name__).bind(component="candidate_repository")


class CandidateRepository(BaseRepository):
    """Repository for candidate reads"""

    async def get_candidate(self, candidate_id: int) -> Optional[Candidate]:
        """Get candidate by id, None if absent"""
        row = await self._fetchrow(
            "get_candidate",
            """
            SELECT id, name, slug, photo_url
            FROM candidates
            WHERE id = $1
            """,
            candidate_id,
        )
        return build_candidate(row)

    async def get_candidates(self) -> List[Candidate]:
        """Get all candidates ordered by name"""
        rows = await self._fetch(
            "get_candidates",
            """
            SELECT id, name, slug, photo_url
            FROM candidates
            ORDER BY name ASC
            """,
        )
        candidates = [build_candidate(row) for row in rows]
        return [c for c in candidates if c is not None]
