"""Input normalization and existence checks for API routes."""

import re
from typing import Optional

from exceptions import NotFoundError

# Dashboard candidate filter sends "all" for the unfiltered view
ALL_CANDIDATES = "all"

_SLUG_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


def normalize_candidate_slug(value: Optional[str]) -> Optional[str]:
    """Normalize the ?candidate= filter; None means no filter.

    Slugs that cannot exist are passed through lowercased; they simply
    match no rows.
    """
    if value is None:
        return None
    slug = value.strip().lower()
    if not slug or slug == ALL_CANDIDATES:
        return None
    return slug


def parse_candidate_id(value: str) -> Optional[int]:
    """Candidate id from the path, None when it is not an integer."""
    try:
        return int(value.strip())
    except ValueError:
        return None


def is_valid_slug(slug: str) -> bool:
    """Check slug shape (lowercase letters, digits, dash, underscore)"""
    return bool(_SLUG_PATTERN.match(slug))


async def require_candidate(db, candidate_id: Optional[int]):
    """Get candidate or raise NotFoundError (routes turn it into a 404)."""
    candidate = None
    if candidate_id is not None:
        candidate = await db.candidates.get_candidate(candidate_id)
    if not candidate:
        raise NotFoundError("Candidate not found", entity="candidate", entity_id=candidate_id)
    return candidate
