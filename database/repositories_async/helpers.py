"""Repository helper functions for object construction.

This is the parsing boundary between loosely typed store rows and the
strict Candidate / Vote / AggregateRow models. Malformed fields are
defaulted here, once, so nothing downstream needs optional chaining.
"""

from typing import Any, Mapping, Optional

from config import get_logger
from database.models import AggregateRow, Candidate, Vote
from database.vote_utils import coerce_votes

logger = get_logger(__name__).bind(component="repository")


def _text(value: Any) -> str:
    """Stored text or "" for NULL"""
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(value: Any) -> Optional[str]:
    """Stored text or None for NULL/blank"""
    text = _text(value)
    return text or None


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def build_candidate(row: Optional[Mapping[str, Any]]) -> Optional[Candidate]:
    """Construct Candidate from a candidates row; None if the row has no usable id."""
    if row is None:
        return None
    data = dict(row)
    candidate_id = _optional_int(data.get("id"))
    if candidate_id is None:
        logger.warning("dropping candidate row without id", row_keys=sorted(data))
        return None
    return Candidate(
        id=candidate_id,
        name=_text(data.get("name")),
        slug=_text(data.get("slug")),
        photo_url=_text(data.get("photo_url")),
    )


def build_vote(row: Mapping[str, Any]) -> Vote:
    """Construct Vote from a votes row, optionally joined with candidates."""
    data = dict(row)
    return Vote(
        id=_optional_int(data.get("id")),
        candidate_id=_optional_int(data.get("candidate_id")),
        country=_optional_text(data.get("country")),
        region=_optional_text(data.get("region")),
        candidate_name=_text(data.get("candidate_name")),
        candidate_slug=_text(data.get("candidate_slug")),
        candidate_photo_url=_text(data.get("candidate_photo_url")),
    )


def build_aggregate_row(row: Mapping[str, Any]) -> AggregateRow:
    """Construct AggregateRow from a vote_aggregates or vote_by_country row.

    Older vote_by_country definitions expose the country as country_name.
    """
    data = dict(row)
    country = data.get("country_name") or data.get("country")
    return AggregateRow(
        total_votes=coerce_votes(data.get("total_votes")),
        candidate_id=_optional_int(data.get("candidate_id")),
        candidate_slug=_text(data.get("candidate_slug")),
        candidate_name=_text(data.get("candidate_name")),
        candidate_photo_url=_text(data.get("candidate_photo_url")),
        country=_optional_text(country),
    )
