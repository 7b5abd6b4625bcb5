"""Shared vote aggregation logic.

Turns flat vote rows (or precomputed aggregate rows) into grouped
statistics. Pure and synchronous: every function here is a function of its
inputs only, so callers can run it twice on the same rows and get equal
output.

Rows may be model instances or plain mappings. Missing or malformed fields
never raise; they are defaulted (votes 0, empty names, placeholder keys).
"""

import math
from typing import Any, Awaitable, Callable, Dict, Hashable, Iterable, List, NamedTuple, Optional

from database.models import GroupedStat, MemberStat

UNKNOWN_KEY = "Unknown"
UNKNOWN_CANDIDATE = "Unknown"


class CandidateRef(NamedTuple):
    """Identity of the candidate a row votes for"""

    id: Optional[int]
    name: str
    slug: str
    photo_url: str


def get_field(row: Any, name: str, default: Any = None) -> Any:
    """Read a field from a model instance or a mapping, default if absent."""
    if row is None:
        return default
    if isinstance(row, dict):
        value = row.get(name, default)
    else:
        value = getattr(row, name, default)
    return default if value is None else value


def coerce_votes(value: Any) -> int:
    """Coerce a stored vote count to a non-negative int (malformed -> 0)."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    try:
        votes = int(value)
    except (TypeError, ValueError):
        return 0
    return max(votes, 0)


def coerce_key(value: Any, placeholder: str = UNKNOWN_KEY) -> str:
    """Normalize a grouping key; null or blank keys become the placeholder."""
    if value is None:
        return placeholder
    key = str(value).strip()
    return key or placeholder


def safe_percentage(part: Any, whole: Any) -> float:
    """part / whole * 100, defined as 0.0 when whole is 0"""
    whole_votes = coerce_votes(whole)
    if whole_votes == 0:
        return 0.0
    return coerce_votes(part) / whole_votes * 100


def total_votes_of(row: Any) -> int:
    """Value extractor for rows that are already aggregates"""
    return coerce_votes(get_field(row, "total_votes"))


def candidate_ref(row: Any) -> CandidateRef:
    """Default member extractor: the candidate_* fields of a row"""
    candidate_id = get_field(row, "candidate_id")
    try:
        candidate_id = int(candidate_id) if candidate_id is not None else None
    except (TypeError, ValueError):
        candidate_id = None
    return CandidateRef(
        id=candidate_id,
        name=str(get_field(row, "candidate_name", "")) or UNKNOWN_CANDIDATE,
        slug=str(get_field(row, "candidate_slug", "")),
        photo_url=str(get_field(row, "candidate_photo_url", "")),
    )


def _member_key(ref: CandidateRef) -> Hashable:
    if ref.id is not None:
        return ref.id
    return ref.slug or ref.name


def aggregate_by_key(
    rows: Iterable[Any],
    key_fn: Callable[[Any], Any],
    value_fn: Optional[Callable[[Any], Any]] = None,
    member_fn: Callable[[Any], CandidateRef] = candidate_ref,
    placeholder: str = UNKNOWN_KEY,
) -> List[GroupedStat]:
    """Group rows by key and tally votes per group and per candidate.

    Args:
        rows: Raw vote rows or aggregate rows
        key_fn: Extracts the grouping key (country, region, candidate id)
        value_fn: Extracts a pre-counted vote value; None counts one vote per row
        member_fn: Extracts the candidate a row belongs to
        placeholder: Key used for rows whose key is null or blank

    Returns:
        One GroupedStat per distinct key, sorted by descending total_votes.
        Ties keep first-encountered order, both for groups and for members,
        so top_entity is the first candidate to appear among those tied.
    """
    groups: Dict[str, Dict[str, Any]] = {}
    grand_total = 0

    for row in rows:
        key = coerce_key(key_fn(row), placeholder)
        votes = 1 if value_fn is None else coerce_votes(value_fn(row))

        group = groups.get(key)
        if group is None:
            group = {"total": 0, "members": {}}
            groups[key] = group

        group["total"] += votes
        grand_total += votes

        ref = member_fn(row)
        member = group["members"].setdefault(_member_key(ref), [ref, 0])
        member[1] += votes

    stats = []
    for key, group in groups.items():
        group_total = group["total"]
        members = [
            MemberStat(
                id=ref.id,
                name=ref.name,
                slug=ref.slug,
                photo_url=ref.photo_url,
                votes=count,
                percentage=safe_percentage(count, group_total),
            )
            for ref, count in group["members"].values()
        ]
        # list.sort is stable with reverse=True
        members.sort(key=lambda m: m.votes, reverse=True)

        stats.append(
            GroupedStat(
                key=key,
                total_votes=group_total,
                percentage=safe_percentage(group_total, grand_total),
                top_entity=members[0] if members else None,
                members=members,
            )
        )

    stats.sort(key=lambda g: g.total_votes, reverse=True)
    return stats


def top_n_within_group(group: GroupedStat, n: int) -> List[MemberStat]:
    """The n members with the most votes, ties in encounter order."""
    if n <= 0:
        return []
    ranked = sorted(group.members, key=lambda m: m.votes, reverse=True)
    return ranked[:n]


def sum_aggregate_totals(aggregate_rows: Optional[Iterable[Any]]) -> int:
    """Sum total_votes over aggregate rows; None or empty sums to 0."""
    if not aggregate_rows:
        return 0
    return sum(total_votes_of(row) for row in aggregate_rows)


def compute_fallback_total(
    aggregate_rows: Optional[Iterable[Any]],
    raw_count_fn: Callable[[], Any],
) -> int:
    """Cached total if non-zero, otherwise the authoritative raw count.

    raw_count_fn is only invoked when the cached sum is 0.
    """
    cached = sum_aggregate_totals(aggregate_rows)
    if cached > 0:
        return cached
    return coerce_votes(raw_count_fn())


async def compute_fallback_total_async(
    aggregate_rows: Optional[Iterable[Any]],
    raw_count_fn: Callable[[], Awaitable[Any]],
) -> int:
    """compute_fallback_total for an awaitable raw counter (a DB count query)."""
    cached = sum_aggregate_totals(aggregate_rows)
    if cached > 0:
        return cached
    return coerce_votes(await raw_count_fn())
