"""
Database Models for voteboard

Pydantic dataclasses with runtime validation for the entities read from
the store and the transient statistics derived from them.
"""


from typing import Optional, List
from dataclasses import asdict, field
from pydantic.dataclasses import dataclass


# --- Stored entities (read-only, owned by the backing store) ---


@dataclass
class Candidate:
    """Candidate entity - referenced by id or slug, never embedded"""

    id: int
    name: str = ""
    slug: str = ""
    photo_url: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return asdict(self)


@dataclass
class Vote:
    """Vote entity - one row per ballot cast

    The candidate_* fields are populated when the read joins candidates;
    they stay empty for bare counts.
    """

    id: Optional[int] = None
    candidate_id: Optional[int] = None
    country: Optional[str] = None
    region: Optional[str] = None  # Department within the country, often missing
    candidate_name: str = ""
    candidate_slug: str = ""
    candidate_photo_url: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return asdict(self)


@dataclass
class AggregateRow:
    """Precomputed vote count from vote_aggregates or vote_by_country

    May be stale or missing entirely. Callers treat a zero sum as
    "cache empty" and count raw votes instead.
    """

    total_votes: int = 0
    candidate_id: Optional[int] = None
    candidate_slug: str = ""
    candidate_name: str = ""
    candidate_photo_url: str = ""
    country: Optional[str] = None  # Only set for vote_by_country rows

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return asdict(self)


# --- Derived statistics (recomputed per request) ---


@dataclass
class MemberStat:
    """One candidate's share inside a group"""

    id: Optional[int] = None
    name: str = ""
    slug: str = ""
    photo_url: str = ""
    votes: int = 0
    percentage: float = 0.0  # Relative to the owning group's total

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class GroupedStat:
    """Votes bucketed under one grouping key (country, department, candidate)

    members are sorted by descending votes; top_entity is members[0].
    """

    key: str
    total_votes: int = 0
    percentage: float = 0.0  # Relative to the grand total across all groups
    top_entity: Optional[MemberStat] = None
    members: List[MemberStat] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)
