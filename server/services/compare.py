"""
Compare service layer

One candidate's share of all votes and their spread across countries.
"""

from typing import Any, Dict, List

from config import get_logger
from database.models import Candidate, GroupedStat
from database.vote_utils import (
    aggregate_by_key,
    compute_fallback_total_async,
    get_field,
    safe_percentage,
    sum_aggregate_totals,
    total_votes_of,
)
from server.metrics import metrics
from server.utils.constants import UNKNOWN_COUNTRY

logger = get_logger(__name__).bind(component="compare_service")


def group_by_country(rows: List[Any], precounted: bool) -> List[GroupedStat]:
    """Group vote_by_country rows (precounted) or raw votes by country"""
    return aggregate_by_key(
        rows,
        key_fn=lambda row: get_field(row, "country"),
        value_fn=total_votes_of if precounted else None,
        placeholder=UNKNOWN_COUNTRY,
    )


def format_compare(
    candidate: Candidate,
    candidate_votes: int,
    total_votes: int,
    country_groups: List[GroupedStat],
) -> Dict[str, Any]:
    """Shape the compare payload

    Country percentages are relative to the candidate's own total.
    """
    top_countries = [
        {
            "country": group.key,
            "votes": group.total_votes,
            "percentage": safe_percentage(group.total_votes, candidate_votes),
        }
        for group in country_groups
    ]

    return {
        "id": candidate.id,
        "name": candidate.name,
        "slug": candidate.slug,
        "photo_url": candidate.photo_url,
        "total_votes": candidate_votes,
        "percentage": safe_percentage(candidate_votes, total_votes),
        "country_count": len(country_groups),
        "top_countries": top_countries,
    }


async def get_compare_data(candidate: Candidate, db) -> Dict[str, Any]:
    """Read and format compare data for an existing candidate

    Totals and the country distribution pick their tier independently.
    The candidate and global totals come from vote_aggregates when both
    sums are non-zero, otherwise both are counted from the votes table.
    The country distribution comes from vote_by_country when the
    candidate's slice is non-zero, otherwise from the candidate's raw votes.
    """
    aggregate = await db.aggregates.get_aggregate_by_candidate(candidate.id)
    all_aggregates = await db.aggregates.get_all_aggregates()
    by_country = await db.aggregates.get_votes_by_country(candidate.slug)

    candidate_rows = [aggregate] if aggregate else []
    if sum_aggregate_totals(candidate_rows) == 0 or sum_aggregate_totals(all_aggregates) == 0:
        logger.info(
            "aggregate cache empty, falling back to raw count",
            dimension="candidate",
            candidate_id=candidate.id,
        )
        metrics.aggregate_fallbacks.labels(dimension="candidate").inc()
        candidate_rows, all_aggregates = [], []

    candidate_votes = await compute_fallback_total_async(
        candidate_rows, lambda: db.votes.count_votes(candidate_id=candidate.id)
    )
    total_votes = await compute_fallback_total_async(all_aggregates, db.votes.count_votes)

    if sum_aggregate_totals(by_country) > 0:
        country_groups = group_by_country(by_country, precounted=True)
    else:
        logger.info(
            "aggregate cache empty, falling back to raw count",
            dimension="country",
            candidate_id=candidate.id,
        )
        metrics.aggregate_fallbacks.labels(dimension="country").inc()
        raw_votes = await db.votes.get_votes(candidate_id=candidate.id)
        metrics.aggregation_rows.labels(dimension="candidate").observe(len(raw_votes))
        country_groups = group_by_country(raw_votes, precounted=False)

    return format_compare(candidate, candidate_votes, total_votes, country_groups)
