"""
Map service layer

Votes grouped by country with the leading candidate in each and the
marker coordinates the world map needs.
"""

from typing import Any, Dict, List, Optional

from config import get_logger
from database.db_postgres import SOURCE_RAW
from database.vote_utils import aggregate_by_key, get_field, total_votes_of
from server.metrics import metrics
from server.reference import ReferenceData
from server.utils.constants import NO_COUNTRY, UNKNOWN_COUNTRY
from server.utils.validation import is_valid_slug

logger = get_logger(__name__).bind(component="map_service")


def empty_map() -> Dict[str, Any]:
    """Payload for a map with no votes"""
    return {
        "countries": [],
        "global": {
            "totalVotes": 0,
            "totalCountries": 0,
            "topCountry": NO_COUNTRY,
        },
    }


def format_map(rows: List[Any], reference: ReferenceData) -> Dict[str, Any]:
    """Group per-(country, candidate) rows into map markers

    Countries are ordered by descending votes; percentage is each
    country's share of all votes on the map.
    """
    groups = aggregate_by_key(
        rows,
        key_fn=lambda row: get_field(row, "country"),
        value_fn=total_votes_of,
        placeholder=UNKNOWN_COUNTRY,
    )
    if not groups:
        return empty_map()

    countries = []
    for group in groups:
        coords = reference.coordinates_for(group.key)
        countries.append({
            **coords.model_dump(),
            "country": group.key,
            "totalVotes": group.total_votes,
            "topCandidate": group.top_entity.name if group.top_entity else None,
            "percentage": group.percentage,
        })

    return {
        "countries": countries,
        "global": {
            "totalVotes": sum(group.total_votes for group in groups),
            "totalCountries": len(countries),
            "topCountry": countries[0]["country"],
        },
    }


async def get_map_data(
    db,
    reference: ReferenceData,
    candidate_slug: Optional[str] = None,
) -> Dict[str, Any]:
    """Read and format map data, optionally for one candidate"""
    if candidate_slug is not None and not is_valid_slug(candidate_slug):
        logger.info("ignoring malformed candidate slug", candidate_slug=candidate_slug)
        return empty_map()

    country_votes = await db.get_all_country_votes(candidate_slug)
    if country_votes.source == SOURCE_RAW:
        metrics.aggregate_fallbacks.labels(dimension="country").inc()
    metrics.aggregation_rows.labels(dimension="country").observe(len(country_votes.rows))

    return format_map(country_votes.rows, reference)
