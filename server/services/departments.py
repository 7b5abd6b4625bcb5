"""
Departments service layer

Breakdown of the home country's votes by department (region). There is
no precomputed per-region view, so this always counts raw votes.
"""

from typing import Any, Dict, List

from config import config, get_logger
from database.models import Vote
from database.vote_utils import aggregate_by_key, get_field, safe_percentage, top_n_within_group
from server.metrics import metrics
from server.reference import ReferenceData
from server.utils.constants import NO_HOME_VOTES_MESSAGE, UNSPECIFIED_DEPARTMENT
from server.utils.responses import success_response

logger = get_logger(__name__).bind(component="departments_service")


def format_departments(
    votes: List[Vote],
    reference: ReferenceData,
    top_n: int = config.TOP_CANDIDATES,
) -> Dict[str, Any]:
    """Group home-country votes by department

    Zero votes yields the explicit no-data payload rather than a
    breakdown computed from zero.
    """
    if not votes:
        return success_response({
            "data": {
                "departments": [],
                "totalVotes": 0,
                "message": NO_HOME_VOTES_MESSAGE,
            },
        })

    groups = aggregate_by_key(
        votes,
        key_fn=lambda vote: reference.canonical_department(get_field(vote, "region")),
        placeholder=UNSPECIFIED_DEPARTMENT,
    )

    total_votes = sum(group.total_votes for group in groups)
    unspecified_count = sum(
        group.total_votes for group in groups if group.key == UNSPECIFIED_DEPARTMENT
    )

    departments = []
    for group in groups:
        top = group.top_entity
        departments.append({
            "department": group.key,
            "totalVotes": group.total_votes,
            "percentage": group.percentage,
            "topCandidate": top.name if top else None,
            "topCandidatePhoto": top.photo_url if top else "",
            "topCandidateVotes": top.votes if top else 0,
            "candidates": [
                {
                    "id": member.id,
                    "name": member.name,
                    "photo_url": member.photo_url,
                    "votes": member.votes,
                }
                for member in top_n_within_group(group, top_n)
            ],
        })

    seen = {group.key for group in groups}
    missing_departments = [name for name in reference.departments if name not in seen]

    return success_response({
        "data": {
            "departments": departments,
            "totalVotes": total_votes,
            "departmentCount": len(departments),
            "unspecifiedCount": unspecified_count,
            "missingDepartments": missing_departments,
            "coverage": {
                "specified": safe_percentage(total_votes - unspecified_count, total_votes),
                "unspecified": safe_percentage(unspecified_count, total_votes),
            },
        },
    })


async def get_department_data(
    db,
    reference: ReferenceData,
    top_n: int = config.TOP_CANDIDATES,
) -> Dict[str, Any]:
    """Read and format the department breakdown for the home country"""
    votes = await db.votes.get_votes_with_region(reference.home_country)
    metrics.aggregation_rows.labels(dimension="department").observe(len(votes))
    logger.debug("loaded home country votes", country=reference.home_country, votes=len(votes))
    return format_departments(votes, reference, top_n)
