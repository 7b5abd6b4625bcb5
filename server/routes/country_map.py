"""
Vote map API routes
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from config import get_logger
from database.db_postgres import Database
from server.dependencies import get_db, get_reference
from server.metrics import metrics
from server.reference import ReferenceData
from server.services.country_map import get_map_data
from server.utils.validation import normalize_candidate_slug

logger = get_logger(__name__)


router = APIRouter(prefix="/api")


@router.get("/map/data")
async def map_data(
    candidate: Optional[str] = None,
    db: Database = Depends(get_db),
    reference: ReferenceData = Depends(get_reference),
):
    """Votes per country with coordinates, optionally for one candidate slug"""
    candidate_slug = normalize_candidate_slug(candidate)
    try:
        return await get_map_data(db, reference, candidate_slug)
    except Exception as e:
        logger.error("map data error", candidate_slug=candidate_slug, error=str(e), exc_info=True)
        metrics.record_error("map", e)
        raise HTTPException(status_code=500, detail="Failed to fetch map data")
