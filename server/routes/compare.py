"""
Candidate comparison API routes
"""

from fastapi import APIRouter, Depends, HTTPException

from config import get_logger
from database.db_postgres import Database
from exceptions import NotFoundError
from server.dependencies import get_db
from server.metrics import metrics
from server.services.compare import get_compare_data
from server.utils.validation import parse_candidate_id, require_candidate

logger = get_logger(__name__)


router = APIRouter(prefix="/api")


@router.get("/compare/{candidate_id}")
async def compare_candidate(candidate_id: str, db: Database = Depends(get_db)):
    """Candidate's vote total, global share, and distribution across countries"""
    try:
        candidate = await require_candidate(db, parse_candidate_id(candidate_id))
        return await get_compare_data(candidate, db)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Candidate not found")
    except Exception as e:
        logger.error("compare data error", candidate_id=candidate_id, error=str(e), exc_info=True)
        metrics.record_error("compare", e)
        raise HTTPException(status_code=500, detail="Failed to fetch compare data")
