"""
Department breakdown API routes
"""

from fastapi import APIRouter, Depends, HTTPException

from config import get_logger
from database.db_postgres import Database
from server.dependencies import get_db, get_reference
from server.metrics import metrics
from server.reference import ReferenceData
from server.services.departments import get_department_data

logger = get_logger(__name__)


router = APIRouter(prefix="/api")


@router.get("/departments")
async def departments(
    db: Database = Depends(get_db),
    reference: ReferenceData = Depends(get_reference),
):
    """Home-country votes by department with leading candidates and coverage"""
    try:
        return await get_department_data(db, reference)
    except Exception as e:
        logger.error("department stats error", error=str(e), exc_info=True)
        metrics.record_error("departments", e)
        raise HTTPException(status_code=500, detail="Failed to fetch department statistics")
