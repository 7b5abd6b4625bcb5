"""
Monitoring and health check API routes
"""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import Response

from config import config, get_logger
from database.db_postgres import Database
from server.dependencies import get_db
from server.metrics import get_metrics_text

logger = get_logger(__name__)

API_VERSION = "1.0.0"


router = APIRouter()


@router.get("/")
async def root():
    """API status and info"""
    return {
        "service": "voteboard API",
        "status": "running",
        "version": API_VERSION,
        "description": "Read-only vote results: candidate comparison, country map, department breakdown",
        "endpoints": {
            "compare": "GET /api/compare/{id} - Candidate total, global share and top countries",
            "map": "GET /api/map/data?candidate={slug} - Votes per country with map coordinates",
            "departments": f"GET /api/departments - {config.HOME_COUNTRY} votes by department",
            "health": "GET /api/health - Health check with database status",
            "metrics": "GET /metrics - Prometheus metrics",
        },
    }


@router.get("/api/health")
async def health_check(db: Database = Depends(get_db)):
    """Health check endpoint"""
    health_status: Dict[str, Any] = {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": API_VERSION,
        "checks": {},
    }

    try:
        await db.ping()
        stats = await db.get_stats()
        health_status["checks"]["database"] = {
            "status": "healthy",
            "candidates": stats["candidates"],
            "votes": stats["total_votes"],
        }
    except Exception as e:
        logger.warning("health check database failure", error=str(e))
        health_status["checks"]["database"] = {"status": "unhealthy", "error": str(e)}
        health_status["status"] = "unhealthy"

    health_status["checks"]["configuration"] = {
        "status": "healthy",
        "is_development": config.is_development(),
        "home_country": config.HOME_COUNTRY,
    }

    return health_status


@router.get("/metrics")
async def prometheus_metrics():
    """Prometheus metrics in text exposition format"""
    try:
        return Response(content=get_metrics_text(), media_type="text/plain")
    except Exception as e:
        logger.error("prometheus metrics endpoint failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to generate metrics")
