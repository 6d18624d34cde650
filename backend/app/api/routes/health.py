"""Health Probes — liveness and readiness for the dashboard API.

Invariants:
    - GET /api/v1/health/ answers 200 while the process is up; touches no dependency
    - GET /api/v1/health/ready answers 503 when the pool cannot run SELECT 1
    - Readiness also reports how many rendered views the cache holds
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.infrastructure.database import ConnectionPool, get_pool
from app.infrastructure.view_cache import ViewCache, get_view_cache

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "invoice-dashboard-api"


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness(request: Request):
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": request.app.version,
    }


@router.get("/ready")
async def readiness(
    pool: ConnectionPool = Depends(get_pool),
    views: ViewCache = Depends(get_view_cache),
):
    """Ready when the database answers; cached view count is informational."""
    if not await pool.health_check():
        logger.warning("Readiness failed: database unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy", "cached_views": len(views)},
    }
