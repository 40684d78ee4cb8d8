"""
Health check endpoint
"""

from fastapi import APIRouter, Request

from upskillnow.core.config import settings
from upskillnow.db.redis import cache

router = APIRouter()


@router.get("/health")
def health_check(request: Request):
    """Service, database and cache status"""
    database = request.app.state.database.check_connection()
    if not settings.REDIS_ENABLED:
        redis_status = "disabled"
    else:
        redis_status = "healthy" if cache.is_connected else "disconnected"

    return {
        "status": "healthy" if database["status"] == "healthy" else "degraded",
        "service": settings.PROJECT_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "checks": {"database": database, "redis": redis_status},
    }
