"""Health check endpoints."""
from fastapi import APIRouter
import logging

from ..core.cache import cache_manager
from ..core.config import settings
from ..core.database import health_check_db

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["Health"])

@router.get("/")
async def health_check():
    """Basic health check"""
    return {
        "status": "healthy",
        "service": "School ERP API",
        "version": settings.app_version,
        "environment": settings.environment,
    }

@router.get("/full-health")
async def full_health_check():
    """Database and cache reachability"""
    health_status = {
        "service": "healthy",
        "database": "healthy" if await health_check_db() else "unhealthy",
        "cache": "disabled",
    }

    if cache_manager.enabled:
        health_status["cache"] = "healthy" if await cache_manager.ping() else "unhealthy"

    overall_status = "healthy" if all(
        status in ("healthy", "disabled") for status in health_status.values()
    ) else "degraded"

    return {
        "status": overall_status,
        "components": health_status,
    }
