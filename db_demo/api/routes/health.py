"""
Health check endpoints for DB Demo service.
"""

import logging
from typing import Dict, Any
from datetime import datetime, timezone

from fastapi import APIRouter

from db_demo.config import settings

router = APIRouter(prefix="/health", tags=["Health"])
logger = logging.getLogger(__name__)


@router.get("")
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns:
        Health status and service info
    """
    return {
        "status": "healthy",
        "service": settings.service_name,
        "version": settings.version,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/live")
async def liveness_check() -> Dict[str, str]:
    """Liveness check - simple check that service is running."""
    return {"status": "alive"}


@router.get("/info")
async def service_info() -> Dict[str, Any]:
    """
    Get service information and the resolved database.

    Only the engine and the source it was resolved from are reported;
    the connection string carries credentials and is never exposed.
    """
    from db_demo.main import get_database

    descriptor = get_database()

    return {
        "service": settings.service_name,
        "version": settings.version,
        "environment": settings.environment,
        "database": descriptor.to_dict() if descriptor else None
    }
