"""
Health check router.

Provides /health and /ready endpoints for container orchestration.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from shared.config import Settings, get_settings

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    """Basic health check for container orchestration."""
    return {"status": "healthy", "service": settings.SERVICE_NAME}


@router.get("/ready")
def ready(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    """Readiness check - reports which integrations have credentials."""
    return {
        "status": "ready",
        "service": settings.SERVICE_NAME,
        "ai_gateway_configured": bool(settings.AI_GATEWAY_API_KEY),
        "storage_configured": bool(settings.SUPABASE_URL and settings.SUPABASE_SERVICE_ROLE_KEY),
        "live_data_enabled": settings.LIVE_DATA_ENABLED,
    }
