"""
Service-level routes.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from config import ServiceConfig
from .models import HealthResponse


# ============================================================================
# ROUTER
# ============================================================================
router = APIRouter()


# ============================================================================
# ENDPOINT: GET /health
# ============================================================================
@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Service health endpoint."""
    return HealthResponse(
        status="healthy",
        service=ServiceConfig.APP_NAME,
        version=ServiceConfig.APP_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
