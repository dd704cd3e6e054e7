"""
Health Check Router
===================

Health and version endpoints for monitoring.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from api.schemas.common import HealthResponse, VersionResponse
from core.config import settings

router = APIRouter(prefix="", tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Does not call the upstream API; the service stays healthy while the
    upstream is down and serves empty data instead.
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.API_VERSION
    )


@router.get("/version", response_model=VersionResponse)
async def version_info() -> VersionResponse:
    """API version information."""
    return VersionResponse(
        version=settings.API_VERSION,
        environment=settings.ENVIRONMENT,
        market=settings.MARKET_CODE.upper()
    )
