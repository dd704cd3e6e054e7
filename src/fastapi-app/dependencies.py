"""
Dependency Injection Module
============================

Provides dependency injection for FastAPI endpoints.
Services are created here once per process; each upstream request still
opens its own HTTP client.

Usage in routers:
    @router.get("/endpoint")
    async def endpoint(
        service: PriceService = Depends(get_price_service)
    ):
        ...
"""

from functools import lru_cache
import logging

from services.dashboard_service import DashboardService
from services.price_service import PriceService

logger = logging.getLogger(__name__)


@lru_cache()
def get_price_service() -> PriceService:
    """Get PriceService instance (singleton pattern)."""
    logger.debug("✅ PriceService created")
    return PriceService()


@lru_cache()
def get_dashboard_service() -> DashboardService:
    """Get DashboardService instance (singleton pattern)."""
    logger.debug("✅ DashboardService created")
    return DashboardService(get_price_service())


async def cleanup_dependencies() -> None:
    """Drop cached service instances on shutdown."""
    get_dashboard_service.cache_clear()
    get_price_service.cache_clear()
    logger.info("🧹 Dependencies cleaned up")
