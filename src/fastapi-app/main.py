"""
Spot Price Dashboard - FastAPI Main Application
================================================

Serves Nord Pool spot prices for one market, with predicted future hours,
statistics overlays and cheapest-window search, to the dashboard renderer.

Layers:
- infrastructure/: Upstream price API client
- services/: Application orchestration
- domain/: Pure price logic
- api/: HTTP interface (routers + schemas + middleware)
- core/: Shared utilities (config, logging, exceptions)
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from core.config import settings
from core.logging_config import setup_logging
from dependencies import cleanup_dependencies
from api.middleware import RequestIDMiddleware
from api.routers import health_router, prices_router

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management."""
    logger.info(f"⚡ Starting Spot Price API (market={settings.MARKET_CODE.upper()}, tz={settings.TZ})")

    yield

    logger.info("🛑 Shutting down Spot Price API")
    await cleanup_dependencies()


def create_app() -> FastAPI:
    """Build the FastAPI application with middleware and routers."""
    app = FastAPI(
        title="Spot Price Dashboard API",
        description="Nord Pool spot prices with predictions, statistics and cheapest windows",
        version=settings.API_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.ENVIRONMENT != "production" else None
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"]
    )
    app.add_middleware(RequestIDMiddleware)

    app.include_router(health_router)
    app.include_router(prices_router)

    logger.info("✅ API routers registered")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development"
    )
