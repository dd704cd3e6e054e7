"""
Pytest Configuration and Shared Fixtures
=========================================

Test setup for the spot price API with dependency overrides and an
in-process fake of the upstream price API.
"""
import json
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

# Add app directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables BEFORE any imports
os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_LEVEL"] = "ERROR"

from domain.energy.models import PricePoint, PriceSeries  # noqa: E402
from infrastructure.external_apis import EleringAPIClient  # noqa: E402


BASE_URL = "https://upstream.test/api/nps/price"
T0 = datetime(2026, 3, 10, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# APP FIXTURE WITH DEPENDENCY OVERRIDES
# =============================================================================

@pytest.fixture(scope="session")
def app():
    """
    Create FastAPI app without lifespan side effects.

    Only routers and middleware are registered; services are overridden
    per test.
    """
    from fastapi import FastAPI
    from api.middleware import RequestIDMiddleware
    from api.routers import health_router, prices_router

    test_app = FastAPI(title="Spot Price API - Test", version="test")
    test_app.add_middleware(RequestIDMiddleware)
    test_app.include_router(health_router)
    test_app.include_router(prices_router)
    return test_app


@pytest.fixture
def client(app, mock_price_service, mock_dashboard_service):
    """FastAPI test client with mocked services."""
    from dependencies import get_dashboard_service, get_price_service

    app.dependency_overrides[get_price_service] = lambda: mock_price_service
    app.dependency_overrides[get_dashboard_service] = lambda: mock_dashboard_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# MOCK FIXTURES FOR SERVICES
# =============================================================================

@pytest.fixture
def mock_price_service():
    """Mock PriceService with async methods returning empty data."""
    mock = MagicMock()
    mock.get_prices_with_prediction = AsyncMock(return_value=PriceSeries.empty())
    mock.fetch_range = AsyncMock(return_value=PriceSeries.empty())
    mock.fetch_current = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def mock_dashboard_service():
    """Mock DashboardService; dashboard_range is a fixed 24h window."""
    mock = MagicMock()
    mock.dashboard_range = MagicMock(return_value=(T0, T0 + timedelta(hours=23)))
    mock.build_snapshot = AsyncMock()
    mock.cheapest_window = AsyncMock(return_value=None)
    return mock


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def make_series():
    """
    Factory for hourly series.

    make_series([10, 20, 30], start=T0, predicted_from=None) builds
    consecutive hours starting at `start`; points from index
    `predicted_from` onwards are predicted.
    """
    def _make(prices, start=T0, predicted_from=None):
        points = []
        for i, price in enumerate(prices):
            ts = start + timedelta(hours=i)
            if predicted_from is not None and i >= predicted_from:
                points.append(PricePoint.predicted(ts, price))
            else:
                points.append(PricePoint.actual(ts, price))
        return PriceSeries.from_points(points)

    return _make


@pytest.fixture
def upstream_payload():
    """Factory for upstream range responses."""
    def _payload(prices, start=T0, step=timedelta(hours=1), market="ee", success=True):
        entries = [
            {"timestamp": int((start + step * i).timestamp()), "price": price}
            for i, price in enumerate(prices)
        ]
        return {"success": success, "data": {market: entries}}

    return _payload


@pytest.fixture
def fake_upstream():
    """
    In-process upstream API built on httpx.MockTransport.

    Set `responses["range"]` / `responses["current"]` to a dict (JSON body),
    an httpx.Response, or an exception instance to raise. Every request is
    appended to `requests`.
    """
    class FakeUpstream:
        def __init__(self):
            self.responses = {
                "range": {"success": True, "data": {"ee": []}},
                "current": {"success": True, "data": []},
            }
            self.requests = []

        def handler(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            key = "current" if request.url.path.endswith("/current") else "range"
            response = self.responses[key]
            if isinstance(response, Exception):
                raise response
            if isinstance(response, httpx.Response):
                return response
            return httpx.Response(200, content=json.dumps(response).encode(),
                                  headers={"Content-Type": "application/json"})

        def client(self, **kwargs) -> EleringAPIClient:
            options = {"base_url": BASE_URL, "market_code": "ee", "max_retries": 1, "backoff_multiplier": 0}
            options.update(kwargs)
            return EleringAPIClient(transport=httpx.MockTransport(self.handler), **options)

    return FakeUpstream()


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
