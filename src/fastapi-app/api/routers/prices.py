"""
Spot Prices Router
==================

Endpoints consumed by the dashboard renderer: price series with predictions,
current price, statistics overlay and cheapest-window search.
"""

import logging
from datetime import datetime, time, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.config import settings
from core.exceptions import ValidationError, handle_exceptions
from dependencies import get_dashboard_service, get_price_service
from domain.energy.models import CheapestWindow, PricePoint, PriceSeries, Statistics
from domain.energy.statistics import compute_statistics
from domain.energy.trend import PriceTrend, classify_period
from domain.energy.units import as_utc
from api.schemas.prices import (
    CheapestWindowResponse,
    CheapestWindowSchema,
    DashboardResponse,
    PricePointSchema,
    PriceSeriesResponse,
    StatisticsResponse,
    StatisticsSchema,
    TrendSchema
)
from services.dashboard_service import DashboardService
from services.price_service import PriceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/prices", tags=["Spot Prices"])


# =================================================================
# SCHEMA CONVERSION
# =================================================================

def point_to_schema(
    point: PricePoint,
    include_tax: bool,
    now: Optional[datetime] = None
) -> PricePointSchema:
    return PricePointSchema(
        timestamp=point.timestamp,
        price_eur_mwh=point.raw_price,
        price_cents_kwh=point.display_price,
        price=point.price(include_tax, settings.VAT_RATE),
        kind=point.kind.value,
        is_predicted=point.is_predicted,
        period=classify_period(point, now).value if now is not None else None
    )


def statistics_to_schema(stats: Optional[Statistics]) -> Optional[StatisticsSchema]:
    if stats is None:
        return None
    return StatisticsSchema(
        min=stats.min,
        max=stats.max,
        mean=stats.mean,
        median=stats.median,
        p75=stats.p75,
        p90=stats.p90,
        p95=stats.p95,
        count=stats.count
    )


def trend_to_schema(trend: Optional[PriceTrend]) -> Optional[TrendSchema]:
    if trend is None:
        return None
    return TrendSchema(direction=trend.direction.value, difference=trend.difference)


def window_to_schema(window: Optional[CheapestWindow]) -> Optional[CheapestWindowSchema]:
    if window is None:
        return None
    return CheapestWindowSchema(
        start=window.start,
        end=window.end,
        average_price=window.average_price,
        window_hours=window.window_hours
    )


def _resolve_range(
    start: Optional[datetime],
    end: Optional[datetime],
    dashboard: DashboardService,
    now: datetime
):
    default_start, default_end = dashboard.dashboard_range(now)
    start = as_utc(start) if start is not None else default_start
    end = as_utc(end) if end is not None else default_end
    if end < start:
        raise ValidationError("end", end.isoformat(), "end must not be before start")
    return start, end


# =================================================================
# ENDPOINTS
# =================================================================

@router.get("", response_model=PriceSeriesResponse)
@handle_exceptions
async def get_prices(
    start: Optional[datetime] = Query(None, description="Range start (defaults to 24h ago)"),
    end: Optional[datetime] = Query(None, description="Range end (defaults to end of the day after tomorrow)"),
    include_tax: bool = Query(True, description="Show prices including VAT"),
    service: PriceService = Depends(get_price_service),
    dashboard: DashboardService = Depends(get_dashboard_service)
) -> PriceSeriesResponse:
    """
    Hourly prices for a range. Hours the market has not priced yet are
    filled with predictions (`is_predicted=true`).
    """
    now = datetime.now(timezone.utc)
    start, end = _resolve_range(start, end, dashboard, now)

    series: PriceSeries = await service.get_prices_with_prediction(start, end, now)

    return PriceSeriesResponse(
        start=start,
        end=end,
        include_tax=include_tax,
        count=len(series),
        predicted_count=len(series.predicted()),
        prices=[point_to_schema(p, include_tax, now) for p in series],
        statistics=statistics_to_schema(compute_statistics(series, include_tax, settings.VAT_RATE))
    )


@router.get("/current", response_model=PricePointSchema)
async def get_current_price(
    include_tax: bool = Query(True, description="Show price including VAT"),
    service: PriceService = Depends(get_price_service)
) -> PricePointSchema:
    """Price of the current hour. Always fetched fresh."""
    current = await service.fetch_current()
    if current is None:
        raise HTTPException(status_code=404, detail="No current price available")
    return point_to_schema(current, include_tax, datetime.now(timezone.utc))


@router.get("/dashboard", response_model=DashboardResponse)
@handle_exceptions
async def get_dashboard(
    include_tax: bool = Query(True, description="Show prices including VAT"),
    dashboard: DashboardService = Depends(get_dashboard_service)
) -> DashboardResponse:
    """
    One dashboard refresh: last 24 hours through the end of the day after
    tomorrow, current price with trend, and statistics.
    """
    snapshot = await dashboard.build_snapshot(include_tax=include_tax)
    now = snapshot.generated_at

    return DashboardResponse(
        generated_at=now,
        include_tax=include_tax,
        prices=[point_to_schema(p, include_tax, now) for p in snapshot.prices],
        current=point_to_schema(snapshot.current, include_tax, now) if snapshot.current else None,
        previous=point_to_schema(snapshot.previous, include_tax, now) if snapshot.previous else None,
        trend=trend_to_schema(snapshot.trend),
        statistics=statistics_to_schema(snapshot.statistics)
    )


@router.get("/statistics", response_model=StatisticsResponse)
@handle_exceptions
async def get_statistics(
    start: Optional[datetime] = Query(None, description="Range start (defaults to 24h ago)"),
    end: Optional[datetime] = Query(None, description="Range end (defaults to end of the day after tomorrow)"),
    include_tax: bool = Query(True, description="Use prices including VAT"),
    service: PriceService = Depends(get_price_service),
    dashboard: DashboardService = Depends(get_dashboard_service)
) -> StatisticsResponse:
    """
    Min, max, mean, median and 75th/90th/95th percentiles over actual
    prices. `statistics` is null when the range has no actual prices.
    """
    now = datetime.now(timezone.utc)
    start, end = _resolve_range(start, end, dashboard, now)

    series = await service.get_prices_with_prediction(start, end, now)

    return StatisticsResponse(
        start=start,
        end=end,
        include_tax=include_tax,
        statistics=statistics_to_schema(compute_statistics(series, include_tax, settings.VAT_RATE))
    )


@router.get("/cheapest-window", response_model=CheapestWindowResponse)
@handle_exceptions
async def get_cheapest_window(
    hours: int = Query(settings.DEFAULT_WINDOW_HOURS, ge=1, le=48, description="Window length in hours"),
    deadline: time = Query(settings.DEFAULT_DEADLINE, description="Local time-of-day the window must end by (HH:MM)"),
    include_tax: bool = Query(True, description="Compare prices including VAT"),
    dashboard: DashboardService = Depends(get_dashboard_service)
) -> CheapestWindowResponse:
    """
    Cheapest contiguous run of `hours` hours from the current hour until the
    next occurrence of `deadline`. `window` is null when no run fits.
    """
    window = await dashboard.cheapest_window(hours, deadline, include_tax=include_tax)

    return CheapestWindowResponse(
        window_hours=hours,
        deadline=deadline,
        include_tax=include_tax,
        window=window_to_schema(window)
    )
