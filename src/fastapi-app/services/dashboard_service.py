"""
Dashboard Service (Application Layer)
=====================================

Assembles everything the price dashboard renders in one refresh:
the rolling price window (last 24h through the end of the day after
tomorrow, with predictions), the current price and its trend, and the
statistics overlay. Also answers cheapest-window queries over the same
horizon.

Fetches within one refresh run sequentially: range first, then current price.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Optional, Tuple

from core.config import settings
from core.exceptions import InvalidWindowError
from domain.energy.models import CheapestWindow, PricePoint, PriceSeries, Statistics
from domain.energy.statistics import compute_statistics
from domain.energy.trend import PriceTrend, compute_trend
from domain.energy.units import as_utc, floor_to_hour
from domain.energy.windows import find_cheapest_window
from services.price_service import PriceService

logger = logging.getLogger(__name__)

END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class DashboardSnapshot:
    """One refresh worth of dashboard data."""

    prices: PriceSeries
    current: Optional[PricePoint]
    previous: Optional[PricePoint]
    statistics: Optional[Statistics]
    trend: Optional[PriceTrend]
    include_tax: bool
    generated_at: datetime


class DashboardService:
    """Builds dashboard snapshots on top of PriceService."""

    def __init__(
        self,
        price_service: PriceService,
        tz: Optional[tzinfo] = None,
        tax_rate: Optional[float] = None,
        past_hours: Optional[int] = None,
        future_days: Optional[int] = None
    ):
        self.price_service = price_service
        self.tz = tz or settings.timezone
        self.tax_rate = tax_rate if tax_rate is not None else settings.VAT_RATE
        self.past_hours = past_hours if past_hours is not None else settings.DASHBOARD_PAST_HOURS
        self.future_days = future_days if future_days is not None else settings.DASHBOARD_FUTURE_DAYS

    def dashboard_range(self, now: datetime) -> Tuple[datetime, datetime]:
        """
        Rolling dashboard window.

        Starts `past_hours` before now (floored to the hour) and ends at
        23:59:59.999 local time `future_days` calendar days after today.
        """
        now = as_utc(now)
        start = floor_to_hour(now - timedelta(hours=self.past_hours))

        last_day = now.astimezone(self.tz).date() + timedelta(days=self.future_days)
        end = datetime.combine(last_day, END_OF_DAY, tzinfo=self.tz).astimezone(timezone.utc)
        return start, end

    async def get_dashboard_prices(self, now: Optional[datetime] = None) -> PriceSeries:
        """Prices for the dashboard window, predictions included."""
        now = as_utc(now) if now is not None else datetime.now(timezone.utc)
        start, end = self.dashboard_range(now)
        return await self.price_service.get_prices_with_prediction(start, end, now)

    async def build_snapshot(
        self,
        include_tax: bool = True,
        now: Optional[datetime] = None
    ) -> DashboardSnapshot:
        """
        Refresh the dashboard.

        Args:
            include_tax: Whether statistics and trend use tax-inclusive prices
            now: Reference instant (defaults to the current time)
        """
        now = as_utc(now) if now is not None else datetime.now(timezone.utc)

        prices = await self.get_dashboard_prices(now)
        current = await self.price_service.fetch_current()

        previous = None
        if current is not None and prices:
            idx = prices.index_of(current.timestamp)
            if idx is not None and idx > 0:
                previous = prices[idx - 1]

        snapshot = DashboardSnapshot(
            prices=prices,
            current=current,
            previous=previous,
            statistics=compute_statistics(prices, include_tax, self.tax_rate),
            trend=compute_trend(current, previous, include_tax, self.tax_rate),
            include_tax=include_tax,
            generated_at=now,
        )

        logger.info(
            f"🖥️ Dashboard refreshed: {len(prices)} prices, "
            f"current={'yes' if current else 'no'}, statistics={'yes' if snapshot.statistics else 'no'}"
        )
        return snapshot

    async def cheapest_window(
        self,
        window_hours: int,
        deadline: time,
        include_tax: bool = True,
        now: Optional[datetime] = None
    ) -> Optional[CheapestWindow]:
        """
        Cheapest window of `window_hours` over the dashboard horizon ending
        by `deadline` (local time-of-day).
        """
        if window_hours < 1:
            raise InvalidWindowError(window_hours)

        now = as_utc(now) if now is not None else datetime.now(timezone.utc)
        prices = await self.get_dashboard_prices(now)

        return find_cheapest_window(
            prices,
            window_hours,
            deadline,
            now=now,
            include_tax=include_tax,
            tax_rate=self.tax_rate,
            tz=self.tz,
        )
