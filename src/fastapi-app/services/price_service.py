"""
Price Service (Application Layer)
=================================

Orchestrates the Elering client and the price forecaster.

Responsibilities:
- Fetch a price range and normalize it into a PriceSeries
- Fetch the current-hour price
- Widen the fetch window so the forecaster has a week of history
- Extend future ranges with predicted hours

Failure policy: upstream transport or payload errors never propagate out of
this service. They are logged with their error code and turned into an empty
series (or None for the current price), so the dashboard renders "no data"
instead of failing.

Usage:
    from services.price_service import PriceService

    service = PriceService()
    series = await service.get_prices_with_prediction(start, end)
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx

from core.config import settings
from core.exceptions import SpotPriceException
from core.logging_config import PerformanceLogger
from domain.energy.forecaster import PriceForecaster
from domain.energy.models import PricePoint, PriceSeries
from domain.energy.units import as_utc, floor_to_hour
from infrastructure.external_apis import EleringAPIClient

logger = logging.getLogger(__name__)


class PriceService:
    """
    Price data orchestration service.

    1. Fetch from the upstream API
    2. Normalize to hourly PricePoints
    3. Predict missing future hours
    """

    def __init__(
        self,
        client_factory: Callable[[], EleringAPIClient] = EleringAPIClient,
        forecaster: Optional[PriceForecaster] = None,
        history_days: Optional[int] = None
    ):
        """
        Initialize price service.

        Args:
            client_factory: Builds a fresh API client per request
            forecaster: Forecaster for future hours
            history_days: Days of history fetched before "now" for prediction
        """
        self._client_factory = client_factory
        self.forecaster = forecaster or PriceForecaster()
        self.history_days = history_days if history_days is not None else settings.PREDICTION_HISTORY_DAYS

    async def fetch_range(self, start: datetime, end: datetime) -> PriceSeries:
        """
        Fetch actual prices with timestamps in [start, end].

        Returns:
            Sorted series of actual points; empty if the upstream failed or
            has no data for the range
        """
        try:
            with PerformanceLogger("fetch_range", __name__):
                async with self._client_factory() as client:
                    records = await client.get_prices(as_utc(start), as_utc(end))
        except (SpotPriceException, httpx.HTTPError) as e:
            logger.warning(f"⚠️ Price range unavailable, returning empty series: {_describe(e)}")
            return PriceSeries.empty()

        return self._to_series(records)

    async def fetch_current(self) -> Optional[PricePoint]:
        """
        Fetch the current-hour price. Always a fresh request.

        Returns:
            Actual point, or None if unavailable
        """
        try:
            with PerformanceLogger("fetch_current", __name__):
                async with self._client_factory() as client:
                    record = await client.get_current_price()
        except (SpotPriceException, httpx.HTTPError) as e:
            logger.warning(f"⚠️ Current price unavailable: {_describe(e)}")
            return None

        if record is None:
            return None
        return PricePoint.actual(record["timestamp"], record["price_eur_mwh"])

    async def get_prices_with_prediction(
        self,
        start: datetime,
        end: datetime,
        now: Optional[datetime] = None
    ) -> PriceSeries:
        """
        Prices for [start, end], with predicted hours where the market has
        not published yet.

        When `end` lies in the future the fetch starts at least
        `history_days` before now so same-hour-last-week references exist.
        The combined series is cut back to [start, end].

        Args:
            start: Range start (inclusive)
            end: Range end (inclusive)
            now: Reference instant (defaults to the current time)
        """
        start = as_utc(start)
        end = as_utc(end)
        now = as_utc(now) if now is not None else datetime.now(timezone.utc)

        reaches_future = end > now
        fetch_start = start
        if reaches_future:
            history_start = floor_to_hour(now - timedelta(days=self.history_days))
            if history_start < fetch_start:
                fetch_start = history_start

        series = await self.fetch_range(fetch_start, end)

        if reaches_future and series:
            series = self.forecaster.extend_with_prediction(series, end)

        result = series.between(start, end)
        logger.info(
            f"📈 Prepared {len(result)} prices "
            f"({len(result.predicted())} predicted) for {start.isoformat()} .. {end.isoformat()}"
        )
        return result

    @staticmethod
    def _to_series(records: Iterable[Dict[str, Any]]) -> PriceSeries:
        """
        Build an hourly series from upstream records.

        Records inside the same clock hour (sub-hourly market intervals) are
        averaged into one point.
        """
        buckets: Dict[datetime, List[float]] = {}
        for record in records:
            hour = floor_to_hour(record["timestamp"])
            buckets.setdefault(hour, []).append(record["price_eur_mwh"])

        return PriceSeries.from_points(
            PricePoint.actual(hour, sum(prices) / len(prices))
            for hour, prices in buckets.items()
        )


def _describe(error: Exception) -> str:
    if isinstance(error, SpotPriceException):
        return f"[{error.error_code}] {error.message}"
    return f"[{error.__class__.__name__}] {error}"
