"""
Energy Price Forecaster (Domain Logic)
=======================================

Pure business logic for filling future hours the market has not priced yet.
Framework-agnostic, testable, and reusable.

The heuristic blends two seasonal references for every missing hour H:
- the same hour yesterday (H - 24h)
- the same hour last week (H - 168h)

Both references are looked up in the series built so far, including
predictions made earlier in the same run, so forecasts several days ahead
bootstrap off earlier predictions.

Usage:
    from domain.energy.forecaster import PriceForecaster

    forecaster = PriceForecaster()
    extended = forecaster.extend_with_prediction(series, target_end)
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from domain.energy.models import ONE_HOUR, PricePoint, PriceSeries

logger = logging.getLogger(__name__)


class PriceForecaster:
    """
    Seasonal-naive price forecaster.

    Deterministic: identical input always yields identical output.
    """

    REFERENCE_LAGS = (timedelta(days=1), timedelta(days=7))

    def extend_with_prediction(
        self,
        series: PriceSeries,
        target_end: datetime
    ) -> PriceSeries:
        """
        Append predicted hourly points after the last point of `series`.

        Args:
            series: Historical points, ascending
            target_end: Exclusive upper bound for generated timestamps

        Returns:
            New series: the input followed by predictions for every hour
            strictly after its last point and strictly before `target_end`.
            An empty input yields an empty series.
        """
        if not series:
            return PriceSeries.empty()

        if target_end.tzinfo is None:
            target_end = target_end.replace(tzinfo=timezone.utc)

        last_actual = series.last
        known: Dict[datetime, float] = {p.timestamp: p.raw_price for p in series}
        predictions: List[PricePoint] = []

        current = last_actual.timestamp + ONE_HOUR
        while current < target_end:
            raw_price = self._blend(known, current)
            if raw_price is None:
                # No seasonal reference: carry the latest value forward
                raw_price = predictions[-1].raw_price if predictions else last_actual.raw_price

            point = PricePoint.predicted(current, raw_price)
            predictions.append(point)
            known[current] = raw_price
            current += ONE_HOUR

        if predictions:
            logger.debug(
                f"🔮 Predicted {len(predictions)} hours "
                f"({predictions[0].timestamp.isoformat()} .. {predictions[-1].timestamp.isoformat()})"
            )

        return series.extended(predictions)

    def predict_next_hours(self, series: PriceSeries, hours: int = 24) -> PriceSeries:
        """
        Extend `series` by `hours` predicted points.

        Args:
            series: Historical points, ascending
            hours: Number of hours to forecast

        Returns:
            Only the predicted points
        """
        if not series or hours <= 0:
            return PriceSeries.empty()

        target_end = series.last.timestamp + ONE_HOUR * (hours + 1)
        return self.extend_with_prediction(series, target_end).predicted()

    def _blend(self, known: Dict[datetime, float], hour: datetime) -> Optional[float]:
        """Mean of the seasonal references that exist for `hour`."""
        references = [
            known[hour - lag]
            for lag in self.REFERENCE_LAGS
            if (hour - lag) in known
        ]
        if not references:
            return None
        return sum(references) / len(references)
