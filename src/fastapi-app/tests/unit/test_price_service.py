"""
Unit Tests for PriceService
===========================

Coverage:
- ✅ Normalization of upstream records into hourly points
- ✅ Degrading to empty / None on upstream failures
- ✅ History widening and prediction for future ranges
"""

import math
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from domain.energy.models import PriceKind
from domain.energy.statistics import compute_statistics
from services.price_service import PriceService

T0 = datetime(2026, 3, 10, tzinfo=timezone.utc)
H = timedelta(hours=1)


@pytest.fixture
def service(fake_upstream):
    return PriceService(client_factory=fake_upstream.client)


@pytest.mark.unit
@pytest.mark.asyncio
class TestFetchRange:

    async def test_returns_actual_points(self, service, fake_upstream, upstream_payload):
        fake_upstream.responses["range"] = upstream_payload([100, 200, 300])

        series = await service.fetch_range(T0, T0 + 2 * H)

        assert len(series) == 3
        assert all(p.kind is PriceKind.ACTUAL for p in series)
        assert [p.display_price for p in series] == [10.0, 20.0, 30.0]

    async def test_quarter_hours_are_averaged(self, service, fake_upstream, upstream_payload):
        fake_upstream.responses["range"] = upstream_payload(
            [10, 20, 30, 40], step=timedelta(minutes=15)
        )

        series = await service.fetch_range(T0, T0 + H)

        assert len(series) == 1
        assert series[0].timestamp == T0
        assert series[0].raw_price == 25.0

    async def test_http_error_gives_empty_series(self, service, fake_upstream):
        fake_upstream.responses["range"] = httpx.Response(500, text="boom")

        series = await service.fetch_range(T0, T0 + H)

        assert len(series) == 0

    async def test_network_error_gives_empty_series(self, service, fake_upstream):
        fake_upstream.responses["range"] = httpx.ConnectTimeout("timed out")

        assert len(await service.fetch_range(T0, T0 + H)) == 0

    async def test_nan_price_does_not_reach_statistics(self, service, fake_upstream):
        fake_upstream.responses["range"] = {
            "success": True,
            "data": {"ee": [
                {"timestamp": int(T0.timestamp()), "price": 100},
                {"timestamp": int((T0 + H).timestamp()), "price": float("nan")},
            ]},
        }

        series = await service.fetch_range(T0, T0 + H)
        stats = compute_statistics(series)

        assert len(series) == 1
        assert math.isfinite(stats.mean)
        assert stats.max == 10.0

    async def test_bad_payload_gives_empty_series(self, service, fake_upstream):
        fake_upstream.responses["range"] = {"success": True, "data": None}

        assert len(await service.fetch_range(T0, T0 + H)) == 0


@pytest.mark.unit
@pytest.mark.asyncio
class TestFetchCurrent:

    async def test_returns_floored_actual_point(self, service, fake_upstream):
        fake_upstream.responses["current"] = {
            "success": True,
            "data": [{"timestamp": int((T0 + timedelta(minutes=15)).timestamp()), "price": 88.5}],
        }

        point = await service.fetch_current()

        assert point.timestamp == T0
        assert point.raw_price == 88.5
        assert point.kind is PriceKind.ACTUAL

    async def test_no_data_gives_none(self, service):
        assert await service.fetch_current() is None

    async def test_failure_gives_none(self, service, fake_upstream):
        fake_upstream.responses["current"] = httpx.Response(502, text="bad gateway")

        assert await service.fetch_current() is None


@pytest.mark.unit
@pytest.mark.asyncio
class TestPricesWithPrediction:

    async def test_past_range_is_not_widened(self, service, fake_upstream, upstream_payload):
        fake_upstream.responses["range"] = upstream_payload([float(i) for i in range(6)])

        series = await service.get_prices_with_prediction(T0, T0 + 5 * H, now=T0 + timedelta(days=10))

        assert fake_upstream.requests[0].url.params["start"] == "2026-03-10T00:00:00.000Z"
        assert len(series) == 6
        assert len(series.predicted()) == 0

    async def test_future_range_fetches_history_and_predicts(self, service, fake_upstream, upstream_payload):
        # Published through day 10, 12:00 UTC
        fake_upstream.responses["range"] = upstream_payload([float(i) for i in range(253)])
        now = T0 + timedelta(days=10, minutes=30)
        start = T0 + timedelta(days=10)
        end = T0 + timedelta(days=11, hours=23, minutes=59, seconds=59, microseconds=999000)

        series = await service.get_prices_with_prediction(start, end, now=now)

        params = fake_upstream.requests[0].url.params
        assert params["start"] == "2026-03-12T00:00:00.000Z"
        assert params["end"] == "2026-03-21T23:59:59.999Z"

        assert series.first.timestamp == start
        assert series.last.timestamp == T0 + timedelta(days=11, hours=23)
        assert len(series) == 48
        assert len(series.actual()) == 13
        assert len(series.predicted()) == 35

        first_prediction = series.predicted().first
        assert first_prediction.timestamp == T0 + 253 * H
        # Mean of hour 229 (yesterday) and hour 85 (last week)
        assert first_prediction.raw_price == pytest.approx(157.0)

    async def test_predictions_follow_actuals(self, service, fake_upstream, upstream_payload):
        fake_upstream.responses["range"] = upstream_payload([float(i) for i in range(30)])
        now = T0 + 29 * H

        series = await service.get_prices_with_prediction(T0, T0 + 40 * H, now=now)

        kinds = [p.kind for p in series]
        assert kinds == sorted(kinds, key=lambda k: k is PriceKind.PREDICTED)
        stamps = [p.timestamp for p in series]
        assert stamps == sorted(set(stamps))

    async def test_upstream_down_gives_empty_series(self, service, fake_upstream):
        fake_upstream.responses["range"] = httpx.ConnectError("down")
        now = T0 + timedelta(minutes=30)

        series = await service.get_prices_with_prediction(T0, T0 + 48 * H, now=now)

        assert len(series) == 0
