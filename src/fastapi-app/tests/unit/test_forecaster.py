"""
Unit Tests for PriceForecaster
==============================

Coverage:
- ✅ Yesterday / last-week blend
- ✅ Fallback to the latest known value
- ✅ Bootstrapping off earlier predictions
- ✅ Determinism and ordering
"""

from datetime import datetime, timedelta, timezone

import pytest

from domain.energy.forecaster import PriceForecaster
from domain.energy.models import PriceKind

T0 = datetime(2026, 3, 10, tzinfo=timezone.utc)
H = timedelta(hours=1)


@pytest.fixture
def forecaster():
    return PriceForecaster()


@pytest.mark.unit
class TestExtendWithPrediction:

    def test_empty_input_yields_empty_series(self, forecaster, make_series):
        result = forecaster.extend_with_prediction(make_series([]), T0 + 24 * H)
        assert len(result) == 0

    def test_target_not_beyond_last_point_adds_nothing(self, forecaster, make_series):
        series = make_series([10, 20, 30])
        result = forecaster.extend_with_prediction(series, T0 + 3 * H)
        assert result == series

    def test_no_references_carries_last_value_forward(self, forecaster, make_series):
        series = make_series([10, 20])
        result = forecaster.extend_with_prediction(series, T0 + 4 * H)

        predicted = result.predicted()
        assert [p.timestamp for p in predicted] == [T0 + 2 * H, T0 + 3 * H]
        assert [p.raw_price for p in predicted] == [20.0, 20.0]
        assert all(p.kind is PriceKind.PREDICTED for p in predicted)

    def test_uses_same_hour_yesterday(self, forecaster, make_series):
        series = make_series([float(i) for i in range(25)])  # hours 0..24
        result = forecaster.extend_with_prediction(series, T0 + 26 * H)

        predicted = result.predicted()
        assert len(predicted) == 1
        assert predicted[0].timestamp == T0 + 25 * H
        assert predicted[0].raw_price == 1.0

    def test_blends_yesterday_and_last_week(self, forecaster, make_series):
        series = make_series([float(i) for i in range(169)])  # hours 0..168
        result = forecaster.extend_with_prediction(series, T0 + 170 * H)

        predicted = result.predicted()
        assert len(predicted) == 1
        # yesterday = hour 145, last week = hour 1
        assert predicted[0].raw_price == pytest.approx((145.0 + 1.0) / 2)

    def test_bootstraps_off_earlier_predictions(self, forecaster, make_series):
        series = make_series([float(i) for i in range(24)])  # hours 0..23
        result = forecaster.extend_with_prediction(series, T0 + 49 * H)

        predicted = result.predicted()
        assert len(predicted) == 25
        # hour 24 copies hour 0, hour 48 copies predicted hour 24
        assert result.point_at(T0 + 24 * H).raw_price == 0.0
        assert result.point_at(T0 + 47 * H).raw_price == 23.0
        assert result.point_at(T0 + 48 * H).raw_price == 0.0

    def test_actual_points_are_kept_unchanged(self, forecaster, make_series):
        series = make_series([10, 20, 30])
        result = forecaster.extend_with_prediction(series, T0 + 10 * H)
        assert result[:3] == series

    def test_timestamps_strictly_increasing(self, forecaster, make_series):
        series = make_series([float(i % 7) for i in range(30)])
        result = forecaster.extend_with_prediction(series, T0 + 100 * H)

        stamps = [p.timestamp for p in result]
        assert all(b - a == H for a, b in zip(stamps, stamps[1:]))

    def test_deterministic(self, forecaster, make_series):
        series = make_series([float(i * 3 % 11) for i in range(50)])
        first = forecaster.extend_with_prediction(series, T0 + 120 * H)
        second = PriceForecaster().extend_with_prediction(series, T0 + 120 * H)
        assert first == second


@pytest.mark.unit
class TestPredictNextHours:

    def test_returns_only_predictions(self, forecaster, make_series):
        series = make_series([10, 20, 30])
        predicted = forecaster.predict_next_hours(series, hours=5)

        assert len(predicted) == 5
        assert all(p.is_predicted for p in predicted)
        assert predicted.first.timestamp == T0 + 3 * H

    def test_zero_hours(self, forecaster, make_series):
        assert len(forecaster.predict_next_hours(make_series([10]), hours=0)) == 0
