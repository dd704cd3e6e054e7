"""
Price Domain Models
===================

Immutable value objects shared by the forecaster, the statistics engine and
the cheapest-window finder.

Usage:
    from domain.energy.models import PricePoint, PriceSeries

    series = PriceSeries.from_points([
        PricePoint.actual(datetime(2026, 1, 1, 0, tzinfo=timezone.utc), 85.2),
        PricePoint.actual(datetime(2026, 1, 1, 1, tzinfo=timezone.utc), 79.9),
    ])
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, Iterator, Optional, Tuple

from domain.energy.units import DEFAULT_TAX_RATE, apply_tax, as_utc, floor_to_hour, to_display_unit

ONE_HOUR = timedelta(hours=1)


class PriceKind(str, Enum):
    """Origin of a price point."""
    ACTUAL = "actual"
    PREDICTED = "predicted"


@dataclass(frozen=True)
class PricePoint:
    """One hourly quotation. `timestamp` is an hour-aligned UTC instant."""

    timestamp: datetime
    raw_price: float
    kind: PriceKind = PriceKind.ACTUAL

    def __post_init__(self):
        if self.timestamp.tzinfo is None:
            raise ValueError("PricePoint timestamp must be timezone-aware")

    @classmethod
    def actual(cls, timestamp: datetime, raw_price: float) -> "PricePoint":
        return cls(floor_to_hour(timestamp), float(raw_price), PriceKind.ACTUAL)

    @classmethod
    def predicted(cls, timestamp: datetime, raw_price: float) -> "PricePoint":
        return cls(floor_to_hour(timestamp), float(raw_price), PriceKind.PREDICTED)

    @property
    def display_price(self) -> float:
        """Price in cents/kWh."""
        return to_display_unit(self.raw_price)

    @property
    def is_predicted(self) -> bool:
        return self.kind is PriceKind.PREDICTED

    def price(self, include_tax: bool = False, tax_rate: float = DEFAULT_TAX_RATE) -> float:
        """Display price, tax-inclusive when requested."""
        value = self.display_price
        return apply_tax(value, tax_rate) if include_tax else value


class PriceSeries:
    """
    Ordered, read-only sequence of PricePoint.

    Timestamps are strictly increasing. Every transformation returns a new
    series; the underlying tuple is never modified.
    """

    __slots__ = ("_points",)

    def __init__(self, points: Tuple[PricePoint, ...] = ()):
        self._points = tuple(points)

    @classmethod
    def from_points(cls, points: Iterable[PricePoint]) -> "PriceSeries":
        """
        Build a series from unordered points.

        Sorted ascending by timestamp; for a repeated hour the first point
        encountered wins.
        """
        by_hour = {}
        for point in points:
            by_hour.setdefault(point.timestamp, point)
        return cls(tuple(sorted(by_hour.values(), key=lambda p: p.timestamp)))

    @classmethod
    def empty(cls) -> "PriceSeries":
        return cls(())

    # Sequence protocol -------------------------------------------------

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[PricePoint]:
        return iter(self._points)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return PriceSeries(self._points[index])
        return self._points[index]

    def __bool__(self) -> bool:
        return bool(self._points)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PriceSeries):
            return NotImplemented
        return self._points == other._points

    def __hash__(self) -> int:
        return hash(self._points)

    def __repr__(self) -> str:
        if not self._points:
            return "PriceSeries([])"
        return (
            f"PriceSeries({len(self._points)} points, "
            f"{self._points[0].timestamp.isoformat()} .. {self._points[-1].timestamp.isoformat()})"
        )

    # Accessors ---------------------------------------------------------

    @property
    def points(self) -> Tuple[PricePoint, ...]:
        return self._points

    @property
    def first(self) -> Optional[PricePoint]:
        return self._points[0] if self._points else None

    @property
    def last(self) -> Optional[PricePoint]:
        return self._points[-1] if self._points else None

    def index_of(self, timestamp: datetime) -> Optional[int]:
        """Position of the point at `timestamp` (floored to the hour), if any."""
        target = floor_to_hour(timestamp)
        for i, point in enumerate(self._points):
            if point.timestamp == target:
                return i
            if point.timestamp > target:
                break
        return None

    def point_at(self, timestamp: datetime) -> Optional[PricePoint]:
        idx = self.index_of(timestamp)
        return None if idx is None else self._points[idx]

    # Transformations ---------------------------------------------------

    def actual(self) -> "PriceSeries":
        """Only points sourced from the market."""
        return PriceSeries(tuple(p for p in self._points if p.kind is PriceKind.ACTUAL))

    def predicted(self) -> "PriceSeries":
        """Only synthesized points."""
        return PriceSeries(tuple(p for p in self._points if p.kind is PriceKind.PREDICTED))

    def between(self, start: datetime, end: datetime) -> "PriceSeries":
        """Points with start <= timestamp <= end."""
        start = as_utc(start)
        end = as_utc(end)
        return PriceSeries(tuple(p for p in self._points if start <= p.timestamp <= end))

    def extended(self, points: Iterable[PricePoint]) -> "PriceSeries":
        """New series with `points` appended, re-validated for ordering."""
        return PriceSeries.from_points((*self._points, *points))


@dataclass(frozen=True)
class Statistics:
    """Descriptive statistics over actual prices, all in one unit."""

    min: float
    max: float
    mean: float
    median: float
    p75: float
    p90: float
    p95: float
    count: int


@dataclass(frozen=True)
class CheapestWindow:
    """Contiguous run of hours with the lowest total price."""

    start: datetime
    end: datetime
    average_price: float
    window_hours: int

