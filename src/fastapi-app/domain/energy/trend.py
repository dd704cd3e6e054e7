"""
Current Price Trend (Domain Logic)
==================================

Hour-over-hour movement of the current price and the past/current/future
split used to colour the chart.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from domain.energy.models import PricePoint
from domain.energy.units import DEFAULT_TAX_RATE, floor_to_hour


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class Period(str, Enum):
    PAST = "past"
    CURRENT = "current"
    FUTURE = "future"


@dataclass(frozen=True)
class PriceTrend:
    """Change of the current price against the previous hour (absolute difference)."""

    direction: TrendDirection
    difference: float


def compute_trend(
    current: Optional[PricePoint],
    previous: Optional[PricePoint],
    include_tax: bool = False,
    tax_rate: float = DEFAULT_TAX_RATE
) -> Optional[PriceTrend]:
    """Trend of `current` vs `previous`, or None if either is missing."""
    if current is None or previous is None:
        return None

    now_value = current.price(include_tax, tax_rate)
    before_value = previous.price(include_tax, tax_rate)

    if now_value > before_value:
        direction = TrendDirection.UP
    elif now_value < before_value:
        direction = TrendDirection.DOWN
    else:
        direction = TrendDirection.FLAT

    return PriceTrend(direction=direction, difference=abs(now_value - before_value))


def classify_period(point: PricePoint, now: datetime) -> Period:
    """Place a point before, in, or after the hour containing `now`."""
    hour_start = floor_to_hour(now)
    if point.timestamp == hour_start:
        return Period.CURRENT
    if point.timestamp < hour_start:
        return Period.PAST
    return Period.FUTURE
