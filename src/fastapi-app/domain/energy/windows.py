"""
Cheapest Window Finder (Domain Logic)
=====================================

Finds the contiguous run of hours with the lowest total price between the
current hour and a time-of-day deadline, e.g. "when should the dishwasher
run for 3 hours before 07:00?".

Usage:
    from domain.energy.windows import find_cheapest_window

    window = find_cheapest_window(series, 3, time(7, 0), now=datetime.now(timezone.utc))
"""

from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Optional

from core.exceptions import InvalidWindowError
from domain.energy.models import ONE_HOUR, CheapestWindow, PriceSeries
from domain.energy.units import DEFAULT_TAX_RATE, floor_to_hour


def resolve_deadline(deadline: time, now: datetime, tz: tzinfo = timezone.utc) -> datetime:
    """
    Turn a time-of-day into an absolute UTC instant strictly after the current hour.

    The time is applied to today's date in `tz`; if that is at or before the
    start of the current hour it means the same time tomorrow.
    """
    hour_start = floor_to_hour(now)
    local_today = hour_start.astimezone(tz).date()

    candidate = datetime.combine(local_today, deadline.replace(tzinfo=None), tzinfo=tz)
    if candidate.astimezone(timezone.utc) <= hour_start:
        candidate = datetime.combine(local_today + timedelta(days=1), deadline.replace(tzinfo=None), tzinfo=tz)

    return candidate.astimezone(timezone.utc)


def find_cheapest_window(
    series: PriceSeries,
    window_hours: int,
    deadline: time,
    now: datetime,
    include_tax: bool = False,
    tax_rate: float = DEFAULT_TAX_RATE,
    tz: tzinfo = timezone.utc
) -> Optional[CheapestWindow]:
    """
    Lowest-cost contiguous window of `window_hours` points ending by `deadline`.

    Args:
        series: Hourly series, ascending (actual and predicted points)
        window_hours: Window length in hours
        deadline: Time-of-day the window must finish by
        now: Reference instant; points before the current hour are ignored
        include_tax: Compare tax-inclusive prices
        tax_rate: Consumption tax rate
        tz: Timezone the deadline is expressed in

    Returns:
        The window with the lowest sum (earliest wins ties), or None

    Raises:
        InvalidWindowError: If window_hours < 1
    """
    if window_hours < 1:
        raise InvalidWindowError(window_hours)

    hour_start = floor_to_hour(now)
    search_start = next(
        (i for i, p in enumerate(series) if p.timestamp >= hour_start),
        None
    )
    if search_start is None:
        return None

    deadline_at = resolve_deadline(deadline, now, tz)
    points = series.points

    best_sum = None
    best_index = None
    for i in range(search_start, len(points) - window_hours + 1):
        window_end = points[i + window_hours - 1].timestamp + ONE_HOUR
        if window_end > deadline_at:
            # Later windows end even later
            break

        total = sum(p.price(include_tax, tax_rate) for p in points[i:i + window_hours])
        if best_sum is None or total < best_sum:
            best_sum = total
            best_index = i

    if best_index is None:
        return None

    last_index = best_index + window_hours - 1
    if last_index + 1 < len(points):
        end = points[last_index + 1].timestamp
    else:
        end = points[last_index].timestamp

    return CheapestWindow(
        start=points[best_index].timestamp,
        end=end,
        average_price=best_sum / window_hours,
        window_hours=window_hours,
    )
