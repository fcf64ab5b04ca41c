"""
DateTime utilities for the waitlist engine.
Provides the injectable clock, restaurant-local day/hour bucketing and
diner-facing time formatting.
"""
from datetime import datetime
from typing import Callable, Optional, Tuple
import math

import pytz

from core.settings import settings


# Timezone configuration
TIMEZONE = pytz.timezone(settings.restaurant_timezone)

# Wall-clock source. Everything that needs "now" takes one of these.
Clock = Callable[[], datetime]


def get_current_datetime() -> datetime:
    """Get current datetime in the restaurant timezone."""
    return datetime.now(TIMEZONE)


def resolve_now(now: Optional[datetime] = None, clock: Optional[Clock] = None) -> datetime:
    """
    Return the explicit ``now`` if given, otherwise read the clock.

    Args:
        now: Caller-supplied timestamp
        clock: Clock to read when ``now`` is None (wall clock by default)

    Returns:
        The timestamp the computation should treat as the present
    """
    if now is not None:
        return now
    return (clock or get_current_datetime)()


def localize(dt: datetime, tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """
    Express a datetime in the restaurant timezone.

    Naive datetimes are assumed to already be restaurant-local.
    """
    tz = tz or TIMEZONE
    if dt.tzinfo is None:
        return tz.localize(dt)
    return dt.astimezone(tz)


def sunday_based_weekday(dt: datetime) -> int:
    """Day of week with 0 = Sunday through 6 = Saturday."""
    return (dt.weekday() + 1) % 7


def day_hour_bucket(dt: datetime, tz: Optional[pytz.BaseTzInfo] = None) -> Tuple[int, int]:
    """
    Get the (day_of_week, hour) bucket historical samples are keyed by.

    Args:
        dt: Timestamp to bucket
        tz: Restaurant timezone (configured timezone by default)

    Returns:
        Tuple of (day_of_week with 0 = Sunday, hour 0-23)
    """
    local = localize(dt, tz)
    return sunday_based_weekday(local), local.hour


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounding up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def round_half_up_places(value: float, places: int = 1) -> float:
    """Round to a fixed number of decimal places with halves rounding up."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def minutes_between(start: datetime, end: datetime) -> float:
    """Minutes elapsed from ``start`` to ``end`` (negative if end is earlier)."""
    return (end - start).total_seconds() / 60


def format_clock_time(dt: datetime) -> str:
    """
    Format a timestamp as a short clock time for diners.

    Returns:
        String like "7:05 PM"
    """
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {suffix}"
