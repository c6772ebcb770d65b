from __future__ import annotations

from datetime import date, datetime, time
from typing import Union

DateLike = Union[date, datetime]


def format_local_date(value: DateLike) -> str:
    """
    Format a date as YYYY-MM-DD from its local calendar components.

    Aware datetimes are formatted in their own offset; they are never
    normalized to UTC first, which would shift the day for zones behind UTC.
    """
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def format_time_hhmm(t: time) -> str:
    return f"{t.hour:02d}:{t.minute:02d}"


def time_to_minutes(t: time, *, is_end_time: bool = False) -> int:
    """
    Convert time to minutes since midnight.

    Args:
        t: Time object.
        is_end_time: If True, treat time(0, 0) as 1440 (end of day).

    Returns:
        Minutes since midnight (0-1440).
    """
    minutes = t.hour * 60 + t.minute
    if is_end_time and minutes == 0:
        return 24 * 60
    return minutes


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end (negative when end is earlier)."""
    return (end - start).days
