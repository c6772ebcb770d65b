"""
Timezone utilities for the availability engine.

Community calendars are interpreted in a single configured timezone. The pure
scheduling functions take ``now`` as an argument; these helpers are where the
service layer resolves it.
"""

from datetime import date, datetime
from typing import Optional

import pytz
from pytz.tzinfo import BaseTzInfo

from .config import settings


def get_calendar_timezone(tz_name: Optional[str] = None) -> BaseTzInfo:
    """
    Get the timezone calendars are evaluated in.

    Args:
        tz_name: Optional IANA name overriding the configured timezone

    Returns:
        pytz timezone object
    """
    return pytz.timezone(tz_name or settings.timezone)


def get_local_now(tz_name: Optional[str] = None) -> datetime:
    """
    Get the current datetime in the calendar timezone.

    Args:
        tz_name: Optional IANA name overriding the configured timezone

    Returns:
        Timezone-aware current datetime
    """
    return datetime.now(get_calendar_timezone(tz_name))


def get_local_today(tz_name: Optional[str] = None) -> date:
    """Get 'today' in the calendar timezone."""
    return get_local_now(tz_name).date()


def to_local_wall_time(dt: datetime, tz_name: Optional[str] = None) -> datetime:
    """
    Convert an instant to naive local wall-clock time in the calendar timezone.

    Naive inputs are taken to already be local wall-clock time and are
    returned unchanged. Aware inputs are converted, then stripped of tzinfo so
    that date/time comparisons against schedule times use local components.

    Args:
        dt: Datetime to convert

    Returns:
        Naive datetime expressed in local wall-clock time
    """
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        return dt
    return dt.astimezone(get_calendar_timezone(tz_name)).replace(tzinfo=None)
