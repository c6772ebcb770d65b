"""
Weekly recurrence parsing and expansion.

Only ``FREQ=WEEKLY;BYDAY=..`` rules are supported. Weekdays are normalized to
Python's ``date.weekday()`` numbering (Monday=0 .. Sunday=6) before any
comparison, whatever convention the source string or client used.
"""

from __future__ import annotations

from datetime import date, timedelta
import re
from typing import FrozenSet, Iterable, List, Optional

from ..core.constants import RRULE_WEEKDAY_CODES, WEEKDAY_SHORT_NAMES
from ..core.exceptions import InvalidRecurrenceException

_CODE_TO_INDEX = {code: idx for idx, code in enumerate(RRULE_WEEKDAY_CODES)}
_BYDAY_RE = re.compile(r"(?:^|;)\s*BYDAY\s*=\s*([^;]*)", re.IGNORECASE)
_FREQ_RE = re.compile(r"(?:^|;)\s*FREQ\s*=\s*([^;]*)", re.IGNORECASE)

WEEKDAYS_MON_FRI: FrozenSet[int] = frozenset(range(5))
WEEKEND: FrozenSet[int] = frozenset({5, 6})


def parse_weekdays(rrule: Optional[str]) -> FrozenSet[int]:
    """
    Extract the weekday set from a weekly recurrence string.

    Anything that is not a weekly rule with at least one recognizable BYDAY
    code yields an empty set. Unknown codes inside an otherwise valid list are
    ignored. The "RRULE:" prefix is tolerated.
    """
    if not rrule or not isinstance(rrule, str):
        return frozenset()
    body = rrule.strip()
    if body.upper().startswith("RRULE:"):
        body = body[len("RRULE:") :]

    freq = _FREQ_RE.search(body)
    if freq is not None and freq.group(1).strip().upper() != "WEEKLY":
        return frozenset()

    match = _BYDAY_RE.search(body)
    if match is None:
        return frozenset()

    days = set()
    for token in match.group(1).split(","):
        code = token.strip().upper()
        if code in _CODE_TO_INDEX:
            days.add(_CODE_TO_INDEX[code])
    return frozenset(days)


def weekday_from_sunday_first(js_day: int) -> int:
    """Convert a Sunday-first day index (Sunday=0) to Monday=0 numbering."""
    if not 0 <= js_day <= 6:
        raise ValueError(f"day index out of range: {js_day}")
    return 6 if js_day == 0 else js_day - 1


def build_weekly_rrule(weekdays: Iterable[int]) -> str:
    """Build a ``FREQ=WEEKLY;BYDAY=..`` string from Monday=0 weekday indexes."""
    days = sorted(set(weekdays))
    if not days:
        raise InvalidRecurrenceException("FREQ=WEEKLY;BYDAY=")
    for day in days:
        if not 0 <= day <= 6:
            raise ValueError(f"weekday out of range: {day}")
    return "FREQ=WEEKLY;BYDAY=" + ",".join(RRULE_WEEKDAY_CODES[d] for d in days)


def format_recurrence(rrule: Optional[str]) -> str:
    """Human readable summary of a weekly rule, e.g. 'Mon-Fri' or 'Mon, Wed'."""
    days = parse_weekdays(rrule)
    if not days:
        return "No days"
    if len(days) == 7:
        return "Daily"
    if days == WEEKDAYS_MON_FRI:
        return "Mon-Fri"
    if days == WEEKEND:
        return "Sat-Sun"
    return ", ".join(WEEKDAY_SHORT_NAMES[d] for d in sorted(days))


def expand_weekly(
    weekdays: Iterable[int],
    valid_from: date,
    valid_until: Optional[date],
    window_from: date,
    window_to: date,
) -> List[date]:
    """
    Return every date in the validity period and query window on a selected weekday.

    The window is clamped to [valid_from, valid_until] (open-ended when
    valid_until is None), then walked one day at a time. Results are ascending.
    An empty weekday set or a reversed window produces an empty list.
    """
    selected = frozenset(weekdays)
    if not selected:
        return []

    lower = max(valid_from, window_from)
    upper = window_to if valid_until is None else min(valid_until, window_to)
    if lower > upper:
        return []

    dates: List[date] = []
    current = lower
    one_day = timedelta(days=1)
    while current <= upper:
        if current.weekday() in selected:
            dates.append(current)
        current += one_day
    return dates


__all__ = [
    "build_weekly_rrule",
    "expand_weekly",
    "format_recurrence",
    "parse_weekdays",
    "weekday_from_sunday_first",
]
