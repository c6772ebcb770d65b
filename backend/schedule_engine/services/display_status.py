# backend/schedule_engine/services/display_status.py
"""
Display status classification for offering cards.

The classifier looks at the single nearest actionable slot relative to a
caller-supplied "now" (local wall-clock time) and maps it to a status tier
with its text, color and icon. Results depend on "now" and on live committed
quantities, so they are recomputed on every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Optional

from ..core.constants import (
    LOW_STOCK_THRESHOLD,
    MONTH_SHORT_NAMES,
    THIS_WEEK_MAX_DAYS,
    WEEKDAY_SHORT_NAMES,
)
from ..core.enums import DisplayStatus
from ..utils.time_utils import days_between, format_time_hhmm, time_to_minutes
from .slot_builder import ComputedSlot, SlotMap, iter_slots

STATUS_COLORS: Dict[DisplayStatus, str] = {
    DisplayStatus.AVAILABLE: "#10B981",
    DisplayStatus.LOW_STOCK: "#F59E0B",
    DisplayStatus.LATER_TODAY: "#F59E0B",
    DisplayStatus.TOMORROW: "#3B82F6",
    DisplayStatus.THIS_WEEK: "#3B82F6",
    DisplayStatus.FUTURE: "#64748B",
    DisplayStatus.UNAVAILABLE: "#6B7280",
}

STATUS_ICONS: Dict[DisplayStatus, str] = {
    DisplayStatus.AVAILABLE: "checkmark-circle",
    DisplayStatus.LOW_STOCK: "alert-circle",
    DisplayStatus.LATER_TODAY: "time",
    DisplayStatus.TOMORROW: "calendar",
    DisplayStatus.THIS_WEEK: "calendar-outline",
    DisplayStatus.FUTURE: "calendar-outline",
    DisplayStatus.UNAVAILABLE: "ban",
}

UNAVAILABLE_TEXT = "Not available"


@dataclass(frozen=True)
class DisplayContext:
    status: DisplayStatus
    status_text: str
    status_color: str
    status_icon: str
    can_order: bool
    schedule_display: Optional[str] = None
    remaining: Optional[int] = None
    slot: Optional[ComputedSlot] = None


@dataclass(frozen=True)
class SlotDisplayInfo:
    """A slot with the labels used in slot pickers and cart lines."""

    slot: ComputedSlot
    day_label: str
    time_label: str
    days_from_now: int

    @property
    def is_today(self) -> bool:
        return self.days_from_now == 0

    @property
    def is_tomorrow(self) -> bool:
        return self.days_from_now == 1


def _minutes_of_day(now: datetime) -> int:
    return now.hour * 60 + now.minute


def _has_ended(slot: ComputedSlot, now: datetime) -> bool:
    today = now.date()
    if slot.date < today:
        return True
    if slot.date > today:
        return False
    return _minutes_of_day(now) >= time_to_minutes(slot.end_time, is_end_time=True)


def first_available_slot(slot_map: SlotMap, now: datetime) -> Optional[ComputedSlot]:
    """
    Earliest bookable slot by (date, start time).

    Sold-out and cancelled slots are skipped, as are slots that already
    ended relative to ``now``.
    """
    best: Optional[ComputedSlot] = None
    for slot in iter_slots(slot_map):
        if not slot.is_bookable or _has_ended(slot, now):
            continue
        if best is None or (slot.date, slot.start_time) < (best.date, best.start_time):
            best = slot
    return best


def format_schedule_display(slot: ComputedSlot) -> str:
    window = f"{format_time_hhmm(slot.start_time)}-{format_time_hhmm(slot.end_time)}"
    return f"{slot.slot_label} {window}" if slot.slot_label else window


def format_day_label(on_date: date, today: date) -> str:
    """'Today', 'Tomorrow', or 'Wed, Jan 22'."""
    offset = days_between(today, on_date)
    if offset == 0:
        return "Today"
    if offset == 1:
        return "Tomorrow"
    return (
        f"{WEEKDAY_SHORT_NAMES[on_date.weekday()]}, "
        f"{MONTH_SHORT_NAMES[on_date.month - 1]} {on_date.day}"
    )


def describe_slot(slot: ComputedSlot, today: date) -> SlotDisplayInfo:
    return SlotDisplayInfo(
        slot=slot,
        day_label=format_day_label(slot.date, today),
        time_label=slot.time_label,
        days_from_now=days_between(today, slot.date),
    )


def _context(
    status: DisplayStatus, text: str, slot: ComputedSlot
) -> DisplayContext:
    return DisplayContext(
        status=status,
        status_text=text,
        status_color=STATUS_COLORS[status],
        status_icon=STATUS_ICONS[status],
        can_order=True,
        schedule_display=format_schedule_display(slot),
        remaining=slot.remaining,
        slot=slot,
    )


def unavailable_context() -> DisplayContext:
    return DisplayContext(
        status=DisplayStatus.UNAVAILABLE,
        status_text=UNAVAILABLE_TEXT,
        status_color=STATUS_COLORS[DisplayStatus.UNAVAILABLE],
        status_icon=STATUS_ICONS[DisplayStatus.UNAVAILABLE],
        can_order=False,
    )


def classify(
    slot_map: SlotMap,
    now: datetime,
    low_stock_threshold: int = LOW_STOCK_THRESHOLD,
) -> DisplayContext:
    """
    Classify an offering's availability relative to ``now``.

    ``now`` is read as local wall-clock time; aware datetimes are used with
    their own date and time components. Precedence, first match wins:

    1. no actionable slot: unavailable
    2. slot is today and now is within [start, end): available or low_stock
    3. slot is later today: later_today
    4. slot is tomorrow: tomorrow
    5. slot is 2-6 days away: this_week
    6. otherwise: future
    """
    slot = first_available_slot(slot_map, now)
    if slot is None:
        return unavailable_context()

    start = format_time_hhmm(slot.start_time)
    days_from_now = days_between(now.date(), slot.date)

    if days_from_now == 0:
        minutes = _minutes_of_day(now)
        in_window = (
            time_to_minutes(slot.start_time)
            <= minutes
            < time_to_minutes(slot.end_time, is_end_time=True)
        )
        if in_window:
            if slot.remaining <= low_stock_threshold:
                return _context(DisplayStatus.LOW_STOCK, f"Only {slot.remaining} left!", slot)
            return _context(DisplayStatus.AVAILABLE, f"{slot.remaining} available", slot)
        return _context(DisplayStatus.LATER_TODAY, f"From {start}", slot)

    if days_from_now == 1:
        return _context(DisplayStatus.TOMORROW, f"Tomorrow {start}", slot)

    if days_from_now <= THIS_WEEK_MAX_DAYS:
        day_name = WEEKDAY_SHORT_NAMES[slot.date.weekday()]
        return _context(DisplayStatus.THIS_WEEK, f"{day_name} {start}", slot)

    month_name = MONTH_SHORT_NAMES[slot.date.month - 1]
    return _context(DisplayStatus.FUTURE, f"{month_name} {slot.date.day}", slot)
