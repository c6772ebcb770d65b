# backend/schedule_engine/services/calendar_grid.py
"""
Calendar grid assembly for month and week-strip views.

Grids are Monday-first and always hold whole weeks: trailing days of the
previous month fill the first week and leading days of the next month fill
the last one. Every cell carries a three-tier availability indicator derived
from the offering's slot map.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional, Tuple

from ..core.constants import DAYS_PER_WEEK
from ..core.enums import DayIndicator
from .slot_builder import DaySlots, SlotMap


@dataclass(frozen=True)
class CalendarDay:
    date: date
    day: int
    is_current_month: bool
    is_today: bool = False
    is_selected: bool = False
    indicator: Optional[DayIndicator] = None


@dataclass(frozen=True)
class CalendarWeek:
    days: Tuple[CalendarDay, ...]

    @property
    def start(self) -> date:
        return self.days[0].date

    @property
    def end(self) -> date:
        return self.days[-1].date

    def contains(self, on_date: date) -> bool:
        return self.start <= on_date <= self.end


@dataclass(frozen=True)
class MonthGrid:
    year: int
    month: int
    weeks: Tuple[CalendarWeek, ...] = field(default_factory=tuple)
    selected_week_index: Optional[int] = None

    @property
    def day_count(self) -> int:
        return sum(len(week.days) for week in self.weeks)

    @property
    def first_day(self) -> date:
        return self.weeks[0].start

    @property
    def last_day(self) -> date:
        return self.weeks[-1].end

    def week_index_of(self, on_date: date) -> Optional[int]:
        for index, week in enumerate(self.weeks):
            if week.contains(on_date):
                return index
        return None


def day_indicator(day: Optional[DaySlots]) -> Optional[DayIndicator]:
    """
    Classify a date's aggregate availability.

    No entry means no indicator. A date whose every occurrence was cancelled
    reads as sold out, as does a date with all capacity committed.
    """
    if day is None:
        return None
    if not day.slots:
        return DayIndicator.SOLD_OUT if day.has_cancellation else None
    if day.total_committed == 0:
        return DayIndicator.AVAILABLE
    if day.total_committed >= day.total_available:
        return DayIndicator.SOLD_OUT
    return DayIndicator.PARTIAL


def month_date_range(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a month."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def month_display_range(year: int, month: int) -> Tuple[date, date]:
    """Monday on/before the 1st through Sunday on/after the last day of the month."""
    first, last = month_date_range(year, month)
    display_start = first - timedelta(days=first.weekday())
    display_end = last + timedelta(days=6 - last.weekday())
    return display_start, display_end


def build_month_grid(
    year: int,
    month: int,
    slot_map: Optional[SlotMap] = None,
    *,
    today: Optional[date] = None,
    selected_date: Optional[date] = None,
) -> MonthGrid:
    """Assemble the Monday-first grid for a month with per-day indicators."""
    slot_map = slot_map or {}
    display_start, display_end = month_display_range(year, month)

    cells: List[CalendarDay] = []
    current = display_start
    while current <= display_end:
        cells.append(
            CalendarDay(
                date=current,
                day=current.day,
                is_current_month=(current.year == year and current.month == month),
                is_today=(today is not None and current == today),
                is_selected=(selected_date is not None and current == selected_date),
                indicator=day_indicator(slot_map.get(current)),
            )
        )
        current += timedelta(days=1)

    weeks = tuple(
        CalendarWeek(days=tuple(cells[i : i + DAYS_PER_WEEK]))
        for i in range(0, len(cells), DAYS_PER_WEEK)
    )
    grid = MonthGrid(year=year, month=month, weeks=weeks)
    if selected_date is None:
        return grid
    return MonthGrid(
        year=year,
        month=month,
        weeks=weeks,
        selected_week_index=grid.week_index_of(selected_date),
    )


def _month_start(value: date) -> date:
    return date(value.year, value.month, 1)


def _shift_month(month_start: date, delta: int) -> date:
    index = month_start.year * 12 + (month_start.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


class CalendarNavigator:
    """
    Month navigation and week-strip paging state for a calendar view.

    The strip's page follows the week holding the selected date and is
    recomputed whenever the displayed month changes. Paging the strip moves
    independently of the selection within the current grid. Month navigation
    past ``min_date``/``max_date`` is a no-op.
    """

    def __init__(
        self,
        current_month: date,
        selected_date: Optional[date] = None,
        *,
        min_date: Optional[date] = None,
        max_date: Optional[date] = None,
        today: Optional[date] = None,
    ):
        self.min_date = min_date
        self.max_date = max_date
        self.today = today
        self.current_month = _month_start(current_month)
        self.selected_date = selected_date
        self.week_index = 0
        self._sync_week_index()

    def grid(self, slot_map: Optional[SlotMap] = None) -> MonthGrid:
        return build_month_grid(
            self.current_month.year,
            self.current_month.month,
            slot_map,
            today=self.today,
            selected_date=self.selected_date,
        )

    @property
    def week_count(self) -> int:
        start, end = month_display_range(self.current_month.year, self.current_month.month)
        return ((end - start).days + 1) // DAYS_PER_WEEK

    def can_go_previous(self) -> bool:
        if self.min_date is None:
            return True
        return _shift_month(self.current_month, -1) >= _month_start(self.min_date)

    def can_go_next(self) -> bool:
        if self.max_date is None:
            return True
        return _shift_month(self.current_month, 1) <= _month_start(self.max_date)

    def previous_month(self) -> bool:
        """Move one month back. Returns False (and changes nothing) past the bound."""
        if not self.can_go_previous():
            return False
        self._set_month(_shift_month(self.current_month, -1))
        return True

    def next_month(self) -> bool:
        """Move one month forward. Returns False (and changes nothing) past the bound."""
        if not self.can_go_next():
            return False
        self._set_month(_shift_month(self.current_month, 1))
        return True

    def select_date(self, on_date: date) -> None:
        """Select a day; switches the displayed month when the day is outside it."""
        self.selected_date = on_date
        if _month_start(on_date) != self.current_month:
            self.current_month = _month_start(on_date)
        self._sync_week_index()

    def page_week(self, delta: int) -> int:
        """Scroll the week strip by ``delta`` pages, clamped to the grid."""
        self.week_index = max(0, min(self.week_count - 1, self.week_index + delta))
        return self.week_index

    def _set_month(self, month_start: date) -> None:
        self.current_month = month_start
        self._sync_week_index()

    def _sync_week_index(self) -> None:
        start, _ = month_display_range(self.current_month.year, self.current_month.month)
        if self.selected_date is not None:
            offset = (self.selected_date - start).days // DAYS_PER_WEEK
            if 0 <= offset < self.week_count:
                self.week_index = offset
                return
        self.week_index = 0
