# backend/schedule_engine/services/availability_service.py
"""
Availability Service

Entry point the HTTP layer uses to turn raw availability rows into slot
maps, month grids, display statuses and selection checks.

The engine functions it calls are pure; this service is where query windows
are defaulted and bounded and where "now" and "today" are resolved in the
configured calendar timezone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
import logging
from typing import List, Optional, Tuple

from ..core.exceptions import InvalidDateWindowException
from ..core.timezone_utils import get_local_now, get_local_today, to_local_wall_time
from ..schemas.schedule_write import ScheduleCreate
from ..schemas.slots import AvailabilityQuery
from .adapters import (
    AvailabilityRecords,
    exceptions_from_rows,
    extract_from_embedded_offerings,
    instances_from_rows,
    schedules_from_rows,
)
from .base import BaseService
from .booking_validation import validate_booking_selection
from .calendar_grid import MonthGrid, build_month_grid, month_display_range
from .display_status import DisplayContext, classify
from .recurrence import format_recurrence, parse_weekdays
from .slot_builder import ComputedSlot, SlotMap, build_slot_map

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleValidationResult:
    rrule: str
    weekdays: List[int]
    recurrence_label: str


class AvailabilityService(BaseService):
    """Computes availability views from schedules, exceptions and instances."""

    def records_from_query(self, query: AvailabilityQuery) -> AvailabilityRecords:
        """Convert flat rows and embedded offerings into canonical records."""
        records = AvailabilityRecords(
            schedules=schedules_from_rows(query.schedules),
            exceptions=exceptions_from_rows(query.exceptions),
            instances=instances_from_rows(query.instances),
        )
        if query.offerings:
            records.extend(extract_from_embedded_offerings(query.offerings))
        return records

    def local_now(self) -> datetime:
        """Current naive wall-clock time in the calendar timezone."""
        return to_local_wall_time(get_local_now(self.settings.timezone), self.settings.timezone)

    def resolve_window(
        self,
        from_date: Optional[date],
        to_date: Optional[date],
        today: Optional[date] = None,
    ) -> Tuple[date, date]:
        """
        Default and bound a query window.

        A missing start means today; a missing end spans the configured
        default number of days. Reversed windows pass through and yield
        empty results downstream.

        Raises:
            InvalidDateWindowException: If the window is longer than allowed
        """
        start = from_date or today or get_local_today(self.settings.timezone)
        end = to_date or start + timedelta(days=self.settings.default_window_days - 1)
        if end >= start and (end - start).days + 1 > self.settings.max_window_days:
            raise InvalidDateWindowException(start, end, self.settings.max_window_days)
        return start, end

    @BaseService.measure_operation("compute_slot_map")
    def compute_slot_map(
        self,
        records: AvailabilityRecords,
        window_from: date,
        window_to: date,
        *,
        public_only: bool = False,
    ) -> SlotMap:
        slot_map = build_slot_map(
            records.schedules,
            records.exceptions,
            records.instances,
            window_from,
            window_to,
            public_only=public_only,
        )
        self.logger.debug(
            f"Computed {len(slot_map)} dates from {len(records.schedules)} schedules "
            f"for {window_from} to {window_to}"
        )
        return slot_map

    @BaseService.measure_operation("build_calendar")
    def build_calendar(
        self,
        records: AvailabilityRecords,
        year: int,
        month: int,
        *,
        selected_date: Optional[date] = None,
        today: Optional[date] = None,
        public_only: bool = False,
    ) -> MonthGrid:
        """Month grid over the grid's full display range, including spill-over days."""
        window_from, window_to = month_display_range(year, month)
        slot_map = self.compute_slot_map(
            records, window_from, window_to, public_only=public_only
        )
        return build_month_grid(
            year,
            month,
            slot_map,
            today=today or get_local_today(self.settings.timezone),
            selected_date=selected_date,
        )

    @BaseService.measure_operation("get_display_context")
    def get_display_context(
        self,
        records: AvailabilityRecords,
        *,
        now: Optional[datetime] = None,
        window_to: Optional[date] = None,
        low_stock_threshold: Optional[int] = None,
        public_only: bool = False,
    ) -> DisplayContext:
        """
        Classify an offering relative to ``now``.

        ``now`` is resolved on every call when not given; aware values are
        converted to local wall-clock time first.
        """
        local_now = to_local_wall_time(now, self.settings.timezone) if now else self.local_now()
        window_from, window_to = self.resolve_window(local_now.date(), window_to)
        slot_map = self.compute_slot_map(
            records, window_from, window_to, public_only=public_only
        )
        threshold = (
            low_stock_threshold
            if low_stock_threshold is not None
            else self.settings.low_stock_threshold
        )
        return classify(slot_map, local_now, threshold)

    @BaseService.measure_operation("validate_selection")
    def validate_selection(
        self,
        records: AvailabilityRecords,
        schedule_id: str,
        on_date: date,
        quantity: int,
    ) -> ComputedSlot:
        """
        Check a selection against freshly computed slots for its date.

        Raises:
            ValidationException: If quantity is below 1
            SlotUnavailableException: If there is no bookable slot
            InsufficientCapacityException: If quantity exceeds remaining capacity
        """
        slot_map = self.compute_slot_map(records, on_date, on_date)
        return validate_booking_selection(slot_map, schedule_id, on_date, quantity)

    @BaseService.measure_operation("validate_schedule")
    def validate_schedule(self, payload: ScheduleCreate) -> ScheduleValidationResult:
        weekdays = sorted(parse_weekdays(payload.rrule))
        return ScheduleValidationResult(
            rrule=payload.rrule,
            weekdays=weekdays,
            recurrence_label=format_recurrence(payload.rrule),
        )
