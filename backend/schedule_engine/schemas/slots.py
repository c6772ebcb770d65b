# backend/schedule_engine/schemas/slots.py
"""
Request and response schemas for the availability HTTP surface.

Requests carry raw schedule, exception and instance rows (or embedded
offerings) exactly as the data store returns them; the service converts them
into canonical records before computing anything.
"""

import datetime
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, model_validator

from ..core.enums import DayIndicator, DisplayStatus
from ._strict_base import StrictRequestModel
from .base import StandardizedModel

DateType = datetime.date
TimeType = datetime.time
DateTimeType = datetime.datetime

RawRow = Dict[str, Any]


class AvailabilityQuery(StrictRequestModel):
    """Raw availability rows plus the query window."""

    model_config = StrictRequestModel.model_config

    schedules: List[RawRow] = Field(default_factory=list)
    exceptions: List[RawRow] = Field(default_factory=list)
    instances: List[RawRow] = Field(default_factory=list)
    offerings: Optional[List[RawRow]] = Field(
        default=None,
        description="Browse-view offerings with embedded schedules; merged with the flat rows",
    )
    from_date: Optional[DateType] = None
    to_date: Optional[DateType] = None
    public_only: bool = False


class CalendarRequest(AvailabilityQuery):
    """Month grid request. The window is always the grid's display range."""

    year: int = Field(ge=1, le=9999)
    month: int = Field(ge=1, le=12)
    selected_date: Optional[DateType] = None
    today: Optional[DateType] = None

    @model_validator(mode="after")
    def _reject_explicit_window(self) -> "CalendarRequest":
        if self.from_date is not None or self.to_date is not None:
            raise ValueError("from_date and to_date are derived from year and month")
        return self


class DisplayStatusRequest(AvailabilityQuery):
    """Display status request. ``now`` defaults to the current time in the calendar timezone."""

    now: Optional[DateTimeType] = None
    low_stock_threshold: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _reject_from_date(self) -> "DisplayStatusRequest":
        if self.from_date is not None:
            raise ValueError("from_date is derived from now; only to_date may be given")
        return self


class SelectionValidationRequest(AvailabilityQuery):
    """A (schedule, date, quantity) selection to check before submitting a booking."""

    schedule_id: str
    date: DateType
    quantity: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def _reject_explicit_window(self) -> "SelectionValidationRequest":
        if self.from_date is not None or self.to_date is not None:
            raise ValueError("from_date and to_date are derived from the selected date")
        return self


class ComputedSlotResponse(StandardizedModel):
    schedule_id: str
    date: DateType
    start_time: TimeType
    end_time: TimeType
    time_label: str
    max_capacity: int
    remaining: int
    committed: int
    is_sold_out: bool
    has_override: bool
    capacity_unit: Optional[str] = None
    slot_label: Optional[str] = None
    offering_id: Optional[str] = None
    offering_name: Optional[str] = None
    exception_reason: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DaySlotsResponse(StandardizedModel):
    date: DateType
    slots: List[ComputedSlotResponse]
    total_available: int
    total_committed: int
    total_remaining: int
    has_cancellation: bool
    cancelled_schedule_ids: List[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class SlotMapResponse(StandardizedModel):
    """Date-keyed slots. Keys are local calendar dates formatted YYYY-MM-DD."""

    from_date: DateType
    to_date: DateType
    days: Dict[str, DaySlotsResponse]
    available_dates: List[DateType]


class CalendarDayResponse(StandardizedModel):
    date: DateType
    day: int
    is_current_month: bool
    is_today: bool
    is_selected: bool
    indicator: Optional[DayIndicator] = None

    model_config = ConfigDict(from_attributes=True)


class CalendarWeekResponse(StandardizedModel):
    days: List[CalendarDayResponse]

    model_config = ConfigDict(from_attributes=True)


class MonthGridResponse(StandardizedModel):
    year: int
    month: int
    weeks: List[CalendarWeekResponse]
    selected_week_index: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class DisplayContextResponse(StandardizedModel):
    status: DisplayStatus
    status_text: str
    status_color: str
    status_icon: str
    can_order: bool
    schedule_display: Optional[str] = None
    remaining: Optional[int] = None
    slot: Optional[ComputedSlotResponse] = None

    model_config = ConfigDict(from_attributes=True)


class SelectionValidationResponse(StandardizedModel):
    valid: bool = True
    slot: ComputedSlotResponse


class ScheduleValidationResponse(StandardizedModel):
    valid: bool = True
    rrule: str
    weekdays: List[int]
    recurrence_label: str
