# backend/schedule_engine/schemas/availability.py
"""
Canonical availability records.

Every external shape (API rows, nested browse-view JSON, request bodies) is
converted into these three models before the scheduling engine sees it.
Column names from the different sources are accepted through validation
aliases; the engine only ever reads the canonical field names.
"""

import datetime
from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator

from .base import RecordModel

DateType = datetime.date
TimeType = datetime.time


class Schedule(RecordModel):
    """Recurring weekly availability definition for one offering."""

    id: str
    offering_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("offering_id", "meal_id")
    )
    offering_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("offering_name", "meal_name")
    )
    rrule: str = ""
    valid_from: DateType = Field(validation_alias=AliasChoices("valid_from", "dtstart"))
    valid_until: Optional[DateType] = Field(
        default=None, validation_alias=AliasChoices("valid_until", "dtend")
    )
    start_time: TimeType
    end_time: TimeType
    capacity: int = Field(
        ge=0,
        validation_alias=AliasChoices(
            "capacity", "slots_available", "quantity_per_slot", "max_quantity_per_slot"
        ),
    )
    capacity_unit: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("capacity_unit", "slot_unit")
    )
    slot_label: Optional[str] = None
    is_active: bool = True
    is_public: bool = True

    @field_validator("is_active", "is_public", mode="before")
    @classmethod
    def _null_flag_is_true(cls, v: Any) -> Any:
        return True if v is None else v

    @field_validator("rrule", mode="before")
    @classmethod
    def _null_rrule_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class ScheduleException(RecordModel):
    """Date-specific override (cancel, or adjust time/capacity) for one schedule."""

    id: Optional[str] = None
    schedule_id: str
    exception_date: DateType
    is_cancelled: bool = False
    override_capacity: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices(
            "override_capacity", "override_slots", "override_quantity"
        ),
    )
    override_start_time: Optional[TimeType] = None
    override_end_time: Optional[TimeType] = None
    reason: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("reason", "cancellation_reason"),
    )

    @field_validator("is_cancelled", mode="before")
    @classmethod
    def _null_cancelled_is_false(cls, v: Any) -> Any:
        return False if v is None else v


class ScheduleInstance(RecordModel):
    """Committed capacity for one (schedule, date) pair. Owned by the booking transaction."""

    schedule_id: str
    instance_date: DateType
    committed: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("committed", "slots_booked", "quantity_sold"),
    )

    @field_validator("committed", mode="before")
    @classmethod
    def _null_committed_is_zero(cls, v: Any) -> Any:
        return 0 if v is None else v
