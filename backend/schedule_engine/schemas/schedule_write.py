# backend/schedule_engine/schemas/schedule_write.py
"""
Write-side schedule schemas.

Recurrence strings are checked here, when a provider saves a schedule, so a
rule that selects no weekday never reaches storage. The read path stays
lenient and simply yields no slots for such a rule.
"""

import datetime
from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator

from ..core.constants import MAX_SLOT_LABEL_LENGTH, MIN_SLOTS_PER_SCHEDULE
from ..services.recurrence import build_weekly_rrule, parse_weekdays
from ._strict_base import StrictRequestModel

DateType = datetime.date
TimeType = datetime.time


def _normalize_rrule(v: str) -> str:
    weekdays = parse_weekdays(v)
    if not weekdays:
        raise ValueError("Recurrence must be FREQ=WEEKLY with at least one BYDAY weekday")
    return build_weekly_rrule(weekdays)


class ScheduleCreate(StrictRequestModel):
    """Schema for creating a recurring weekly schedule."""

    model_config = StrictRequestModel.model_config

    rrule: str
    valid_from: DateType = Field(validation_alias=AliasChoices("valid_from", "dtstart"))
    valid_until: Optional[DateType] = Field(
        default=None, validation_alias=AliasChoices("valid_until", "dtend")
    )
    start_time: TimeType
    end_time: TimeType
    capacity: int = Field(
        ge=MIN_SLOTS_PER_SCHEDULE,
        validation_alias=AliasChoices("capacity", "slots_available", "quantity_per_slot"),
    )
    capacity_unit: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("capacity_unit", "slot_unit")
    )
    slot_label: Optional[str] = Field(default=None, max_length=MAX_SLOT_LABEL_LENGTH)
    is_active: bool = True
    is_public: bool = True

    @field_validator("rrule")
    @classmethod
    def validate_rrule(cls, v: str) -> str:
        """Reject rules that select no weekday; store the canonical form."""
        return _normalize_rrule(v)

    @field_validator("valid_until")
    @classmethod
    def validate_date_order(cls, v: Optional[DateType], info: Any) -> Optional[DateType]:
        """Ensure the validity period does not end before it starts."""
        if (
            v
            and isinstance(getattr(info, "data", None), dict)
            and info.data.get("valid_from")
            and v < info.data["valid_from"]
        ):
            raise ValueError("End date must not be before start date")
        return v

    @field_validator("end_time")
    @classmethod
    def validate_time_order(cls, v: TimeType, info: Any) -> TimeType:
        """Ensure end time is after start time."""
        if (
            isinstance(getattr(info, "data", None), dict)
            and info.data.get("start_time")
            and v <= info.data["start_time"]
        ):
            raise ValueError("End time must be after start time")
        return v


class ScheduleUpdate(StrictRequestModel):
    """Schema for a partial schedule update."""

    model_config = StrictRequestModel.model_config

    rrule: Optional[str] = None
    valid_from: Optional[DateType] = Field(
        default=None, validation_alias=AliasChoices("valid_from", "dtstart")
    )
    valid_until: Optional[DateType] = Field(
        default=None, validation_alias=AliasChoices("valid_until", "dtend")
    )
    start_time: Optional[TimeType] = None
    end_time: Optional[TimeType] = None
    capacity: Optional[int] = Field(
        default=None,
        ge=MIN_SLOTS_PER_SCHEDULE,
        validation_alias=AliasChoices("capacity", "slots_available", "quantity_per_slot"),
    )
    capacity_unit: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("capacity_unit", "slot_unit")
    )
    slot_label: Optional[str] = Field(default=None, max_length=MAX_SLOT_LABEL_LENGTH)
    is_active: Optional[bool] = None
    is_public: Optional[bool] = None

    @field_validator("rrule")
    @classmethod
    def validate_rrule(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_rrule(v) if v is not None else v

    @field_validator("valid_until")
    @classmethod
    def validate_date_order(cls, v: Optional[DateType], info: Any) -> Optional[DateType]:
        if (
            v
            and isinstance(getattr(info, "data", None), dict)
            and info.data.get("valid_from")
            and v < info.data["valid_from"]
        ):
            raise ValueError("End date must not be before start date")
        return v

    @field_validator("end_time")
    @classmethod
    def validate_time_order(cls, v: Optional[TimeType], info: Any) -> Optional[TimeType]:
        """Ensure end time is after start time if both provided."""
        if (
            v
            and isinstance(getattr(info, "data", None), dict)
            and info.data.get("start_time")
            and v <= info.data["start_time"]
        ):
            raise ValueError("End time must be after start time")
        return v
