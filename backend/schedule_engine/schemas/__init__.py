# backend/schedule_engine/schemas/__init__.py
"""
Pydantic schemas for the availability engine.

Canonical records are what the engine computes on; request and response
schemas are the HTTP surface.
"""

from .availability import Schedule, ScheduleException, ScheduleInstance
from .schedule_write import ScheduleCreate, ScheduleUpdate
from .main_responses import HealthResponse
from .slots import (
    AvailabilityQuery,
    CalendarDayResponse,
    CalendarRequest,
    CalendarWeekResponse,
    ComputedSlotResponse,
    DaySlotsResponse,
    DisplayContextResponse,
    DisplayStatusRequest,
    MonthGridResponse,
    ScheduleValidationResponse,
    SelectionValidationRequest,
    SelectionValidationResponse,
    SlotMapResponse,
)

__all__ = [
    "AvailabilityQuery",
    "CalendarDayResponse",
    "CalendarRequest",
    "CalendarWeekResponse",
    "ComputedSlotResponse",
    "DaySlotsResponse",
    "DisplayContextResponse",
    "DisplayStatusRequest",
    "HealthResponse",
    "MonthGridResponse",
    "Schedule",
    "ScheduleCreate",
    "ScheduleException",
    "ScheduleInstance",
    "ScheduleUpdate",
    "ScheduleValidationResponse",
    "SelectionValidationRequest",
    "SelectionValidationResponse",
    "SlotMapResponse",
]
