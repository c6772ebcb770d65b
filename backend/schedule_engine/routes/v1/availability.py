"""V1 availability endpoints: slot maps, month grids, display status and selection checks."""

from __future__ import annotations

from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends

from ...api.dependencies.services import get_availability_service
from ...core.config import Settings, get_settings
from ...core.constants import API_VERSION, BRAND_NAME
from ...core.exceptions import DomainException
from ...schemas.main_responses import HealthResponse
from ...schemas.schedule_write import ScheduleCreate
from ...schemas.slots import (
    AvailabilityQuery,
    CalendarRequest,
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
from ...services.availability_service import AvailabilityService
from ...services.slot_builder import available_dates
from ...utils.time_utils import format_local_date

logger = logging.getLogger(__name__)

# V1 router - mounted at /api/v1/availability
router = APIRouter(tags=["availability"])


@router.post("/slots", response_model=SlotMapResponse)
def compute_slots(
    payload: AvailabilityQuery,
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> SlotMapResponse:
    """Return the date-keyed slot map for the requested window."""

    try:
        window_from, window_to = availability_service.resolve_window(
            payload.from_date, payload.to_date
        )
        records = availability_service.records_from_query(payload)
        slot_map = availability_service.compute_slot_map(
            records, window_from, window_to, public_only=payload.public_only
        )
    except DomainException as exc:
        raise exc.to_http_exception() from exc

    return SlotMapResponse(
        from_date=window_from,
        to_date=window_to,
        days={
            format_local_date(on_date): DaySlotsResponse.model_validate(day)
            for on_date, day in slot_map.items()
        },
        available_dates=available_dates(slot_map),
    )


@router.post("/calendar", response_model=MonthGridResponse)
def build_calendar(
    payload: CalendarRequest,
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> MonthGridResponse:
    """Return the Monday-first month grid with per-day indicators."""

    try:
        records = availability_service.records_from_query(payload)
        grid = availability_service.build_calendar(
            records,
            payload.year,
            payload.month,
            selected_date=payload.selected_date,
            today=payload.today,
            public_only=payload.public_only,
        )
    except DomainException as exc:
        raise exc.to_http_exception() from exc

    return MonthGridResponse.model_validate(grid)


@router.post("/display-status", response_model=DisplayContextResponse)
def get_display_status(
    payload: DisplayStatusRequest,
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> DisplayContextResponse:
    """Classify the nearest actionable slot relative to now."""

    try:
        records = availability_service.records_from_query(payload)
        context = availability_service.get_display_context(
            records,
            now=payload.now,
            window_to=payload.to_date,
            low_stock_threshold=payload.low_stock_threshold,
            public_only=payload.public_only,
        )
    except DomainException as exc:
        raise exc.to_http_exception() from exc

    return DisplayContextResponse.model_validate(context)


@router.post("/validate-selection", response_model=SelectionValidationResponse)
def validate_selection(
    payload: SelectionValidationRequest,
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> SelectionValidationResponse:
    """Check a selection against live capacity before the booking is submitted."""

    try:
        records = availability_service.records_from_query(payload)
        slot = availability_service.validate_selection(
            records, payload.schedule_id, payload.date, payload.quantity
        )
    except DomainException as exc:
        raise exc.to_http_exception() from exc

    return SelectionValidationResponse(slot=ComputedSlotResponse.model_validate(slot))


@router.post("/schedules/validate", response_model=ScheduleValidationResponse)
def validate_schedule(
    payload: ScheduleCreate,
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> ScheduleValidationResponse:
    """Validate a schedule before it is saved and echo its canonical recurrence."""

    result = availability_service.validate_schedule(payload)
    return ScheduleValidationResponse(
        rrule=result.rrule,
        weekdays=result.weekdays,
        recurrence_label=result.recurrence_label,
    )


def health_payload(config: Settings) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        service=f"{BRAND_NAME.lower()}-availability",
        version=API_VERSION,
        environment=config.environment,
        timezone=config.timezone,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )


@router.get("/health", response_model=HealthResponse)
def availability_health(config: Settings = Depends(get_settings)) -> HealthResponse:
    return health_payload(config)
