"""
Pre-submission check of a booking selection against a computed slot map.

This is advisory: it catches selections that are plainly no longer possible
before the request is sent. The booking transaction remains the only place
where capacity is enforced atomically.
"""

from __future__ import annotations

from datetime import date
import logging

from ..core.exceptions import (
    InsufficientCapacityException,
    SlotUnavailableException,
    ValidationException,
)
from .slot_builder import ComputedSlot, SlotMap, find_slot

logger = logging.getLogger(__name__)


def validate_booking_selection(
    slot_map: SlotMap,
    schedule_id: str,
    on_date: date,
    quantity: int,
) -> ComputedSlot:
    """
    Return the selected slot when it can take ``quantity`` more units.

    Raises:
        ValidationException: quantity is below 1
        SlotUnavailableException: no listed slot, or the schedule is cancelled that date
        InsufficientCapacityException: quantity exceeds remaining capacity
    """
    if quantity < 1:
        raise ValidationException(
            "Quantity must be at least 1",
            code="INVALID_QUANTITY",
            details={"quantity": quantity},
        )

    day = slot_map.get(on_date)
    if day is not None and schedule_id in day.cancelled_schedule_ids:
        raise SlotUnavailableException(
            schedule_id, on_date, reason=f"Schedule {schedule_id} is cancelled on {on_date}"
        )

    slot = find_slot(slot_map, schedule_id, on_date)
    if slot is None:
        raise SlotUnavailableException(schedule_id, on_date)

    if quantity > slot.remaining:
        logger.info(
            f"Selection rejected for schedule {schedule_id} on {on_date}: "
            f"requested {quantity}, remaining {slot.remaining}"
        )
        raise InsufficientCapacityException(schedule_id, on_date, quantity, slot.remaining)

    return slot
