from datetime import date

import pytest

from schedule_engine.core.exceptions import (
    InsufficientCapacityException,
    SlotUnavailableException,
    ValidationException,
)
from schedule_engine.services.booking_validation import validate_booking_selection
from schedule_engine.services.slot_builder import build_slot_map

from tests.factories.availability_records import make_exception, make_instance, make_schedule

JAN_5 = date(2026, 1, 5)
JAN_6 = date(2026, 1, 6)
JAN_7 = date(2026, 1, 7)


@pytest.fixture
def slot_map():
    return build_slot_map(
        [make_schedule(capacity=5)],
        [make_exception(JAN_7, is_cancelled=True)],
        [make_instance(JAN_5, 3)],
        date(2026, 1, 1),
        date(2026, 1, 14),
    )


def test_valid_selection_returns_slot(slot_map):
    slot = validate_booking_selection(slot_map, "sched-1", JAN_5, 2)
    assert slot.remaining == 2


def test_quantity_above_remaining_conflicts(slot_map):
    with pytest.raises(InsufficientCapacityException) as exc_info:
        validate_booking_selection(slot_map, "sched-1", JAN_5, 3)
    assert exc_info.value.details["remaining"] == 2
    assert exc_info.value.to_http_exception().status_code == 409


def test_cancelled_date_is_unavailable(slot_map):
    with pytest.raises(SlotUnavailableException) as exc_info:
        validate_booking_selection(slot_map, "sched-1", JAN_7, 1)
    assert "cancelled" in exc_info.value.message


def test_date_without_occurrence_is_unavailable(slot_map):
    with pytest.raises(SlotUnavailableException):
        validate_booking_selection(slot_map, "sched-1", JAN_6, 1)


def test_unknown_schedule_is_unavailable(slot_map):
    with pytest.raises(SlotUnavailableException):
        validate_booking_selection(slot_map, "other", JAN_5, 1)


def test_quantity_must_be_positive(slot_map):
    with pytest.raises(ValidationException):
        validate_booking_selection(slot_map, "sched-1", JAN_5, 0)
