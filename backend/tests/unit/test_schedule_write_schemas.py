from datetime import date, time

import pytest
from pydantic import ValidationError

from schedule_engine.schemas.schedule_write import ScheduleCreate, ScheduleUpdate


def _payload(**overrides):
    data = {
        "rrule": "FREQ=WEEKLY;BYDAY=MO,WE",
        "dtstart": "2026-01-01",
        "start_time": "12:00",
        "end_time": "14:00",
        "slots_available": 10,
    }
    data.update(overrides)
    return data


def test_valid_schedule_is_normalized():
    schedule = ScheduleCreate.model_validate(_payload(rrule="BYDAY=WE,MO;FREQ=WEEKLY"))
    assert schedule.rrule == "FREQ=WEEKLY;BYDAY=MO,WE"
    assert schedule.valid_from == date(2026, 1, 1)
    assert schedule.capacity == 10


@pytest.mark.parametrize("rrule", ["", "FREQ=DAILY", "FREQ=WEEKLY;BYDAY=XX", "garbage"])
def test_unparseable_recurrence_rejected(rrule):
    with pytest.raises(ValidationError):
        ScheduleCreate.model_validate(_payload(rrule=rrule))


def test_end_time_must_follow_start():
    with pytest.raises(ValidationError):
        ScheduleCreate.model_validate(_payload(end_time="12:00"))


def test_end_date_not_before_start():
    with pytest.raises(ValidationError):
        ScheduleCreate.model_validate(_payload(dtend="2025-12-31"))
    assert ScheduleCreate.model_validate(_payload(dtend="2026-01-01")).valid_until == date(2026, 1, 1)


def test_capacity_must_be_positive():
    with pytest.raises(ValidationError):
        ScheduleCreate.model_validate(_payload(slots_available=0))


def test_unknown_fields_forbidden():
    with pytest.raises(ValidationError):
        ScheduleCreate.model_validate(_payload(colour="red"))


def test_partial_update():
    update = ScheduleUpdate.model_validate({"rrule": "FREQ=WEEKLY;BYDAY=FR"})
    assert update.rrule == "FREQ=WEEKLY;BYDAY=FR"
    assert update.start_time is None
    with pytest.raises(ValidationError):
        ScheduleUpdate.model_validate({"start_time": "10:00", "end_time": "09:00"})
    assert ScheduleUpdate.model_validate({"end_time": time(9, 0)}).end_time == time(9, 0)
