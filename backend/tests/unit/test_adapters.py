from datetime import date, time
import json
import logging

from schedule_engine.services.adapters import (
    exceptions_from_rows,
    extract_from_embedded_offering,
    extract_from_embedded_offerings,
    instances_from_rows,
    parse_embedded_schedules,
    schedules_from_rows,
)
from schedule_engine.services.slot_builder import build_slot_map

from tests.factories.availability_records import schedule_row


def _embedded_schedule(**overrides):
    data = {
        "id": "sched-1",
        "rrule": "FREQ=WEEKLY;BYDAY=MO,WE",
        "dtstart": "2026-01-01",
        "dtend": None,
        "start_time": "12:00",
        "end_time": "14:00",
        "quantity_per_slot": 8,
        "slot_label": "Lunch",
        "exceptions": [
            {"id": "exc-1", "exception_date": "2026-01-07", "override_quantity": 3},
        ],
        "instances": [{"instance_date": "2026-01-05", "quantity_sold": 2}],
    }
    data.update(overrides)
    return data


def test_schedule_rows_accept_table_column_names():
    schedule = schedules_from_rows([schedule_row()])[0]
    assert schedule.offering_id == "offering-1"
    assert schedule.valid_from == date(2026, 1, 1)
    assert schedule.start_time == time(12, 0)
    assert schedule.end_time == time(14, 0)
    assert schedule.capacity == 10
    assert schedule.capacity_unit == "portion"


def test_missing_flags_default_to_true():
    row = schedule_row(is_active=None)
    del row["is_public"]
    schedule = schedules_from_rows([row])[0]
    assert schedule.is_active
    assert schedule.is_public


def test_invalid_rows_are_skipped_with_warning(caplog):
    rows = [schedule_row("good"), schedule_row("bad", start_time="noon")]
    with caplog.at_level(logging.WARNING, logger="schedule_engine.services.adapters"):
        schedules = schedules_from_rows(rows)
    assert [s.id for s in schedules] == ["good"]
    assert any("Skipping invalid Schedule" in r.getMessage() for r in caplog.records)


def test_exception_and_instance_column_aliases():
    exc = exceptions_from_rows(
        [
            {
                "schedule_id": "s",
                "exception_date": "2026-01-07",
                "override_slots": 2,
                "cancellation_reason": "Oven repair",
                "is_cancelled": None,
            }
        ]
    )[0]
    assert exc.override_capacity == 2
    assert exc.reason == "Oven repair"
    assert exc.is_cancelled is False

    inst = instances_from_rows([{"schedule_id": "s", "instance_date": "2026-01-05", "slots_booked": 4}])[0]
    assert inst.committed == 4


def test_long_cancellation_reason_still_cancels_the_date():
    schedules = schedules_from_rows([schedule_row()])
    exceptions = exceptions_from_rows(
        [
            {
                "schedule_id": "sched-1",
                "exception_date": "2026-01-05",
                "is_cancelled": True,
                "cancellation_reason": "x" * 300,
            }
        ]
    )
    assert len(exceptions) == 1
    assert exceptions[0].reason == "x" * 300

    slot_map = build_slot_map(schedules, exceptions, [], date(2026, 1, 5), date(2026, 1, 5))
    assert slot_map[date(2026, 1, 5)].slots == []
    assert slot_map[date(2026, 1, 5)].has_cancellation


def test_parse_embedded_schedules_list_or_json():
    assert len(parse_embedded_schedules([_embedded_schedule()])) == 1
    assert len(parse_embedded_schedules(json.dumps([_embedded_schedule()]))) == 1


def test_parse_embedded_schedules_malformed_is_empty():
    assert parse_embedded_schedules("[{not json") == []
    assert parse_embedded_schedules('{"id": "x"}') == []
    assert parse_embedded_schedules(None) == []
    assert parse_embedded_schedules("") == []


def test_extract_embedded_offering_inherits_ids():
    offering = {"id": "meal-9", "meal_name": "Dumplings", "schedules": [_embedded_schedule()]}
    records = extract_from_embedded_offering(offering)
    schedule = records.schedules[0]
    assert schedule.offering_id == "meal-9"
    assert schedule.offering_name == "Dumplings"
    assert schedule.capacity == 8
    assert schedule.is_active and schedule.is_public
    assert records.exceptions[0].schedule_id == "sched-1"
    assert records.exceptions[0].override_capacity == 3
    assert records.instances[0].schedule_id == "sched-1"
    assert records.instances[0].committed == 2


def test_extract_embedded_offerings_skips_missing_ids_and_bad_json():
    offerings = [
        {"id": None, "schedules": [_embedded_schedule()]},
        {"id": "meal-1", "schedules": "not json"},
        {"id": "meal-2", "schedules": json.dumps([_embedded_schedule(id="sched-2")])},
    ]
    records = extract_from_embedded_offerings(offerings)
    assert [s.id for s in records.schedules] == ["sched-2"]
    assert records.schedules[0].offering_id == "meal-2"
