from datetime import date, time
import logging

from schedule_engine.services.slot_builder import (
    available_dates,
    build_offering_slot_maps,
    build_schedule_slots,
    build_slot_map,
    find_slot,
    has_available_slots,
    index_exceptions,
    slots_for_date,
)

from tests.factories.availability_records import make_exception, make_instance, make_schedule

JAN_1 = date(2026, 1, 1)
JAN_5 = date(2026, 1, 5)
JAN_7 = date(2026, 1, 7)
JAN_12 = date(2026, 1, 12)
JAN_14 = date(2026, 1, 14)


def test_build_schedule_slots_basic_weekly_expansion():
    slots = build_schedule_slots(make_schedule(), {}, {}, JAN_1, JAN_14)
    assert sorted(slots) == [JAN_5, JAN_7, JAN_12, JAN_14]
    for slot in slots.values():
        assert slot.max_capacity == 10
        assert slot.remaining == 10
        assert slot.time_label == "12:00 - 14:00"


def test_build_schedule_slots_skips_inactive():
    assert build_schedule_slots(make_schedule(is_active=False), {}, {}, JAN_1, JAN_14) == {}


def test_override_capacity_applies_to_one_date_only():
    exceptions = {JAN_7: make_exception(JAN_7, override_capacity=3)}
    slots = build_schedule_slots(make_schedule(), exceptions, {}, JAN_1, JAN_14)
    assert slots[JAN_7].max_capacity == 3
    assert slots[JAN_7].has_override
    assert slots[JAN_5].max_capacity == 10


def test_override_zero_removes_slot():
    exceptions = {JAN_7: make_exception(JAN_7, override_capacity=0)}
    slots = build_schedule_slots(make_schedule(), exceptions, {}, JAN_1, JAN_14)
    assert JAN_7 not in slots
    assert JAN_5 in slots


def test_sold_out_via_consumption():
    instances = {JAN_5: make_instance(JAN_5, 10)}
    slot = build_schedule_slots(make_schedule(), {}, instances, JAN_1, JAN_14)[JAN_5]
    assert slot.remaining == 0
    assert slot.is_sold_out
    assert not slot.is_bookable


def test_build_slot_map_is_deterministic():
    schedules = [make_schedule("a"), make_schedule("b", rrule="FREQ=WEEKLY;BYDAY=MO,FR")]
    exceptions = [make_exception(JAN_12, "a", override_capacity=4)]
    instances = [make_instance(JAN_5, 2, "b")]
    first = build_slot_map(schedules, exceptions, instances, JAN_1, JAN_14)
    second = build_slot_map(schedules, exceptions, instances, JAN_1, JAN_14)
    assert first == second
    assert list(first) == sorted(first)


def test_remaining_bounded_by_effective_capacity():
    schedules = [make_schedule(capacity=6)]
    instances = [make_instance(JAN_5, 9), make_instance(JAN_7, 2)]
    slot_map = build_slot_map(schedules, [], instances, JAN_1, JAN_14)
    for day in slot_map.values():
        for slot in day.slots:
            assert 0 <= slot.remaining <= slot.max_capacity


def test_cancelled_date_is_flagged_but_not_listed():
    schedules = [make_schedule()]
    exceptions = [make_exception(JAN_7, is_cancelled=True)]
    slot_map = build_slot_map(schedules, exceptions, [], JAN_1, JAN_14)
    day = slot_map[JAN_7]
    assert day.slots == []
    assert day.has_cancellation
    assert day.cancelled_schedule_ids == ["sched-1"]
    assert day.is_fully_cancelled
    assert find_slot(slot_map, "sched-1", JAN_7) is None


def test_partial_cancellation_keeps_other_schedules():
    schedules = [
        make_schedule("lunch"),
        make_schedule("dinner", start_time=time(18, 0), end_time=time(20, 0), capacity=4),
    ]
    exceptions = [make_exception(JAN_5, "lunch", is_cancelled=True)]
    day = build_slot_map(schedules, exceptions, [], JAN_1, JAN_14)[JAN_5]
    assert [s.schedule_id for s in day.slots] == ["dinner"]
    assert day.has_cancellation
    assert not day.is_fully_cancelled
    assert day.total_available == 4


def test_slots_sorted_by_start_time_and_totals_summed():
    schedules = [
        make_schedule("late", start_time=time(18, 0), end_time=time(20, 0), capacity=4),
        make_schedule("early", start_time=time(8, 0), end_time=time(9, 0), capacity=6),
    ]
    instances = [make_instance(JAN_5, 1, "late"), make_instance(JAN_5, 2, "early")]
    day = build_slot_map(schedules, [], instances, JAN_1, JAN_14)[JAN_5]
    assert [s.schedule_id for s in day.slots] == ["early", "late"]
    assert day.total_available == 10
    assert day.total_committed == 3
    assert day.total_remaining == 7


def test_public_only_skips_private_schedules():
    schedules = [make_schedule("public"), make_schedule("private", is_public=False)]
    slot_map = build_slot_map(schedules, [], [], JAN_1, JAN_14, public_only=True)
    assert {s.schedule_id for d in slot_map.values() for s in d.slots} == {"public"}


def test_malformed_recurrence_contributes_nothing_and_warns(caplog):
    schedules = [make_schedule("broken", rrule="not-a-rule"), make_schedule("ok")]
    with caplog.at_level(logging.WARNING, logger="schedule_engine.services.slot_builder"):
        slot_map = build_slot_map(schedules, [], [], JAN_1, JAN_14)
    assert {s.schedule_id for d in slot_map.values() for s in d.slots} == {"ok"}
    assert any("broken" in record.getMessage() for record in caplog.records)


def test_reversed_window_is_empty():
    assert build_slot_map([make_schedule()], [], [], JAN_14, JAN_1) == {}


def test_index_exceptions_keys_by_schedule_then_date():
    index = index_exceptions(
        [make_exception(JAN_5, "a"), make_exception(JAN_5, "b"), make_exception(JAN_7, "a")]
    )
    assert set(index) == {"a", "b"}
    assert set(index["a"]) == {JAN_5, JAN_7}


def test_lookup_helpers():
    schedules = [make_schedule(capacity=2)]
    instances = [make_instance(JAN_5, 2)]
    slot_map = build_slot_map(schedules, [], instances, JAN_1, JAN_14)
    assert slots_for_date(slot_map, JAN_5) == []
    assert [s.date for s in slots_for_date(slot_map, JAN_7)] == [JAN_7]
    assert available_dates(slot_map) == [JAN_7, JAN_12, JAN_14]
    assert has_available_slots(slot_map)
    assert find_slot(slot_map, "sched-1", JAN_5).is_sold_out


def test_build_offering_slot_maps_groups_by_offering():
    schedules = [
        make_schedule("a", offering_id="soup"),
        make_schedule("b", offering_id="bread", rrule="FREQ=WEEKLY;BYDAY=TU"),
    ]
    maps = build_offering_slot_maps(schedules, [], [], JAN_1, JAN_14)
    assert set(maps) == {"soup", "bread"}
    assert all(d.weekday() == 1 for d in maps["bread"])
