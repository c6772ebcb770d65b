from datetime import date, time

from schedule_engine.services.consumption import merge_consumption
from schedule_engine.services.exception_resolver import resolve_exception

from tests.factories.availability_records import make_exception, make_instance

DAY = date(2026, 1, 5)


def test_no_exception_uses_base_values():
    resolved = resolve_exception(10, time(12, 0), time(14, 0), None)
    assert resolved.capacity == 10
    assert (resolved.start_time, resolved.end_time) == (time(12, 0), time(14, 0))
    assert not resolved.has_override
    assert resolved.contributes_slot


def test_override_capacity_takes_precedence():
    exc = make_exception(DAY, override_capacity=3)
    resolved = resolve_exception(10, time(12, 0), time(14, 0), exc)
    assert resolved.capacity == 3
    assert resolved.has_override
    assert not resolved.is_cancelled


def test_override_times_replace_only_the_given_bound():
    exc = make_exception(DAY, override_start_time=time(11, 30))
    resolved = resolve_exception(10, time(12, 0), time(14, 0), exc)
    assert resolved.start_time == time(11, 30)
    assert resolved.end_time == time(14, 0)
    assert resolved.capacity == 10


def test_override_zero_counts_as_cancellation():
    exc = make_exception(DAY, override_capacity=0, is_cancelled=False)
    resolved = resolve_exception(10, time(12, 0), time(14, 0), exc)
    assert resolved.is_cancelled
    assert not resolved.contributes_slot


def test_cancelled_flag_carries_reason():
    exc = make_exception(DAY, is_cancelled=True, cancellation_reason="Holiday")
    resolved = resolve_exception(10, time(12, 0), time(14, 0), exc)
    assert resolved.is_cancelled
    assert resolved.reason == "Holiday"


def test_merge_consumption_sold_out():
    consumption = merge_consumption(5, make_instance(DAY, 5))
    assert consumption.remaining == 0
    assert consumption.is_sold_out


def test_merge_consumption_never_negative():
    consumption = merge_consumption(3, make_instance(DAY, 8))
    assert consumption.remaining == 0
    assert consumption.committed == 8


def test_merge_consumption_without_instance():
    consumption = merge_consumption(4, None)
    assert (consumption.committed, consumption.remaining) == (0, 4)
    assert not consumption.is_sold_out
