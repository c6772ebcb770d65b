# backend/schedule_engine/services/slot_builder.py
"""
Slot Builder

Joins the three availability streams for a query window:
- schedules, expanded through their weekly recurrence
- exceptions, resolved per date (cancel / override capacity / override times)
- instances, merged per date as committed quantity

Exceptions and instances are indexed schedule_id -> date -> record. Computed
slots are never persisted or cached: committed quantities change as bookings
are made concurrently, so every query recomputes from fresh rows.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, time
import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..monitoring.prometheus_metrics import prometheus_metrics
from ..schemas.availability import Schedule, ScheduleException, ScheduleInstance
from ..utils.time_utils import format_time_hhmm
from .consumption import merge_consumption
from .exception_resolver import ResolvedOccurrence, resolve_exception
from .recurrence import expand_weekly, parse_weekdays

logger = logging.getLogger(__name__)

ExceptionIndex = Dict[str, Dict[date, ScheduleException]]
InstanceIndex = Dict[str, Dict[date, ScheduleInstance]]


@dataclass(frozen=True)
class ComputedSlot:
    """One bookable occurrence of a schedule on a date."""

    schedule_id: str
    date: date
    start_time: time
    end_time: time
    max_capacity: int
    remaining: int
    committed: int = 0
    is_cancelled: bool = False
    has_override: bool = False
    capacity_unit: Optional[str] = None
    slot_label: Optional[str] = None
    offering_id: Optional[str] = None
    offering_name: Optional[str] = None
    exception_reason: Optional[str] = None

    @property
    def is_sold_out(self) -> bool:
        return self.remaining == 0 and self.max_capacity > 0

    @property
    def is_bookable(self) -> bool:
        return not self.is_cancelled and self.remaining > 0

    @property
    def time_label(self) -> str:
        return f"{format_time_hhmm(self.start_time)} - {format_time_hhmm(self.end_time)}"

    @property
    def sort_key(self) -> Tuple[time, time, str]:
        return (self.start_time, self.end_time, self.schedule_id)


@dataclass
class DaySlots:
    """All slots of one offering on one date, plus per-date aggregates."""

    date: date
    slots: List[ComputedSlot] = field(default_factory=list)
    total_available: int = 0
    total_committed: int = 0
    has_cancellation: bool = False
    cancelled_schedule_ids: List[str] = field(default_factory=list)

    @property
    def total_remaining(self) -> int:
        return max(0, self.total_available - self.total_committed)

    @property
    def is_fully_cancelled(self) -> bool:
        return self.has_cancellation and not self.slots


SlotMap = Dict[date, DaySlots]


def index_exceptions(exceptions: Iterable[ScheduleException]) -> ExceptionIndex:
    """Group exceptions as schedule_id -> exception_date -> exception (last one wins)."""
    index: Dict[str, Dict[date, ScheduleException]] = defaultdict(dict)
    for exc in exceptions:
        index[exc.schedule_id][exc.exception_date] = exc
    return dict(index)


def index_instances(instances: Iterable[ScheduleInstance]) -> InstanceIndex:
    """Group instances as schedule_id -> instance_date -> instance (last one wins)."""
    index: Dict[str, Dict[date, ScheduleInstance]] = defaultdict(dict)
    for inst in instances:
        index[inst.schedule_id][inst.instance_date] = inst
    return dict(index)


def _iter_occurrences(
    schedule: Schedule,
    exceptions_by_date: Mapping[date, ScheduleException],
    window_from: date,
    window_to: date,
) -> Iterator[Tuple[date, ResolvedOccurrence]]:
    weekdays = parse_weekdays(schedule.rrule)
    if not weekdays:
        logger.warning(
            f"Schedule {schedule.id} has no usable weekdays in recurrence "
            f"'{schedule.rrule}'; it contributes no slots"
        )
        prometheus_metrics.record_malformed_recurrence()
        return
    for occurrence in expand_weekly(
        weekdays, schedule.valid_from, schedule.valid_until, window_from, window_to
    ):
        yield occurrence, resolve_exception(
            schedule.capacity,
            schedule.start_time,
            schedule.end_time,
            exceptions_by_date.get(occurrence),
        )


def _make_slot(
    schedule: Schedule,
    on_date: date,
    resolved: ResolvedOccurrence,
    instance: Optional[ScheduleInstance],
) -> ComputedSlot:
    consumption = merge_consumption(resolved.capacity, instance)
    return ComputedSlot(
        schedule_id=schedule.id,
        date=on_date,
        start_time=resolved.start_time,
        end_time=resolved.end_time,
        max_capacity=consumption.capacity,
        remaining=consumption.remaining,
        committed=consumption.committed,
        has_override=resolved.has_override,
        capacity_unit=schedule.capacity_unit,
        slot_label=schedule.slot_label,
        offering_id=schedule.offering_id,
        offering_name=schedule.offering_name,
        exception_reason=resolved.reason,
    )


def build_schedule_slots(
    schedule: Schedule,
    exceptions_by_date: Mapping[date, ScheduleException],
    instances_by_date: Mapping[date, ScheduleInstance],
    window_from: date,
    window_to: date,
) -> Dict[date, ComputedSlot]:
    """
    Compute the date-keyed slots of a single schedule within a window.

    Inactive schedules, cancelled dates and dates whose effective capacity is
    zero produce no entry.
    """
    slots: Dict[date, ComputedSlot] = {}
    if not schedule.is_active:
        return slots
    for on_date, resolved in _iter_occurrences(
        schedule, exceptions_by_date, window_from, window_to
    ):
        if not resolved.contributes_slot:
            continue
        slots[on_date] = _make_slot(schedule, on_date, resolved, instances_by_date.get(on_date))
    return slots


def build_slot_map(
    schedules: Iterable[Schedule],
    exceptions: Iterable[ScheduleException],
    instances: Iterable[ScheduleInstance],
    window_from: date,
    window_to: date,
    *,
    public_only: bool = False,
) -> SlotMap:
    """
    Build the offering-level slot map: date -> DaySlots.

    A date is present when at least one schedule has an occurrence there. The
    slot list only holds bookable-capacity occurrences sorted by start time;
    cancelled or zero-capacity occurrences only set ``has_cancellation``.
    Totals are summed over listed slots. Dates are returned ascending.
    """
    exception_index = index_exceptions(exceptions)
    instance_index = index_instances(instances)
    days: Dict[date, DaySlots] = {}

    for schedule in schedules:
        if not schedule.is_active:
            continue
        if public_only and not schedule.is_public:
            continue
        schedule_exceptions = exception_index.get(schedule.id, {})
        schedule_instances = instance_index.get(schedule.id, {})

        for on_date, resolved in _iter_occurrences(
            schedule, schedule_exceptions, window_from, window_to
        ):
            day = days.get(on_date)
            if day is None:
                day = days[on_date] = DaySlots(date=on_date)
            if not resolved.contributes_slot:
                day.has_cancellation = True
                day.cancelled_schedule_ids.append(schedule.id)
                continue
            slot = _make_slot(schedule, on_date, resolved, schedule_instances.get(on_date))
            day.slots.append(slot)
            day.total_available += slot.max_capacity
            day.total_committed += slot.committed

    for day in days.values():
        day.slots.sort(key=lambda s: s.sort_key)
        day.cancelled_schedule_ids.sort()

    return {on_date: days[on_date] for on_date in sorted(days)}


def build_offering_slot_maps(
    schedules: Iterable[Schedule],
    exceptions: Iterable[ScheduleException],
    instances: Iterable[ScheduleInstance],
    window_from: date,
    window_to: date,
    *,
    public_only: bool = False,
) -> Dict[str, SlotMap]:
    """Group schedules by offering and build one slot map per offering."""
    by_offering: Dict[str, List[Schedule]] = defaultdict(list)
    for schedule in schedules:
        by_offering[schedule.offering_id or ""].append(schedule)

    exceptions = list(exceptions)
    instances = list(instances)
    return {
        offering_id: build_slot_map(
            offering_schedules,
            exceptions,
            instances,
            window_from,
            window_to,
            public_only=public_only,
        )
        for offering_id, offering_schedules in by_offering.items()
    }


def iter_slots(slot_map: SlotMap) -> Iterator[ComputedSlot]:
    for day in slot_map.values():
        yield from day.slots


def slots_for_date(slot_map: SlotMap, on_date: date) -> List[ComputedSlot]:
    """Bookable slots on a date, ordered by start time."""
    day = slot_map.get(on_date)
    if day is None:
        return []
    return [slot for slot in day.slots if slot.is_bookable]


def available_dates(slot_map: SlotMap) -> List[date]:
    return [on_date for on_date, day in slot_map.items() if any(s.is_bookable for s in day.slots)]


def has_available_slots(slot_map: SlotMap) -> bool:
    return any(slot.is_bookable for slot in iter_slots(slot_map))


def find_slot(slot_map: SlotMap, schedule_id: str, on_date: date) -> Optional[ComputedSlot]:
    day = slot_map.get(on_date)
    if day is None:
        return None
    for slot in day.slots:
        if slot.schedule_id == schedule_id:
            return slot
    return None
