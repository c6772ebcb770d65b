# backend/schedule_engine/services/adapters.py
"""
Boundary adapters from external row shapes to canonical records.

Two sources feed the engine:
- flat API rows for schedules, exceptions and instances, with the column
  names of either the offering or the legacy meal tables
- an embedded browse-view shape where each offering carries its schedules
  (a list, or a JSON-encoded string) and each schedule nests its own
  exceptions and instances without a schedule_id

Rows that fail validation are skipped with a WARNING so one bad record never
hides the rest of an offering's availability.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..schemas.availability import Schedule, ScheduleException, ScheduleInstance

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_OFFERING_NAME_KEYS = ("offering_name", "meal_name", "name")


@dataclass
class AvailabilityRecords:
    """Canonical records gathered from one or more offerings."""

    schedules: List[Schedule] = field(default_factory=list)
    exceptions: List[ScheduleException] = field(default_factory=list)
    instances: List[ScheduleInstance] = field(default_factory=list)

    def extend(self, other: "AvailabilityRecords") -> None:
        self.schedules.extend(other.schedules)
        self.exceptions.extend(other.exceptions)
        self.instances.extend(other.instances)


def _validate_rows(model: Type[ModelT], rows: Optional[Iterable[Mapping[str, Any]]]) -> List[ModelT]:
    records: List[ModelT] = []
    for row in rows or ():
        try:
            records.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning(
                f"Skipping invalid {model.__name__} row: {e.error_count()} error(s); "
                f"first: {e.errors()[0]['msg']}"
            )
    return records


def schedules_from_rows(rows: Optional[Iterable[Mapping[str, Any]]]) -> List[Schedule]:
    return _validate_rows(Schedule, rows)


def exceptions_from_rows(
    rows: Optional[Iterable[Mapping[str, Any]]],
) -> List[ScheduleException]:
    return _validate_rows(ScheduleException, rows)


def instances_from_rows(rows: Optional[Iterable[Mapping[str, Any]]]) -> List[ScheduleInstance]:
    return _validate_rows(ScheduleInstance, rows)


def parse_embedded_schedules(value: Any) -> List[Dict[str, Any]]:
    """
    Decode an offering's embedded schedules.

    Accepts a list of objects or a JSON string holding one. Anything else,
    including malformed JSON, yields an empty list.
    """
    if value is None:
        return []
    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            logger.warning(f"Embedded schedules are not valid JSON: {e.msg}")
            return []
    if not isinstance(value, list):
        logger.warning(f"Embedded schedules have unexpected type {type(value).__name__}")
        return []
    return [item for item in value if isinstance(item, dict)]


def _offering_name(offering: Mapping[str, Any]) -> Optional[str]:
    for key in _OFFERING_NAME_KEYS:
        name = offering.get(key)
        if name:
            return str(name)
    return None


def extract_from_embedded_offering(offering: Mapping[str, Any]) -> AvailabilityRecords:
    """
    Flatten one offering's embedded schedules into canonical records.

    The offering id and name are stamped on each schedule, and each nested
    exception or instance inherits its parent schedule's id.
    """
    records = AvailabilityRecords()
    offering_id = offering.get("id")
    offering_name = _offering_name(offering)

    for raw in parse_embedded_schedules(offering.get("schedules")):
        schedule_row = {
            key: value for key, value in raw.items() if key not in ("exceptions", "instances")
        }
        if offering_id is not None:
            schedule_row.setdefault("offering_id", str(offering_id))
        if offering_name is not None:
            schedule_row.setdefault("offering_name", offering_name)

        schedules = schedules_from_rows([schedule_row])
        if not schedules:
            continue
        schedule = schedules[0]
        records.schedules.append(schedule)

        records.exceptions.extend(
            exceptions_from_rows(
                {**exc, "schedule_id": schedule.id} for exc in (raw.get("exceptions") or ())
                if isinstance(exc, dict)
            )
        )
        records.instances.extend(
            instances_from_rows(
                {**inst, "schedule_id": schedule.id} for inst in (raw.get("instances") or ())
                if isinstance(inst, dict)
            )
        )
    return records


def extract_from_embedded_offerings(
    offerings: Iterable[Mapping[str, Any]],
) -> AvailabilityRecords:
    """Flatten a browse-view page of offerings; offerings without an id are skipped."""
    records = AvailabilityRecords()
    for offering in offerings:
        if not offering.get("id"):
            continue
        records.extend(extract_from_embedded_offering(offering))
    return records
