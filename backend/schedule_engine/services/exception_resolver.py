"""Resolve a schedule's effective values for one date against its exception record."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..schemas.availability import ScheduleException


@dataclass(frozen=True)
class ResolvedOccurrence:
    capacity: int
    start_time: time
    end_time: time
    is_cancelled: bool = False
    has_override: bool = False
    reason: Optional[str] = None

    @property
    def contributes_slot(self) -> bool:
        """False for cancelled dates and dates whose capacity resolves to zero."""
        return not self.is_cancelled and self.capacity > 0


def resolve_exception(
    base_capacity: int,
    base_start: time,
    base_end: time,
    exception: Optional[ScheduleException],
) -> ResolvedOccurrence:
    """
    Apply an optional exception to a schedule's base capacity and time window.

    Each override replaces its base value only when present. An override
    capacity of exactly zero is reported as a cancellation even when the
    exception's own cancelled flag is false.
    """
    if exception is None:
        return ResolvedOccurrence(capacity=base_capacity, start_time=base_start, end_time=base_end)

    capacity = (
        exception.override_capacity
        if exception.override_capacity is not None
        else base_capacity
    )
    return ResolvedOccurrence(
        capacity=capacity,
        start_time=(
            exception.override_start_time
            if exception.override_start_time is not None
            else base_start
        ),
        end_time=(
            exception.override_end_time if exception.override_end_time is not None else base_end
        ),
        is_cancelled=bool(exception.is_cancelled) or capacity == 0,
        has_override=True,
        reason=exception.reason,
    )
