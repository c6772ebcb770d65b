"""Merge committed quantities into an occurrence's effective capacity (read-only)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..schemas.availability import ScheduleInstance


@dataclass(frozen=True)
class Consumption:
    capacity: int
    committed: int
    remaining: int

    @property
    def is_sold_out(self) -> bool:
        # Sold out is a consumption state; a zero-capacity date is a provider cancellation.
        return self.remaining == 0 and self.capacity > 0


def merge_consumption(effective_capacity: int, instance: Optional[ScheduleInstance]) -> Consumption:
    """Return committed and remaining capacity; remaining never drops below zero."""
    committed = max(0, instance.committed) if instance is not None else 0
    capacity = max(0, effective_capacity)
    return Consumption(
        capacity=capacity,
        committed=committed,
        remaining=max(0, capacity - committed),
    )
