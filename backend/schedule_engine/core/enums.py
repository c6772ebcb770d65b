# backend/schedule_engine/core/enums.py
"""
Core enums for the availability engine.

String-valued so they serialize directly into API responses and match the
status keys the mobile client renders.
"""

from enum import Enum


class DisplayStatus(str, Enum):
    """
    Summary status shown on offering cards and list rows.

    Derived from the single nearest actionable slot relative to "now".
    """

    AVAILABLE = "available"
    LOW_STOCK = "low_stock"
    LATER_TODAY = "later_today"
    TOMORROW = "tomorrow"
    THIS_WEEK = "this_week"
    FUTURE = "future"
    UNAVAILABLE = "unavailable"


class DayIndicator(str, Enum):
    """Three-tier availability indicator for a calendar day cell."""

    AVAILABLE = "available"
    PARTIAL = "partial"
    SOLD_OUT = "sold_out"
