"""Application-wide constants for the community availability engine."""

from __future__ import annotations

import os

# API metadata
API_TITLE = "Community Availability API"
API_DESCRIPTION = (
    "Recurring availability expansion, slot computation and display status for "
    "community offerings."
)
API_VERSION = "1.0.0"
BRAND_NAME = "nativeCom"

# Recurrence grammar (weekly only)
RRULE_WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")
WEEKDAY_SHORT_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_SHORT_NAMES = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

# Display status
LOW_STOCK_THRESHOLD = 5
THIS_WEEK_MAX_DAYS = 6

# Capacity and label constraints
MIN_SLOTS_PER_SCHEDULE = 1
MAX_SLOT_LABEL_LENGTH = 100

# Query windows
DEFAULT_WINDOW_DAYS = 30  # matches the embedded browse view window
MAX_WINDOW_DAYS = 400

DAYS_PER_WEEK = 7

DEFAULT_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8081",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:8081",
]


def _split_env(name: str) -> list[str]:
    value = os.getenv(name, "")
    return [origin.strip() for origin in value.split(",") if origin.strip()]


ALLOWED_ORIGINS = _split_env("ALLOWED_ORIGINS") or DEFAULT_DEV_ORIGINS
