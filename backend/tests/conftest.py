# backend/tests/conftest.py
"""
Shared fixtures for the availability engine tests.

Settings are pinned to a known timezone and thresholds so results never
depend on the machine running the suite.
"""

from datetime import date

import pytest

from schedule_engine.api.dependencies.services import reset_service_instances
from schedule_engine.core.config import Settings
from schedule_engine.services.availability_service import AvailabilityService

from tests.factories.availability_records import make_schedule


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        timezone="Europe/Berlin",
        low_stock_threshold=5,
        default_window_days=30,
        max_window_days=400,
        log_level="INFO",
    )


@pytest.fixture
def availability_service(test_settings: Settings) -> AvailabilityService:
    return AvailabilityService(test_settings)


@pytest.fixture(autouse=True)
def _reset_services():
    reset_service_instances()
    yield
    reset_service_instances()


@pytest.fixture
def january_window() -> tuple[date, date]:
    return date(2026, 1, 1), date(2026, 1, 14)


@pytest.fixture
def mon_wed_schedule():
    return make_schedule()
