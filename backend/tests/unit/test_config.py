import pytest
from pydantic import ValidationError

from schedule_engine.core.config import Settings


def test_defaults():
    cfg = Settings()
    assert cfg.low_stock_threshold == 5
    assert cfg.default_window_days == 30
    assert cfg.max_window_days == 400


def test_environment_variables_override(monkeypatch):
    monkeypatch.setenv("TIMEZONE", "America/New_York")
    monkeypatch.setenv("LOW_STOCK_THRESHOLD", "2")
    monkeypatch.setenv("SITE_MODE", "production")
    cfg = Settings()
    assert cfg.timezone == "America/New_York"
    assert cfg.low_stock_threshold == 2
    assert cfg.is_production


def test_unknown_timezone_rejected():
    with pytest.raises(ValidationError):
        Settings(timezone="Mars/Olympus_Mons")


def test_log_level_is_normalized():
    assert Settings(log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        Settings(log_level="chatty")
