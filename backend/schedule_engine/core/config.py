# backend/schedule_engine/core/config.py
from functools import lru_cache
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import pytz

from .constants import DEFAULT_WINDOW_DAYS, LOW_STOCK_THRESHOLD, MAX_WINDOW_DAYS

logger = logging.getLogger(__name__)

_BACKEND_ROOT = Path(__file__).resolve().parents[2]

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = _BACKEND_ROOT / ".env"
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


class Settings(BaseSettings):
    environment: str = Field(default="development", alias="SITE_MODE")
    log_level: str = Field(default="INFO", description="Root log level for the service")

    # Calendar semantics
    timezone: str = Field(
        default="Europe/Berlin",
        description="IANA timezone in which community calendars are interpreted",
    )
    low_stock_threshold: int = Field(
        default=LOW_STOCK_THRESHOLD,
        ge=0,
        description="Remaining capacity at or below which a live slot shows as low stock",
    )
    default_window_days: int = Field(
        default=DEFAULT_WINDOW_DAYS,
        ge=1,
        description="Days of availability computed when the caller gives no end date",
    )
    max_window_days: int = Field(
        default=MAX_WINDOW_DAYS,
        ge=1,
        description="Largest query window accepted by the HTTP surface",
    )

    # Metrics
    slow_operation_seconds: float = Field(
        default=1.0,
        description="Operations slower than this are logged at WARNING",
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, v: str) -> str:
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError as exc:
            raise ValueError(f"Unknown timezone: {v}") from exc
        return v

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        normalized = (v or "INFO").strip().upper()
        if normalized not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return normalized

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in {"prod", "production", "live"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance (FastAPI dependency)."""
    return Settings()


settings = get_settings()
