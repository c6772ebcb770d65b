# backend/schedule_engine/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Services hold no per-request state, so one instance per service type is
shared across requests.
"""

import logging

from fastapi import Depends

from ...core.config import Settings, get_settings
from ...services.availability_service import AvailabilityService
from ...services.base import BaseService

logger = logging.getLogger(__name__)

# Service instance cache keyed by service type
_service_instances: dict[type[BaseService], BaseService] = {}


def get_availability_service(
    config: Settings = Depends(get_settings),
) -> AvailabilityService:
    """Get the availability service instance for dependency injection."""
    service = _service_instances.get(AvailabilityService)
    if service is None or service.settings is not config:
        service = AvailabilityService(config)
        _service_instances[AvailabilityService] = service
        logger.debug("Created AvailabilityService instance")
    return service  # type: ignore[return-value]


def reset_service_instances() -> None:
    """Drop cached service instances (used by tests that swap settings)."""
    _service_instances.clear()
