"""FastAPI dependencies."""

from .services import get_availability_service

__all__ = ["get_availability_service"]
