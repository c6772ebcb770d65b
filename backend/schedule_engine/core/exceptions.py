# backend/schedule_engine/core/exceptions.py
"""
Domain-specific exceptions for the availability engine.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
The pure scheduling functions never raise for malformed data; these
are used by request validation and the pre-submission booking check.
"""

from datetime import date
from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Convert to an HTTPException carrying the standard error payload."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


# Specific business exceptions


class InvalidRecurrenceException(ValidationException):
    """Raised when a recurrence string cannot be parsed into weekdays."""

    def __init__(self, rrule: str):
        super().__init__(
            message=f"Recurrence rule '{rrule}' does not select any weekday",
            code="INVALID_RECURRENCE",
            details={"rrule": rrule},
        )


class InvalidDateWindowException(ValidationException):
    """Raised when a requested query window exceeds the configured maximum."""

    def __init__(self, from_date: date, to_date: date, max_days: int):
        super().__init__(
            message=f"Date window {from_date} to {to_date} exceeds {max_days} days",
            code="INVALID_DATE_WINDOW",
            details={
                "from_date": from_date.isoformat(),
                "to_date": to_date.isoformat(),
                "max_days": max_days,
            },
        )


class SlotUnavailableException(NotFoundException):
    """Raised when no bookable slot exists for a schedule on a date."""

    def __init__(self, schedule_id: str, on_date: date, reason: Optional[str] = None):
        super().__init__(
            message=reason or f"Schedule {schedule_id} has no bookable slot on {on_date}",
            code="SLOT_UNAVAILABLE",
            details={"schedule_id": schedule_id, "date": on_date.isoformat()},
        )


class InsufficientCapacityException(ConflictException):
    """Raised when a selection asks for more than the remaining capacity."""

    def __init__(self, schedule_id: str, on_date: date, requested: int, remaining: int):
        super().__init__(
            message=(
                f"Not enough capacity for schedule {schedule_id} on {on_date}: "
                f"requested {requested}, available {remaining}"
            ),
            code="INSUFFICIENT_CAPACITY",
            details={
                "schedule_id": schedule_id,
                "date": on_date.isoformat(),
                "requested": requested,
                "remaining": remaining,
            },
        )
