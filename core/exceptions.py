# core/exceptions.py
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.services.scheduling.models import AdjustmentReport


class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when data is invalid or violates constraints."""


class NotFoundError(DomainError):
    """Raised when an entity is not found."""


class BusinessRuleError(DomainError):
    """Raised when business rules are violated (e.g., a blocked schedule commit)."""


# ---------- Calendar arithmetic ----------

class InvalidDateError(ValidationError):
    """Raised when a date value cannot be parsed."""
    def __init__(self, message: str = "Invalid date provided", *, code: str | None = None):
        super().__init__(message, code=code or "INVALID_DATE")


class InvalidRangeError(ValidationError):
    """Raised when a start date falls after its end date where ordering is mandatory."""
    def __init__(self, message: str = "Start date cannot be after end date", *, code: str | None = None):
        super().__init__(message, code=code or "INVALID_RANGE")


class InvalidArgumentError(ValidationError):
    """Raised for a negative or non-integer working-day count."""
    def __init__(self, message: str = "Days must be a non-negative integer", *, code: str | None = None):
        super().__init__(message, code=code or "INVALID_ARGUMENT")


class MissingInputError(ValidationError):
    """Raised when a required date is missing."""
    def __init__(self, message: str = "Date is required", *, code: str | None = None):
        super().__init__(message, code=code or "MISSING_INPUT")


class ScheduleAdjustmentError(BusinessRuleError):
    """Raised when a project-wide date adjustment cannot be committed."""
    def __init__(self, message: str, report: "AdjustmentReport", *, code: str | None = None):
        super().__init__(message, code=code or "SCHEDULE_ADJUSTMENT_BLOCKED")
        self.report = report
