"""Domain error types surfaced to callers of the payroll core."""

from __future__ import annotations

from typing import Any


class PayrollError(Exception):
    """Base class for all recoverable payroll domain errors."""

    code = "PAYROLL_ERROR"


class ValidationError(PayrollError):
    """Raised for malformed or out-of-range input."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class ConflictError(PayrollError):
    """Raised on a uniqueness violation or an overlapping pay period."""

    code = "CONFLICT"

    def __init__(self, entity: str, field: str, value: Any, message: str | None = None):
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(message or f"{entity} with {field} '{value}' already exists")


class NotFoundError(PayrollError):
    """Raised when a referenced record does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class PermissionDeniedError(PayrollError):
    """Raised when the acting user's role does not allow an operation."""

    code = "PERMISSION_DENIED"


class StoreUnavailableError(PayrollError):
    """Raised when the record store cannot be reached.

    Retryable by the caller; the core never retries on its own.
    """

    code = "STORE_UNAVAILABLE"

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Record store unavailable during {operation}")
