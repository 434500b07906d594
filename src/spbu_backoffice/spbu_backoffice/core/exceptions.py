from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class MalformedInputError(ValidationError):
    """Raised when a value cannot be parsed at all (wrong shape)."""


class OutOfRangeError(ValidationError):
    """Raised when a value parses but falls outside the supported range."""


class DateRangeError(OutOfRangeError):
    """Raised when a date range ends before it starts."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class WriteConflictError(DomainError):
    """Raised when a payroll write loses against a concurrent write.

    Recoverable: the caller should reload the record and retry.
    """

    def __init__(
        self,
        message: str,
        *,
        payroll_id: Optional[str] = None,
        employee_id: Optional[str] = None,
        store_id: Optional[int] = None,
        month: Optional[str] = None,
    ):
        super().__init__(message)
        self.payroll_id = payroll_id
        self.employee_id = employee_id
        self.store_id = store_id
        self.month = month

    def to_dict(self) -> dict:
        return {
            "payroll_id": self.payroll_id,
            "employee_id": self.employee_id,
            "store_id": self.store_id,
            "month": self.month,
        }
