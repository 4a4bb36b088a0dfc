"""
Base exception classes for application-wide error handling.

Every domain error raised by a service derives from BaseApplicationError so
that views, webhook handlers and the DRF exception handler can translate it
into a response without knowing the concrete type.

Exception Hierarchy:
    BaseApplicationError (base, HTTP 500)
    ├── ConflictError - State conflicts, illegal transitions (409)
    └── payments.exceptions.PaymentError - Payment domain errors

Usage:
    from core.exceptions import BaseApplicationError

    class PaymentError(BaseApplicationError):
        default_error_code = "PAYMENT_ERROR"

    # Convert to dict for API response
    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=e.http_status)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, identifiers, etc.)
        http_status: Status code used when the error reaches an HTTP boundary
    """

    default_error_code: str = "APPLICATION_ERROR"
    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Donation not found",
                "error_code": "PAYMENT_NOT_FOUND",
                "details": {"reference": "CHIP-IN_..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Example:
        if donation.status != "pending":
            raise ConflictError(
                f"Cannot complete donation in {donation.status} status",
                error_code="INVALID_STATE_TRANSITION",
                details={"current_status": donation.status},
            )
    """

    default_error_code: str = "CONFLICT"
    http_status: int = 409

