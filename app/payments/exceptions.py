"""
Payment-specific exceptions for chip-in, confirmation and settlement flows.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── PaymentNotFoundError - Donation or event lookup failures (404)
    ├── PaymentValidationError - Request or business rule failures (400)
    │   ├── AmountMismatchError - Verified amount differs from expected
    │   ├── PaymentNotSuccessfulError - Gateway reports a non-success status
    │   └── UnknownPaymentTypeError - Metadata type has no registered handler
    ├── PaymentProcessingError - Processing failures (500)
    │   └── PaystackError - Base for all gateway errors
    │       ├── PaystackInvalidRequestError - 4xx from Paystack (permanent)
    │       ├── PaystackAPIUnavailableError - 5xx / connection errors (transient)
    │       └── PaystackTimeoutError - Request timeout (transient)
    ├── WebhookSignatureError - Webhook HMAC mismatch (400, no detail)
    └── ReconciliationError - Settlement reconciliation run failed
    InvalidStateTransitionError - Donation not in the expected state (inherits ConflictError)

Usage:
    from payments.exceptions import AmountMismatchError, PaystackError

    if verified_amount != expected_amount:
        raise AmountMismatchError(
            "Amount mismatch",
            details={"expected": expected_amount, "received": verified_amount},
        )

    try:
        PaystackAdapter.verify_transaction(reference)
    except PaystackError as e:
        if e.is_retryable:
            return HttpResponse(status=500)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError, ConflictError

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """
    Base exception for all payment operations.

    Inherits from BaseApplicationError so API views and the DRF exception
    handler render it consistently.
    """

    default_error_code: str = "PAYMENT_ERROR"


class PaymentNotFoundError(PaymentError):
    """
    Raised when a payment entity cannot be found.

    Use for:
    - Donation lookup by payment reference
    - Event lookup when starting a chip-in
    """

    default_error_code: str = "PAYMENT_NOT_FOUND"
    http_status: int = 404


class PaymentValidationError(PaymentError):
    """
    Raised when payment validation fails.

    Validation failures are terminal for the request and are never
    retried automatically.

    Example:
        if amount <= 0:
            raise PaymentValidationError(
                "Amount must be greater than zero",
                error_code="INVALID_AMOUNT",
                details={"amount": str(amount)},
            )
    """

    default_error_code: str = "PAYMENT_VALIDATION_ERROR"
    http_status: int = 400


class AmountMismatchError(PaymentValidationError):
    """
    Verified gateway amount differs from (amount + fee) in minor units.

    The donation stays pending; a mismatch is never silently accepted.
    """

    default_error_code: str = "AMOUNT_MISMATCH"


class PaymentNotSuccessfulError(PaymentValidationError):
    """Gateway verification returned a status other than "success"."""

    default_error_code: str = "PAYMENT_NOT_SUCCESSFUL"


class UnknownPaymentTypeError(PaymentValidationError):
    """Transaction metadata carries a payment type with no registered handler."""

    default_error_code: str = "UNKNOWN_PAYMENT_TYPE"


class PaymentProcessingError(PaymentError):
    """Raised when payment processing fails after validation."""

    default_error_code: str = "PAYMENT_PROCESSING_ERROR"
    http_status: int = 500


# =============================================================================
# Paystack-Specific Exceptions
# =============================================================================


class PaystackError(PaymentProcessingError):
    """
    Base exception for all Paystack-related errors.

    The message is Paystack's own message when the API returned one,
    otherwise a generic description.

    Attributes:
        status_code: HTTP status returned by Paystack, if any
        is_retryable: Whether the operation can be retried
    """

    default_error_code: str = "PAYSTACK_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, error_code=error_code, details=details)
        self.status_code = status_code


class PaystackInvalidRequestError(PaystackError):
    """
    Paystack rejected the request (4xx).

    Permanent: the same request will never succeed. Typical causes are an
    unknown reference, an unresolvable account number or a bad secret key.
    """

    default_error_code: str = "INVALID_PAYSTACK_REQUEST"
    is_retryable: bool = False


class PaystackAPIUnavailableError(PaystackError):
    """
    Paystack is temporarily unavailable.

    Covers connection failures, 5xx responses and rate limiting (429).
    """

    default_error_code: str = "PAYSTACK_UNAVAILABLE"
    is_retryable: bool = True


class PaystackTimeoutError(PaystackError):
    """
    Paystack call exceeded PAYSTACK_API_TIMEOUT_SECONDS.

    The operation may have succeeded on Paystack's side. Every caller in
    this app is idempotent on the payment reference, so retrying is safe.
    """

    default_error_code: str = "PAYSTACK_TIMEOUT"
    is_retryable: bool = True


# =============================================================================
# Webhook Exceptions
# =============================================================================


class WebhookSignatureError(PaymentError):
    """
    Webhook signature did not match the HMAC of the raw body.

    The response must not reveal why verification failed.
    """

    default_error_code: str = "INVALID_SIGNATURE"
    http_status: int = 400


# =============================================================================
# Concurrency Control Exceptions
# =============================================================================


class InvalidStateTransitionError(ConflictError):
    """
    Raised when a donation is not in a state that allows the operation.

    Example:
        raise InvalidStateTransitionError(
            "Cannot complete donation in 'failed' state",
            details={"current_state": "failed", "target_state": "completed"},
        )
    """

    default_error_code: str = "INVALID_STATE_TRANSITION"


# =============================================================================
# Reconciliation Exceptions
# =============================================================================


class ReconciliationError(PaymentError):
    """
    Settlement reconciliation run failed.

    The job checkpoint is left untouched so the next run re-scans the
    same window. The underlying cause is chained as __cause__.
    """

    default_error_code: str = "RECONCILIATION_ERROR"
