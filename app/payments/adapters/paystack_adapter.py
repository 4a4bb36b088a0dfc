"""
Paystack API adapter for payment operations.

This module provides the PaystackAdapter class which encapsulates all
Paystack API interactions. Every Paystack call goes through this adapter
so that timeouts, error translation and logging are consistent.

Features:
- Fixed timeout on every request (PAYSTACK_API_TIMEOUT_SECONDS)
- Automatic error translation to domain exceptions
- Structured logging with timing metrics
- Webhook signature verification over the raw request body

Configuration (via settings):
- PAYSTACK_SECRET_KEY: Secret key, also the webhook HMAC key
- PAYSTACK_BASE_URL: API base URL (default: https://api.paystack.co)
- PAYSTACK_API_TIMEOUT_SECONDS: Request timeout (default: 30)

Usage:
    from payments.adapters import PaystackAdapter

    init = PaystackAdapter.initialize_transaction(
        email="guest@example.com",
        amount_minor=515000,
        reference="CHIP-IN_1700000000000_ab12cd34ef56ab78",
        callback_url="https://app.example.com/verify-payment",
        metadata={"type": "chipin", "eventId": str(event.id)},
    )
    init.authorization_url

    verified = PaystackAdapter.verify_transaction(reference)
    if verified.is_successful:
        ...

    page = PaystackAdapter.list_settlements(from_date=since, page=1, per_page=50)
    for settlement in page.items:
        ...
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, TypeVar
from urllib.parse import quote

import requests
from django.conf import settings

from payments.exceptions import (
    PaystackAPIUnavailableError,
    PaystackError,
    PaystackInvalidRequestError,
    PaystackTimeoutError,
    WebhookSignatureError,
)

T = TypeVar("T")

GENERIC_ERROR_MESSAGE = "Payment gateway request failed"


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class InitializedTransaction:
    """Result of /transaction/initialize."""

    authorization_url: str
    access_code: str
    reference: str


@dataclass
class VerifiedTransaction:
    """
    Result of /transaction/verify/{reference}.

    Attributes:
        reference: Transaction reference
        status: Paystack status ("success", "failed", "abandoned", ...)
        amount_minor: Amount charged in kobo
        gateway_response: Paystack's gateway response text ("Successful", ...)
        metadata: Metadata attached at initialization (decoded to a dict)
        currency: Currency code
        raw_response: Full "data" payload (for debugging)
    """

    reference: str
    status: str
    amount_minor: int
    gateway_response: str
    metadata: dict[str, Any] = field(default_factory=dict)
    currency: str = ""
    raw_response: dict[str, Any] = field(default_factory=dict)

    @property
    def is_successful(self) -> bool:
        return self.status == "success"

    @property
    def payment_type(self) -> str | None:
        return self.metadata.get("type")


@dataclass
class Settlement:
    """A settlement batch paid out to the merchant's bank account."""

    id: int | str
    status: str
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class SettlementTransaction:
    """A transaction included in a settlement."""

    reference: str
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class ResolvedAccount:
    """Result of /bank/resolve."""

    account_name: str
    account_number: str


@dataclass
class TransferRecipient:
    """Result of /transferrecipient."""

    recipient_code: str


@dataclass
class Page(Generic[T]):
    """
    One page of a paginated list endpoint.

    has_more comes from meta.pageCount when Paystack sends it. Without it,
    a full page means "ask for the next one", so a final full page costs
    one extra request that comes back empty.
    """

    items: list[T]
    page: int
    has_more: bool


# =============================================================================
# Paystack Adapter
# =============================================================================


class PaystackAdapter:
    """
    Adapter for Paystack API operations.

    All methods are classmethods - no instance state is maintained.
    Safe to call from request handlers and Celery workers alike.

    Error translation:
        requests.Timeout          -> PaystackTimeoutError (retryable)
        connection errors, 5xx, 429 -> PaystackAPIUnavailableError (retryable)
        other 4xx                 -> PaystackInvalidRequestError
        {"status": false} body    -> PaystackError

    Paystack's own "message" is used as the exception message whenever
    the response carries one.
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    @classmethod
    def get_logger(cls) -> logging.Logger:
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @staticmethod
    def _headers() -> dict[str, str]:
        return {
            "Authorization": f"Bearer {settings.PAYSTACK_SECRET_KEY}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _timeout() -> int:
        return getattr(settings, "PAYSTACK_API_TIMEOUT_SECONDS", 30)

    # =========================================================================
    # Transactions
    # =========================================================================

    @classmethod
    def initialize_transaction(
        cls,
        email: str,
        amount_minor: int,
        reference: str,
        callback_url: str,
        metadata: dict[str, Any],
    ) -> InitializedTransaction:
        """
        Start a hosted-checkout transaction.

        Args:
            email: Payer's email
            amount_minor: Amount to charge in kobo (amount + fee) * 100
            reference: Our payment reference
            callback_url: Where Paystack redirects after checkout
            metadata: Echoed back on verify and webhook events

        Returns:
            InitializedTransaction with the authorization URL

        Raises:
            PaystackError: Any gateway failure
        """
        data = cls._request(
            "POST",
            "/transaction/initialize",
            operation="initialize_transaction",
            payload={
                "email": email,
                "amount": amount_minor,
                "reference": reference,
                "callback_url": callback_url,
                "metadata": metadata,
            },
            log_context={"reference": reference, "amount_minor": amount_minor},
        )
        return InitializedTransaction(
            authorization_url=data["authorization_url"],
            access_code=data.get("access_code", ""),
            reference=data.get("reference", reference),
        )

    @classmethod
    def verify_transaction(cls, reference: str) -> VerifiedTransaction:
        """
        Fetch the authoritative state of a transaction.

        Raises:
            PaystackInvalidRequestError: Unknown reference
            PaystackAPIUnavailableError: Paystack unavailable
            PaystackTimeoutError: Request timed out
        """
        data = cls._request(
            "GET",
            f"/transaction/verify/{quote(reference, safe='')}",
            operation="verify_transaction",
            log_context={"reference": reference},
        )
        return VerifiedTransaction(
            reference=data.get("reference", reference),
            status=data.get("status", ""),
            amount_minor=int(data.get("amount") or 0),
            gateway_response=data.get("gateway_response") or "",
            metadata=cls._decode_metadata(data.get("metadata")),
            currency=data.get("currency", ""),
            raw_response=data,
        )

    # =========================================================================
    # Settlements
    # =========================================================================

    @classmethod
    def list_settlements(
        cls,
        from_date: datetime,
        page: int,
        per_page: int,
        status: str = "success",
    ) -> Page[Settlement]:
        """List settlements created since from_date, one page at a time."""
        data, meta = cls._request(
            "GET",
            "/settlement",
            operation="list_settlements",
            params={
                "from": from_date.isoformat(),
                "status": status,
                "perPage": per_page,
                "page": page,
            },
            log_context={"page": page, "per_page": per_page},
            with_meta=True,
        )
        items = [
            Settlement(id=row["id"], status=row.get("status", ""), raw_response=row)
            for row in data or []
        ]
        return Page(
            items=items,
            page=page,
            has_more=cls._has_more(meta, page, per_page, len(items)),
        )

    @classmethod
    def list_settlement_transactions(
        cls,
        settlement_id: int | str,
        page: int,
        per_page: int,
    ) -> Page[SettlementTransaction]:
        """List the transactions bundled in one settlement."""
        data, meta = cls._request(
            "GET",
            f"/settlement/{settlement_id}/transactions",
            operation="list_settlement_transactions",
            params={"perPage": per_page, "page": page},
            log_context={
                "settlement_id": settlement_id,
                "page": page,
                "per_page": per_page,
            },
            with_meta=True,
        )
        items = [
            SettlementTransaction(reference=row["reference"], raw_response=row)
            for row in data or []
            if row.get("reference")
        ]
        return Page(
            items=items,
            page=page,
            has_more=cls._has_more(meta, page, per_page, len(data or [])),
        )

    # =========================================================================
    # Bank Accounts & Transfer Recipients
    # =========================================================================

    @classmethod
    def resolve_bank_account(cls, account_number: str, bank_code: str) -> ResolvedAccount:
        """Look up the account holder's name for a NUBAN account."""
        data = cls._request(
            "GET",
            "/bank/resolve",
            operation="resolve_bank_account",
            params={"account_number": account_number, "bank_code": bank_code},
            log_context={"bank_code": bank_code},
        )
        return ResolvedAccount(
            account_name=data["account_name"],
            account_number=data.get("account_number", account_number),
        )

    @classmethod
    def create_transfer_recipient(
        cls,
        name: str,
        account_number: str,
        bank_code: str,
        currency: str,
    ) -> TransferRecipient:
        """Register a NUBAN account as a transfer recipient."""
        data = cls._request(
            "POST",
            "/transferrecipient",
            operation="create_transfer_recipient",
            payload={
                "type": "nuban",
                "name": name,
                "account_number": account_number,
                "bank_code": bank_code,
                "currency": currency,
            },
            log_context={"bank_code": bank_code, "currency": currency},
        )
        return TransferRecipient(recipient_code=data["recipient_code"])

    # =========================================================================
    # Webhooks
    # =========================================================================

    @classmethod
    def verify_webhook_signature(cls, payload: bytes, signature: str | None) -> None:
        """
        Check the x-paystack-signature header against the raw body.

        The HMAC-SHA512 is computed over the exact bytes received, never
        over a re-serialization of the parsed JSON.

        Raises:
            WebhookSignatureError: Missing secret, missing header or mismatch
        """
        secret = settings.PAYSTACK_SECRET_KEY
        if not secret or not signature:
            raise WebhookSignatureError("Invalid signature")

        expected = hmac.new(secret.encode(), payload, hashlib.sha512).hexdigest()
        if not hmac.compare_digest(expected, signature):
            raise WebhookSignatureError("Invalid signature")

    # =========================================================================
    # Internal: Transport
    # =========================================================================

    @classmethod
    def _request(
        cls,
        method: str,
        path: str,
        operation: str,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
        log_context: dict[str, Any] | None = None,
        with_meta: bool = False,
    ):
        """
        Perform one Paystack call and return its "data" payload.

        Returns (data, meta) when with_meta is True.
        """
        logger = cls.get_logger()
        log_context = {"operation": operation, **(log_context or {})}

        start_time = time.time()
        logger.info("Starting Paystack operation", extra=log_context)

        try:
            response = requests.request(
                method,
                f"{settings.PAYSTACK_BASE_URL.rstrip('/')}{path}",
                headers=cls._headers(),
                params=params,
                json=payload,
                timeout=cls._timeout(),
            )
        except requests.RequestException as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_transport_error(e, log_context, duration_ms)
            raise  # Never reached, but satisfies type checker

        duration_ms = (time.time() - start_time) * 1000
        body = cls._parse_body(response, log_context, duration_ms)

        if response.status_code >= 400:
            cls._handle_http_error(response.status_code, body, log_context, duration_ms)

        if body.get("status") is not True:
            message = body.get("message") or GENERIC_ERROR_MESSAGE
            logger.error(
                "Paystack reported failure",
                extra={**log_context, "duration_ms": duration_ms, "gateway_message": message},
            )
            raise PaystackError(message, status_code=response.status_code)

        logger.info(
            "Paystack operation completed",
            extra={
                **log_context,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        data = body.get("data")
        if with_meta:
            return data, body.get("meta") or {}
        return data or {}

    @classmethod
    def _parse_body(
        cls,
        response: requests.Response,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            return body

        cls.get_logger().error(
            "Non-JSON response from Paystack",
            extra={
                **log_context,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        if response.status_code >= 500:
            raise PaystackAPIUnavailableError(
                GENERIC_ERROR_MESSAGE, status_code=response.status_code
            )
        raise PaystackError(GENERIC_ERROR_MESSAGE, status_code=response.status_code)

    @staticmethod
    def _decode_metadata(metadata: Any) -> dict[str, Any]:
        # Metadata sent as a string comes back as a string
        if isinstance(metadata, dict):
            return metadata
        if isinstance(metadata, str) and metadata:
            try:
                decoded = json.loads(metadata)
            except ValueError:
                return {}
            return decoded if isinstance(decoded, dict) else {}
        return {}

    @staticmethod
    def _has_more(meta: dict[str, Any], page: int, per_page: int, count: int) -> bool:
        page_count = meta.get("pageCount")
        if page_count is not None:
            return page < int(page_count)
        return count > 0 and count >= per_page

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _handle_transport_error(
        cls,
        error: requests.RequestException,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate requests exceptions to domain exceptions.

        Raises:
            PaystackTimeoutError: Request exceeded the configured timeout
            PaystackAPIUnavailableError: Connection or other transport failure
        """
        logger = cls.get_logger()
        log_context = {**log_context, "duration_ms": duration_ms}

        # ConnectTimeout is both a Timeout and a ConnectionError
        if isinstance(error, requests.Timeout):
            logger.warning("Paystack request timed out", extra=log_context)
            raise PaystackTimeoutError(
                "Payment gateway timed out. Please retry.",
                details={"timeout_seconds": cls._timeout()},
            ) from error

        logger.error(
            "Paystack unavailable",
            extra={**log_context, "error": str(error)},
        )
        raise PaystackAPIUnavailableError(
            "Payment gateway is temporarily unavailable",
        ) from error

    @classmethod
    def _handle_http_error(
        cls,
        status_code: int,
        body: dict[str, Any],
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate HTTP error responses to domain exceptions.

        Raises:
            PaystackAPIUnavailableError: 5xx or 429
            PaystackInvalidRequestError: Other 4xx
        """
        logger = cls.get_logger()
        message = body.get("message") or GENERIC_ERROR_MESSAGE
        log_context = {
            **log_context,
            "status_code": status_code,
            "gateway_message": message,
            "duration_ms": duration_ms,
        }

        if status_code >= 500 or status_code == 429:
            logger.warning("Paystack unavailable", extra=log_context)
            raise PaystackAPIUnavailableError(message, status_code=status_code)

        logger.error("Invalid request to Paystack", extra=log_context)
        raise PaystackInvalidRequestError(message, status_code=status_code)
