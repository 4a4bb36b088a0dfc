"""
Webhook event handlers for Paystack events.

This module provides a handler registry keyed by Paystack's "event" field.
Only charge.success is handled; any other event is rejected with a
validation error.

Usage:
    from payments.webhooks.handlers import dispatch_webhook, register_handler

    @register_handler("transfer.success")
    def handle_transfer_success(event: dict) -> CompletionOutcome:
        ...

    outcome = dispatch_webhook({"event": "charge.success", "data": {...}})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from payments.exceptions import PaymentValidationError
from payments.services import PaymentConfirmationService

if TYPE_CHECKING:
    from payments.payment_types import CompletionOutcome


logger = logging.getLogger(__name__)


# =============================================================================
# Handler Registry
# =============================================================================


# Maps Paystack event names to handler functions
WEBHOOK_HANDLERS: dict[str, Callable[[dict[str, Any]], CompletionOutcome]] = {}


def register_handler(event_type: str) -> Callable:
    """
    Decorator to register a webhook event handler.

    Args:
        event_type: The Paystack event name (e.g., "charge.success")
    """

    def decorator(func: Callable[[dict[str, Any]], CompletionOutcome]) -> Callable:
        WEBHOOK_HANDLERS[event_type] = func
        logger.debug(f"Registered webhook handler for {event_type}")
        return func

    return decorator


def dispatch_webhook(event: dict[str, Any]) -> CompletionOutcome:
    """
    Dispatch a parsed webhook body to the handler for its event.

    Raises:
        PaymentValidationError: No handler for the event
    """
    event_type = event.get("event")
    handler = WEBHOOK_HANDLERS.get(event_type or "")

    if handler is None:
        logger.info(
            f"No handler registered for event type: {event_type}",
            extra={"event_type": event_type},
        )
        raise PaymentValidationError(
            "Unsupported webhook event",
            error_code="UNSUPPORTED_WEBHOOK_EVENT",
            details={"event_type": event_type},
        )

    return handler(event)


# =============================================================================
# Charge Handlers
# =============================================================================


@register_handler("charge.success")
def handle_charge_success(event: dict[str, Any]) -> CompletionOutcome:
    """
    Handle charge.success.

    The body's amount and status are ignored; the transaction is verified
    with Paystack again before anything is completed. A payment that is
    already completed locally short-circuits, since Paystack redelivers
    webhooks.
    """
    data = event.get("data") or {}
    reference = data.get("reference")
    if not reference:
        raise PaymentValidationError(
            "Webhook payload has no transaction reference",
            error_code="MISSING_REFERENCE",
        )

    logger.info(
        f"Processing charge.success for {reference}",
        extra={"reference": reference},
    )
    return PaymentConfirmationService.confirm(reference, skip_completed=True)
