"""
Payment type handlers.

Every Paystack transaction carries a "type" in its metadata ("chipin",
"ticket", ...). Both confirmation paths (webhook and verify-payment) look
the type up here and let its handler finish the payment, so adding a new
payment type means adding one handler class:

    @register_payment_type
    class MembershipPaymentType(PaymentTypeHandler):
        name = "membership"

        def is_completed(self, reference):
            ...

        def complete(self, verified):
            ...
            return CompletionOutcome(payment_type=self.name, reference=...)

Usage:
    from payments.payment_types import get_payment_type

    handler = get_payment_type(verified.payment_type)  # UnknownPaymentTypeError
    outcome = handler.complete(verified)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from payments.exceptions import UnknownPaymentTypeError
from payments.state_machines import DonationStatus, PaymentType

if TYPE_CHECKING:
    from payments.adapters import VerifiedTransaction


logger = logging.getLogger(__name__)


@dataclass
class CompletionOutcome:
    """
    What a handler did with a verified transaction.

    Attributes:
        payment_type: Handler name ("chipin", "ticket")
        reference: Payment reference
        record: The local record that was completed (a Donation for
            chip-ins), None when the type keeps no local record
        already_completed: True when the record was completed before this
            call (webhook redelivery, or the other confirmation path won)
    """

    payment_type: str
    reference: str
    record: Any = None
    already_completed: bool = False


class PaymentTypeHandler(ABC):
    """Completes verified transactions of one payment type."""

    name: str = ""

    @abstractmethod
    def is_completed(self, reference: str) -> bool:
        """Whether the local record for this reference is already completed."""

    @abstractmethod
    def complete(self, verified: VerifiedTransaction) -> CompletionOutcome:
        """
        Apply a successful, gateway-verified transaction.

        Must be idempotent: calling it twice for the same reference has the
        same effect as calling it once.
        """


# =============================================================================
# Handler Registry
# =============================================================================


# Maps metadata "type" strings to handler instances
PAYMENT_TYPES: dict[str, PaymentTypeHandler] = {}


def register_payment_type(handler_class: type[PaymentTypeHandler]) -> type[PaymentTypeHandler]:
    """
    Class decorator registering a handler under its name.

    Usage:
        @register_payment_type
        class ChipInPaymentType(PaymentTypeHandler):
            name = "chipin"
    """
    if not handler_class.name:
        raise ValueError(f"{handler_class.__name__} must define a name")

    PAYMENT_TYPES[handler_class.name] = handler_class()
    logger.debug(f"Registered payment type handler for {handler_class.name}")
    return handler_class


def get_payment_type(name: str | None) -> PaymentTypeHandler:
    """
    Look up the handler for a metadata type.

    Raises:
        UnknownPaymentTypeError: No handler registered under name
    """
    handler = PAYMENT_TYPES.get(name or "")
    if handler is None:
        raise UnknownPaymentTypeError(
            "Invalid payment type",
            details={"payment_type": name},
        )
    return handler


# =============================================================================
# Handlers
# =============================================================================


@register_payment_type
class ChipInPaymentType(PaymentTypeHandler):
    """
    Chip-in donations.

    Delegates to DonationLifecycleService.complete_from_external_event,
    checking Paystack's amount against the donation's own amount + fee.
    """

    name = PaymentType.CHIPIN.value

    def is_completed(self, reference: str) -> bool:
        from payments.services import DonationLifecycleService

        return DonationLifecycleService.is_completed(reference)

    def complete(self, verified: VerifiedTransaction) -> CompletionOutcome:
        # payments.services imports this module
        from payments.services import DonationLifecycleService

        donation = DonationLifecycleService.get_by_reference(verified.reference)
        was_completed = donation.status == DonationStatus.COMPLETED

        donation = DonationLifecycleService.complete_from_external_event(
            reference=verified.reference,
            verified_amount=verified.amount_minor,
            expected_amount=donation.expected_amount_minor,
            gateway_response=verified.gateway_response,
        )
        return CompletionOutcome(
            payment_type=self.name,
            reference=verified.reference,
            record=donation,
            already_completed=was_completed,
        )


@register_payment_type
class TicketPaymentType(PaymentTypeHandler):
    """
    Ticket purchases.

    Tickets are fulfilled outside this service, so a verified ticket
    payment is acknowledged without touching any local record.
    """

    name = PaymentType.TICKET.value

    def is_completed(self, reference: str) -> bool:
        return False

    def complete(self, verified: VerifiedTransaction) -> CompletionOutcome:
        logger.info(
            f"Ticket payment acknowledged: {verified.reference}",
            extra={"reference": verified.reference},
        )
        return CompletionOutcome(payment_type=self.name, reference=verified.reference)
