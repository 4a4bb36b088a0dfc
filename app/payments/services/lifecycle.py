"""
Donation lifecycle service.

Owns every status change of a Donation:

    initiate_chip_in            creates PENDING and starts a Paystack checkout
    complete_from_external_event  PENDING -> COMPLETED (webhook or verify)
    fail_from_external_event    PENDING -> FAILED

Completion is idempotent. The webhook and the verify-payment endpoint both
call complete_from_external_event for the same reference, in any order and
possibly at the same time. The write is a single conditional UPDATE
(reference matches AND status is still PENDING), so exactly one caller
changes the row and the other sees zero rows affected and returns the
already-completed record.

Usage:
    from payments.services import DonationLifecycleService

    result = DonationLifecycleService.initiate_chip_in(
        user=request.user,
        event_id=event.id,
        amount=Decimal("5000"),
    )
    if result.success:
        redirect_to(result.data.payment_link)

    donation = DonationLifecycleService.complete_from_external_event(
        reference="CHIP-IN_1700000000000_ab12cd34ef56ab78",
        verified_amount=515000,
        expected_amount=515000,
        gateway_response="Successful",
    )
"""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from django.conf import settings

from core.services import BaseService, ServiceResult
from events.models import Event
from payments.adapters import PaystackAdapter
from payments.exceptions import (
    AmountMismatchError,
    InvalidStateTransitionError,
    PaymentNotFoundError,
    PaystackInvalidRequestError,
)
from payments.models import PAYSTACK_GATEWAY, Donation
from payments.state_machines import DonationStatus, PaymentType

if TYPE_CHECKING:
    import uuid

    from django.contrib.auth.models import AbstractBaseUser


CHIP_IN_REFERENCE_PREFIX = "CHIP-IN"


def generate_chip_in_reference() -> str:
    """CHIP-IN_<epoch ms>_<16 hex chars>."""
    return f"{CHIP_IN_REFERENCE_PREFIX}_{int(time.time() * 1000)}_{secrets.token_hex(8)}"


@dataclass
class ChipInResult:
    """
    Result of starting a chip-in.

    Attributes:
        donation: The PENDING donation
        payment_link: Paystack hosted-checkout URL to send the guest to
    """

    donation: Donation
    payment_link: str


class DonationLifecycleService(BaseService):
    """
    Service for donation state changes.

    Business rule failures when starting a chip-in come back as
    ServiceResult failures. Missing records and amount mismatches are
    raised, since callers map them straight onto HTTP responses.
    """

    # Paystack adapter - can be injected for testing
    _paystack_adapter: type | None = None

    @classmethod
    def get_paystack_adapter(cls) -> type:
        return cls._paystack_adapter or PaystackAdapter

    @classmethod
    def set_paystack_adapter(cls, adapter: type | None) -> None:
        cls._paystack_adapter = adapter

    # =========================================================================
    # Chip-in
    # =========================================================================

    @classmethod
    def initiate_chip_in(
        cls,
        user: AbstractBaseUser,
        event_id: uuid.UUID | str,
        amount: Decimal,
    ) -> ServiceResult[ChipInResult]:
        """
        Create a PENDING donation and a Paystack checkout for it.

        The guest is charged amount + fee; the fee is computed once when the
        donation row is inserted.

        Returns:
            ServiceResult with ChipInResult, or a failure when the event
            does not take chip-ins or the amount breaks its rules

        Raises:
            PaymentNotFoundError: No event with event_id
            PaystackError: Paystack could not start the transaction; the
                message is Paystack's own when it sent one
        """
        logger = cls.get_logger()

        event = Event.objects.filter(pk=event_id).first()
        if event is None:
            raise PaymentNotFoundError(
                "Event not found",
                error_code="EVENT_NOT_FOUND",
                details={"event_id": str(event_id)},
            )

        if not event.accepts_chip_ins:
            return ServiceResult.failure(
                "This event does not accept donations",
                error_code="CHIP_IN_NOT_ACCEPTED",
            )

        amount = Decimal(amount)
        if amount <= 0:
            return ServiceResult.failure(
                "Amount must be positive",
                error_code="INVALID_AMOUNT",
            )

        rule_error = event.chip_in_amount_error(amount)
        if rule_error:
            return ServiceResult.failure(rule_error, error_code="INVALID_AMOUNT")

        reference = generate_chip_in_reference()
        with cls.atomic():
            donation = Donation.objects.create(
                event=event,
                user=user,
                amount=amount,
                currency=settings.CHIPIN_CURRENCY,
                payment_reference=reference,
            )

        # Committed before the gateway call; a rejected checkout still keeps the row
        try:
            initialized = cls.get_paystack_adapter().initialize_transaction(
                email=user.email,
                amount_minor=donation.expected_amount_minor,
                reference=reference,
                callback_url=f"{settings.FRONT_URL.rstrip('/')}/verify-payment",
                metadata={
                    "eventId": str(event.id),
                    "transaction_fee": float(donation.fee),
                    "originalAmount": float(amount),
                    "type": PaymentType.CHIPIN.value,
                },
            )
        except PaystackInvalidRequestError as e:
            # Paystack refused the checkout, so nobody can pay this reference
            Donation.objects.fail_pending(
                reference,
                metadata={"gateway": PAYSTACK_GATEWAY, "gatewayResponse": e.message},
            )
            logger.warning(
                f"Chip-in checkout rejected for {reference}: {e.message}",
                extra={"reference": reference, "event_id": str(event.id)},
            )
            raise

        logger.info(
            f"Chip-in initiated: {reference}",
            extra={
                "reference": reference,
                "event_id": str(event.id),
                "amount": str(amount),
                "fee": str(donation.fee),
            },
        )
        return ServiceResult.success(
            ChipInResult(donation=donation, payment_link=initialized.authorization_url)
        )

    # =========================================================================
    # Completion
    # =========================================================================

    @classmethod
    def get_by_reference(cls, reference: str) -> Donation:
        """
        Fetch a donation with its event loaded.

        Raises:
            PaymentNotFoundError: No donation carries this reference
        """
        donation = (
            Donation.objects.select_related("event")
            .filter(payment_reference=reference)
            .first()
        )
        if donation is None:
            raise PaymentNotFoundError(
                "Chip-in not found",
                error_code="DONATION_NOT_FOUND",
                details={"reference": reference},
            )
        return donation

    @classmethod
    def is_completed(cls, reference: str) -> bool:
        return Donation.objects.filter(
            payment_reference=reference,
            status=DonationStatus.COMPLETED,
        ).exists()

    @classmethod
    def complete_from_external_event(
        cls,
        reference: str,
        verified_amount: int,
        expected_amount: int,
        gateway_response: str,
    ) -> Donation:
        """
        Mark a donation COMPLETED exactly once.

        Args:
            reference: Payment reference
            verified_amount: Amount Paystack reports, in kobo
            expected_amount: (amount + fee) * 100 for this donation
            gateway_response: Paystack's gateway_response text

        Returns:
            The donation, freshly fetched with its event. When another
            caller completed it first, the existing record is returned
            unchanged.

        Raises:
            PaymentNotFoundError: No donation carries this reference
            AmountMismatchError: verified_amount != expected_amount; the
                donation is left PENDING
            InvalidStateTransitionError: The donation already FAILED
        """
        logger = cls.get_logger()
        log_context = {"reference": reference}

        if not Donation.objects.filter(payment_reference=reference).exists():
            raise PaymentNotFoundError(
                "Chip-in not found",
                error_code="DONATION_NOT_FOUND",
                details=log_context,
            )

        if verified_amount != expected_amount:
            logger.warning(
                f"Amount mismatch for {reference}: "
                f"expected {expected_amount}, received {verified_amount}",
                extra={
                    **log_context,
                    "expected_amount": expected_amount,
                    "verified_amount": verified_amount,
                },
            )
            raise AmountMismatchError(
                "Payment amount mismatch",
                details={
                    "reference": reference,
                    "expected": expected_amount,
                    "received": verified_amount,
                },
            )

        updated = Donation.objects.complete_pending(
            reference,
            metadata={
                "transactionId": reference,
                "gateway": PAYSTACK_GATEWAY,
                "gatewayResponse": gateway_response,
            },
        )

        donation = cls.get_by_reference(reference)

        if updated:
            logger.info(f"Donation completed: {reference}", extra=log_context)
            return donation

        # Zero rows: someone else moved it out of PENDING first
        if donation.status in (DonationStatus.COMPLETED, DonationStatus.REFUNDED):
            logger.info(
                f"Donation {reference} already completed, returning existing record",
                extra=log_context,
            )
            return donation

        logger.error(
            f"Cannot complete donation {reference} in '{donation.status}' state",
            extra={**log_context, "current_state": donation.status},
        )
        raise InvalidStateTransitionError(
            f"Cannot complete donation in '{donation.status}' state",
            details={
                "reference": reference,
                "current_state": donation.status,
                "target_state": DonationStatus.COMPLETED,
            },
        )

    @classmethod
    def fail_from_external_event(cls, reference: str, gateway_response: str) -> bool:
        """
        Mark a PENDING donation FAILED after Paystack reports a definitive failure.

        Returns:
            True if this call changed the donation, False if it had already
            left PENDING (or does not exist)
        """
        updated = Donation.objects.fail_pending(
            reference,
            metadata={
                "transactionId": reference,
                "gateway": PAYSTACK_GATEWAY,
                "gatewayResponse": gateway_response,
            },
        )
        if updated:
            cls.get_logger().info(
                f"Donation failed: {reference}",
                extra={"reference": reference, "gateway_response": gateway_response},
            )
        return bool(updated)

