"""
Payment confirmation shared by the Paystack webhook and verify-payment.

Both entry points hand a reference to PaymentConfirmationService.confirm(),
which never trusts the caller's copy of the transaction:

    1. verify the transaction with Paystack
    2. require status "success"
    3. look up the payment type handler from the verified metadata
    4. let the handler complete the payment (idempotent)

Usage:
    from payments.services import PaymentConfirmationService

    outcome = PaymentConfirmationService.confirm(reference)
    outcome.record            # Donation for chip-ins
    outcome.already_completed
"""

from __future__ import annotations

from core.services import BaseService
from payments.adapters import PaystackAdapter
from payments.exceptions import PaymentNotSuccessfulError
from payments.payment_types import CompletionOutcome, get_payment_type
from payments.services.lifecycle import DonationLifecycleService
from payments.state_machines import PaymentType

# Paystack statuses that will never turn into "success"
FAILED_TRANSACTION_STATUSES = frozenset({"failed", "reversed"})


class PaymentConfirmationService(BaseService):
    """Confirms Paystack transactions against local records."""

    # Paystack adapter - can be injected for testing
    _paystack_adapter: type | None = None

    @classmethod
    def get_paystack_adapter(cls) -> type:
        return cls._paystack_adapter or PaystackAdapter

    @classmethod
    def set_paystack_adapter(cls, adapter: type | None) -> None:
        cls._paystack_adapter = adapter

    @classmethod
    def confirm(cls, reference: str, skip_completed: bool = False) -> CompletionOutcome:
        """
        Verify a transaction with Paystack and complete it locally.

        Args:
            reference: Paystack transaction reference
            skip_completed: Return as soon as the local record is found
                completed, without re-running completion (webhook
                redeliveries)

        Returns:
            CompletionOutcome from the payment type handler

        Raises:
            PaymentNotSuccessfulError: Paystack status is not "success"
            UnknownPaymentTypeError: Metadata type has no handler
            AmountMismatchError: Verified amount differs from amount + fee
            PaymentNotFoundError: No local record for the reference
            PaystackError: Verification call failed
        """
        logger = cls.get_logger()
        log_context = {"reference": reference}

        verified = cls.get_paystack_adapter().verify_transaction(reference)

        if not verified.is_successful:
            logger.warning(
                f"Payment not successful: {reference} ({verified.status})",
                extra={**log_context, "gateway_status": verified.status},
            )
            if (
                verified.status in FAILED_TRANSACTION_STATUSES
                and verified.payment_type == PaymentType.CHIPIN
            ):
                DonationLifecycleService.fail_from_external_event(
                    reference, verified.gateway_response
                )
            raise PaymentNotSuccessfulError(
                "Payment not successful",
                details={"reference": reference, "status": verified.status},
            )

        handler = get_payment_type(verified.payment_type)

        if skip_completed and handler.is_completed(reference):
            logger.info(
                f"Payment {reference} already completed, skipping",
                extra={**log_context, "payment_type": handler.name},
            )
            return CompletionOutcome(
                payment_type=handler.name,
                reference=reference,
                already_completed=True,
            )

        outcome = handler.complete(verified)
        logger.info(
            f"Payment confirmed: {reference}",
            extra={
                **log_context,
                "payment_type": outcome.payment_type,
                "already_completed": outcome.already_completed,
            },
        )
        return outcome
