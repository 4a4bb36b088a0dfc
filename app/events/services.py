"""
Event services.

EventService.register_payout_account attaches the host's bank account to an
event: Paystack resolves the account holder's name, then the account is
registered as a transfer recipient so payouts can be sent to it later.

Usage:
    from events.services import EventService

    result = EventService.resolve_bank_account("0123456789", "058")
    result.data.account_name  # "ADA LOVELACE"

    result = EventService.register_payout_account(
        event,
        account_number="0123456789",
        bank_code="058",
        bank_name="GTBank",
    )
    if result.success:
        result.data.recipient_code  # "RCP_xxx"

    EventService.get_donation_totals(event)
    # {"total_amount": Decimal("7500.00"), "total_donations": 2}
"""

from __future__ import annotations

from typing import Any

from django.conf import settings

from core.services import BaseService, ServiceResult
from events.models import Event
from payments.adapters import PaystackAdapter, ResolvedAccount
from payments.exceptions import PaystackInvalidRequestError
from payments.models import Donation


class EventService(BaseService):
    """Service for event payout configuration and chip-in totals."""

    # Paystack adapter - can be injected for testing
    _paystack_adapter: type | None = None

    @classmethod
    def get_paystack_adapter(cls) -> type:
        return cls._paystack_adapter or PaystackAdapter

    @classmethod
    def set_paystack_adapter(cls, adapter: type | None) -> None:
        cls._paystack_adapter = adapter

    @classmethod
    def resolve_bank_account(
        cls,
        account_number: str,
        bank_code: str,
    ) -> ServiceResult[ResolvedAccount]:
        """
        Look up the holder name of a bank account before it is registered.

        An account Paystack cannot resolve comes back as a failure result
        carrying Paystack's message.
        """
        try:
            account = cls.get_paystack_adapter().resolve_bank_account(
                account_number, bank_code
            )
        except PaystackInvalidRequestError as e:
            cls.get_logger().info(
                f"Bank account could not be resolved: {e.message}",
                extra={"bank_code": bank_code},
            )
            return ServiceResult.failure(e.message, error_code=e.error_code)
        return ServiceResult.success(account)

    @classmethod
    def register_payout_account(
        cls,
        event: Event,
        account_number: str,
        bank_code: str,
        bank_name: str = "",
    ) -> ServiceResult[Event]:
        """
        Resolve and store the host's payout account on the event.

        A rejected account number or bank code comes back as a failure
        result carrying Paystack's message. Availability problems and
        timeouts propagate as PaystackError.
        """
        adapter = cls.get_paystack_adapter()
        logger = cls.get_logger()

        try:
            account = adapter.resolve_bank_account(account_number, bank_code)
            recipient = adapter.create_transfer_recipient(
                name=account.account_name,
                account_number=account_number,
                bank_code=bank_code,
                currency=settings.CHIPIN_CURRENCY,
            )
        except PaystackInvalidRequestError as e:
            logger.warning(
                f"Payout account rejected for event {event.id}: {e.message}",
                extra={"event_id": str(event.id), "bank_code": bank_code},
            )
            return ServiceResult.failure(e.message, error_code=e.error_code)

        with cls.atomic():
            event.bank_account_name = account.account_name
            event.bank_account_number = account_number
            event.bank_code = bank_code
            event.bank_name = bank_name
            event.recipient_code = recipient.recipient_code
            event.save(
                update_fields=[
                    "bank_account_name",
                    "bank_account_number",
                    "bank_code",
                    "bank_name",
                    "recipient_code",
                    "updated_at",
                ]
            )

        logger.info(
            f"Registered payout account for event {event.id}",
            extra={"event_id": str(event.id), "recipient_code": recipient.recipient_code},
        )
        return ServiceResult.success(event)

    @classmethod
    def get_donation_totals(cls, event: Event) -> dict[str, Any]:
        """Sum and count of the event's completed chip-ins."""
        return Donation.objects.totals_for_event(event)
