"""
Factory Boy factories for payment test data.

Usage:
    from payments.tests.factories import DonationFactory

    donation = DonationFactory()                          # pending, amount 5000
    donation = DonationFactory(status=DonationStatus.COMPLETED)
    donation = DonationFactory(payment_reference="CHIP-IN_1000_abc")
"""

from __future__ import annotations

from decimal import Decimal

import factory

from events.tests.factories import EventFactory, UserFactory
from payments.adapters import Page, Settlement, SettlementTransaction, VerifiedTransaction
from payments.models import PAYSTACK_GATEWAY, Donation, JobCheckpoint
from payments.state_machines import DonationStatus


class DonationFactory(factory.django.DjangoModelFactory):
    """
    Factory for creating Donation instances.

    The fee is left to Donation.save(), so it follows the configured rate.
    """

    class Meta:
        model = Donation

    event = factory.SubFactory(EventFactory)
    user = factory.SubFactory(UserFactory)
    amount = Decimal("5000.00")
    status = DonationStatus.PENDING
    payment_reference = factory.Sequence(lambda n: f"CHIP-IN_1700000000{n:03d}_{n:016x}")
    metadata = factory.LazyFunction(dict)


class CompletedDonationFactory(DonationFactory):
    """Donation completed through Paystack, not yet settled."""

    status = DonationStatus.COMPLETED
    metadata = factory.LazyAttribute(
        lambda o: {
            "transactionId": o.payment_reference,
            "gateway": PAYSTACK_GATEWAY,
            "gatewayResponse": "Successful",
        }
    )


class JobCheckpointFactory(factory.django.DjangoModelFactory):
    """Factory for creating JobCheckpoint instances."""

    class Meta:
        model = JobCheckpoint
        django_get_or_create = ("name",)

    name = "paystack_settlement_reconcile"
    last_run_at = None


def build_verified_transaction(
    reference: str,
    amount_minor: int,
    status: str = "success",
    payment_type: str | None = "chipin",
    gateway_response: str = "Successful",
) -> VerifiedTransaction:
    """VerifiedTransaction as PaystackAdapter.verify_transaction returns it."""
    metadata = {"type": payment_type} if payment_type else {}
    return VerifiedTransaction(
        reference=reference,
        status=status,
        amount_minor=amount_minor,
        gateway_response=gateway_response,
        metadata=metadata,
        currency="NGN",
    )


def build_page(items: list, page: int = 1, has_more: bool = False) -> Page:
    """One page of a Paystack list endpoint."""
    return Page(items=items, page=page, has_more=has_more)


def build_settlements(count: int, start: int = 1) -> list[Settlement]:
    return [Settlement(id=start + i, status="success") for i in range(count)]


def build_settlement_transactions(references: list[str]) -> list[SettlementTransaction]:
    return [SettlementTransaction(reference=reference) for reference in references]
