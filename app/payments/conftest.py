"""
Pytest fixtures for payment tests.

Shared by payments/tests and the nested tests packages (adapters,
services, webhooks, workers).

Usage:
    def test_completion(pending_donation, mock_paystack):
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            pending_donation.payment_reference,
            pending_donation.expected_amount_minor,
        )
"""

import pytest

from events.services import EventService
from events.tests.factories import EventFactory
from payments.services import (
    DonationLifecycleService,
    PaymentConfirmationService,
    SettlementReconciliationService,
)
from payments.tests.factories import CompletedDonationFactory, DonationFactory

PAYSTACK_CONSUMERS = (
    EventService,
    DonationLifecycleService,
    PaymentConfirmationService,
    SettlementReconciliationService,
)


# =============================================================================
# Paystack
# =============================================================================


@pytest.fixture
def mock_paystack(mocker):
    """
    Inject a mocked Paystack adapter into every payment service.

    Only the Paystack calls are mocked; signature verification in the
    webhook view still uses the real adapter.
    """
    adapter = mocker.MagicMock(name="PaystackAdapter")
    for service in PAYSTACK_CONSUMERS:
        service.set_paystack_adapter(adapter)
    yield adapter
    for service in PAYSTACK_CONSUMERS:
        service.set_paystack_adapter(None)


# =============================================================================
# Event and Donation Fixtures
# =============================================================================


@pytest.fixture
def event(db):
    """Private event taking free donations of at least 1000."""
    return EventFactory()


@pytest.fixture
def pending_donation(db, event, user):
    """Pending 5000 donation (fee 150, expected 515000 kobo)."""
    return DonationFactory(event=event, user=user)


@pytest.fixture
def completed_donation(db, event, user):
    """Completed donation not yet settled."""
    return CompletedDonationFactory(event=event, user=user)
