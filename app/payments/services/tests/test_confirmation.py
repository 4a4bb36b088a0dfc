"""
Tests for PaymentConfirmationService and payment type handlers.

Tests cover:
- Paystack verification before completion
- Unsuccessful and failed transactions
- Payment type dispatch (chipin, ticket, unknown)
- Webhook short-circuit for completed payments
- End-to-end ordering of webhook and verify-payment
"""

import pytest

from payments.exceptions import (
    AmountMismatchError,
    PaymentNotSuccessfulError,
    PaystackAPIUnavailableError,
    UnknownPaymentTypeError,
)
from payments.payment_types import (
    PAYMENT_TYPES,
    ChipInPaymentType,
    TicketPaymentType,
    get_payment_type,
)
from payments.services import PaymentConfirmationService
from payments.state_machines import DonationStatus
from payments.tests.factories import DonationFactory, build_verified_transaction


# =============================================================================
# Payment Type Registry Tests
# =============================================================================


class TestPaymentTypeRegistry:
    """Tests for the payment type handler registry."""

    def test_registered_types(self):
        """Should register chip-in and ticket handlers."""
        assert isinstance(PAYMENT_TYPES["chipin"], ChipInPaymentType)
        assert isinstance(PAYMENT_TYPES["ticket"], TicketPaymentType)

    @pytest.mark.parametrize("name", ["membership", "", None])
    def test_unknown_type_raises(self, name):
        """Should raise UnknownPaymentTypeError for unregistered types."""
        with pytest.raises(UnknownPaymentTypeError):
            get_payment_type(name)

    def test_unknown_type_is_client_error(self):
        """Should surface as a 400."""
        assert UnknownPaymentTypeError("Invalid payment type").http_status == 400


# =============================================================================
# Confirmation Tests
# =============================================================================


class TestConfirmChipIn:
    """Tests for confirming chip-in payments."""

    def test_verifies_then_completes(self, pending_donation, mock_paystack):
        """Should verify with Paystack and complete the donation."""
        reference = pending_donation.payment_reference
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            reference, 515000
        )

        outcome = PaymentConfirmationService.confirm(reference)

        mock_paystack.verify_transaction.assert_called_once_with(reference)
        assert outcome.payment_type == "chipin"
        assert outcome.already_completed is False
        assert outcome.record.status == DonationStatus.COMPLETED

    def test_amount_mismatch(self, pending_donation, mock_paystack):
        """Should reject 514000 for a 5000 donation (expects 515000)."""
        reference = pending_donation.payment_reference
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            reference, 514000
        )

        with pytest.raises(AmountMismatchError):
            PaymentConfirmationService.confirm(reference)

        pending_donation.refresh_from_db()
        assert pending_donation.status == DonationStatus.PENDING

    def test_abandoned_transaction_not_successful(self, pending_donation, mock_paystack):
        """Should raise PaymentNotSuccessfulError and keep the donation pending."""
        reference = pending_donation.payment_reference
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            reference, 515000, status="abandoned"
        )

        with pytest.raises(PaymentNotSuccessfulError):
            PaymentConfirmationService.confirm(reference)

        pending_donation.refresh_from_db()
        assert pending_donation.status == DonationStatus.PENDING

    def test_failed_transaction_fails_donation(self, pending_donation, mock_paystack):
        """Should mark the donation failed when Paystack reports failure."""
        reference = pending_donation.payment_reference
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            reference, 515000, status="failed", gateway_response="Declined"
        )

        with pytest.raises(PaymentNotSuccessfulError):
            PaymentConfirmationService.confirm(reference)

        pending_donation.refresh_from_db()
        assert pending_donation.status == DonationStatus.FAILED
        assert pending_donation.metadata["gatewayResponse"] == "Declined"

    def test_unknown_payment_type(self, pending_donation, mock_paystack):
        """Should raise UnknownPaymentTypeError for an unregistered type."""
        reference = pending_donation.payment_reference
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            reference, 515000, payment_type="membership"
        )

        with pytest.raises(UnknownPaymentTypeError):
            PaymentConfirmationService.confirm(reference)

    def test_gateway_error_propagates(self, pending_donation, mock_paystack):
        """Should let Paystack errors propagate untouched."""
        mock_paystack.verify_transaction.side_effect = PaystackAPIUnavailableError(
            "Service unavailable", status_code=503
        )

        with pytest.raises(PaystackAPIUnavailableError):
            PaymentConfirmationService.confirm(pending_donation.payment_reference)

    def test_skip_completed_short_circuits(self, completed_donation, mock_paystack):
        """Should return without re-running completion when asked to skip."""
        reference = completed_donation.payment_reference
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            reference, completed_donation.expected_amount_minor
        )

        outcome = PaymentConfirmationService.confirm(reference, skip_completed=True)

        assert outcome.already_completed is True
        assert outcome.record is None

    def test_completed_donation_returned_without_skip(self, completed_donation, mock_paystack):
        """Should return the completed donation for the verify-payment path."""
        reference = completed_donation.payment_reference
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            reference, completed_donation.expected_amount_minor
        )

        outcome = PaymentConfirmationService.confirm(reference)

        assert outcome.already_completed is True
        assert outcome.record.pk == completed_donation.pk


class TestConfirmTicket:
    """Tests for confirming ticket payments."""

    def test_ticket_acknowledged(self, db, mock_paystack):
        """Should acknowledge a ticket payment without a local record."""
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            "TICKET_1", 250000, payment_type="ticket"
        )

        outcome = PaymentConfirmationService.confirm("TICKET_1")

        assert outcome.payment_type == "ticket"
        assert outcome.record is None


# =============================================================================
# End-to-end Ordering
# =============================================================================


class TestWebhookThenVerify:
    """Webhook arrives first, then the client verifies."""

    def test_verify_returns_completed_record(self, db, mock_paystack):
        """Should complete once and hand the same record to verify-payment."""
        donation = DonationFactory(payment_reference="CHIP-IN_1000_abc")
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            "CHIP-IN_1000_abc", 515000
        )

        webhook = PaymentConfirmationService.confirm("CHIP-IN_1000_abc", skip_completed=True)
        donation.refresh_from_db()
        completed_at = donation.updated_at
        metadata = donation.metadata

        verify = PaymentConfirmationService.confirm("CHIP-IN_1000_abc")

        assert webhook.already_completed is False
        assert verify.already_completed is True
        assert verify.record.status == DonationStatus.COMPLETED
        assert verify.record.updated_at == completed_at
        assert verify.record.metadata == metadata
