"""
Tests for the Paystack webhook view.

Requests are signed with HMAC-SHA512 over the raw body using
settings.PAYSTACK_SECRET_KEY, as Paystack does.
"""

from __future__ import annotations

import hashlib
import hmac
import json

import pytest
from django.conf import settings
from django.test import RequestFactory
from django.urls import reverse

from payments.exceptions import (
    PaystackAPIUnavailableError,
    PaystackInvalidRequestError,
    PaystackTimeoutError,
)
from payments.models import Donation
from payments.state_machines import DonationStatus
from payments.tests.factories import build_verified_transaction
from payments.webhooks.views import paystack_webhook

# =============================================================================
# Helpers
# =============================================================================


def sign(body: bytes, secret: str | None = None) -> str:
    key = (secret or settings.PAYSTACK_SECRET_KEY).encode()
    return hmac.new(key, body, hashlib.sha512).hexdigest()


def charge_success_body(reference: str, **data) -> bytes:
    return json.dumps(
        {"event": "charge.success", "data": {"reference": reference, **data}}
    ).encode()


@pytest.fixture
def post_webhook():
    """POST a raw body to the webhook view, signed unless told otherwise."""
    factory = RequestFactory()
    url = reverse("payments:paystack-webhook")

    def _post(body: bytes, signature: str | None = "sign"):
        headers = {}
        if signature == "sign":
            signature = sign(body)
        if signature is not None:
            headers["HTTP_X_PAYSTACK_SIGNATURE"] = signature
        request = factory.post(url, data=body, content_type="application/json", **headers)
        return paystack_webhook(request)

    return _post


# =============================================================================
# Signature and Payload Tests
# =============================================================================


class TestWebhookSignature:
    """Tests for signature and payload checks."""

    def test_missing_signature(self, db, post_webhook, mock_paystack):
        """Should return 400 without the signature header."""
        response = post_webhook(charge_success_body("CHIP-IN_1_a"), signature=None)

        assert response.status_code == 400
        mock_paystack.verify_transaction.assert_not_called()

    def test_wrong_secret(self, db, post_webhook, mock_paystack):
        """Should return 400 when signed with another secret."""
        body = charge_success_body("CHIP-IN_1_a")

        response = post_webhook(body, signature=sign(body, secret="sk_test_other"))

        assert response.status_code == 400
        mock_paystack.verify_transaction.assert_not_called()

    def test_signature_over_raw_bytes(self, pending_donation, post_webhook, mock_paystack):
        """Should accept a signature over the exact bytes, whitespace included."""
        reference = pending_donation.payment_reference
        body = (
            b'{ "event" : "charge.success",\n  "data": {"reference": "'
            + reference.encode()
            + b'"} }'
        )
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            reference, pending_donation.expected_amount_minor
        )

        response = post_webhook(body)

        assert response.status_code == 200

    def test_reserialized_body_signature_rejected(self, db, post_webhook):
        """Should reject a signature computed over re-serialized JSON."""
        body = b'{ "event": "charge.success", "data": {"reference": "CHIP-IN_1_a"} }'
        reserialized = json.dumps(json.loads(body)).encode()

        response = post_webhook(body, signature=sign(reserialized))

        assert response.status_code == 400

    def test_invalid_json(self, db, post_webhook):
        """Should return 400 for a signed body that is not JSON."""
        response = post_webhook(b"not json")

        assert response.status_code == 400

    def test_non_object_json(self, db, post_webhook):
        """Should return 400 for a JSON body that is not an object."""
        response = post_webhook(b"[1, 2, 3]")

        assert response.status_code == 400

    def test_get_not_allowed(self, db):
        """Should only accept POST."""
        request = RequestFactory().get(reverse("payments:paystack-webhook"))

        assert paystack_webhook(request).status_code == 405


# =============================================================================
# Processing Tests
# =============================================================================


class TestWebhookProcessing:
    """Tests for charge.success processing and status codes."""

    def test_unsupported_event(self, db, post_webhook, mock_paystack):
        """Should return 400 for events other than charge.success."""
        body = json.dumps({"event": "transfer.success", "data": {}}).encode()

        response = post_webhook(body)

        assert response.status_code == 400
        mock_paystack.verify_transaction.assert_not_called()

    def test_completes_donation(self, pending_donation, post_webhook, mock_paystack):
        """Should complete the donation and return 200."""
        reference = pending_donation.payment_reference
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            reference, pending_donation.expected_amount_minor
        )

        response = post_webhook(charge_success_body(reference))

        pending_donation.refresh_from_db()
        assert response.status_code == 200
        assert pending_donation.status == DonationStatus.COMPLETED
        assert pending_donation.metadata == {
            "transactionId": reference,
            "gateway": "paystack",
            "gatewayResponse": "Successful",
        }

    def test_redelivery_returns_200(self, pending_donation, post_webhook, mock_paystack):
        """Should return 200 on redelivery and leave the donation unchanged."""
        reference = pending_donation.payment_reference
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            reference, pending_donation.expected_amount_minor
        )
        body = charge_success_body(reference)

        first = post_webhook(body)
        updated_at = Donation.objects.get(pk=pending_donation.pk).updated_at
        second = post_webhook(body)

        donation = Donation.objects.get(pk=pending_donation.pk)
        assert first.status_code == 200
        assert second.status_code == 200
        assert donation.status == DonationStatus.COMPLETED
        assert donation.updated_at == updated_at

    def test_amount_mismatch(self, pending_donation, post_webhook, mock_paystack):
        """Should return 400 and keep the donation pending on a short payment."""
        reference = pending_donation.payment_reference
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            reference, pending_donation.expected_amount_minor - 1000
        )

        response = post_webhook(charge_success_body(reference))

        pending_donation.refresh_from_db()
        assert response.status_code == 400
        assert pending_donation.status == DonationStatus.PENDING

    def test_unknown_payment_type(self, pending_donation, post_webhook, mock_paystack):
        """Should return 400 when metadata.type has no handler."""
        reference = pending_donation.payment_reference
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            reference, pending_donation.expected_amount_minor, payment_type="membership"
        )

        response = post_webhook(charge_success_body(reference))

        assert response.status_code == 400

    def test_unknown_reference(self, db, post_webhook, mock_paystack):
        """Should return 400 when no donation carries the reference."""
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            "CHIP-IN_1_unknown", 515000
        )

        response = post_webhook(charge_success_body("CHIP-IN_1_unknown"))

        assert response.status_code == 400

    def test_failed_transaction(self, pending_donation, post_webhook, mock_paystack):
        """Should return 400 and fail the donation when Paystack reports failure."""
        reference = pending_donation.payment_reference
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            reference,
            pending_donation.expected_amount_minor,
            status="failed",
            gateway_response="Declined",
        )

        response = post_webhook(charge_success_body(reference))

        pending_donation.refresh_from_db()
        assert response.status_code == 400
        assert pending_donation.status == DonationStatus.FAILED

    def test_ticket_payment_acknowledged(self, db, post_webhook, mock_paystack):
        """Should return 200 for a verified ticket payment."""
        mock_paystack.verify_transaction.return_value = build_verified_transaction(
            "TICKET_1", 200000, payment_type="ticket"
        )

        response = post_webhook(charge_success_body("TICKET_1"))

        assert response.status_code == 200

    @pytest.mark.parametrize(
        "error",
        [
            PaystackAPIUnavailableError("Payment gateway is unavailable", status_code=503),
            PaystackTimeoutError("Payment gateway timed out. Please retry."),
            PaystackInvalidRequestError("Transaction reference not found", status_code=400),
        ],
        ids=["unavailable", "timeout", "gateway-rejected"],
    )
    def test_gateway_errors_return_500(
        self, pending_donation, post_webhook, mock_paystack, error
    ):
        """Should return 500 so Paystack retries after a gateway failure."""
        mock_paystack.verify_transaction.side_effect = error

        response = post_webhook(charge_success_body(pending_donation.payment_reference))

        pending_donation.refresh_from_db()
        assert response.status_code == 500
        assert pending_donation.status == DonationStatus.PENDING

    def test_unexpected_error_returns_500(self, pending_donation, post_webhook, mock_paystack):
        """Should return 500 for errors outside the application hierarchy."""
        mock_paystack.verify_transaction.side_effect = RuntimeError("boom")

        response = post_webhook(charge_success_body(pending_donation.payment_reference))

        assert response.status_code == 500
