"""
DRF serializers for payments app.

This module provides serializers for:
- Chip-in requests and the checkout link response
- The confirmed donation view returned by verify-payment
- Bank account verification

Usage:
    serializer = ConfirmedDonationSerializer(donation)
    data = serializer.data
"""

from __future__ import annotations

from rest_framework import serializers

from events.models import Event
from payments.models import Donation


# =============================================================================
# Chip-in
# =============================================================================


class ChipInRequestSerializer(serializers.Serializer):
    """Request body for starting a chip-in."""

    event_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class ChipInResponseSerializer(serializers.Serializer):
    """Checkout link for a new chip-in."""

    payment_link = serializers.URLField()
    reference = serializers.CharField()


# =============================================================================
# Verify payment
# =============================================================================


class EventHostSerializer(serializers.Serializer):
    """Host identity shown with a confirmed donation."""

    name = serializers.CharField(source="host_name")
    email = serializers.EmailField(source="host_email")
    photo = serializers.SerializerMethodField()

    def get_photo(self, obj: Event) -> str | None:
        return obj.host_photo or None


class DonationEventSerializer(serializers.ModelSerializer):
    """The parts of an event a confirmed donation shows."""

    image = serializers.CharField(source="image_url")
    host = EventHostSerializer(source="*")

    class Meta:
        model = Event
        fields = ["id", "title", "slug", "image", "host"]


class ConfirmedDonationSerializer(serializers.ModelSerializer):
    """
    Donation as returned by verify-payment.

    Usage:
        donation = DonationLifecycleService.get_by_reference(reference)
        ConfirmedDonationSerializer(donation).data
    """

    event = DonationEventSerializer()
    user_id = serializers.CharField(read_only=True)

    class Meta:
        model = Donation
        fields = [
            "id",
            "event",
            "user_id",
            "amount",
            "currency",
            "fee",
            "status",
            "payout_status",
            "is_payout_eligible",
            "settled_at",
            "payment_reference",
            "metadata",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class VerifyPaymentResponseSerializer(serializers.Serializer):
    """Response body of verify-payment."""

    status = serializers.CharField()
    data = ConfirmedDonationSerializer(allow_null=True)
    payment_type = serializers.CharField()
    message = serializers.CharField()


# =============================================================================
# Bank accounts
# =============================================================================


class VerifyBankAccountRequestSerializer(serializers.Serializer):
    """Request body for resolving a bank account holder name."""

    account_number = serializers.RegexField(r"^\d{10}$", help_text="10-digit NUBAN")
    bank_code = serializers.CharField(max_length=20)


class BankAccountSerializer(serializers.Serializer):
    """Resolved bank account."""

    account_name = serializers.CharField()
    account_number = serializers.CharField()
