"""
Serializers for event endpoints.
"""

from rest_framework import serializers

from events.models import Event


class PayoutAccountRequestSerializer(serializers.Serializer):
    """Request body for registering a host payout account."""

    account_number = serializers.RegexField(r"^\d{10}$", help_text="10-digit NUBAN")
    bank_code = serializers.CharField(max_length=20)
    bank_name = serializers.CharField(max_length=100, required=False, allow_blank=True)


class PayoutAccountSerializer(serializers.ModelSerializer):
    """Payout account as stored on the event."""

    class Meta:
        model = Event
        fields = [
            "id",
            "bank_account_name",
            "bank_account_number",
            "bank_name",
            "bank_code",
            "recipient_code",
        ]
        read_only_fields = fields


class DonationTotalsSerializer(serializers.Serializer):
    """Completed chip-ins for an event."""

    total_amount = serializers.DecimalField(max_digits=None, decimal_places=2)
    total_donations = serializers.IntegerField()
