"""
Payments app configuration.

This app provides chip-in payment infrastructure including:
- Donation lifecycle over Paystack
- Webhook and verify-payment confirmation
- Scheduled settlement reconciliation
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
