"""
State enums for payment models.

These are Django TextChoices for database storage and admin integration.
DonationStatus drives the django-fsm field on Donation.

State Machines Overview:

Donation status:
    pending → completed → refunded
    pending → failed

Donation payout status (advanced by payout processing, not by this app):
    pending → paid
    pending → failed

Settlement run status:
    running → completed
    running → failed
"""

from django.db import models


class DonationStatus(models.TextChoices):
    """
    States for the Donation lifecycle.

    Status only moves forward; nothing returns a donation to PENDING.
    Payout eligibility is tracked separately and never changes status.

    State Flow:
        PENDING → COMPLETED (webhook or verify-payment, exactly once)
        PENDING → FAILED (gateway reports a definitive failure)
        COMPLETED → REFUNDED (only while refundable)
    """

    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    REFUNDED = "refunded", "Refunded"
    FAILED = "failed", "Failed"


class PayoutStatus(models.TextChoices):
    """Payout status of a donation's funds to the event host."""

    PENDING = "pending", "Pending"
    PAID = "paid", "Paid"
    FAILED = "failed", "Failed"


class SettlementRunStatus(models.TextChoices):
    """Status of a settlement reconciliation run."""

    RUNNING = "running", "Running"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"


class PaymentType(models.TextChoices):
    """
    Payment type carried in gateway transaction metadata ("type").

    Each value maps to a handler in payments.payment_types.
    """

    CHIPIN = "chipin", "Chip-in"
    TICKET = "ticket", "Ticket"


__all__ = [
    "DonationStatus",
    "PayoutStatus",
    "SettlementRunStatus",
    "PaymentType",
]
