"""
Donation model for chip-in payments.

A Donation is created PENDING with a fresh payment reference when a guest
chips in to a private event. It is completed exactly once, by whichever of
the Paystack webhook or the verify-payment endpoint arrives first, and is
later marked payout-eligible by settlement reconciliation.

Every state change that can race goes through a conditional UPDATE on the
DonationQuerySet, never through read-modify-save.

Usage:
    from payments.models import Donation

    donation = Donation.objects.create(
        event=event,
        user=user,
        amount=Decimal("5000"),
        payment_reference="CHIP-IN_1700000000000_ab12cd34ef56ab78",
    )
    donation.fee                    # Decimal("150.00"), set once on insert
    donation.expected_amount_minor  # 515000

    # Conditional completion; returns rows affected (0 or 1)
    Donation.objects.complete_pending(reference, metadata={...})

    # Settlement reconciliation; one UPDATE for a whole page of references
    Donation.objects.mark_payout_eligible(references, settled_at=now)
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models
from django.db.models import Count, Q, Sum
from django.utils import timezone

from django_fsm import FSMField, transition

from core.models import BaseModel, UUIDPrimaryKeyMixin
from payments.fees import calculate_fee, to_minor_units
from payments.state_machines import DonationStatus, PayoutStatus

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime
    from typing import Any


PAYSTACK_GATEWAY = "paystack"
REFUND_WINDOW_DAYS = 30


# =============================================================================
# QuerySet
# =============================================================================


class DonationQuerySet(models.QuerySet):
    """
    Conditional bulk writes for Donation.

    QuerySet.update() bypasses auto_now, so each write sets updated_at.
    """

    def complete_pending(self, reference: str, metadata: dict[str, Any]) -> int:
        """
        PENDING -> COMPLETED for one reference, as a single guarded UPDATE.

        Returns the number of rows changed. Zero means the donation does
        not exist or has already left PENDING.
        """
        return self.filter(
            payment_reference=reference,
            status=DonationStatus.PENDING,
        ).update(
            status=DonationStatus.COMPLETED,
            metadata=metadata,
            updated_at=timezone.now(),
        )

    def fail_pending(self, reference: str, metadata: dict[str, Any]) -> int:
        """PENDING -> FAILED for one reference, as a single guarded UPDATE."""
        return self.filter(
            payment_reference=reference,
            status=DonationStatus.PENDING,
        ).update(
            status=DonationStatus.FAILED,
            metadata=metadata,
            updated_at=timezone.now(),
        )

    def payout_candidates(
        self,
        references: Iterable[str],
        gateway: str = PAYSTACK_GATEWAY,
    ) -> DonationQuerySet:
        """
        Completed donations among references that are not yet payout-eligible.

        Pending donations are never matched; settlement data does not
        complete a donation.
        """
        return self.filter(
            payment_reference__in=list(references),
            metadata__gateway=gateway,
            is_payout_eligible=False,
            payout_status=PayoutStatus.PENDING,
            status=DonationStatus.COMPLETED,
        )

    def mark_payout_eligible(
        self,
        references: Iterable[str],
        settled_at: datetime,
        gateway: str = PAYSTACK_GATEWAY,
    ) -> int:
        """Flag settled donations payout-eligible in one UPDATE; returns the count."""
        return self.payout_candidates(references, gateway).update(
            is_payout_eligible=True,
            settled_at=settled_at,
            updated_at=timezone.now(),
        )

    def totals_for_event(self, event) -> dict[str, Any]:
        """Sum and count of completed donations for an event."""
        totals = self.filter(event=event, status=DonationStatus.COMPLETED).aggregate(
            total_amount=Sum("amount"),
            total_donations=Count("id"),
        )
        totals["total_amount"] = totals["total_amount"] or Decimal("0")
        return totals


# =============================================================================
# Model
# =============================================================================


def _is_refundable(instance: Donation) -> bool:
    return instance.is_refundable


class Donation(UUIDPrimaryKeyMixin, BaseModel):
    """
    A guest's chip-in towards a private event.

    State Flow:
        PENDING -> COMPLETED (conditional update, exactly once)
        PENDING -> FAILED
        COMPLETED -> REFUNDED (only while is_refundable)

    Fields:
        event / user: Who chipped in to what
        amount: Chip-in amount in major units (positive)
        currency: Always NGN
        fee: Set once on insert from calculate_fee(), never recomputed
        status: Donation status (django-fsm field)
        payout_status: Host payout status of these funds
        is_payout_eligible: True once a Paystack settlement included it
        settled_at: When reconciliation saw it in a settlement
        payment_reference: Paystack reference (unique once assigned)
        metadata: {"transactionId", "gateway", "gatewayResponse"}

    Note:
        status is not protected because completion and reconciliation
        write it through QuerySet.update(); the FSM transitions cover the
        instance-level change (refund).
    """

    # ==========================================================================
    # Relationships
    # ==========================================================================

    event = models.ForeignKey(
        "events.Event",
        on_delete=models.PROTECT,
        related_name="donations",
        help_text="Event this donation chips in to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="donations",
        help_text="User who made the donation",
    )

    # ==========================================================================
    # Amount & Currency
    # ==========================================================================

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Chip-in amount in major currency units",
    )

    currency = models.CharField(
        max_length=3,
        choices=[("NGN", "Nigerian Naira")],
        default="NGN",
    )

    fee = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        editable=False,
        help_text="Transaction fee, computed once at creation",
    )

    # ==========================================================================
    # State
    # ==========================================================================

    status = FSMField(
        default=DonationStatus.PENDING,
        choices=DonationStatus.choices,
        db_index=True,
        help_text="Current state of the donation (managed by FSM)",
    )

    payout_status = models.CharField(
        max_length=20,
        choices=PayoutStatus.choices,
        default=PayoutStatus.PENDING,
    )

    is_payout_eligible = models.BooleanField(default=False)

    settled_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When a Paystack settlement including this donation was reconciled",
    )

    # ==========================================================================
    # Gateway
    # ==========================================================================

    payment_reference = models.CharField(
        max_length=100,
        unique=True,
        null=True,
        blank=True,
        help_text="Paystack transaction reference (CHIP-IN_<ms>_<hex>)",
    )

    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="transactionId, gateway and gatewayResponse from completion",
    )

    objects = DonationQuerySet.as_manager()

    # ==========================================================================
    # Meta & Methods
    # ==========================================================================

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["event", "user"], name="donation_event_user_idx"),
            models.Index(fields=["payout_status", "status"], name="donation_payout_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="donation_amount_positive",
            ),
            models.CheckConstraint(
                condition=Q(fee__gte=0),
                name="donation_fee_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(is_payout_eligible=False)
                | Q(status__in=[DonationStatus.COMPLETED, DonationStatus.REFUNDED]),
                name="donation_payout_eligible_requires_completed",
            ),
        ]

    def __str__(self) -> str:
        return f"Donation({self.payment_reference}, {self.status}, {self.amount} {self.currency})"

    def save(self, *args, **kwargs):
        if self._state.adding and self.fee is None:
            self.fee = calculate_fee(self.amount)
        super().save(*args, **kwargs)

    @property
    def expected_amount_minor(self) -> int:
        """What Paystack should report for this donation, in kobo."""
        return to_minor_units(self.amount + self.fee)

    @property
    def is_refundable(self) -> bool:
        """Completed and created within the refund window."""
        if self.status != DonationStatus.COMPLETED or self.created_at is None:
            return False
        return self.created_at >= timezone.now() - timedelta(days=REFUND_WINDOW_DAYS)

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=DonationStatus.COMPLETED,
        target=DonationStatus.REFUNDED,
        conditions=[_is_refundable],
    )
    def refund(self):
        """
        Mark the donation refunded.

        Transition: COMPLETED -> REFUNDED (only while is_refundable)
        """
