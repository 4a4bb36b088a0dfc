"""
Event model with chip-in configuration.

Only the parts of an event the payment flows read are modelled here:
the title/slug/image/host used when formatting a confirmed donation,
the privacy flag and chip-in rules checked when a donation starts, and
the host's payout bank account.

Usage:
    from events.models import ChipInType, Event

    event = Event.objects.create(
        creator=user,
        title="Ada's Birthday",
        host_name="Ada Lovelace",
        host_email="ada@example.com",
        is_private=True,
        chip_in_type=ChipInType.DONATION,
        min_amount=Decimal("1000"),
    )
    event.slug  # "ada-s-birthday-3f9c"
"""

from __future__ import annotations

import re
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from core.models import BaseModel, UUIDPrimaryKeyMixin


def build_event_slug(title: str, creator_id) -> str:
    """
    Slug from the lowercased title plus the last 4 characters of the creator id.

    Runs of anything other than [a-z0-9] collapse to a single hyphen.
    """
    base = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return f"{base}-{str(creator_id)[-4:]}"


class ChipInType(models.TextChoices):
    """How guests contribute to an event."""

    FIXED = "fixed", "Fixed amount"
    TARGET = "target", "Target amount"
    DONATION = "donation", "Free donation (minimum)"


class Event(UUIDPrimaryKeyMixin, BaseModel):
    """
    An event guests can chip in to.

    Chip-ins are accepted only for private events with a chip_in_type.
    Amount fields are in major currency units.

    Fields:
        creator: User who created the event
        title / slug / image_url: Public identity used in formatted views
        host_name / host_email / host_photo: Host identity
        is_private: Only private events accept chip-ins
        chip_in_type: fixed, target or donation (blank = no chip-in)
        fixed_amount / target_amount / min_amount: Per-type amount rules
        bank_*: Host payout account; recipient_code is the Paystack
            transfer recipient created for it
    """

    # ==========================================================================
    # Identity
    # ==========================================================================

    creator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="events",
        help_text="User who created the event",
    )

    title = models.CharField(max_length=200)

    slug = models.SlugField(
        max_length=220,
        unique=True,
        editable=False,
        help_text="Set once on creation from the title and creator id",
    )

    image_url = models.URLField(blank=True)

    # ==========================================================================
    # Host
    # ==========================================================================

    host_name = models.CharField(max_length=200)
    host_email = models.EmailField()
    host_photo = models.URLField(blank=True)

    # ==========================================================================
    # Chip-in
    # ==========================================================================

    is_private = models.BooleanField(default=True)

    chip_in_type = models.CharField(
        max_length=20,
        choices=ChipInType.choices,
        blank=True,
        help_text="Blank when the event does not accept chip-ins",
    )
    fixed_amount = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )
    target_amount = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )
    min_amount = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )

    bank_account_name = models.CharField(max_length=200, blank=True)
    bank_account_number = models.CharField(max_length=20, blank=True)
    bank_name = models.CharField(max_length=100, blank=True)
    bank_code = models.CharField(max_length=20, blank=True)
    recipient_code = models.CharField(
        max_length=64,
        blank=True,
        help_text="Paystack transfer recipient code (RCP_xxx)",
    )

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Event({self.slug})"

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = build_event_slug(self.title, self.creator_id)
        super().save(*args, **kwargs)

    def clean(self):
        required = {
            ChipInType.FIXED: "fixed_amount",
            ChipInType.TARGET: "target_amount",
            ChipInType.DONATION: "min_amount",
        }
        field_name = required.get(self.chip_in_type)
        if field_name and getattr(self, field_name) is None:
            raise ValidationError(
                {field_name: f"Required for {self.chip_in_type} chip-in type"}
            )

    @property
    def accepts_chip_ins(self) -> bool:
        return self.is_private and bool(self.chip_in_type)

    def chip_in_amount_error(self, amount: Decimal) -> str | None:
        """
        Check an amount against this event's chip-in rules.

        Returns a user-facing message when the amount is not allowed,
        None otherwise. Target events accept any positive amount.
        """
        if self.chip_in_type == ChipInType.DONATION and self.min_amount is not None:
            if amount < self.min_amount:
                return f"Amount must be at least {self.min_amount}"
        if self.chip_in_type == ChipInType.FIXED and self.fixed_amount is not None:
            if amount != self.fixed_amount:
                return f"Amount must be exactly {self.fixed_amount}"
        return None
