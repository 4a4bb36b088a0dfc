"""
Abstract models shared by the events and payments apps.

    BaseModel            created_at / updated_at timestamps
    UUIDPrimaryKeyMixin  UUID4 primary key

Usage:
    from core.models import BaseModel, UUIDPrimaryKeyMixin

    class Donation(UUIDPrimaryKeyMixin, BaseModel):
        amount = models.DecimalField(max_digits=12, decimal_places=2)

List the mixin before BaseModel so its id field wins.
"""

from __future__ import annotations

import uuid

from django.db import models


class BaseModel(models.Model):
    """
    Abstract model with creation and modification timestamps.

    QuerySet.update() skips auto_now; conditional updates in the payments
    app pass updated_at themselves.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="Timestamp when this record was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Timestamp when this record was last modified",
    )

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(pk={self.pk})"


class UUIDPrimaryKeyMixin(models.Model):
    """UUID4 primary key; ids end up in Paystack metadata, so they must not be sequential."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier (UUID4)",
    )

    class Meta:
        abstract = True
