"""
JobCheckpoint model recording the last successful run of a batch job.

The settlement reconciliation job reads its checkpoint before a run and
writes it only after the run finishes cleanly, so a failed run leaves the
window to be scanned again.

Usage:
    from payments.models import JobCheckpoint

    since = JobCheckpoint.objects.get_last_run("paystack_settlement_reconcile")
    ...
    JobCheckpoint.objects.record_run("paystack_settlement_reconcile", started_at)
"""

from __future__ import annotations

from datetime import datetime

from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.models import BaseModel


class JobCheckpointManager(models.Manager):
    """Read and upsert checkpoints by job name."""

    def get_last_run(self, name: str) -> datetime | None:
        """Last successful run time, or None if the job never completed."""
        return self.filter(name=name).values_list("last_run_at", flat=True).first()

    def record_run(self, name: str, run_at: datetime) -> JobCheckpoint:
        """
        Upsert the checkpoint for name.

        The timestamp only moves forward: recording an earlier run_at than
        the stored one leaves the checkpoint unchanged.
        """
        checkpoint, _ = self.get_or_create(name=name)
        self.filter(pk=checkpoint.pk).filter(
            Q(last_run_at__isnull=True) | Q(last_run_at__lt=run_at)
        ).update(last_run_at=run_at, updated_at=timezone.now())
        checkpoint.refresh_from_db()
        return checkpoint


class JobCheckpoint(BaseModel):
    """
    Last successful run time per named batch job.

    Fields:
        name: Job name (unique)
        last_run_at: Start time of the last run that completed successfully
    """

    name = models.CharField(max_length=100, unique=True)
    last_run_at = models.DateTimeField(null=True, blank=True)

    objects = JobCheckpointManager()

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return f"JobCheckpoint({self.name}, {self.last_run_at})"
