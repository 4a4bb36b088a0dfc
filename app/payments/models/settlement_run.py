"""
SettlementRun model: audit trail of settlement reconciliation runs.

Each run of SettlementReconciliationService creates a SettlementRun at the
start, fills in counters as it pages through Paystack, and marks it
completed or failed at the end.

Usage:
    from payments.models import SettlementRun

    SettlementRun.objects.filter(status=SettlementRunStatus.FAILED)[:10]
"""

from __future__ import annotations

from django.db import models

from core.models import BaseModel, UUIDPrimaryKeyMixin
from payments.state_machines import SettlementRunStatus


class SettlementRun(UUIDPrimaryKeyMixin, BaseModel):
    """
    Tracks one settlement reconciliation run.

    Fields:
        job_name: Checkpoint name the run belongs to
        window_from: Lower bound sent to Paystack as "from"
        started_at / completed_at: Run timing
        settlements_scanned / transactions_scanned: Paystack rows seen
        donations_reconciled: Donations flipped to payout-eligible
        status: running, completed or failed
        error_message: Failure description if the run failed
    """

    job_name = models.CharField(max_length=100, db_index=True)
    window_from = models.DateTimeField(
        help_text="Settlements created since this time were scanned",
    )

    started_at = models.DateTimeField()
    completed_at = models.DateTimeField(null=True, blank=True)

    settlements_scanned = models.PositiveIntegerField(default=0)
    transactions_scanned = models.PositiveIntegerField(default=0)
    donations_reconciled = models.PositiveIntegerField(default=0)

    status = models.CharField(
        max_length=20,
        choices=SettlementRunStatus.choices,
        default=SettlementRunStatus.RUNNING,
        db_index=True,
    )
    error_message = models.TextField(blank=True)

    class Meta:
        ordering = ["-started_at"]
        indexes = [
            models.Index(fields=["job_name", "started_at"], name="settlement_run_job_idx"),
        ]

    def __str__(self) -> str:
        return f"SettlementRun({self.id}, {self.status}, {self.started_at})"

    @property
    def duration_seconds(self) -> float | None:
        """Run duration in seconds, or None while running."""
        if self.completed_at and self.started_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None
