"""
Settlement reconciliation: mark settled donations payout-eligible.

Paystack pays completed transactions out to the merchant account in
settlement batches on its own schedule. This service walks those batches
and flags the matching local donations as payout-eligible.

Algorithm:
    1. window_from = checkpoint.last_run_at, or now - lookback_days
    2. page through successful settlements since window_from
    3. page through each settlement's transactions
    4. per transaction page, one UPDATE over the completed donations whose
       reference is on the page and that are not yet payout-eligible
    5. on full success, advance the checkpoint to the run's start time

Failure Semantics:
    Any error aborts the run. The SettlementRun is marked failed, the
    checkpoint is left alone and ReconciliationError is raised. The next
    run re-scans the same window; donations already flagged do not match
    the step 4 filter, so the re-scan changes nothing it already did.

Usage:
    from payments.services import SettlementReconciliationService

    result = SettlementReconciliationService.run()
    result.total_reconciled
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from django.conf import settings
from django.utils import timezone

from core.services import BaseService
from payments.adapters import PaystackAdapter
from payments.exceptions import ReconciliationError
from payments.models import PAYSTACK_GATEWAY, Donation, JobCheckpoint, SettlementRun
from payments.state_machines import SettlementRunStatus

if TYPE_CHECKING:
    import uuid

    from payments.adapters import Settlement


DEFAULT_JOB_NAME = "paystack_settlement_reconcile"


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class SettlementReconciliationResult:
    """Summary of a successful reconciliation run."""

    run_id: uuid.UUID
    job_name: str
    window_from: datetime
    started_at: datetime
    settlements_scanned: int
    transactions_scanned: int
    total_reconciled: int


# =============================================================================
# Service
# =============================================================================


class SettlementReconciliationService(BaseService):
    """
    Reconciles Paystack settlements against completed donations.

    Runs are expected not to overlap; celery-beat schedules a single
    instance per interval.
    """

    # Paystack adapter - can be injected for testing
    _paystack_adapter: type | None = None

    @classmethod
    def get_paystack_adapter(cls) -> type:
        return cls._paystack_adapter or PaystackAdapter

    @classmethod
    def set_paystack_adapter(cls, adapter: type | None) -> None:
        cls._paystack_adapter = adapter

    @classmethod
    def run(
        cls,
        job_name: str = DEFAULT_JOB_NAME,
        lookback_days: int | None = None,
        now: datetime | None = None,
    ) -> SettlementReconciliationResult:
        """
        Run one reconciliation pass.

        Args:
            job_name: Checkpoint name
            lookback_days: Window used when there is no checkpoint yet
                (default: SETTLEMENT_LOOKBACK_DAYS)
            now: Run start time (default: timezone.now())

        Returns:
            SettlementReconciliationResult with counters

        Raises:
            ReconciliationError: The run failed; the cause is chained
        """
        logger = cls.get_logger()
        now = now or timezone.now()
        if lookback_days is None:
            lookback_days = settings.SETTLEMENT_LOOKBACK_DAYS

        last_run_at = JobCheckpoint.objects.get_last_run(job_name)
        window_from = last_run_at or now - timedelta(days=lookback_days)

        run = SettlementRun.objects.create(
            job_name=job_name,
            window_from=window_from,
            started_at=now,
        )
        log_context = {
            "run_id": str(run.id),
            "job_name": job_name,
            "window_from": window_from.isoformat(),
        }
        logger.info("Starting settlement reconciliation", extra=log_context)

        try:
            cls._scan_settlements(run, settled_at=now)
        except Exception as e:
            run.status = SettlementRunStatus.FAILED
            run.error_message = str(e)
            run.completed_at = timezone.now()
            run.save()
            logger.error(
                f"Settlement reconciliation failed: {e}",
                extra={
                    **log_context,
                    "settlements_scanned": run.settlements_scanned,
                    "total_reconciled": run.donations_reconciled,
                },
                exc_info=True,
            )
            raise ReconciliationError(
                f"Settlement reconciliation failed: {e}",
                details={"run_id": str(run.id), "job_name": job_name},
            ) from e

        with cls.atomic():
            run.status = SettlementRunStatus.COMPLETED
            run.completed_at = timezone.now()
            run.save()
            JobCheckpoint.objects.record_run(job_name, now)

        logger.info(
            "Settlement reconciliation completed",
            extra={
                **log_context,
                "settlements_scanned": run.settlements_scanned,
                "transactions_scanned": run.transactions_scanned,
                "total_reconciled": run.donations_reconciled,
                "duration_seconds": run.duration_seconds,
            },
        )
        return SettlementReconciliationResult(
            run_id=run.id,
            job_name=job_name,
            window_from=window_from,
            started_at=now,
            settlements_scanned=run.settlements_scanned,
            transactions_scanned=run.transactions_scanned,
            total_reconciled=run.donations_reconciled,
        )

    # =========================================================================
    # Internal
    # =========================================================================

    @classmethod
    def _scan_settlements(cls, run: SettlementRun, settled_at: datetime) -> None:
        """Walk settlement pages in the order Paystack returns them."""
        adapter = cls.get_paystack_adapter()
        per_page = settings.SETTLEMENT_PAGE_SIZE
        page_number = 1

        while True:
            page = adapter.list_settlements(
                from_date=run.window_from,
                page=page_number,
                per_page=per_page,
                status="success",
            )

            for settlement in page.items:
                cls._reconcile_settlement(run, settlement, settled_at)
                run.settlements_scanned += 1

            run.save(
                update_fields=[
                    "settlements_scanned",
                    "transactions_scanned",
                    "donations_reconciled",
                    "updated_at",
                ]
            )
            cls.get_logger().info(
                f"Processed settlement page {page_number}",
                extra={
                    "run_id": str(run.id),
                    "page": page_number,
                    "settlements": len(page.items),
                    "total_reconciled": run.donations_reconciled,
                },
            )

            if not page.has_more:
                break
            page_number += 1

    @classmethod
    def _reconcile_settlement(
        cls,
        run: SettlementRun,
        settlement: Settlement,
        settled_at: datetime,
    ) -> None:
        """Flag the donations in one settlement, one UPDATE per transaction page."""
        adapter = cls.get_paystack_adapter()
        per_page = settings.SETTLEMENT_TRANSACTION_PAGE_SIZE
        page_number = 1

        while True:
            page = adapter.list_settlement_transactions(
                settlement_id=settlement.id,
                page=page_number,
                per_page=per_page,
            )
            references = [txn.reference for txn in page.items]
            run.transactions_scanned += len(references)

            if references:
                reconciled = Donation.objects.mark_payout_eligible(
                    references,
                    settled_at=settled_at,
                    gateway=PAYSTACK_GATEWAY,
                )
                run.donations_reconciled += reconciled
                if reconciled:
                    cls.get_logger().debug(
                        f"Marked {reconciled} donations payout-eligible",
                        extra={
                            "run_id": str(run.id),
                            "settlement_id": settlement.id,
                            "page": page_number,
                        },
                    )

            if not page.has_more:
                break
            page_number += 1
