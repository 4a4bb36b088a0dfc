"""
Settlement reconciliation worker.

Tasks:
- run_settlement_reconciliation: Periodic task marking settled donations
  payout-eligible

Scheduled hourly by the django-celery-beat PeriodicTask created in
payments/migrations/0002_settlement_reconcile_schedule.py. The interval
can be changed from the admin without a deploy.

Usage:
    from payments.workers import run_settlement_reconciliation

    run_settlement_reconciliation.delay()
    run_settlement_reconciliation.delay(lookback_days=7)
"""

from __future__ import annotations

import logging

from celery import shared_task

from payments.exceptions import ReconciliationError

logger = logging.getLogger(__name__)


# =============================================================================
# Periodic Task: Settlement Reconciliation
# =============================================================================


@shared_task(bind=True)
def run_settlement_reconciliation(
    self,
    lookback_days: int | None = None,
    job_name: str | None = None,
) -> dict:
    """
    Run one settlement reconciliation pass.

    Args:
        lookback_days: Window used when the job has no checkpoint yet
            (default: SETTLEMENT_LOOKBACK_DAYS)
        job_name: Checkpoint name (default: "paystack_settlement_reconcile")

    Returns:
        Dict with:
        - status: "completed" or "failed"
        - run_id: UUID of the SettlementRun
        - settlements_scanned / transactions_scanned: Paystack rows seen
        - total_reconciled: Donations marked payout-eligible
        - error / error_code: Present when the run failed

    Note:
        A failed run is not retried here. The checkpoint did not move, so
        the next scheduled run covers the same window.
    """
    from payments.services import DEFAULT_JOB_NAME, SettlementReconciliationService

    job_name = job_name or DEFAULT_JOB_NAME
    logger.info(
        "Starting scheduled settlement reconciliation",
        extra={"job_name": job_name, "task_id": self.request.id},
    )

    try:
        result = SettlementReconciliationService.run(
            job_name=job_name,
            lookback_days=lookback_days,
        )
    except ReconciliationError as e:
        # Already logged with its cause by the service
        return {
            "status": "failed",
            "run_id": e.details.get("run_id"),
            "error": e.message,
            "error_code": e.error_code,
        }
    except Exception as e:
        logger.exception(
            f"Unexpected error during settlement reconciliation: {e}",
            extra={"job_name": job_name},
        )
        return {
            "status": "failed",
            "error": str(e),
            "error_code": "UNEXPECTED_ERROR",
        }

    return {
        "status": "completed",
        "run_id": str(result.run_id),
        "window_from": result.window_from.isoformat(),
        "settlements_scanned": result.settlements_scanned,
        "transactions_scanned": result.transactions_scanned,
        "total_reconciled": result.total_reconciled,
    }
