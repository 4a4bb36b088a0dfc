"""
Workers for async payment processing.

This module contains Celery tasks for background payment operations:
- SettlementWorker: Reconciles Paystack settlements against donations

Usage:
    from payments.workers import run_settlement_reconciliation

    # Trigger a run outside the beat schedule
    run_settlement_reconciliation.delay()
"""

from payments.workers.settlement_worker import run_settlement_reconciliation

__all__ = [
    "run_settlement_reconciliation",
]
