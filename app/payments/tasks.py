"""
Celery tasks for payment processing.

The tasks themselves live in payments.workers; this module re-exports them
so Celery autodiscovery finds them.

Usage:
    from payments.tasks import run_settlement_reconciliation

    run_settlement_reconciliation.delay()
"""

from payments.workers import run_settlement_reconciliation  # noqa: F401

__all__ = [
    "run_settlement_reconciliation",
]
