"""
Payment domain models.

- Donation: Chip-in payment with lifecycle and payout tracking
- JobCheckpoint: Last successful run per batch job
- SettlementRun: Audit trail of settlement reconciliation runs
"""

from payments.models.donation import PAYSTACK_GATEWAY, Donation, DonationQuerySet
from payments.models.job_checkpoint import JobCheckpoint
from payments.models.settlement_run import SettlementRun

__all__ = [
    "PAYSTACK_GATEWAY",
    "Donation",
    "DonationQuerySet",
    "JobCheckpoint",
    "SettlementRun",
]
