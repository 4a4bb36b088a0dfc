"""
State machine enums for payment models.
"""

from payments.state_machines.states import (
    DonationStatus,
    PaymentType,
    PayoutStatus,
    SettlementRunStatus,
)

__all__ = [
    "DonationStatus",
    "PaymentType",
    "PayoutStatus",
    "SettlementRunStatus",
]
