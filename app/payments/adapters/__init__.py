"""
Payment adapters for external services.

All Paystack API calls go through PaystackAdapter so that timeouts, error
translation and logging are consistent.

Usage:
    from payments.adapters import PaystackAdapter

    verified = PaystackAdapter.verify_transaction("CHIP-IN_1700000000000_ab12cd34ef56ab78")
"""

from payments.adapters.paystack_adapter import (
    InitializedTransaction,
    Page,
    PaystackAdapter,
    ResolvedAccount,
    Settlement,
    SettlementTransaction,
    TransferRecipient,
    VerifiedTransaction,
)

__all__ = [
    "InitializedTransaction",
    "Page",
    "PaystackAdapter",
    "ResolvedAccount",
    "Settlement",
    "SettlementTransaction",
    "TransferRecipient",
    "VerifiedTransaction",
]
