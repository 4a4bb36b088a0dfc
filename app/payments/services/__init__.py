"""
Payment services.

This module provides:
- DonationLifecycleService: Chip-in creation and donation state changes
- PaymentConfirmationService: Shared webhook / verify-payment confirmation
- SettlementReconciliationService: Marks settled donations payout-eligible

Usage:
    from payments.services import DonationLifecycleService

    result = DonationLifecycleService.initiate_chip_in(
        user=request.user,
        event_id=event_id,
        amount=Decimal("5000"),
    )

    # Confirm a transaction (webhook and verify-payment)
    from payments.services import PaymentConfirmationService

    outcome = PaymentConfirmationService.confirm(reference)

    # Reconcile settlements (normally via celery-beat)
    from payments.services import SettlementReconciliationService

    result = SettlementReconciliationService.run()
"""

from payments.services.lifecycle import (
    ChipInResult,
    DonationLifecycleService,
    generate_chip_in_reference,
)
from payments.services.confirmation import PaymentConfirmationService
from payments.services.settlement_reconciliation import (
    DEFAULT_JOB_NAME,
    SettlementReconciliationResult,
    SettlementReconciliationService,
)

__all__ = [
    # Lifecycle
    "ChipInResult",
    "DonationLifecycleService",
    "generate_chip_in_reference",
    # Confirmation
    "PaymentConfirmationService",
    # Settlement reconciliation
    "DEFAULT_JOB_NAME",
    "SettlementReconciliationResult",
    "SettlementReconciliationService",
]
