"""
Payments app for Paystack chip-ins and settlement reconciliation.

This app handles:
- Chip-in donations towards private events (fee, reference, checkout)
- Payment confirmation from the Paystack webhook and verify-payment
- Settlement reconciliation marking donations payout-eligible

Related apps:
    - events: Event chip-in rules and host payout account

Usage:
    from payments.services import DonationLifecycleService

    result = DonationLifecycleService.initiate_chip_in(user, event_id, amount)

    from payments.services import PaymentConfirmationService

    outcome = PaymentConfirmationService.confirm(reference)
"""
