"""
Chip-in fee calculation.

    fee = amount * CHIPIN_FEE_RATE + CHIPIN_FIXED_FEE

Amounts are Decimals in major currency units (naira). Paystack works in
minor units (kobo), so anything sent to or compared with the gateway goes
through to_minor_units().

Usage:
    from payments.fees import calculate_fee, to_minor_units

    fee = calculate_fee(Decimal("5000"))        # Decimal("150.00")
    to_minor_units(Decimal("5000") + fee)       # 515000
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings

TWO_PLACES = Decimal("0.01")
MINOR_UNITS_PER_MAJOR = 100


def calculate_fee(amount: Decimal) -> Decimal:
    """
    Fee charged on top of a chip-in amount, rounded to 2 decimal places.

    Raises:
        ValueError: amount is not positive (callers validate first)
    """
    amount = Decimal(amount)
    if amount <= 0:
        raise ValueError("amount must be positive")

    fee = amount * settings.CHIPIN_FEE_RATE + settings.CHIPIN_FIXED_FEE
    return fee.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal) -> int:
    """Convert a major-unit amount to an integer number of minor units."""
    minor = (Decimal(amount) * MINOR_UNITS_PER_MAJOR).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return int(minor)
