from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def as_decimal(value) -> Decimal:
    """Coerce a stored amount to ``Decimal``; missing or unparsable values count as zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return ZERO
    return result if result.is_finite() else ZERO


def interest_amount(loan_amount, interest_rate) -> Decimal:
    return as_decimal(loan_amount) * as_decimal(interest_rate) / HUNDRED


def total_payable(loan_amount, interest_rate) -> Decimal:
    return as_decimal(loan_amount) + interest_amount(loan_amount, interest_rate)


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
