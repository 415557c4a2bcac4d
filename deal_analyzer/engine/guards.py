"""Guarded arithmetic shared by the formula modules.

Degenerate inputs collapse to a neutral value (0 by default) instead of
raising, so a single bad figure never aborts a projection.
"""

from decimal import Decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def is_finite(value: Decimal | int) -> bool:
    return Decimal(value).is_finite()


def safe_div(
    numerator: Decimal | int, denominator: Decimal | int, default: Decimal = ZERO
) -> Decimal:
    """numerator / denominator, or ``default`` for a zero or non-finite operand."""
    if not (is_finite(numerator) and is_finite(denominator)) or denominator == 0:
        return default
    return Decimal(numerator) / Decimal(denominator)


def percent_of(amount: Decimal, rate: Decimal | int) -> Decimal:
    """``rate`` percent of ``amount``."""
    return amount * rate / HUNDRED


def as_percent(numerator: Decimal, denominator: Decimal) -> Decimal:
    return safe_div(numerator, denominator) * HUNDRED
