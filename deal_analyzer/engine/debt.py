"""Level-payment loan math.

Pure functions: Decimal in, Decimal or dataclass out. No I/O.
Rates are annual percentages (7 means 7%).
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from deal_analyzer.engine.guards import HUNDRED, ZERO, as_percent, safe_div
from deal_analyzer.models.results import AmortizationEntry

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")
MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class InterestSplit:
    interest: Decimal
    principal: Decimal


def _monthly_rate(annual_rate: Decimal) -> Decimal:
    return annual_rate / HUNDRED / MONTHS_PER_YEAR


def monthly_payment(principal: Decimal, annual_rate: Decimal, term_years: int) -> Decimal:
    """Fixed monthly principal-and-interest payment.

    Returns 0 when principal, rate or term is not positive. The payment is
    left unrounded so a full schedule closes out at zero; callers quantize
    what they report.
    """
    if principal <= 0 or annual_rate <= 0 or term_years <= 0:
        return ZERO

    r = _monthly_rate(annual_rate)
    n = int(term_years) * MONTHS_PER_YEAR
    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    factor = (1 + r) ** n
    return safe_div(principal * r * factor, factor - 1)


def annual_interest_split(
    balance: Decimal, annual_rate: Decimal, payment: Decimal
) -> InterestSplit:
    """Interest and principal paid over one year of monthly payments."""
    r = _monthly_rate(annual_rate)
    interest = ZERO
    for _ in range(MONTHS_PER_YEAR):
        month_interest = balance * r
        interest += month_interest
        balance -= payment - month_interest
    return InterestSplit(interest=interest, principal=payment * MONTHS_PER_YEAR - interest)


def amortization_schedule(
    principal: Decimal, annual_rate: Decimal, term_years: int
) -> list[AmortizationEntry]:
    """Year-end balances over the full loan term."""
    payment = monthly_payment(principal, annual_rate, term_years)
    r = _monthly_rate(annual_rate)

    schedule: list[AmortizationEntry] = []
    balance = principal
    for year in range(1, int(term_years) + 1):
        for _ in range(MONTHS_PER_YEAR):
            balance -= payment - balance * r
        principal_paid = principal - balance
        schedule.append(AmortizationEntry(
            year=year,
            balance=max(ZERO, balance).quantize(TWO_PLACES, ROUND_HALF_UP),
            principal_paid=principal_paid.quantize(TWO_PLACES, ROUND_HALF_UP),
            equity_percent=as_percent(principal_paid, principal).quantize(FOUR_PLACES, ROUND_HALF_UP),
        ))
    return schedule
