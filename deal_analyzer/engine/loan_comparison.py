"""Side-by-side cost of alternative loan offers on one purchase.

Pure functions. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from deal_analyzer.engine.debt import MONTHS_PER_YEAR, monthly_payment
from deal_analyzer.engine.guards import as_percent, percent_of, safe_div
from deal_analyzer.models.assumptions import Financing, LoanOption
from deal_analyzer.models.results import LoanComparison

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")


def compare_loan(loan_amount: Decimal, option: LoanOption) -> LoanComparison:
    """Lifetime cost of one option held to full term.

    Effective rate spreads interest plus points evenly over the term.
    """
    if loan_amount <= 0:
        return LoanComparison(name=option.name)

    payment = monthly_payment(loan_amount, option.interest_rate, option.term_years)
    points_cost = percent_of(loan_amount, option.points).quantize(TWO_PLACES, ROUND_HALF_UP)
    total_interest = (payment * MONTHS_PER_YEAR * option.term_years - loan_amount).quantize(
        TWO_PLACES, ROUND_HALF_UP
    )
    effective_rate = safe_div(as_percent(total_interest + points_cost, loan_amount), option.term_years)

    return LoanComparison(
        name=option.name,
        monthly_payment=payment.quantize(TWO_PLACES, ROUND_HALF_UP),
        points_cost=points_cost,
        total_interest=total_interest,
        total_cost=loan_amount.quantize(TWO_PLACES, ROUND_HALF_UP) + total_interest + points_cost,
        effective_rate=effective_rate.quantize(FOUR_PLACES, ROUND_HALF_UP),
    )


def offer_loan_amount(purchase_price: Decimal, down_payment_percent: Decimal) -> Decimal:
    return Financing(down_payment_percent=down_payment_percent).loan_amount(purchase_price)


def compare_loans(
    purchase_price: Decimal,
    down_payment_percent: Decimal,
    options: list[LoanOption],
) -> list[LoanComparison]:
    """One comparison per option, in the order given."""
    loan_amount = offer_loan_amount(purchase_price, down_payment_percent)
    return [compare_loan(loan_amount, option) for option in options]
