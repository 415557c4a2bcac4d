"""IRR, NPV and equity multiple.

Pure functions. No I/O. IRR is reported as a percentage; NPV takes its
discount rate as a decimal fraction (0.10 for 10%).
"""

import logging
import math
from decimal import Decimal, ROUND_HALF_UP

from scipy.optimize import newton

from deal_analyzer.config import settings
from deal_analyzer.engine.guards import ZERO, safe_div

logger = logging.getLogger(__name__)

FOUR_PLACES = Decimal("0.0001")
DIVERGENCE_FLOOR = -0.99  # Rates at or below -100% are meaningless


class SolverDiverged(ArithmeticError):
    """A trial rate or its NPV left the finite, meaningful range."""


def _checked(rate: float, value: float) -> float:
    if not math.isfinite(rate) or rate < DIVERGENCE_FLOOR or not math.isfinite(value):
        raise SolverDiverged(f"rate={rate}")
    return value


def compute_irr(cash_flows: list[Decimal]) -> Decimal:
    """IRR of annual cash flows, as a percentage.

    cash_flows[0] is the (negative) initial investment and the last flow
    includes sale proceeds. Uses Newton-Raphson on the NPV function.
    Returns 0 when the IRR is undefined (fewer than two flows, no sign
    change) or the solver fails to converge or diverges.
    """
    if len(cash_flows) < 2:
        return ZERO

    # Convert to float for scipy
    cf_float = [float(cf) for cf in cash_flows]
    if not any(cf < 0 for cf in cf_float) or not any(cf > 0 for cf in cf_float):
        return ZERO

    def npv_at(rate: float) -> float:
        total = 0.0
        for t, cf in enumerate(cf_float):
            total += cf / _checked(rate, (1 + rate) ** t)
        return _checked(rate, total)

    def npv_slope(rate: float) -> float:
        slope = 0.0
        for t, cf in enumerate(cf_float[1:], start=1):
            slope -= t * cf / _checked(rate, (1 + rate) ** (t + 1))
        return _checked(rate, slope)

    try:
        rate = float(newton(
            npv_at,
            settings.irr_initial_guess,
            fprime=npv_slope,
            tol=settings.irr_tolerance,
            maxiter=settings.irr_max_iterations,
        ))
    except (RuntimeError, ArithmeticError) as e:
        # Non-convergence, zero derivative or divergence
        logger.debug("IRR solver gave up on %d cash flows: %s", len(cf_float), e)
        return ZERO

    if not math.isfinite(rate) or rate < DIVERGENCE_FLOOR:
        logger.debug("IRR solver diverged to %s", rate)
        return ZERO
    return Decimal(str(rate * 100)).quantize(FOUR_PLACES, ROUND_HALF_UP)


def npv(rate: Decimal, cash_flows: list[Decimal]) -> Decimal:
    """Net present value; flow t is discounted by (1 + rate)^t."""
    total = ZERO
    discount = Decimal("1")
    for cf in cash_flows:
        total += safe_div(cf, discount)
        discount *= 1 + rate
    return total


def equity_multiple(
    total_cash_returned: Decimal, total_cash_invested: Decimal
) -> Decimal:
    """Equity multiple = total cash out / total cash in."""
    if total_cash_invested <= 0:
        return ZERO
    return (total_cash_returned / total_cash_invested).quantize(FOUR_PLACES, ROUND_HALF_UP)
