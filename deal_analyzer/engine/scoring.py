"""Letter-grade deal score from after-tax returns.

Pure functions. No I/O. Each metric maps to a sub-score through a
descending step table; the total is a weighted sum graded A to F.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from deal_analyzer.models.results import DealScore, Metrics, ScoreComponent

# (minimum, sub-score), checked top down
IRR_STEPS = (
    (Decimal("15"), 100),
    (Decimal("12"), 85),
    (Decimal("8"), 70),
    (Decimal("5"), 55),
    (Decimal("0"), 40),
)
CASH_ON_CASH_STEPS = (
    (Decimal("10"), 100),
    (Decimal("7"), 85),
    (Decimal("5"), 70),
    (Decimal("3"), 55),
    (Decimal("0"), 40),
)
EQUITY_MULTIPLE_STEPS = (
    (Decimal("2.5"), 100),
    (Decimal("2.0"), 85),
    (Decimal("1.5"), 70),
    (Decimal("1.2"), 55),
    (Decimal("1.0"), 40),
)

WEIGHTS = {"irr": 40, "cash_on_cash": 30, "equity_multiple": 30}  # Percent

GRADES = ((90, "A"), (80, "B"), (70, "C"), (60, "D"))


def _step_score(value: Any, steps: tuple[tuple[Decimal, int], ...]) -> int:
    value = Decimal(str(value))
    for minimum, score in steps:
        if value >= minimum:
            return score
    return 0


def _grade(total: Decimal) -> str:
    for minimum, grade in GRADES:
        if total >= minimum:
            return grade
    return "F"


def score_deal(irr: Any, cash_on_cash: Any, equity_multiple: Any) -> DealScore:
    """Score after-tax IRR (%), average cash-on-cash (%) and equity multiple."""
    scores = {
        "irr": _step_score(irr, IRR_STEPS),
        "cash_on_cash": _step_score(cash_on_cash, CASH_ON_CASH_STEPS),
        "equity_multiple": _step_score(equity_multiple, EQUITY_MULTIPLE_STEPS),
    }
    total = sum(Decimal(scores[name] * weight) / 100 for name, weight in WEIGHTS.items())

    return DealScore(
        grade=_grade(total),
        score=int(total.quantize(Decimal("1"), ROUND_HALF_UP)),
        breakdown={
            name: ScoreComponent(score=scores[name], weight=weight)
            for name, weight in WEIGHTS.items()
        },
    )


def calculate_deal_score(metrics: Metrics) -> DealScore:
    return score_deal(
        metrics.irr_after_tax,
        metrics.average_cash_on_cash_after_tax,
        metrics.equity_multiple_after_tax,
    )
