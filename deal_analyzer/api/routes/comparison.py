"""Comparison routes: loan offers and saved scenarios."""

from fastapi import APIRouter, HTTPException

from deal_analyzer.api.schemas import (
    LoanComparisonRequest,
    LoanComparisonResponse,
    ScenarioComparisonRequest,
    ScenarioComparisonResponse,
)
from deal_analyzer.engine.comparison import compare_scenarios
from deal_analyzer.engine.loan_comparison import compare_loans, offer_loan_amount
from deal_analyzer.models.assumptions import Scenario

router = APIRouter(prefix="/api/v1", tags=["comparison"])


@router.post("/loans/compare", response_model=LoanComparisonResponse)
def compare_loan_options(req: LoanComparisonRequest):
    """Monthly payment, lifetime interest and points cost per loan option."""
    comparisons = compare_loans(
        req.purchase_price,
        req.down_payment_percent,
        [option.to_model() for option in req.options],
    )
    return LoanComparisonResponse(
        loan_amount=offer_loan_amount(req.purchase_price, req.down_payment_percent),
        comparisons=comparisons,
    )


@router.post("/scenarios/compare", response_model=ScenarioComparisonResponse)
def compare_saved_scenarios(req: ScenarioComparisonRequest):
    """Metrics and score for each scenario that computes."""
    try:
        scenarios = [Scenario.from_partial(data) for data in req.scenarios]
    except (ValueError, ArithmeticError, TypeError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid scenario: {e}")

    return ScenarioComparisonResponse(comparisons=compare_scenarios(scenarios))
