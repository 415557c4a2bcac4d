"""Analysis routes: projection, sensitivity grid and deal score."""

from fastapi import APIRouter, HTTPException

from deal_analyzer.api.schemas import (
    DealInputsRequest,
    ProjectionResponse,
    ScoreRequest,
    SensitivityRequest,
    SensitivityResponse,
)
from deal_analyzer.engine.proforma import project_deal
from deal_analyzer.engine.scoring import calculate_deal_score, score_deal
from deal_analyzer.engine.sensitivity import resolve_metric, sensitivity_grid
from deal_analyzer.models.results import DealScore

router = APIRouter(prefix="/api/v1", tags=["analysis"])


@router.post("/project", response_model=ProjectionResponse)
def project(req: DealInputsRequest):
    """Full pro forma for one deal, with its score."""
    try:
        result = project_deal(req.to_model())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ProjectionResponse(
        forecast=result.forecast,
        amortization_schedule=result.amortization_schedule,
        metrics=result.metrics,
        score=calculate_deal_score(result.metrics),
    )


@router.post("/sensitivity", response_model=SensitivityResponse)
def sensitivity(req: SensitivityRequest):
    """Metric matrix over two varied inputs; failed cells are null."""
    try:
        metric = resolve_metric(req.metric)
        matrix = sensitivity_grid(
            req.inputs.to_model(),
            req.x_field,
            req.x_values,
            req.y_field,
            req.y_values,
            metric=metric,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SensitivityResponse(
        x_field=req.x_field,
        x_values=req.x_values,
        y_field=req.y_field,
        y_values=req.y_values,
        metric=metric,
        matrix=matrix,
    )


@router.post("/score", response_model=DealScore)
def score(req: ScoreRequest):
    return score_deal(
        req.irr_after_tax,
        req.average_cash_on_cash_after_tax,
        req.equity_multiple_after_tax,
    )
