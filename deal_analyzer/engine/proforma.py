"""Pro forma orchestrator: composes the engine sub-modules into a full projection.

Pure computation. No I/O. Dataclasses in, ProjectionResult out.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from deal_analyzer.engine.cashflow import cash_on_cash, project_cash_flows
from deal_analyzer.engine.debt import amortization_schedule
from deal_analyzer.engine.depreciation import cost_segregation_summary
from deal_analyzer.engine.disposition import compute_exit
from deal_analyzer.engine.guards import HUNDRED, as_percent, safe_div
from deal_analyzer.engine.irr import compute_irr, equity_multiple, npv
from deal_analyzer.models.assumptions import (
    ClosingCosts,
    DealInputs,
    Financing,
    Operations,
    Property,
    TaxMarket,
)
from deal_analyzer.models.results import Metrics, ProjectionResult

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")


def project(
    prop: Property,
    financing: Financing,
    operations: Operations,
    tax_market: TaxMarket,
    closing_costs: ClosingCosts,
) -> ProjectionResult:
    """Run the full pipeline on the five input structs."""
    return project_deal(DealInputs(
        property=prop,
        financing=financing,
        operations=operations,
        tax_market=tax_market,
        closing_costs=closing_costs,
    ))


def project_deal(inputs: DealInputs) -> ProjectionResult:
    """Run the full pipeline on an input bundle.

    Raises ValueError for a hold period under one year.
    """
    tax_market = inputs.tax_market
    if tax_market.hold_period < 1:
        raise ValueError(f"hold_period must be at least 1 year, got {tax_market.hold_period}")

    cash = project_cash_flows(inputs)
    forecast = cash.forecast
    first, final = forecast[0], forecast[-1]
    initial_investment = cash.total_initial_investment

    exit_analysis = compute_exit(
        inputs,
        final_noi=final.noi,
        loan_balance=final.ending_loan_balance,
        annual_depreciation=cash.annual_depreciation,
        closing_costs=cash.closing_costs.total,
    )

    # Sale proceeds land in the final year
    before_tax_cfs = [-initial_investment] + [y.cash_flow for y in forecast]
    before_tax_cfs[-1] += exit_analysis.net_sale_proceeds
    after_tax_cfs = [-initial_investment] + [y.cash_flow_after_tax for y in forecast]
    after_tax_cfs[-1] += exit_analysis.net_cash_from_sale

    total_cash_flow = sum((y.cash_flow for y in forecast), Decimal("0"))
    total_cash_flow_after_tax = sum((y.cash_flow_after_tax for y in forecast), Decimal("0"))
    years = len(forecast)

    metrics = Metrics(
        irr=compute_irr(before_tax_cfs),
        irr_after_tax=compute_irr(after_tax_cfs),
        npv_after_tax=npv(tax_market.discount_rate / HUNDRED, after_tax_cfs).quantize(
            TWO_PLACES, ROUND_HALF_UP
        ),
        equity_multiple=equity_multiple(
            total_cash_flow + exit_analysis.net_sale_proceeds, initial_investment
        ),
        equity_multiple_after_tax=equity_multiple(
            total_cash_flow_after_tax + exit_analysis.net_cash_from_sale, initial_investment
        ),
        average_cash_on_cash=(sum(y.cash_on_cash for y in forecast) / years).quantize(
            FOUR_PLACES, ROUND_HALF_UP
        ),
        average_cash_on_cash_after_tax=(
            sum(y.cash_on_cash_after_tax for y in forecast) / years
        ).quantize(FOUR_PLACES, ROUND_HALF_UP),
        total_initial_investment=initial_investment,
        loan_amount=cash.loan_amount,
        monthly_debt_service=cash.monthly_payment.quantize(TWO_PLACES, ROUND_HALF_UP),
        annual_depreciation=cash.annual_depreciation,
        closing_costs_breakdown=cash.closing_costs,
        net_sale_proceeds=exit_analysis.net_sale_proceeds,
        net_cash_from_sale=exit_analysis.net_cash_from_sale,
        total_profit=total_cash_flow_after_tax + exit_analysis.net_cash_from_sale - initial_investment,
        cap_rate=as_percent(first.noi, inputs.property.purchase_price).quantize(
            FOUR_PLACES, ROUND_HALF_UP
        ),
        dscr=safe_div(first.noi, first.debt_service).quantize(FOUR_PLACES, ROUND_HALF_UP),
        year1_noi=first.noi,
        year1_cash_on_cash_after_tax=cash_on_cash(first.cash_flow_after_tax, initial_investment),
        exit_analysis=exit_analysis,
        cost_segregation=cost_segregation_summary(cash.annual_depreciation, tax_market),
    )

    schedule = amortization_schedule(
        cash.loan_amount,
        inputs.financing.interest_rate,
        inputs.financing.loan_term_years,
    )
    logger.debug(
        "Projected %d-year %s deal: irr=%s irr_after_tax=%s",
        years, inputs.operations.input_mode.value, metrics.irr, metrics.irr_after_tax,
    )
    return ProjectionResult(forecast=forecast, amortization_schedule=schedule, metrics=metrics)
