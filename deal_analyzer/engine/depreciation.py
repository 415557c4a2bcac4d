"""Straight-line depreciation and the optional cost segregation bonus.

Pure functions. No I/O. Depreciation is flat each year (no mid-month
convention); the cost segregation bonus is a single year-1 amount that
only enters accumulated depreciation at sale.
"""

from decimal import Decimal, ROUND_HALF_UP

from deal_analyzer.engine.guards import ZERO, safe_div
from deal_analyzer.models.assumptions import DealInputs, TaxMarket
from deal_analyzer.models.results import CostSegregationSummary

TWO_PLACES = Decimal("0.01")


def depreciable_basis(inputs: DealInputs) -> Decimal:
    """Price less land, plus rehab and initial CapEx."""
    prop = inputs.property
    return prop.purchase_price - prop.land_value + prop.rehab_costs + inputs.operations.initial_capex


def annual_depreciation(basis: Decimal, depreciation_years: Decimal) -> Decimal:
    return safe_div(basis, depreciation_years).quantize(TWO_PLACES, ROUND_HALF_UP)


def cost_seg_bonus(tax_market: TaxMarket) -> Decimal:
    if not tax_market.use_cost_segregation:
        return ZERO
    return tax_market.cost_seg_year1_bonus


def accumulated_depreciation(annual: Decimal, tax_market: TaxMarket) -> Decimal:
    """Depreciation taken over the hold, recaptured at sale."""
    return annual * tax_market.hold_period + cost_seg_bonus(tax_market)


def cost_segregation_summary(annual: Decimal, tax_market: TaxMarket) -> CostSegregationSummary | None:
    if not tax_market.use_cost_segregation:
        return None
    return CostSegregationSummary(
        year1_bonus=tax_market.cost_seg_year1_bonus,
        total_depreciation=accumulated_depreciation(annual, tax_market),
    )
