"""Buyer closing costs at acquisition.

Pure functions. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from deal_analyzer.engine.guards import percent_of
from deal_analyzer.models.assumptions import ClosingCosts
from deal_analyzer.models.results import ClosingCostsBreakdown

TWO_PLACES = Decimal("0.01")


def closing_costs_breakdown(purchase_price: Decimal, costs: ClosingCosts) -> ClosingCostsBreakdown:
    """Itemized closing costs; the percentage items are charged on purchase price."""
    title = percent_of(purchase_price, costs.title_insurance_percent).quantize(TWO_PLACES, ROUND_HALF_UP)
    escrow = percent_of(purchase_price, costs.escrow_fees_percent).quantize(TWO_PLACES, ROUND_HALF_UP)
    lender = percent_of(purchase_price, costs.lender_fees_percent).quantize(TWO_PLACES, ROUND_HALF_UP)
    recording = percent_of(purchase_price, costs.recording_fees_percent).quantize(TWO_PLACES, ROUND_HALF_UP)
    inspection = costs.inspection_appraisal_fixed.quantize(TWO_PLACES, ROUND_HALF_UP)

    return ClosingCostsBreakdown(
        title_insurance=title,
        escrow_fees=escrow,
        lender_fees=lender,
        recording_fees=recording,
        inspection_appraisal=inspection,
        total=title + escrow + lender + recording + inspection,
    )


def total_closing_costs(purchase_price: Decimal, costs: ClosingCosts) -> Decimal:
    return closing_costs_breakdown(purchase_price, costs).total
