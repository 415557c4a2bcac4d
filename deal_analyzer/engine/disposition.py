"""Sale at end of hold: exit value, gain, recapture and capital gains tax.

Pure functions. No I/O.

Sale value is a forward cap on next year's NOI when an exit cap rate is
set, otherwise the purchase price appreciated at the rent growth rate.
Recapture is charged on all depreciation taken; capital gains tax applies
to whatever gain remains above it. An explicit recapture rate of 0 is
taken at face value (no recapture tax). A 1031 exchange defers both, taxing
only the cash boot at the blended rate.
"""

from decimal import Decimal, ROUND_HALF_UP

from deal_analyzer.engine.depreciation import accumulated_depreciation
from deal_analyzer.engine.guards import HUNDRED, ZERO, percent_of, safe_div
from deal_analyzer.models.assumptions import DealInputs
from deal_analyzer.models.results import Exchange1031Summary, ExitAnalysis

TWO_PLACES = Decimal("0.01")


def sale_value(inputs: DealInputs, final_noi: Decimal) -> Decimal:
    """Gross sale price at the end of the hold."""
    tax_market = inputs.tax_market
    growth = 1 + inputs.operations.annual_rent_growth / HUNDRED
    if tax_market.exit_cap_rate:
        return safe_div(final_noi * growth, tax_market.exit_cap_rate / HUNDRED)
    return inputs.property.purchase_price * growth ** tax_market.hold_period


def compute_exit(
    inputs: DealInputs,
    final_noi: Decimal,
    loan_balance: Decimal,
    annual_depreciation: Decimal,
    closing_costs: Decimal,
) -> ExitAnalysis:
    """Exit analysis for a sale at the end of the hold period."""
    prop = inputs.property
    tax_market = inputs.tax_market

    gross = sale_value(inputs, final_noi).quantize(TWO_PLACES, ROUND_HALF_UP)
    selling = percent_of(gross, tax_market.selling_costs).quantize(TWO_PLACES, ROUND_HALF_UP)
    net_proceeds = gross - selling - loan_balance

    accumulated = accumulated_depreciation(annual_depreciation, tax_market)
    adjusted_basis = prop.purchase_price + prop.rehab_costs + closing_costs - accumulated
    capital_gain = (gross - selling) - adjusted_basis

    recapture_tax = percent_of(accumulated, tax_market.depreciation_recapture_rate).quantize(
        TWO_PLACES, ROUND_HALF_UP
    )
    remaining_gain = max(ZERO, capital_gain - accumulated)
    capital_gains_tax = percent_of(remaining_gain, tax_market.capital_gains_tax_rate).quantize(
        TWO_PLACES, ROUND_HALF_UP
    )

    exchange = None
    if tax_market.use_1031_exchange:
        boot = percent_of(net_proceeds, tax_market.exchange_boot_percent).quantize(
            TWO_PLACES, ROUND_HALF_UP
        )
        blended_rate = (tax_market.capital_gains_tax_rate + tax_market.depreciation_recapture_rate) / 2
        tax_on_sale = percent_of(boot, blended_rate).quantize(TWO_PLACES, ROUND_HALF_UP)
        exchange = Exchange1031Summary(
            boot_percent=tax_market.exchange_boot_percent,
            boot_amount=boot,
            deferred_gain=capital_gain - boot,
            tax_saved=recapture_tax + capital_gains_tax - tax_on_sale,
        )
    else:
        tax_on_sale = recapture_tax + capital_gains_tax

    return ExitAnalysis(
        gross_sale_price=gross,
        selling_costs=selling,
        loan_balance_at_exit=loan_balance,
        net_sale_proceeds=net_proceeds,
        accumulated_depreciation=accumulated,
        adjusted_basis=adjusted_basis,
        capital_gain=capital_gain,
        depreciation_recapture=recapture_tax,
        capital_gains_tax=capital_gains_tax,
        total_tax_on_sale=tax_on_sale,
        net_cash_from_sale=net_proceeds - tax_on_sale,
        exchange_1031=exchange,
    )
