"""Year-by-year operating and cash flow projection.

Pure functions: Decimal in, Decimal out. No I/O.

Two operating models share one pipeline. Simple mode works from monthly
gross rent with expenses as flat rates; commercial mode works from annual
$/sf base rent on an NNN lease, where tenants reimburse property tax,
insurance and CAM.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from deal_analyzer.engine.closing_costs import closing_costs_breakdown
from deal_analyzer.engine.debt import MONTHS_PER_YEAR, annual_interest_split, monthly_payment
from deal_analyzer.engine.depreciation import annual_depreciation, depreciable_basis
from deal_analyzer.engine.guards import HUNDRED, ZERO, as_percent, percent_of
from deal_analyzer.models.assumptions import (
    CommercialOperations,
    DealInputs,
    Financing,
    Operations,
    Property,
)
from deal_analyzer.models.results import ClosingCostsBreakdown, ForecastYear

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")
ONE = Decimal("1")


@dataclass(frozen=True)
class OperatingLevels:
    """Year-1 revenue and expense levels before growth."""
    base_rent: Decimal
    other_income: Decimal
    property_tax: Decimal
    insurance: Decimal
    cam: Decimal = ZERO

    @property
    def reimbursements(self) -> Decimal:
        return self.property_tax + self.insurance + self.cam


@dataclass(frozen=True)
class CashFlowProjection:
    forecast: list[ForecastYear]
    total_initial_investment: Decimal
    loan_amount: Decimal
    monthly_payment: Decimal  # Unrounded
    annual_depreciation: Decimal
    closing_costs: ClosingCostsBreakdown


def initial_levels(prop: Property, operations: Operations) -> OperatingLevels:
    if isinstance(operations, CommercialOperations):
        size = prop.building_size
        expenses = operations.commercial_expenses
        base_rent = operations.annual_base_rent_per_sqft * size
        return OperatingLevels(
            base_rent=base_rent,
            other_income=percent_of(base_rent, operations.other_income_percent),
            property_tax=expenses.property_tax_per_sqft * size,
            insurance=expenses.insurance_per_sqft * size,
            cam=expenses.cam_per_sqft * size,
        )
    return OperatingLevels(
        base_rent=operations.gross_rent_monthly * 12,
        other_income=operations.other_income_monthly * 12,
        property_tax=percent_of(prop.purchase_price, operations.property_tax_rate),
        insurance=operations.insurance_annual,
    )


def grown_levels(
    levels: OperatingLevels, rent_factor: Decimal, expense_factor: Decimal
) -> OperatingLevels:
    """Levels scaled by cumulative rent and expense growth."""
    return OperatingLevels(
        base_rent=levels.base_rent * rent_factor,
        other_income=levels.other_income * rent_factor,
        property_tax=levels.property_tax * expense_factor,
        insurance=levels.insurance * expense_factor,
        cam=levels.cam * expense_factor,
    )


def potential_gross_income(levels: OperatingLevels, operations: Operations) -> Decimal:
    pgi = levels.base_rent + levels.other_income
    if isinstance(operations, CommercialOperations):
        # Re-derived from this year's tax, insurance and CAM so recoveries
        # track the expenses they reimburse
        pgi += levels.reimbursements
    return pgi.quantize(TWO_PLACES, ROUND_HALF_UP)


def operating_expenses(
    levels: OperatingLevels,
    operations: Operations,
    egi: Decimal,
    building_size: Decimal,
) -> dict[str, Decimal]:
    """Itemized operating expenses for one year."""
    if isinstance(operations, CommercialOperations):
        expenses = operations.commercial_expenses
        management = percent_of(egi, expenses.management_percent)
        maintenance = expenses.repairs_maintenance_annual
        capex = expenses.capex_reserve_per_sqft * building_size
    else:
        management = percent_of(egi, operations.management_fee_rate)
        maintenance = percent_of(egi, operations.maintenance_rate)
        capex = percent_of(egi, operations.capex_rate)

    items = {
        "property_tax": levels.property_tax,
        "insurance": levels.insurance,
        "cam": levels.cam,
        "management": management,
        "maintenance": maintenance,
        "capex_reserve": capex,
    }
    items = {name: amount.quantize(TWO_PLACES, ROUND_HALF_UP) for name, amount in items.items()}
    items["total"] = sum(items.values(), ZERO)
    return items


def total_initial_investment(inputs: DealInputs, closing_costs: Decimal) -> Decimal:
    """Down payment + closing costs + rehab + initial CapEx."""
    prop = inputs.property
    down_payment = inputs.financing.down_payment(prop.purchase_price)
    total = down_payment + closing_costs + prop.rehab_costs + inputs.operations.initial_capex
    return total.quantize(TWO_PLACES, ROUND_HALF_UP)


def cash_on_cash(cash_flow: Decimal, initial_investment: Decimal) -> Decimal:
    return as_percent(cash_flow, initial_investment).quantize(FOUR_PLACES, ROUND_HALF_UP)


def _debt_for_year(
    year: int,
    balance: Decimal,
    financing: Financing,
    payment: Decimal,
    annual_debt_service: Decimal,
) -> tuple[Decimal, Decimal, Decimal]:
    """(debt service, interest, principal) for one year on the running balance."""
    if payment > 0 and year > financing.loan_term_years:
        return ZERO, ZERO, ZERO  # Loan retired
    if payment > 0 and year == financing.loan_term_years:
        # Final year pays off whatever rounding left on the balance
        return annual_debt_service, annual_debt_service - balance, balance

    split = annual_interest_split(balance, financing.interest_rate, payment)
    interest = split.interest.quantize(TWO_PLACES, ROUND_HALF_UP)
    return annual_debt_service, interest, annual_debt_service - interest


def project_cash_flows(inputs: DealInputs) -> CashFlowProjection:
    """Operating forecast for every year of the hold period."""
    prop = inputs.property
    financing = inputs.financing
    operations = inputs.operations
    tax_market = inputs.tax_market

    closing = closing_costs_breakdown(prop.purchase_price, inputs.closing_costs)
    initial_investment = total_initial_investment(inputs, closing.total)

    loan_amount = financing.loan_amount(prop.purchase_price)
    payment = monthly_payment(loan_amount, financing.interest_rate, financing.loan_term_years)
    annual_debt_service = (payment * MONTHS_PER_YEAR).quantize(TWO_PLACES, ROUND_HALF_UP)
    depreciation = annual_depreciation(depreciable_basis(inputs), tax_market.depreciation_years)

    base = initial_levels(prop, operations)
    rent_step = ONE + operations.annual_rent_growth / HUNDRED
    expense_step = ONE + operations.annual_expense_growth / HUNDRED
    rent_factor = expense_factor = ONE

    balance = loan_amount.quantize(TWO_PLACES, ROUND_HALF_UP)
    forecast: list[ForecastYear] = []

    for year in range(1, tax_market.hold_period + 1):
        levels = grown_levels(base, rent_factor, expense_factor)

        pgi = potential_gross_income(levels, operations)
        vacancy = percent_of(pgi, operations.vacancy_rate).quantize(TWO_PLACES, ROUND_HALF_UP)
        egi = pgi - vacancy
        expenses = operating_expenses(levels, operations, egi, prop.building_size)
        noi = egi - expenses["total"]

        debt_service, interest, principal = _debt_for_year(
            year, balance, financing, payment, annual_debt_service
        )
        balance -= principal

        cash_flow = noi - debt_service
        taxable_income = noi - interest - depreciation
        # No floor: a negative liability is a tax benefit
        tax = percent_of(taxable_income, tax_market.income_tax_rate).quantize(TWO_PLACES, ROUND_HALF_UP)
        cash_flow_after_tax = cash_flow - tax

        forecast.append(ForecastYear(
            year=year,
            potential_gross_income=pgi,
            vacancy_loss=vacancy,
            effective_gross_income=egi,
            property_tax=expenses["property_tax"],
            insurance=expenses["insurance"],
            cam=expenses["cam"],
            management=expenses["management"],
            maintenance=expenses["maintenance"],
            capex_reserve=expenses["capex_reserve"],
            total_expenses=expenses["total"],
            noi=noi,
            debt_service=debt_service,
            interest_payment=interest,
            principal_payment=principal,
            ending_loan_balance=balance,
            cash_flow=cash_flow,
            taxable_income=taxable_income,
            tax_liability=tax,
            cash_flow_after_tax=cash_flow_after_tax,
            cash_on_cash=cash_on_cash(cash_flow, initial_investment),
            cash_on_cash_after_tax=cash_on_cash(cash_flow_after_tax, initial_investment),
        ))

        rent_factor *= rent_step
        expense_factor *= expense_step

    return CashFlowProjection(
        forecast=forecast,
        total_initial_investment=initial_investment,
        loan_amount=loan_amount.quantize(TWO_PLACES, ROUND_HALF_UP),
        monthly_payment=payment,
        annual_depreciation=depreciation,
        closing_costs=closing,
    )
