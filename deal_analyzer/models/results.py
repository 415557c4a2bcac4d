from dataclasses import dataclass, field
from decimal import Decimal


@dataclass
class ForecastYear:
    year: int

    # Income
    potential_gross_income: Decimal = Decimal("0")
    vacancy_loss: Decimal = Decimal("0")
    effective_gross_income: Decimal = Decimal("0")

    # Expenses
    property_tax: Decimal = Decimal("0")
    insurance: Decimal = Decimal("0")
    cam: Decimal = Decimal("0")  # Commercial only
    management: Decimal = Decimal("0")
    maintenance: Decimal = Decimal("0")
    capex_reserve: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")

    # Operations
    noi: Decimal = Decimal("0")
    debt_service: Decimal = Decimal("0")
    interest_payment: Decimal = Decimal("0")
    principal_payment: Decimal = Decimal("0")
    ending_loan_balance: Decimal = Decimal("0")
    cash_flow: Decimal = Decimal("0")  # Before tax

    # Tax
    taxable_income: Decimal = Decimal("0")
    tax_liability: Decimal = Decimal("0")  # Negative = tax benefit
    cash_flow_after_tax: Decimal = Decimal("0")

    # Returns (percent)
    cash_on_cash: Decimal = Decimal("0")
    cash_on_cash_after_tax: Decimal = Decimal("0")


@dataclass
class AmortizationEntry:
    year: int
    balance: Decimal = Decimal("0")
    principal_paid: Decimal = Decimal("0")  # Cumulative
    equity_percent: Decimal = Decimal("0")


@dataclass
class Exchange1031Summary:
    boot_percent: Decimal = Decimal("0")
    boot_amount: Decimal = Decimal("0")  # Cash taken out, taxable
    deferred_gain: Decimal = Decimal("0")
    tax_saved: Decimal = Decimal("0")


@dataclass
class ExitAnalysis:
    gross_sale_price: Decimal = Decimal("0")
    selling_costs: Decimal = Decimal("0")
    loan_balance_at_exit: Decimal = Decimal("0")
    net_sale_proceeds: Decimal = Decimal("0")  # Before tax

    # Gain calculation
    accumulated_depreciation: Decimal = Decimal("0")
    adjusted_basis: Decimal = Decimal("0")
    capital_gain: Decimal = Decimal("0")

    # Tax on sale
    depreciation_recapture: Decimal = Decimal("0")
    capital_gains_tax: Decimal = Decimal("0")
    total_tax_on_sale: Decimal = Decimal("0")

    net_cash_from_sale: Decimal = Decimal("0")
    exchange_1031: Exchange1031Summary | None = None


@dataclass
class ClosingCostsBreakdown:
    title_insurance: Decimal = Decimal("0")
    escrow_fees: Decimal = Decimal("0")
    lender_fees: Decimal = Decimal("0")
    recording_fees: Decimal = Decimal("0")
    inspection_appraisal: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


@dataclass
class CostSegregationSummary:
    year1_bonus: Decimal = Decimal("0")
    total_depreciation: Decimal = Decimal("0")


@dataclass
class Metrics:
    # Returns
    irr: Decimal = Decimal("0")  # Percent
    irr_after_tax: Decimal = Decimal("0")
    npv_after_tax: Decimal = Decimal("0")
    equity_multiple: Decimal = Decimal("0")
    equity_multiple_after_tax: Decimal = Decimal("0")
    average_cash_on_cash: Decimal = Decimal("0")
    average_cash_on_cash_after_tax: Decimal = Decimal("0")

    # Capital
    total_initial_investment: Decimal = Decimal("0")
    loan_amount: Decimal = Decimal("0")
    monthly_debt_service: Decimal = Decimal("0")
    annual_depreciation: Decimal = Decimal("0")
    closing_costs_breakdown: ClosingCostsBreakdown = field(default_factory=ClosingCostsBreakdown)

    # Exit
    net_sale_proceeds: Decimal = Decimal("0")
    net_cash_from_sale: Decimal = Decimal("0")
    total_profit: Decimal = Decimal("0")

    # Year-1 snapshot
    cap_rate: Decimal = Decimal("0")
    dscr: Decimal = Decimal("0")  # 0 means all cash (no debt service), not a shortfall
    year1_noi: Decimal = Decimal("0")
    year1_cash_on_cash_after_tax: Decimal = Decimal("0")

    exit_analysis: ExitAnalysis = field(default_factory=ExitAnalysis)
    cost_segregation: CostSegregationSummary | None = None


@dataclass
class ProjectionResult:
    forecast: list[ForecastYear] = field(default_factory=list)
    amortization_schedule: list[AmortizationEntry] = field(default_factory=list)
    metrics: Metrics = field(default_factory=Metrics)


@dataclass
class ScoreComponent:
    score: int = 0
    weight: int = 0  # Percent of the total


@dataclass
class DealScore:
    grade: str = "F"
    score: int = 0
    breakdown: dict[str, ScoreComponent] = field(default_factory=dict)


@dataclass
class LoanComparison:
    name: str
    monthly_payment: Decimal = Decimal("0")
    points_cost: Decimal = Decimal("0")
    total_interest: Decimal = Decimal("0")
    total_cost: Decimal = Decimal("0")
    effective_rate: Decimal = Decimal("0")  # Percent per year, points included


@dataclass
class ScenarioComparison:
    name: str
    metrics: Metrics = field(default_factory=Metrics)
    score: DealScore = field(default_factory=DealScore)
