"""Pydantic schemas for API request/response models.

Request schemas carry form-level validation ranges. Omitted optional
fields take the engine's dataclass defaults through ``from_partial``.
"""

from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, model_validator

from deal_analyzer.models.assumptions import (
    ClosingCosts,
    DealInputs,
    Financing,
    LoanOption,
    Operations,
    Property,
    TaxMarket,
    operations_from_partial,
)
from deal_analyzer.models.results import (
    AmortizationEntry,
    DealScore,
    ForecastYear,
    LoanComparison,
    Metrics,
    ScenarioComparison,
)


# ---- Request schemas ----

class PropertyRequest(BaseModel):
    purchase_price: Decimal = Field(..., ge=0, le=1_000_000_000)
    rehab_costs: Decimal | None = Field(None, ge=0, le=100_000_000)
    after_repair_value: Decimal | None = Field(None, ge=0, le=1_000_000_000)
    land_value_percent: Decimal = Field(..., ge=0, le=100)
    building_size: Decimal | None = Field(None, ge=0, le=10_000_000, description="sq ft")

    @model_validator(mode="after")
    def check_after_repair_value(self) -> "PropertyRequest":
        if self.after_repair_value and self.purchase_price and self.rehab_costs:
            minimum = self.purchase_price + self.rehab_costs
            if self.after_repair_value < minimum:
                raise ValueError(
                    f"after_repair_value should be at least purchase price + rehab ({minimum})"
                )
        return self

    def to_model(self) -> Property:
        return Property.from_partial(self.model_dump(exclude_none=True))


class FinancingRequest(BaseModel):
    down_payment_percent: Decimal = Field(..., ge=0, le=100)
    interest_rate: Decimal = Field(..., ge=0, le=30)
    loan_term_years: int = Field(..., ge=1, le=50)

    def to_model(self) -> Financing:
        return Financing.from_partial(self.model_dump())


class _OperationsRequest(BaseModel):
    vacancy_rate: Decimal = Field(..., ge=0, le=100)
    annual_rent_growth: Decimal = Field(..., ge=-50, le=50)
    annual_expense_growth: Decimal = Field(..., ge=-50, le=50)
    initial_capex: Decimal | None = Field(None, ge=0, le=100_000_000)

    def to_model(self) -> Operations:
        return operations_from_partial(self.model_dump(exclude_none=True))


class SimpleOperationsRequest(_OperationsRequest):
    input_mode: Literal["simple"]
    gross_rent_monthly: Decimal | None = Field(None, ge=0, le=10_000_000)
    other_income_monthly: Decimal | None = Field(None, ge=0, le=10_000_000)
    property_tax_rate: Decimal | None = Field(None, ge=0, le=100)
    insurance_annual: Decimal | None = Field(None, ge=0, le=10_000_000)
    management_fee_rate: Decimal | None = Field(None, ge=0, le=100)
    maintenance_rate: Decimal | None = Field(None, ge=0, le=100)
    capex_rate: Decimal | None = Field(None, ge=0, le=100)


class CommercialExpensesRequest(BaseModel):
    property_tax_per_sqft: Decimal | None = Field(None, ge=0, le=1000)
    insurance_per_sqft: Decimal | None = Field(None, ge=0, le=1000)
    cam_per_sqft: Decimal | None = Field(None, ge=0, le=1000)
    management_percent: Decimal | None = Field(None, ge=0, le=100)
    repairs_maintenance_annual: Decimal | None = Field(None, ge=0, le=100_000_000)
    capex_reserve_per_sqft: Decimal | None = Field(None, ge=0, le=1000)


class CommercialOperationsRequest(_OperationsRequest):
    input_mode: Literal["commercial"]
    annual_base_rent_per_sqft: Decimal | None = Field(None, ge=0, le=1000)
    other_income_percent: Decimal | None = Field(None, ge=0, le=100)
    commercial_expenses: CommercialExpensesRequest | None = None


OperationsRequest = Annotated[
    SimpleOperationsRequest | CommercialOperationsRequest,
    Field(discriminator="input_mode"),
]


class TaxMarketRequest(BaseModel):
    income_tax_rate: Decimal = Field(..., ge=0, le=100)
    capital_gains_tax_rate: Decimal = Field(..., ge=0, le=100)
    depreciation_years: Decimal = Field(..., ge=1, le=100)
    depreciation_recapture_rate: Decimal | None = Field(None, ge=0, le=100)
    selling_costs: Decimal = Field(..., ge=0, le=100)
    discount_rate: Decimal = Field(..., ge=0, le=100)
    exit_cap_rate: Decimal | None = Field(None, ge=0, le=100)
    hold_period: int = Field(..., ge=1, le=50)
    use_1031_exchange: bool = False
    exchange_boot_percent: Decimal | None = Field(None, ge=0, le=100)
    use_cost_segregation: bool = False
    cost_seg_year1_bonus: Decimal | None = Field(None, ge=0)

    def to_model(self) -> TaxMarket:
        # An explicit null exit cap survives to select the appreciation exit
        return TaxMarket.from_partial(self.model_dump(exclude_unset=True))


class ClosingCostsRequest(BaseModel):
    title_insurance_percent: Decimal = Field(..., ge=0, le=10)
    escrow_fees_percent: Decimal = Field(..., ge=0, le=10)
    lender_fees_percent: Decimal = Field(..., ge=0, le=10)
    recording_fees_percent: Decimal = Field(..., ge=0, le=5)
    inspection_appraisal_fixed: Decimal = Field(..., ge=0, le=50_000)

    def to_model(self) -> ClosingCosts:
        return ClosingCosts.from_partial(self.model_dump())


class DealInputsRequest(BaseModel):
    property: PropertyRequest
    financing: FinancingRequest
    operations: OperationsRequest
    tax_market: TaxMarketRequest
    closing_costs: ClosingCostsRequest

    def to_model(self) -> DealInputs:
        return DealInputs(
            property=self.property.to_model(),
            financing=self.financing.to_model(),
            operations=self.operations.to_model(),
            tax_market=self.tax_market.to_model(),
            closing_costs=self.closing_costs.to_model(),
        )


class SensitivityRequest(BaseModel):
    inputs: DealInputsRequest
    x_field: str = Field(..., description="Dotted input path, e.g. operations.vacancy_rate")
    x_values: list[Decimal] = Field(..., min_length=1)
    y_field: str
    y_values: list[Decimal] = Field(..., min_length=1)
    metric: str = "irr"


class ScoreRequest(BaseModel):
    irr_after_tax: Decimal
    average_cash_on_cash_after_tax: Decimal
    equity_multiple_after_tax: Decimal


class LoanOptionRequest(BaseModel):
    name: str
    interest_rate: Decimal = Field(..., ge=0, le=30)
    term_years: int = Field(..., ge=1, le=50)
    points: Decimal = Field(Decimal("0"), ge=0, le=10)

    def to_model(self) -> LoanOption:
        return LoanOption(
            name=self.name,
            interest_rate=self.interest_rate,
            term_years=self.term_years,
            points=self.points,
        )


class LoanComparisonRequest(BaseModel):
    purchase_price: Decimal = Field(..., ge=0, le=1_000_000_000)
    down_payment_percent: Decimal = Field(..., ge=0, le=100)
    options: list[LoanOptionRequest] = Field(..., min_length=1)


class ScenarioComparisonRequest(BaseModel):
    """Saved scenarios as partial input data (camelCase or snake_case keys)."""
    scenarios: list[dict[str, Any]] = Field(..., min_length=1)


# ---- Response schemas ----

class ProjectionResponse(BaseModel):
    forecast: list[ForecastYear]
    amortization_schedule: list[AmortizationEntry]
    metrics: Metrics
    score: DealScore


class SensitivityResponse(BaseModel):
    x_field: str
    x_values: list[Decimal]
    y_field: str
    y_values: list[Decimal]
    metric: str
    matrix: list[list[Decimal | None]]


class LoanComparisonResponse(BaseModel):
    loan_amount: Decimal
    comparisons: list[LoanComparison]


class ScenarioComparisonResponse(BaseModel):
    comparisons: list[ScenarioComparison]
