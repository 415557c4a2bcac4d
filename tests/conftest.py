"""Canonical test fixtures used across all tests.

Commercial fixture: $500K NNN building, 5,000 sf at $20/sf base rent,
25% down at 7% for 25 years, 10-year hold, 6.5% exit cap.
Simple fixture: same price and financing, $5,000/month gross rent.
"""

import pytest
from decimal import Decimal

from deal_analyzer.models.assumptions import (
    ClosingCosts,
    CommercialExpenses,
    CommercialOperations,
    DealInputs,
    Financing,
    Property,
    SimpleOperations,
    TaxMarket,
)


def _property() -> Property:
    return Property(
        purchase_price=Decimal("500000"),
        rehab_costs=Decimal("0"),
        after_repair_value=Decimal("500000"),
        land_value_percent=Decimal("20"),
        building_size=Decimal("5000"),
    )


def _financing() -> Financing:
    return Financing(
        down_payment_percent=Decimal("25"),
        interest_rate=Decimal("7"),
        loan_term_years=25,
    )


def _tax_market() -> TaxMarket:
    return TaxMarket(
        income_tax_rate=Decimal("37"),
        capital_gains_tax_rate=Decimal("20"),
        depreciation_years=Decimal("39"),
        depreciation_recapture_rate=Decimal("25"),
        selling_costs=Decimal("3"),
        discount_rate=Decimal("10"),
        exit_cap_rate=Decimal("6.5"),
        hold_period=10,
    )


@pytest.fixture
def commercial_inputs() -> DealInputs:
    """$500K NNN deal: year-1 PGI $117,500, NOI $86,410."""
    return DealInputs(
        property=_property(),
        financing=_financing(),
        operations=CommercialOperations(
            vacancy_rate=Decimal("5"),
            annual_rent_growth=Decimal("3"),
            annual_expense_growth=Decimal("2"),
            initial_capex=Decimal("25000"),
            annual_base_rent_per_sqft=Decimal("20"),
            other_income_percent=Decimal("0"),
            commercial_expenses=CommercialExpenses(
                property_tax_per_sqft=Decimal("1.50"),
                insurance_per_sqft=Decimal("0.75"),
                cam_per_sqft=Decimal("1.25"),
                management_percent=Decimal("4"),
                repairs_maintenance_annual=Decimal("2500"),
                capex_reserve_per_sqft=Decimal("0.15"),
            ),
        ),
        tax_market=_tax_market(),
        closing_costs=ClosingCosts(),
    )


@pytest.fixture
def simple_inputs() -> DealInputs:
    """$500K rental: year-1 PGI $62,400, NOI $40,209.60."""
    return DealInputs(
        property=_property(),
        financing=_financing(),
        operations=SimpleOperations(
            vacancy_rate=Decimal("5"),
            annual_rent_growth=Decimal("3"),
            annual_expense_growth=Decimal("2"),
            initial_capex=Decimal("0"),
            gross_rent_monthly=Decimal("5000"),
            other_income_monthly=Decimal("200"),
            property_tax_rate=Decimal("1.2"),
            insurance_annual=Decimal("2400"),
            management_fee_rate=Decimal("8"),
            maintenance_rate=Decimal("5"),
            capex_rate=Decimal("5"),
        ),
        tax_market=_tax_market(),
        closing_costs=ClosingCosts(),
    )
