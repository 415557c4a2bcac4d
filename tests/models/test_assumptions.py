from decimal import Decimal, ROUND_HALF_UP

import pytest

from deal_analyzer.engine.proforma import project_deal
from deal_analyzer.models.assumptions import (
    DEFAULT_SCENARIO_NAME,
    CommercialExpenses,
    CommercialOperations,
    DealInputs,
    InputMode,
    Property,
    Scenario,
    SimpleOperations,
    TaxMarket,
    field_name,
    operations_from_partial,
)


class TestFieldName:
    @pytest.mark.parametrize(
        "key, expected",
        [
            ("purchasePrice", "purchase_price"),
            ("purchase_price", "purchase_price"),
            ("annualBaseRentPerSqFt", "annual_base_rent_per_sqft"),
            ("annualCapExReservePerSqFt", "annual_capex_reserve_per_sqft"),
            ("initialCapEx", "initial_capex"),
            ("use1031Exchange", "use_1031_exchange"),
            ("costSegYear1Bonus", "cost_seg_year1_bonus"),
            ("year1Noi", "year1_noi"),
        ],
    )
    def test_normalises(self, key, expected):
        assert field_name(key) == expected


class TestFromPartial:
    def test_empty_gives_defaults(self):
        inputs = DealInputs.from_partial({})
        assert inputs == DealInputs()
        assert inputs.property.purchase_price == Decimal("2000000")
        assert inputs.financing.loan_term_years == 25
        assert inputs.operations.input_mode is InputMode.COMMERCIAL
        assert inputs.operations.commercial_expenses.cam_per_sqft == Decimal("1.25")
        assert inputs.tax_market.exit_cap_rate == Decimal("6.5")
        assert inputs.closing_costs.inspection_appraisal_fixed == Decimal("2000")

    def test_none_gives_defaults(self):
        assert DealInputs.from_partial(None) == DealInputs()

    def test_camel_case_keys_and_coercion(self):
        inputs = DealInputs.from_partial({
            "property": {"purchasePrice": 750000, "landValuePercent": "25"},
            "taxMarket": {"holdPeriod": "7", "use1031Exchange": True, "exitCapRate": 7.25},
        })
        assert inputs.property.purchase_price == Decimal("750000")
        assert inputs.property.land_value_percent == Decimal("25")
        assert inputs.property.building_size == Decimal("10000")
        assert inputs.tax_market.hold_period == 7
        assert inputs.tax_market.use_1031_exchange is True
        assert inputs.tax_market.exit_cap_rate == Decimal("7.25")

    def test_null_and_unknown_keys(self):
        prop = Property.from_partial({"purchasePrice": None, "color": "blue"})
        assert prop == Property()

    def test_partial_commercial_expenses_keep_defaults(self):
        ops = operations_from_partial({"commercialExpenses": {"camPerSqFt": 2}})
        assert isinstance(ops, CommercialOperations)
        assert ops.commercial_expenses.cam_per_sqft == Decimal("2")
        assert ops.commercial_expenses.property_tax_per_sqft == Decimal("1.50")
        assert ops.commercial_expenses.repairs_maintenance_annual == Decimal("2500")

    def test_operations_level_reserve(self):
        ops = operations_from_partial({"annualCapExReservePerSqFt": 0.3})
        assert ops.commercial_expenses.capex_reserve_per_sqft == Decimal("0.3")

    def test_simple_mode(self):
        ops = operations_from_partial({"inputMode": "simple", "grossRentMonthly": 6000})
        assert isinstance(ops, SimpleOperations)
        assert ops.input_mode is InputMode.SIMPLE
        assert ops.gross_rent_monthly == Decimal("6000")
        assert ops.management_fee_rate == Decimal("8")

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            operations_from_partial({"inputMode": "industrial"})

    def test_null_exit_cap_is_kept(self):
        tax_market = Scenario.from_partial({"taxMarket": {"exitCapRate": None}}).inputs.tax_market
        assert tax_market.exit_cap_rate is None

    def test_omitted_exit_cap_takes_default(self):
        assert TaxMarket.from_partial({"holdPeriod": 5}).exit_cap_rate == Decimal("6.5")

    def test_null_exit_cap_appreciates_price(self):
        """$500K appreciated at the default 3% for the default 10 years."""
        inputs = DealInputs.from_partial({
            "property": {"purchasePrice": 500000},
            "taxMarket": {"exitCapRate": None},
        })
        exit_analysis = project_deal(inputs).metrics.exit_analysis
        expected = (Decimal("500000") * Decimal("1.03") ** 10).quantize(Decimal("0.01"), ROUND_HALF_UP)
        assert exit_analysis.gross_sale_price == expected == Decimal("671958.19")

    def test_recapture_zero_is_kept(self):
        assert TaxMarket.from_partial({"depreciationRecaptureRate": 0}).depreciation_recapture_rate == 0


class TestScenario:
    def test_default_name(self):
        assert Scenario.from_partial({}).name == DEFAULT_SCENARIO_NAME

    def test_named(self):
        scenario = Scenario.from_partial({"scenarioName": "Retail strip", "property": {"buildingSize": 8000}})
        assert scenario.name == "Retail strip"
        assert scenario.inputs.property.building_size == Decimal("8000")


class TestWithField:
    def test_does_not_mutate(self, commercial_inputs):
        updated = commercial_inputs.with_field("operations.vacancy_rate", 12)
        assert updated.operations.vacancy_rate == Decimal("12")
        assert commercial_inputs.operations.vacancy_rate == Decimal("5")

    def test_unqualified_path_is_tax_market(self, commercial_inputs):
        updated = commercial_inputs.with_field("exit_cap_rate", "7")
        assert updated.tax_market.exit_cap_rate == Decimal("7")

    def test_camel_case_path(self, commercial_inputs):
        updated = commercial_inputs.with_field("property.purchasePrice", 600000)
        assert updated.property.purchase_price == Decimal("600000")

    def test_nested_path(self, commercial_inputs):
        updated = commercial_inputs.with_field("operations.commercialExpenses.camPerSqFt", 2)
        assert updated.operations.commercial_expenses == CommercialExpenses(
            property_tax_per_sqft=Decimal("1.50"),
            insurance_per_sqft=Decimal("0.75"),
            cam_per_sqft=Decimal("2"),
            management_percent=Decimal("4"),
            repairs_maintenance_annual=Decimal("2500"),
            capex_reserve_per_sqft=Decimal("0.15"),
        )

    def test_coerces_to_field_type(self, commercial_inputs):
        updated = commercial_inputs.with_field("hold_period", Decimal("5"))
        assert updated.tax_market.hold_period == 5
        assert isinstance(updated.tax_market.hold_period, int)

    def test_coerces_bool(self, commercial_inputs):
        updated = commercial_inputs.with_field("use1031Exchange", 1)
        assert updated.tax_market.use_1031_exchange is True

    def test_float_values_are_exact(self, commercial_inputs):
        updated = commercial_inputs.with_field("financing.interest_rate", 6.1)
        assert updated.financing.interest_rate == Decimal("6.1")

    @pytest.mark.parametrize("value", [7.5, "7.5", Decimal("7.25")])
    def test_rejects_fractional_whole_number(self, commercial_inputs, value):
        with pytest.raises(ValueError):
            commercial_inputs.with_field("hold_period", value)

    def test_integral_float_accepted(self, commercial_inputs):
        assert commercial_inputs.with_field("hold_period", 7.0).tax_market.hold_period == 7

    def test_field_value(self, commercial_inputs):
        assert commercial_inputs.field_value("operations.vacancyRate") == Decimal("5")
        assert commercial_inputs.field_value("hold_period") == 10

    @pytest.mark.parametrize(
        "path",
        ["nonsense", "property.nonsense", "operations.gross_rent_monthly", "property.purchase_price.x"],
    )
    def test_unknown_path(self, commercial_inputs, path):
        with pytest.raises(ValueError):
            commercial_inputs.with_field(path, 1)
