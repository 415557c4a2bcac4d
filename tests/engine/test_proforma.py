from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP

import pytest

from deal_analyzer.engine.guards import as_percent
from deal_analyzer.engine.irr import compute_irr
from deal_analyzer.engine.proforma import project, project_deal

FOUR_PLACES = Decimal("0.0001")


def _with_tax(inputs, **changes):
    return replace(inputs, tax_market=replace(inputs.tax_market, **changes))


class TestProforma:
    def test_runs_without_error(self, commercial_inputs):
        result = project_deal(commercial_inputs)
        assert len(result.forecast) == 10
        assert len(result.amortization_schedule) == 25

    def test_struct_form_matches_bundle(self, commercial_inputs):
        result = project(
            commercial_inputs.property,
            commercial_inputs.financing,
            commercial_inputs.operations,
            commercial_inputs.tax_market,
            commercial_inputs.closing_costs,
        )
        assert result.metrics == project_deal(commercial_inputs).metrics

    def test_deterministic(self, simple_inputs):
        assert project_deal(simple_inputs) == project_deal(simple_inputs)

    def test_does_not_mutate_inputs(self, commercial_inputs):
        before = replace(commercial_inputs)
        project_deal(commercial_inputs)
        assert commercial_inputs == before

    @pytest.mark.parametrize("hold_period", [0, -1])
    def test_rejects_short_hold(self, commercial_inputs, hold_period):
        with pytest.raises(ValueError):
            project_deal(_with_tax(commercial_inputs, hold_period=hold_period))

    def test_single_year_hold(self, simple_inputs):
        result = project_deal(_with_tax(simple_inputs, hold_period=1))
        assert len(result.forecast) == 1
        assert result.metrics.exit_analysis.loan_balance_at_exit == result.forecast[0].ending_loan_balance


class TestMetrics:
    def test_year_one_snapshot(self, commercial_inputs):
        m = project_deal(commercial_inputs).metrics
        assert m.year1_noi == Decimal("86410.00")
        assert m.cap_rate == Decimal("17.2820")
        assert m.total_initial_investment == Decimal("167000.00")
        assert m.loan_amount == Decimal("375000.00")
        assert m.closing_costs_breakdown.total == Decimal("17000.00")
        assert m.annual_depreciation == Decimal("10897.44")

    def test_dscr(self, commercial_inputs):
        result = project_deal(commercial_inputs)
        y1 = result.forecast[0]
        assert result.metrics.dscr == (y1.noi / y1.debt_service).quantize(FOUR_PLACES, ROUND_HALF_UP)
        assert result.metrics.dscr > Decimal("2.5")

    def test_cash_on_cash_uses_total_initial_investment(self, commercial_inputs, simple_inputs):
        for inputs in (commercial_inputs, simple_inputs):
            result = project_deal(inputs)
            invested = result.metrics.total_initial_investment
            for y in result.forecast:
                assert y.cash_on_cash == as_percent(y.cash_flow, invested).quantize(
                    FOUR_PLACES, ROUND_HALF_UP
                )
                assert y.cash_on_cash_after_tax == as_percent(
                    y.cash_flow_after_tax, invested
                ).quantize(FOUR_PLACES, ROUND_HALF_UP)

    def test_dscr_zero_without_debt(self, commercial_inputs):
        financing = replace(commercial_inputs.financing, down_payment_percent=Decimal("100"))
        m = project_deal(replace(commercial_inputs, financing=financing)).metrics
        assert m.dscr == Decimal("0")
        assert m.monthly_debt_service == Decimal("0")

    def test_returns_positive(self, commercial_inputs, simple_inputs):
        for inputs in (commercial_inputs, simple_inputs):
            m = project_deal(inputs).metrics
            assert m.irr > 0
            assert m.irr_after_tax > 0
            assert m.equity_multiple > 1

    def test_irr_matches_cash_flows(self, commercial_inputs):
        result = project_deal(commercial_inputs)
        m = result.metrics
        flows = [-m.total_initial_investment] + [y.cash_flow for y in result.forecast]
        flows[-1] += m.net_sale_proceeds
        assert m.irr == compute_irr(flows)

    def test_equity_multiple(self, commercial_inputs):
        result = project_deal(commercial_inputs)
        m = result.metrics
        returned = sum(y.cash_flow for y in result.forecast) + m.net_sale_proceeds
        expected = (returned / m.total_initial_investment).quantize(Decimal("0.0001"))
        assert abs(m.equity_multiple - expected) <= Decimal("0.0001")

    def test_total_profit(self, commercial_inputs):
        result = project_deal(commercial_inputs)
        m = result.metrics
        after_tax = sum(y.cash_flow_after_tax for y in result.forecast)
        assert m.total_profit == after_tax + m.net_cash_from_sale - m.total_initial_investment

    def test_average_cash_on_cash(self, simple_inputs):
        result = project_deal(simple_inputs)
        average = sum(y.cash_on_cash for y in result.forecast) / len(result.forecast)
        assert abs(result.metrics.average_cash_on_cash - average) <= Decimal("0.0001")

    def test_npv_below_zero_at_high_discount(self, commercial_inputs):
        m = project_deal(_with_tax(commercial_inputs, discount_rate=Decimal("90"))).metrics
        assert m.npv_after_tax < 0

    def test_all_cash_irr_beats_cap_rate(self, commercial_inputs):
        """Unlevered IRR exceeds going-in cap rate when NOI and value grow."""
        financing = replace(commercial_inputs.financing, down_payment_percent=Decimal("100"))
        m = project_deal(replace(commercial_inputs, financing=financing)).metrics
        assert m.irr > 0
        assert m.irr > m.cap_rate


class TestExitWiring:
    def test_exit_uses_final_year(self, commercial_inputs):
        result = project_deal(commercial_inputs)
        final = result.forecast[-1]
        exit_analysis = result.metrics.exit_analysis
        assert exit_analysis.loan_balance_at_exit == final.ending_loan_balance
        expected_price = (final.noi * Decimal("1.03") / Decimal("0.065")).quantize(Decimal("0.01"))
        assert abs(exit_analysis.gross_sale_price - expected_price) <= Decimal("0.01")

    def test_cost_segregation_summary(self, commercial_inputs):
        inputs = _with_tax(
            commercial_inputs, use_cost_segregation=True, cost_seg_year1_bonus=Decimal("40000")
        )
        m = project_deal(inputs).metrics
        assert m.cost_segregation.year1_bonus == Decimal("40000")
        assert m.cost_segregation.total_depreciation == m.annual_depreciation * 10 + Decimal("40000")

    def test_no_cost_segregation_summary_by_default(self, commercial_inputs):
        assert project_deal(commercial_inputs).metrics.cost_segregation is None

    def test_1031_raises_after_tax_return(self, commercial_inputs):
        base = project_deal(commercial_inputs).metrics
        exchanged = project_deal(_with_tax(commercial_inputs, use_1031_exchange=True)).metrics
        assert exchanged.net_cash_from_sale > base.net_cash_from_sale
        assert exchanged.irr_after_tax > base.irr_after_tax
        assert exchanged.irr == base.irr
