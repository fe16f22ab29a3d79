"""
Tests for scenario sweeps and stress tests.
"""

import pytest
from decimal import Decimal

from propcalc.calculations.bridging import BridgingInputs
from propcalc.calculations.buy_to_let import BuyToLetInputs, derive_buy_to_let
from propcalc.calculations.holiday_let import HolidayLetInputs
from propcalc.calculations.scenarios import (
    bridging_exit_scenarios,
    btl_rate_stress,
    btl_rent_sensitivity,
    fhl_vs_btl_by_bracket,
    sa_occupancy_scenarios,
    sweep,
)
from propcalc.calculations.serviced_accommodation import ServicedAccommodationInputs


@pytest.fixture
def btl():
    return BuyToLetInputs.from_form(
        {"purchase_price": "250000", "monthly_rent": "1200", "interest_rate": "5.5"}
    )


class TestSweep:
    """Test the generic sweep."""

    def test_one_result_per_value(self, btl, tables):
        results = sweep(derive_buy_to_let, btl, "monthly_rent", [Decimal("1000"), Decimal("1500")], tables)
        assert [r.value for r in results] == [Decimal("1000"), Decimal("1500")]
        assert results[1].result.annual_rent == Decimal("18000")
        assert all(r.field == "monthly_rent" for r in results)

    def test_base_is_not_mutated(self, btl, tables):
        sweep(derive_buy_to_let, btl, "monthly_rent", [Decimal("1")], tables)
        assert btl.monthly_rent == Decimal("1200")

    def test_unknown_field(self, btl, tables):
        with pytest.raises(ValueError):
            sweep(derive_buy_to_let, btl, "bedrooms", [1], tables)

    def test_non_dataclass_base(self, tables):
        with pytest.raises(TypeError):
            sweep(derive_buy_to_let, {"monthly_rent": 1}, "monthly_rent", [1], tables)


class TestStressTests:
    """Test the ready-made scenario runners."""

    def test_btl_rate_stress_defaults(self, btl, tables):
        results = btl_rate_stress(btl, tables=tables)
        assert [r.value for r in results] == [
            Decimal("0.055"),
            Decimal("0.065"),
            Decimal("0.075"),
            Decimal("0.085"),
        ]
        cashflows = [r.result.annual_cashflow for r in results]
        assert cashflows == sorted(cashflows, reverse=True)

    def test_btl_rate_stress_custom_rates(self, btl, tables):
        results = btl_rate_stress(btl, [Decimal("0.04")], tables)
        assert results[0].result.annual_mortgage_interest == Decimal("7500")

    def test_btl_rent_sensitivity(self, btl, tables):
        results = btl_rent_sensitivity(btl, [Decimal("900"), Decimal("1300")], tables)
        assert results[0].result.gross_yield < results[1].result.gross_yield

    def test_sa_occupancy_scenarios(self, tables):
        inputs = ServicedAccommodationInputs(adr=Decimal("100"), fixed_costs_monthly=Decimal("1500"))
        results = sa_occupancy_scenarios(inputs, [Decimal("0.4"), Decimal("0.6")], tables)
        assert [r.cashflow_monthly for r in results] == [Decimal("-300"), Decimal("300")]

    def test_bridging_exit_scenarios_default_horizon(self):
        inputs = BridgingInputs(
            loan_amount=Decimal("300000"), monthly_rate=Decimal("0.009"), term_months=9
        )
        rows = bridging_exit_scenarios(inputs)
        assert len(rows) == 18
        assert rows[-1].month == 18

    def test_fhl_vs_btl_by_bracket(self, tables):
        inputs = HolidayLetInputs.from_form(
            {"gross_income": "30000", "days_available": "250", "days_let": "150", "mortgage_interest": "6000"}
        )
        results = fhl_vs_btl_by_bracket(inputs, tables)
        assert [r.value for r in results] == ["basic", "higher", "additional"]
        assert [r.result.tax_rate for r in results] == [
            Decimal("0.20"),
            Decimal("0.40"),
            Decimal("0.45"),
        ]
        savings = [r.result.fhl_tax_saving for r in results]
        assert savings == sorted(savings)
