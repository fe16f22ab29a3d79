"""
Tests for serviced accommodation occupancy and break-even.
"""

import pytest
from decimal import Decimal

from propcalc.calculations.serviced_accommodation import (
    ServicedAccommodationInputs,
    calculate_sa_breakeven,
    cashflow_for_nights,
    net_revenue_per_night,
    occupancy_cashflow,
    occupancy_sweep,
)


@pytest.fixture
def simple_sa():
    """£100 a night against £1,500 a month of fixed costs."""
    return ServicedAccommodationInputs.from_form(
        {"adr": "100", "fixed_costs_monthly": "1000", "mortgage_monthly": "500", "target_monthly_profit": "500"}
    )


@pytest.fixture
def full_sa():
    """Platform fees, cleaning charges and variable costs all in play."""
    return ServicedAccommodationInputs.from_form(
        {
            "adr": "120",
            "fixed_costs_monthly": "1000",
            "mortgage_monthly": "800",
            "variable_cost_per_night": "10",
            "cleaning_fee": "60",
            "cleaning_cost": "40",
            "platform_fee_percent": "15",
            "average_stay_length": "3",
            "target_monthly_profit": "1000",
        }
    )


class TestNetRevenue:
    """Test per-night contribution."""

    def test_simple(self, simple_sa):
        assert net_revenue_per_night(simple_sa) == Decimal("100")

    def test_with_fees_and_cleaning(self, full_sa):
        # 120 * 0.85 + 20 / 3 - 10
        assert abs(net_revenue_per_night(full_sa) - Decimal("98.6667")) < Decimal("0.0001")

    def test_zero_stay_length_ignores_cleaning(self):
        inputs = ServicedAccommodationInputs(adr=Decimal("80"), cleaning_fee=Decimal("50"))
        assert net_revenue_per_night(inputs) == Decimal("80")


class TestOccupancy:
    """Test occupancy cashflow."""

    def test_half_occupancy(self, simple_sa, tables):
        scenario = occupancy_cashflow(simple_sa, Decimal("0.5"), tables)
        assert scenario.nights_per_month == Decimal("15")
        assert scenario.gross_revenue_monthly == Decimal("1500")
        assert scenario.cashflow_monthly == 0
        assert scenario.cashflow_annual == 0

    def test_default_sweep(self, simple_sa, tables):
        scenarios = occupancy_sweep(simple_sa, tables=tables)
        assert [s.occupancy for s in scenarios] == tables.sa_occupancy_scenarios
        cashflows = [s.cashflow_monthly for s in scenarios]
        assert cashflows == sorted(cashflows)

    def test_gross_bookings_model(self, full_sa):
        scenario = cashflow_for_nights(full_sa, Decimal("18"))
        # 6 bookings: 2160 room revenue + 360 cleaning fees
        assert scenario.gross_revenue_monthly == Decimal("2520")
        # less 324 platform, 180 variable, 240 cleaning
        assert scenario.net_revenue_monthly == Decimal("1776")
        assert scenario.cashflow_monthly == Decimal("-24")


class TestBreakeven:
    """Test break-even and target occupancy."""

    def test_simple_breakeven(self, simple_sa, tables):
        result = calculate_sa_breakeven(simple_sa, tables)
        assert result.breakeven_nights_monthly == Decimal("15")
        assert result.breakeven_nights_annual == Decimal("180")
        assert result.breakeven_occupancy == Decimal("0.5")
        assert result.breakeven_achievable is True
        assert result.target_nights_monthly == Decimal("20")
        assert result.safety_margin_nights == Decimal("4.5")
        assert result.total_fixed_costs_annual == Decimal("18000")

    def test_breakeven_verified_independently(self, full_sa, tables):
        result = calculate_sa_breakeven(full_sa, tables)
        assert result.breakeven_verified is True
        assert abs(result.breakeven_residual) < Decimal("0.01")
        assert abs(result.breakeven_nights_monthly - Decimal("18.2432")) < Decimal("0.0001")
        assert abs(result.target_occupancy - Decimal("0.9459")) < Decimal("0.0001")

    @pytest.mark.parametrize(
        "adr,fixed,variable",
        [("75", "900", "5"), ("150", "2500", "25"), ("99.99", "1234.56", "0")],
    )
    def test_breakeven_cashflow_is_zero(self, adr, fixed, variable, tables):
        inputs = ServicedAccommodationInputs(
            adr=Decimal(adr),
            fixed_costs_monthly=Decimal(fixed),
            variable_cost_per_night=Decimal(variable),
            platform_fee_rate=Decimal("0.03"),
        )
        result = calculate_sa_breakeven(inputs, tables)
        assert result.breakeven_verified is True

    def test_breakeven_beyond_month_not_achievable(self, tables):
        inputs = ServicedAccommodationInputs(adr=Decimal("50"), fixed_costs_monthly=Decimal("2000"))
        result = calculate_sa_breakeven(inputs, tables)
        assert result.breakeven_nights_monthly == Decimal("40")
        assert result.breakeven_achievable is False
        assert result.safety_margin_nights == 0

    def test_loss_per_night_has_no_breakeven(self, tables):
        inputs = ServicedAccommodationInputs(
            adr=Decimal("10"),
            variable_cost_per_night=Decimal("20"),
            fixed_costs_monthly=Decimal("500"),
        )
        result = calculate_sa_breakeven(inputs, tables)
        assert result.breakeven_nights_monthly == 0
        assert result.breakeven_achievable is False
        assert result.breakeven_verified is False

    def test_revpar(self, simple_sa, tables):
        result = calculate_sa_breakeven(simple_sa, tables)
        assert result.revpar_at_50 == Decimal("50")
        assert result.revpar_at_65 == Decimal("65")
        assert result.revpar_at_80 == Decimal("80")
