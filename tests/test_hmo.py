"""
Tests for HMO viability and licensing estimates.
"""

import pytest
from decimal import Decimal

from propcalc.calculations.exceptions import ParseError
from propcalc.calculations.hmo import (
    HmoInputs,
    derive_hmo,
    estimate_fire_safety_cost,
    estimate_licence,
)


@pytest.fixture
def sample_hmo_form():
    """Six rooms at £600 pcm on a £300k purchase."""
    return {
        "purchase_price": "300000",
        "number_of_rooms": "6",
        "average_room_rent": "600",
        "deposit_percent": "25",
        "interest_rate": "6",
        "management_fee": "12",
        "licence_cost": "1000",
        "insurance_cost": "800",
        "utilities_cost": "400",
        "cleaning_cost": "100",
        "maintenance_percent": "5",
        "void_percent": "5",
    }


class TestHmoInputs:
    """Test HMO form handling."""

    def test_room_rents_parsed(self):
        inputs = HmoInputs.from_form({"room_rents": ["£500", "550", 600]})
        assert inputs.room_rents == (Decimal("500"), Decimal("550"), Decimal("600"))

    def test_room_rents_must_be_a_list(self):
        with pytest.raises(TypeError):
            HmoInputs.from_form({"room_rents": "500,550"})

    def test_strict_rejects_bad_room_rent(self):
        with pytest.raises(ParseError):
            HmoInputs.from_form({"room_rents": ["500", "lots"]}, strict=True)

    def test_lenient_bad_room_rent_is_zero(self):
        inputs = HmoInputs.from_form({"room_rents": ["500", "lots"]})
        assert inputs.room_rents == (Decimal("500"), Decimal("0"))


class TestDeriveHmo:
    """Test HMO viability metrics."""

    def test_rent_and_costs(self, sample_hmo_form, tables):
        metrics = derive_hmo(HmoInputs.from_form(sample_hmo_form), tables)
        assert metrics.monthly_gross_rent == Decimal("3600")
        assert metrics.annual_gross_rent == Decimal("43200")
        assert metrics.effective_rent == Decimal("41040")
        assert metrics.annual_management == Decimal("4924.8")
        assert metrics.annual_maintenance == Decimal("2052")
        assert metrics.annual_licence == Decimal("200")
        assert metrics.total_operating_costs == Decimal("13976.8")
        assert metrics.net_operating_income == Decimal("27063.2")

    def test_finance_and_returns(self, sample_hmo_form, tables):
        metrics = derive_hmo(HmoInputs.from_form(sample_hmo_form), tables)
        assert metrics.mortgage_amount == Decimal("225000")
        assert metrics.annual_mortgage_interest == Decimal("13500")
        assert metrics.annual_cashflow == Decimal("13563.2")
        assert metrics.gross_yield == Decimal("0.144")
        assert abs(metrics.icr - Decimal("3.4909")) < Decimal("0.0001")
        assert metrics.hmo_vs_btl_multiplier == Decimal("2.88")
        assert metrics.cost_per_room == Decimal("50000")

    def test_per_room_cashflow(self, sample_hmo_form, tables):
        metrics = derive_hmo(HmoInputs.from_form(sample_hmo_form), tables)
        assert abs(metrics.per_room_cashflow * 6 - metrics.monthly_cashflow) < Decimal("0.000001")

    def test_room_rents_override_average(self, sample_hmo_form, tables):
        form = dict(sample_hmo_form, room_rents=["500", "550", "600"])
        metrics = derive_hmo(HmoInputs.from_form(form), tables)
        assert metrics.number_of_rooms == 3
        assert metrics.monthly_gross_rent == Decimal("1650")

    def test_refurb_included_in_yield_base(self, sample_hmo_form, tables):
        form = dict(sample_hmo_form, refurb_cost="60000")
        metrics = derive_hmo(HmoInputs.from_form(form), tables)
        assert metrics.total_investment == Decimal("360000")
        assert metrics.gross_yield == Decimal("0.12")

    def test_no_rooms_gives_zero_per_room(self, tables):
        metrics = derive_hmo(HmoInputs.from_form({"purchase_price": "200000"}), tables)
        assert metrics.per_room_cashflow == 0
        assert metrics.cost_per_room == 0


class TestHmoLicence:
    """Test licence fee and fire safety estimates."""

    def test_licence_fee_by_tier(self, tables):
        estimate = estimate_licence(
            {"bedrooms": "6", "storeys": "3", "council_tier": "High"}, tables=tables
        )
        assert estimate.council_tier == "high"
        assert estimate.licence_fee == Decimal("1980")
        assert estimate.annual_cost == Decimal("396")

    def test_unknown_tier_uses_default(self, tables):
        estimate = estimate_licence({"bedrooms": "5", "council_tier": "mega"}, tables=tables)
        assert estimate.council_tier == "medium"
        assert estimate.licence_fee == Decimal("1150")

    def test_fire_safety_from_scratch(self):
        assert estimate_fire_safety_cost(3, 6, False, False, False) == Decimal("6400")

    def test_fire_safety_fully_compliant(self):
        assert estimate_fire_safety_cost(2, 5, True, True, True) == Decimal("0")
        assert estimate_fire_safety_cost(3, 5, True, True, True) == Decimal("1500")

    def test_licence_form_flags(self, tables):
        estimate = estimate_licence(
            {
                "bedrooms": "4",
                "has_fire_doors": "yes",
                "has_alarm_system": "yes",
                "has_emergency_lighting": "no",
            },
            tables=tables,
        )
        # Two storeys by default
        assert estimate.fire_safety_cost == Decimal("400")
