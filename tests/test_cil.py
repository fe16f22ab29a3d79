"""
Tests for Community Infrastructure Levy calculations.
"""

import pytest
from datetime import date
from decimal import Decimal

from propcalc.calculations.cil import (
    CilInputs,
    build_payment_schedule,
    calculate_cil,
    instalment_stage,
)


@pytest.fixture
def sample_cil_form():
    """500 sqm replacing 100 sqm of lawful use in London zone 1."""
    return {
        "local_authority": "london-mayoral",
        "charging_zone": "zone-1",
        "gross_floor_area": "500",
        "existing_floor_area": "100",
        "existing_use_lawful": "yes",
    }


class TestCalculateCil:
    """Test CIL liability."""

    def test_indexed_liability(self, sample_cil_form, tables):
        result = calculate_cil(CilInputs.from_form(sample_cil_form), tables)
        assert result.net_floor_area == Decimal("400")
        assert result.base_rate == Decimal("80")
        assert result.adoption_index == Decimal("334")
        assert result.current_index == Decimal("412")
        assert abs(result.indexation_multiplier - Decimal("1.2335")) < Decimal("0.0001")
        assert abs(result.liability - Decimal("39473.05")) < Decimal("0.01")

    def test_unlawful_existing_use_not_netted(self, sample_cil_form, tables):
        form = dict(sample_cil_form, existing_use_lawful="no")
        result = calculate_cil(CilInputs.from_form(form), tables)
        assert result.net_floor_area == Decimal("500")

    def test_existing_area_larger_than_gross(self, sample_cil_form, tables):
        form = dict(sample_cil_form, existing_floor_area="800")
        result = calculate_cil(CilInputs.from_form(form), tables)
        assert result.net_floor_area == 0
        assert result.liability == 0
        assert result.payment_schedule == []

    def test_social_housing_relief_reduces_area(self, sample_cil_form, tables):
        form = dict(sample_cil_form, social_housing_relief="50")
        result = calculate_cil(CilInputs.from_form(form), tables)
        assert result.relief_area == Decimal("200")
        assert result.chargeable_area == Decimal("200")

    def test_self_build_exemption(self, sample_cil_form, tables):
        form = dict(sample_cil_form, self_build_exemption="yes")
        result = calculate_cil(CilInputs.from_form(form), tables)
        assert result.liability == 0
        assert result.payment_schedule == []
        assert result.self_build_exemption is True

    def test_indexation_year(self, sample_cil_form, tables):
        form = dict(sample_cil_form, indexation_year="2022")
        result = calculate_cil(CilInputs.from_form(form), tables)
        assert result.current_index == Decimal("388")

    def test_unknown_authority_uses_default_zones(self, tables):
        inputs = CilInputs.from_form(
            {"local_authority": "Narnia", "charging_zone": "low", "gross_floor_area": "100"}
        )
        result = calculate_cil(inputs, tables)
        assert result.base_rate == Decimal("50")

    def test_per_sqm_uses_gross_area(self, sample_cil_form, tables):
        result = calculate_cil(CilInputs.from_form(sample_cil_form), tables)
        assert result.liability_per_sqm == result.liability / 500


class TestPaymentSchedule:
    """Test instalment policies."""

    def test_small_liability_paid_at_once(self, tables):
        schedule = build_payment_schedule(Decimal("45000"), tables)
        assert len(schedule) == 1
        assert schedule[0].amount == Decimal("45000")
        assert schedule[0].stage == "On commencement"
        assert schedule[0].percentage == Decimal("100")

    def test_medium_liability_two_instalments(self, tables):
        schedule = build_payment_schedule(
            Decimal("100000"), tables, commencement_date=date(2025, 1, 1)
        )
        assert [i.day_offset for i in schedule] == [0, 60]
        assert [i.amount for i in schedule] == [Decimal("50000"), Decimal("50000")]
        assert schedule[1].stage == "60 days"
        assert schedule[0].due_date == date(2025, 1, 1)
        assert schedule[1].due_date == date(2025, 3, 2)

    def test_large_liability_four_instalments(self, tables):
        schedule = build_payment_schedule(Decimal("600000"), tables)
        assert [i.day_offset for i in schedule] == [0, 60, 120, 180]
        assert all(i.percentage == Decimal("25") for i in schedule)
        assert sum(i.amount for i in schedule) == Decimal("600000")
        assert all(i.due_date is None for i in schedule)

    @pytest.mark.parametrize(
        "liability, count",
        [("49999.99", 1), ("50000", 2), ("499999.99", 2), ("500000", 4)],
    )
    def test_band_boundaries(self, liability, count, tables):
        schedule = build_payment_schedule(Decimal(liability), tables)
        assert len(schedule) == count
        assert sum(i.amount for i in schedule) == Decimal(liability)

    def test_zero_liability_has_no_schedule(self, tables):
        assert build_payment_schedule(Decimal("0"), tables) == []

    def test_instalments_sum_to_liability(self, sample_cil_form, tables):
        form = dict(sample_cil_form, gross_floor_area="3000", existing_floor_area="0")
        result = calculate_cil(CilInputs.from_form(form), tables)
        total = sum(i.amount for i in result.payment_schedule)
        assert abs(total - result.liability) < Decimal("0.000001")

    def test_commencement_date_from_form(self, sample_cil_form, tables):
        form = dict(sample_cil_form, commencement_date="2025-06-01")
        result = calculate_cil(CilInputs.from_form(form), tables)
        assert result.payment_schedule[0].due_date == date(2025, 6, 1)

    def test_stage_labels(self):
        assert instalment_stage(0) == "On commencement"
        assert instalment_stage(120) == "120 days"
