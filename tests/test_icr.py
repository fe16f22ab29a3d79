"""
Tests for the lender ICR stress test.
"""

import pytest
from dataclasses import replace
from decimal import Decimal

from propcalc.calculations.icr import IcrInputs, assess_icr


@pytest.fixture
def sample_icr_form():
    """£200k loan at 5% against £1,200 pcm."""
    return {
        "property_value": "280000",
        "loan_amount": "200000",
        "monthly_rent": "1200",
        "actual_rate": "5",
        "ownership_type": "limited-company",
    }


class TestAssessIcr:
    """Test stressed coverage against lender requirements."""

    def test_from_form_uses_table_stress_rate(self, sample_icr_form, tables):
        inputs = IcrInputs.from_form(sample_icr_form)
        assert inputs.stress_rate is None
        assert assess_icr(inputs, tables).stress_rate == Decimal("0.055")

    def test_passes_for_limited_company(self, sample_icr_form, tables):
        result = assess_icr(IcrInputs.from_form(sample_icr_form), tables)
        assert result.required_icr == Decimal("1.25")
        assert result.annual_interest_stress == Decimal("11000")
        assert abs(result.icr_at_stress_rate - Decimal("1.3091")) < Decimal("0.0001")
        assert result.icr_at_actual_rate == Decimal("1.44")
        assert result.passes_stress_test is True
        assert result.verdict == "Passes at 1.31x against 1.25x required"
        assert abs(result.margin_of_safety - Decimal("0.0473")) < Decimal("0.0001")

    def test_fails_for_higher_rate_taxpayer(self, sample_icr_form, tables):
        form = dict(sample_icr_form, ownership_type="personal-higher")
        result = assess_icr(IcrInputs.from_form(form), tables)
        assert result.required_icr == Decimal("1.45")
        assert result.passes_stress_test is False
        assert abs(result.required_rent_monthly - Decimal("1329.17")) < Decimal("0.01")
        assert result.rent_headroom < 0
        assert result.verdict == (
            "Fails at 1.31x against 1.45x required; rent of £1,329 a month needed"
        )

    def test_max_loan(self, sample_icr_form, tables):
        result = assess_icr(IcrInputs.from_form(sample_icr_form), tables)
        assert abs(result.max_loan - Decimal("209454.55")) < Decimal("0.01")
        assert result.loan_headroom > 0

    def test_max_loan_exactly_meets_requirement(self, sample_icr_form, tables):
        inputs = IcrInputs.from_form(sample_icr_form)
        max_loan = assess_icr(inputs, tables).max_loan
        at_max = assess_icr(replace(inputs, loan_amount=max_loan), tables)
        assert abs(at_max.icr_at_stress_rate - at_max.required_icr) < Decimal("0.000001")

    def test_custom_stress_rate(self, sample_icr_form, tables):
        form = dict(sample_icr_form, stress_test_rate="7")
        result = assess_icr(IcrInputs.from_form(form), tables)
        assert result.stress_rate == Decimal("0.07")
        assert result.annual_interest_stress == Decimal("14000")
        assert result.passes_stress_test is False

    def test_ltv(self, sample_icr_form, tables):
        result = assess_icr(IcrInputs.from_form(sample_icr_form), tables)
        assert abs(result.ltv - Decimal("0.7143")) < Decimal("0.0001")

    def test_no_loan(self, tables):
        result = assess_icr(IcrInputs.from_form({"monthly_rent": "1000"}), tables)
        assert result.icr_at_stress_rate == 0
        assert result.rental_coverage_ratio == 0
        assert result.ownership_type == "personal-higher"

    def test_unknown_ownership_type(self, sample_icr_form, tables):
        form = dict(sample_icr_form, ownership_type="trust")
        result = assess_icr(IcrInputs.from_form(form), tables)
        assert result.required_icr == Decimal("1.45")
