"""
Tests for income tax and Section 24 calculations.
"""

import pytest
from decimal import Decimal

from propcalc.calculations.tax import (
    IncomeTaxInputs,
    Section24Inputs,
    calculate_income_tax,
    calculate_section24_impact,
    compare_limited_company,
    income_tax_due,
    tapered_personal_allowance,
)


class TestIncomeTax:
    """Test income tax with the allowance taper."""

    def test_basic_rate(self, tables):
        result = calculate_income_tax(
            IncomeTaxInputs.from_form({"rental_profit": "20000", "other_income": "30000"}),
            tables,
        )
        assert result.personal_allowance == Decimal("12570")
        assert result.taxable_income == Decimal("37430")
        assert result.total_tax == Decimal("7486")
        assert result.tax_on_rental_profit == Decimal("4000")
        assert result.band_rate == Decimal("0.20")
        assert result.marginal_rate == Decimal("0.20")

    def test_allowance_taper(self, tables):
        assert tapered_personal_allowance(Decimal("100000"), tables) == Decimal("12570")
        assert tapered_personal_allowance(Decimal("110000"), tables) == Decimal("7570")
        assert tapered_personal_allowance(Decimal("125140"), tables) == 0
        assert tapered_personal_allowance(Decimal("200000"), tables) == 0

    def test_sixty_percent_trap(self, tables):
        result = calculate_income_tax(IncomeTaxInputs(rental_profit=Decimal("110000")), tables)
        assert result.total_tax == Decimal("33432")
        assert result.band_rate == Decimal("0.40")
        assert result.marginal_rate == Decimal("0.60")

    def test_additional_rate(self, tables):
        result = calculate_income_tax(IncomeTaxInputs(rental_profit=Decimal("200000")), tables)
        # 7540 + 34976 + 33687
        assert result.total_tax == Decimal("76203")
        assert result.marginal_rate == Decimal("0.45")

    def test_breakdown_sums_to_total(self, tables):
        result = calculate_income_tax(IncomeTaxInputs(rental_profit=Decimal("150000")), tables)
        assert sum(s.tax for s in result.breakdown) == result.total_tax
        assert sum(s.taxable for s in result.breakdown) == result.taxable_income

    def test_zero_income(self, tables):
        result = calculate_income_tax(IncomeTaxInputs(rental_profit=Decimal("0")), tables)
        assert result.total_tax == 0
        assert result.effective_rate == 0
        assert result.band_rate == 0

    def test_income_tax_due_within_allowance(self, tables):
        assert income_tax_due(Decimal("12000"), tables) == 0


@pytest.fixture
def sample_s24():
    """Higher rate landlord: £20k rent, £8k interest, £2k costs."""
    return Section24Inputs.from_form(
        {
            "annual_rent": "20000",
            "mortgage_interest": "8000",
            "other_expenses": "2000",
            "tax_band": "40",
        }
    )


class TestSection24:
    """Test the interest relief restriction."""

    def test_old_regime(self, sample_s24, tables):
        result = calculate_section24_impact(sample_s24, tables)
        assert result.old_net_profit == Decimal("10000")
        assert result.old_tax_due == Decimal("4000")
        assert result.old_net_income == Decimal("6000")

    def test_new_regime(self, sample_s24, tables):
        result = calculate_section24_impact(sample_s24, tables)
        assert result.new_taxable_income == Decimal("18000")
        assert result.new_tax_before_credit == Decimal("7200")
        assert result.tax_credit == Decimal("1600")
        assert result.new_tax_due == Decimal("5600")
        assert result.new_net_income == Decimal("4400")

    def test_impact(self, sample_s24, tables):
        result = calculate_section24_impact(sample_s24, tables)
        assert result.additional_tax == Decimal("1600")
        assert result.percentage_increase == Decimal("0.4")
        assert result.income_reduction == Decimal("1600")
        assert result.personal_effective_rate == Decimal("0.56")

    def test_limited_company_comparison(self, sample_s24, tables):
        result = calculate_section24_impact(sample_s24, tables)
        company = result.limited_company
        assert company.corporation_tax_rate == Decimal("0.19")
        assert company.corporation_tax == Decimal("1900")
        assert company.dividend_tax_rate == Decimal("0.3375")
        assert company.dividend_tax == Decimal("2565")
        assert company.net_after_dividend == Decimal("5535")
        assert result.limited_company_saving == Decimal("1135")

    def test_basic_rate_taxpayer_unaffected(self, tables):
        inputs = Section24Inputs.from_form(
            {"annual_rent": "20000", "mortgage_interest": "8000", "tax_band": "20"}
        )
        result = calculate_section24_impact(inputs, tables)
        assert result.additional_tax == 0

    def test_tax_band_defaults_to_higher(self):
        inputs = Section24Inputs.from_form({"annual_rent": "1000"})
        assert inputs.tax_rate == Decimal("0.40")

    def test_credit_cannot_create_refund(self, tables):
        inputs = Section24Inputs.from_form(
            {"annual_rent": "10000", "mortgage_interest": "15000", "tax_band": "40"}
        )
        result = calculate_section24_impact(inputs, tables)
        assert result.new_tax_due == Decimal("1000")
        assert result.old_tax_due == 0
        assert result.percentage_increase == 0


class TestLimitedCompany:
    """Test corporation tax and dividend extraction."""

    def test_main_rate_above_limit(self, tables):
        company = compare_limited_company(Decimal("60000"), Decimal("0.45"), tables)
        assert company.corporation_tax_rate == Decimal("0.25")
        assert company.retained_profit == Decimal("45000")
        assert company.dividend_tax_rate == Decimal("0.3935")

    def test_loss(self, tables):
        company = compare_limited_company(Decimal("-5000"), Decimal("0.20"), tables)
        assert company.corporation_tax == 0
        assert company.dividend_tax == 0
        assert company.effective_rate == 0
