"""
Tests for BRRR refinance and return metrics.
"""

import pytest
from dataclasses import replace
from decimal import Decimal

from propcalc.calculations.brrr import BrrrInputs, derive_brrr, recycle_status


@pytest.fixture
def sample_brrr():
    """£150k purchase, £30k refurb, refinanced at 75% of a £220k ARV."""
    return BrrrInputs.from_form(
        {
            "purchase_price": "150,000",
            "refurb_cost": "30000",
            "after_repair_value": "220000",
            "monthly_rent": "950",
            "refinance_ltv": "75",
            "refinance_rate": "5.5",
            "bridging_rate": "0.85",
            "bridging_term": "6",
            "stamp_duty": "5000",
            "legal_fees": "2500",
            "survey_fees": "500",
            "management_fee": "10",
        }
    )


class TestBrrrInputs:
    def test_from_form(self, sample_brrr):
        assert sample_brrr.purchase_price == Decimal("150000")
        assert sample_brrr.refinance_ltv == Decimal("0.75")
        assert sample_brrr.bridging_rate == Decimal("0.0085")
        assert sample_brrr.bridging_term_months == 6

    def test_refinance_ltv_defaults_to_75_percent(self):
        assert BrrrInputs.from_form({}).refinance_ltv == Decimal("0.75")


class TestDeriveBrrr:
    """Test the refinance, cashflow and returns of a BRRR project."""

    def test_acquisition_costs(self, sample_brrr, tables):
        metrics = derive_brrr(sample_brrr, tables)
        assert metrics.total_investment == Decimal("188000")
        assert metrics.bridging_interest == Decimal("9180")
        assert metrics.total_with_bridging == Decimal("197180")

    def test_refinance(self, sample_brrr, tables):
        metrics = derive_brrr(sample_brrr, tables)
        assert metrics.refinance_amount == Decimal("165000")
        assert metrics.monthly_mortgage == Decimal("756.25")
        assert metrics.annual_mortgage == Decimal("9075")
        assert metrics.money_left_in == Decimal("32180")
        assert metrics.recycled_capital == Decimal("-32180")
        assert not metrics.all_capital_recycled
        # £32,180 left in is under 20% of the £188,000 invested
        assert metrics.recycle_status == "good"

    def test_value_and_cashflow(self, sample_brrr, tables):
        metrics = derive_brrr(sample_brrr, tables)
        assert metrics.value_added == Decimal("70000")
        assert metrics.equity_gain == Decimal("55000")
        assert metrics.effective_rent == Decimal("10260")
        assert metrics.annual_cashflow == Decimal("1185")
        assert metrics.monthly_cashflow == Decimal("98.75")

    def test_returns(self, sample_brrr, tables):
        metrics = derive_brrr(sample_brrr, tables)
        assert abs(metrics.cash_on_cash - Decimal("0.036824")) < Decimal("0.000001")
        assert abs(metrics.return_on_investment - Decimal("0.361010")) < Decimal("0.000001")
        assert abs(metrics.dscr - Decimal("1.130579")) < Decimal("0.000001")
        assert abs(metrics.gross_yield - Decimal("0.051818")) < Decimal("0.000001")

    def test_full_recycle_has_no_cash_on_cash(self, sample_brrr, tables):
        metrics = derive_brrr(replace(sample_brrr, after_repair_value=Decimal("300000")), tables)
        assert metrics.refinance_amount == Decimal("225000")
        assert metrics.money_left_in == Decimal("-27820")
        assert metrics.recycled_capital == Decimal("27820")
        assert metrics.all_capital_recycled
        assert metrics.recycle_status == "full"
        assert metrics.cash_on_cash == 0
        assert metrics.annual_cashflow == Decimal("-2115")

    def test_capital_trapped_at_low_ltv(self, sample_brrr, tables):
        metrics = derive_brrr(replace(sample_brrr, refinance_ltv=Decimal("0.50")), tables)
        assert metrics.money_left_in == Decimal("87180")
        assert metrics.recycle_status == "trapped"

    def test_no_refinance_has_no_dscr(self, tables):
        metrics = derive_brrr(BrrrInputs.from_form({"purchase_price": "100000"}), tables)
        assert metrics.refinance_amount == 0
        assert metrics.dscr == 0
        assert metrics.gross_yield == 0


class TestRecycleStatus:
    @pytest.mark.parametrize(
        "money_left_in,status",
        [("-1", "full"), ("0", "full"), ("19999", "good"), ("20000", "trapped")],
    )
    def test_thresholds(self, money_left_in, status):
        assert recycle_status(Decimal(money_left_in), Decimal("100000"), Decimal("0.20")) == status
