"""
BRRR Calculations

Buy, refurbish, refinance, rent, repeat. A purchase and refurbishment
funded on a bridging loan is refinanced onto an interest-only mortgage
at the after-repair value (ARV); the metrics show how much capital the
refinance releases and what the let then returns on the money left in.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from propcalc.calculations.amortization import interest_only_payment
from propcalc.calculations.bridging import retained_interest
from propcalc.calculations.parsing import FormReader
from propcalc.calculations.ratios import (
    ONE,
    annualise,
    compute_cash_on_cash,
    compute_dscr,
    compute_yield,
    monthly,
    safe_divide,
)
from propcalc.calculations.tables import RateTables, get_default_tables


@dataclass(frozen=True)
class BrrrInputs:
    purchase_price: Decimal
    refurb_cost: Decimal
    after_repair_value: Decimal
    monthly_rent: Decimal
    refinance_ltv: Decimal  # 0.75 for 75%
    refinance_rate: Decimal  # annual
    bridging_rate: Decimal  # monthly
    bridging_term_months: int
    stamp_duty: Decimal = Decimal("0")
    legal_fees: Decimal = Decimal("0")
    survey_fees: Decimal = Decimal("0")
    management_rate: Decimal = Decimal("0")  # share of annual rent

    @classmethod
    def from_form(cls, form: Mapping[str, Any], strict: bool = False) -> "BrrrInputs":
        reader = FormReader(form, strict)
        return cls(
            purchase_price=reader.amount("purchase_price"),
            refurb_cost=reader.amount("refurb_cost"),
            after_repair_value=reader.amount("after_repair_value"),
            monthly_rent=reader.amount("monthly_rent"),
            refinance_ltv=reader.rate("refinance_ltv", "75"),
            refinance_rate=reader.rate("refinance_rate"),
            bridging_rate=reader.rate("bridging_rate"),
            bridging_term_months=reader.count("bridging_term"),
            stamp_duty=reader.amount("stamp_duty"),
            legal_fees=reader.amount("legal_fees"),
            survey_fees=reader.amount("survey_fees"),
            management_rate=reader.rate("management_fee"),
        )


@dataclass(frozen=True)
class BrrrMetrics:
    """Derived BRRR metrics. Rates and yields are fractions."""

    # Acquisition
    total_investment: Decimal
    bridging_interest: Decimal
    total_with_bridging: Decimal

    # Refinance
    refinance_amount: Decimal
    monthly_mortgage: Decimal
    annual_mortgage: Decimal
    money_left_in: Decimal
    recycled_capital: Decimal
    all_capital_recycled: bool
    recycle_status: str  # full, good or trapped

    # Value
    value_added: Decimal
    equity_gain: Decimal

    # Income
    annual_rent: Decimal
    effective_rent: Decimal
    annual_cashflow: Decimal
    monthly_cashflow: Decimal

    # Returns
    gross_yield: Decimal
    cash_on_cash: Decimal
    return_on_investment: Decimal
    dscr: Decimal


def recycle_status(money_left_in: Decimal, total_investment: Decimal, good_share: Decimal) -> str:
    """Classify how much of the investment the refinance pulled back out."""
    if money_left_in <= 0:
        return "full"
    if money_left_in < total_investment * good_share:
        return "good"
    return "trapped"


def derive_brrr(inputs: BrrrInputs, tables: Optional[RateTables] = None) -> BrrrMetrics:
    """
    Derive refinance, cashflow and return metrics for a BRRR project.

    Bridging interest is simple interest on the purchase and refurb for
    the bridging term. Cash-on-cash is zero once the refinance releases
    all the capital, since no cash remains invested.
    """
    tables = tables or get_default_tables()

    total_investment = (
        inputs.purchase_price
        + inputs.refurb_cost
        + inputs.stamp_duty
        + inputs.legal_fees
        + inputs.survey_fees
    )
    bridging_interest = retained_interest(
        inputs.purchase_price + inputs.refurb_cost,
        inputs.bridging_rate,
        inputs.bridging_term_months,
    )
    total_with_bridging = total_investment + bridging_interest

    refinance_amount = inputs.after_repair_value * inputs.refinance_ltv
    monthly_mortgage = interest_only_payment(refinance_amount, inputs.refinance_rate)
    annual_mortgage = annualise(monthly_mortgage)
    money_left_in = total_with_bridging - refinance_amount

    annual_rent = annualise(inputs.monthly_rent)
    effective_rent = annual_rent * (ONE - inputs.management_rate)
    annual_cashflow = effective_rent - annual_mortgage
    value_added = inputs.after_repair_value - inputs.purchase_price

    return BrrrMetrics(
        total_investment=total_investment,
        bridging_interest=bridging_interest,
        total_with_bridging=total_with_bridging,
        refinance_amount=refinance_amount,
        monthly_mortgage=monthly_mortgage,
        annual_mortgage=annual_mortgage,
        money_left_in=money_left_in,
        recycled_capital=-money_left_in,
        all_capital_recycled=money_left_in <= 0,
        recycle_status=recycle_status(
            money_left_in, total_investment, tables.brrr_good_recycle_share
        ),
        value_added=value_added,
        equity_gain=inputs.after_repair_value - refinance_amount,
        annual_rent=annual_rent,
        effective_rent=effective_rent,
        annual_cashflow=annual_cashflow,
        monthly_cashflow=monthly(annual_cashflow),
        gross_yield=compute_yield(annual_rent, inputs.after_repair_value),
        cash_on_cash=compute_cash_on_cash(annual_cashflow, money_left_in),
        return_on_investment=safe_divide(value_added + annual_cashflow, total_with_bridging),
        dscr=compute_dscr(effective_rent, annual_mortgage),
    )
