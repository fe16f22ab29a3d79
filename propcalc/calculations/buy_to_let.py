"""
Buy-to-Let Calculations

Yield, cashflow and lender coverage metrics for a single let property
financed on an interest-only mortgage, with the repayment mortgage
alternative alongside.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from propcalc.calculations.amortization import (
    calculate_payment,
    first_year_split,
    interest_only_payment,
    repayment_schedule,
)
from propcalc.calculations.parsing import FormReader
from propcalc.calculations.ratios import (
    MONTHS_PER_YEAR,
    ONE,
    annualise,
    compute_cash_on_cash,
    compute_dscr,
    compute_icr,
    compute_ltv,
    compute_stressed_interest,
    compute_yield,
)
from propcalc.calculations.tables import RateTables, get_default_tables


@dataclass(frozen=True)
class BuyToLetInputs:
    """User-entered BTL parameters, already normalised."""

    purchase_price: Decimal
    monthly_rent: Decimal
    deposit_rate: Decimal  # 0.25 for 25%
    interest_rate: Decimal  # annual, 0.055 for 5.5%
    management_rate: Decimal = Decimal("0")  # share of annual rent
    insurance_annual: Decimal = Decimal("0")
    maintenance_rate: Decimal = Decimal("0")  # share of annual rent
    void_rate: Decimal = Decimal("0")  # share of annual rent
    other_costs_monthly: Decimal = Decimal("0")
    mortgage_term_years: int = 25

    @classmethod
    def from_form(cls, form: Mapping[str, Any], strict: bool = False) -> "BuyToLetInputs":
        reader = FormReader(form, strict)
        return cls(
            purchase_price=reader.amount("purchase_price"),
            monthly_rent=reader.amount("monthly_rent"),
            deposit_rate=reader.rate("deposit_percent", "25"),
            interest_rate=reader.rate("interest_rate"),
            management_rate=reader.rate("management_fee"),
            insurance_annual=reader.amount("insurance_cost"),
            maintenance_rate=reader.rate("maintenance_percent"),
            void_rate=reader.rate("void_percent"),
            other_costs_monthly=reader.amount("other_costs"),
            mortgage_term_years=reader.count("mortgage_term", "25"),
        )


@dataclass(frozen=True)
class BuyToLetMetrics:
    """Derived BTL metrics. Rates and yields are fractions."""

    purchase_price: Decimal
    deposit: Decimal
    mortgage_amount: Decimal
    ltv: Decimal
    monthly_rent: Decimal
    annual_rent: Decimal

    # Finance
    monthly_mortgage: Decimal
    annual_mortgage_interest: Decimal
    monthly_repayment: Decimal
    repayment_first_year_interest: Decimal
    repayment_first_year_capital: Decimal
    repayment_annual_cashflow: Decimal
    indicative_rate_label: str
    indicative_min_rate: Decimal
    indicative_max_rate: Decimal

    # Operating costs
    annual_management: Decimal
    insurance_cost: Decimal
    annual_maintenance: Decimal
    annual_void_loss: Decimal
    annual_other_costs: Decimal
    total_operating_costs: Decimal
    net_operating_income: Decimal

    # Returns
    gross_yield: Decimal
    net_yield: Decimal
    annual_cashflow: Decimal
    monthly_cashflow: Decimal
    cash_on_cash: Decimal

    # Coverage
    dscr: Decimal
    stress_rate: Decimal
    stressed_annual_interest: Decimal
    icr: Decimal


def calculate_operating_costs(inputs: BuyToLetInputs, annual_rent: Decimal) -> dict:
    """Break annual operating costs into their components."""
    costs = {
        "annual_management": annual_rent * inputs.management_rate,
        "insurance_cost": inputs.insurance_annual,
        "annual_maintenance": annual_rent * inputs.maintenance_rate,
        "annual_void_loss": annual_rent * inputs.void_rate,
        "annual_other_costs": annualise(inputs.other_costs_monthly),
    }
    costs["total_operating_costs"] = sum(costs.values(), Decimal("0"))
    return costs


def derive_buy_to_let(
    inputs: BuyToLetInputs, tables: Optional[RateTables] = None
) -> BuyToLetMetrics:
    """
    Derive yield, cashflow and coverage metrics for a BTL purchase.

    The ICR is tested at the table stress rate against the mortgage
    principal, not at the contract rate.
    """
    tables = tables or get_default_tables()

    annual_rent = annualise(inputs.monthly_rent)
    deposit = inputs.purchase_price * inputs.deposit_rate
    mortgage_amount = inputs.purchase_price * (ONE - inputs.deposit_rate)
    ltv = compute_ltv(mortgage_amount, inputs.purchase_price)

    # Interest-only mortgage
    monthly_mortgage = interest_only_payment(mortgage_amount, inputs.interest_rate)
    annual_mortgage_interest = annualise(monthly_mortgage)
    # Repayment mortgage alternative
    term_months = inputs.mortgage_term_years * MONTHS_PER_YEAR
    monthly_repayment = calculate_payment(mortgage_amount, inputs.interest_rate, term_months)
    first_year_interest, first_year_capital = first_year_split(
        repayment_schedule(mortgage_amount, inputs.interest_rate, term_months)
    )

    costs = calculate_operating_costs(inputs, annual_rent)
    net_operating_income = annual_rent - costs["total_operating_costs"]

    annual_cashflow = net_operating_income - annual_mortgage_interest
    rate_band = tables.btl_rate_band(ltv)

    return BuyToLetMetrics(
        purchase_price=inputs.purchase_price,
        deposit=deposit,
        mortgage_amount=mortgage_amount,
        ltv=ltv,
        monthly_rent=inputs.monthly_rent,
        annual_rent=annual_rent,
        monthly_mortgage=monthly_mortgage,
        annual_mortgage_interest=annual_mortgage_interest,
        monthly_repayment=monthly_repayment,
        repayment_first_year_interest=first_year_interest,
        repayment_first_year_capital=first_year_capital,
        repayment_annual_cashflow=net_operating_income - annualise(monthly_repayment),
        indicative_rate_label=rate_band.label,
        indicative_min_rate=rate_band.min_rate,
        indicative_max_rate=rate_band.max_rate,
        net_operating_income=net_operating_income,
        gross_yield=compute_yield(annual_rent, inputs.purchase_price),
        net_yield=compute_yield(net_operating_income, inputs.purchase_price),
        annual_cashflow=annual_cashflow,
        monthly_cashflow=annual_cashflow / MONTHS_PER_YEAR,
        cash_on_cash=compute_cash_on_cash(annual_cashflow, deposit),
        dscr=compute_dscr(net_operating_income, annual_mortgage_interest),
        stress_rate=tables.btl_stress_rate,
        stressed_annual_interest=compute_stressed_interest(
            mortgage_amount, tables.btl_stress_rate
        ),
        icr=compute_icr(annual_rent, mortgage_amount, tables.btl_stress_rate),
        **costs,
    )
