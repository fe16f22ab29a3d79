"""
Landlord Tax Calculations

Income tax with the personal allowance taper, and the effect of the
Section 24 restriction on mortgage interest relief, including a
comparison with holding the property in a limited company.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Mapping, Optional

from propcalc.calculations.parsing import FormReader
from propcalc.calculations.ratios import ONE, ZERO, safe_divide
from propcalc.calculations.schedule import BandSlice
from propcalc.calculations.tables import RateTables, get_default_tables

TWO = Decimal("2")


# === Income tax ===


@dataclass(frozen=True)
class IncomeTaxInputs:
    rental_profit: Decimal
    other_income: Decimal = Decimal("0")

    @classmethod
    def from_form(cls, form: Mapping[str, Any], strict: bool = False) -> "IncomeTaxInputs":
        reader = FormReader(form, strict)
        return cls(
            rental_profit=reader.amount("rental_profit"),
            other_income=reader.amount("other_income"),
        )


@dataclass(frozen=True)
class IncomeTaxResult:
    total_income: Decimal
    personal_allowance: Decimal
    taxable_income: Decimal
    total_tax: Decimal
    tax_on_rental_profit: Decimal
    breakdown: List[BandSlice]
    effective_rate: Decimal
    band_rate: Decimal
    marginal_rate: Decimal


def tapered_personal_allowance(income: Decimal, tables: Optional[RateTables] = None) -> Decimal:
    """
    Personal allowance after the high-income taper.

    The allowance falls by £1 for every £2 of income over the taper
    threshold, down to nothing.
    """
    tables = tables or get_default_tables()
    excess = max(ZERO, income - tables.allowance_taper_threshold)
    return max(ZERO, tables.personal_allowance - excess / TWO)


def income_tax_due(income: Decimal, tables: Optional[RateTables] = None) -> Decimal:
    tables = tables or get_default_tables()
    taxable = max(ZERO, income - tapered_personal_allowance(income, tables))
    return tables.schedule("income_tax").evaluate(taxable)


def calculate_income_tax(
    inputs: IncomeTaxInputs, tables: Optional[RateTables] = None
) -> IncomeTaxResult:
    """
    Income tax on rental profit added to other income.

    Tax on the rental profit is the tax on total income less the tax the
    other income would bear on its own. The marginal rate is measured by
    adding £1 of income, so it picks up the 60% effective rate inside the
    allowance taper.
    """
    tables = tables or get_default_tables()
    schedule = tables.schedule("income_tax")

    total_income = inputs.rental_profit + inputs.other_income
    allowance = tapered_personal_allowance(total_income, tables)
    taxable = max(ZERO, total_income - allowance)
    breakdown = schedule.slices(taxable)
    total_tax = sum((s.tax for s in breakdown), ZERO)

    return IncomeTaxResult(
        total_income=total_income,
        personal_allowance=allowance,
        taxable_income=taxable,
        total_tax=total_tax,
        tax_on_rental_profit=total_tax - income_tax_due(inputs.other_income, tables),
        breakdown=breakdown,
        effective_rate=safe_divide(total_tax, total_income) if total_income > 0 else ZERO,
        band_rate=schedule.marginal_rate(taxable) if taxable > 0 else ZERO,
        marginal_rate=income_tax_due(total_income + ONE, tables) - total_tax,
    )


# === Section 24 ===


@dataclass(frozen=True)
class Section24Inputs:
    annual_rent: Decimal
    mortgage_interest: Decimal
    tax_rate: Decimal  # marginal rate, 0.40 for a higher rate taxpayer
    other_expenses: Decimal = Decimal("0")

    @classmethod
    def from_form(cls, form: Mapping[str, Any], strict: bool = False) -> "Section24Inputs":
        reader = FormReader(form, strict)
        return cls(
            annual_rent=reader.amount("annual_rent"),
            mortgage_interest=reader.amount("mortgage_interest"),
            other_expenses=reader.amount("other_expenses"),
            tax_rate=reader.rate("tax_band", "40"),
        )


@dataclass(frozen=True)
class LimitedCompanyComparison:
    profit: Decimal
    corporation_tax_rate: Decimal
    corporation_tax: Decimal
    retained_profit: Decimal
    dividend_tax_rate: Decimal
    dividend_tax: Decimal
    net_after_dividend: Decimal
    effective_rate: Decimal


@dataclass(frozen=True)
class Section24Impact:
    annual_rent: Decimal
    mortgage_interest: Decimal
    other_expenses: Decimal
    tax_rate: Decimal

    # Full interest deduction
    old_net_profit: Decimal
    old_taxable_income: Decimal
    old_tax_due: Decimal
    old_net_income: Decimal

    # Interest restricted to a basic rate credit
    new_net_profit: Decimal
    new_taxable_income: Decimal
    new_tax_before_credit: Decimal
    tax_credit: Decimal
    new_tax_due: Decimal
    new_net_income: Decimal

    additional_tax: Decimal
    percentage_increase: Decimal
    income_reduction: Decimal
    personal_effective_rate: Decimal

    limited_company: LimitedCompanyComparison
    limited_company_saving: Decimal


def compare_limited_company(
    profit: Decimal, tax_rate: Decimal, tables: Optional[RateTables] = None
) -> LimitedCompanyComparison:
    """
    Net income if the same profit were earned by a company and fully
    extracted as dividends.
    """
    tables = tables or get_default_tables()
    if profit > tables.corporation_tax_small_profits_limit:
        ct_rate = tables.corporation_tax_main_rate
    else:
        ct_rate = tables.corporation_tax_small_rate

    corporation_tax = max(ZERO, profit * ct_rate)
    retained = profit - corporation_tax
    dividend_rate = tables.dividend_tax_rates[tables.bracket_for_rate(tax_rate)]
    dividend_tax = max(ZERO, retained - tables.dividend_allowance) * dividend_rate

    return LimitedCompanyComparison(
        profit=profit,
        corporation_tax_rate=ct_rate,
        corporation_tax=corporation_tax,
        retained_profit=retained,
        dividend_tax_rate=dividend_rate,
        dividend_tax=dividend_tax,
        net_after_dividend=retained - dividend_tax,
        effective_rate=(
            safe_divide(corporation_tax + dividend_tax, profit) if profit > 0 else ZERO
        ),
    )


def calculate_section24_impact(
    inputs: Section24Inputs, tables: Optional[RateTables] = None
) -> Section24Impact:
    """
    Compare tax under full mortgage interest deduction with Section 24.

    Under Section 24 the interest is not deducted; instead a credit at the
    basic rate is set against the tax bill, which cannot go below zero.
    """
    tables = tables or get_default_tables()
    rent = inputs.annual_rent
    interest = inputs.mortgage_interest
    expenses = inputs.other_expenses
    rate = inputs.tax_rate

    old_net_profit = rent - interest - expenses
    old_taxable = max(ZERO, old_net_profit)
    old_tax = old_taxable * rate
    old_net_income = old_net_profit - old_tax

    new_net_profit = rent - expenses
    new_taxable = max(ZERO, new_net_profit)
    new_tax_before_credit = new_taxable * rate
    credit = interest * tables.section24_credit_rate
    new_tax = max(ZERO, new_tax_before_credit - credit)
    new_net_income = rent - expenses - interest - new_tax

    additional_tax = new_tax - old_tax
    company = compare_limited_company(old_net_profit, rate, tables)

    return Section24Impact(
        annual_rent=rent,
        mortgage_interest=interest,
        other_expenses=expenses,
        tax_rate=rate,
        old_net_profit=old_net_profit,
        old_taxable_income=old_taxable,
        old_tax_due=old_tax,
        old_net_income=old_net_income,
        new_net_profit=new_net_profit,
        new_taxable_income=new_taxable,
        new_tax_before_credit=new_tax_before_credit,
        tax_credit=credit,
        new_tax_due=new_tax,
        new_net_income=new_net_income,
        additional_tax=additional_tax,
        percentage_increase=safe_divide(additional_tax, old_tax) if old_tax > 0 else ZERO,
        income_reduction=old_net_income - new_net_income,
        personal_effective_rate=(
            safe_divide(new_tax, old_net_profit) if old_net_profit > 0 else ZERO
        ),
        limited_company=company,
        limited_company_saving=company.net_after_dividend - new_net_income,
    )
