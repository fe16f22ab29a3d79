"""
Furnished Holiday Let Tax Calculations

Tax on a holiday let treated as an FHL (mortgage interest fully
deductible, Class 4 NI due) alongside the same income taxed as an
ordinary buy-to-let under Section 24 (interest restricted to a basic
rate credit).
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Mapping, Optional

from propcalc.calculations.parsing import FormReader
from propcalc.calculations.ratios import ZERO, safe_divide
from propcalc.calculations.tables import RateTables, get_default_tables

EXPENSE_FIELDS = (
    "mortgage_interest",
    "insurance",
    "utilities",
    "cleaning",
    "management",
    "maintenance",
    "council_tax",
    "advertising",
    "other_expenses",
)


@dataclass(frozen=True)
class HolidayLetInputs:
    gross_income: Decimal
    days_available: int
    days_let: int
    tax_bracket: str = "basic"
    mortgage_interest: Decimal = Decimal("0")
    insurance: Decimal = Decimal("0")
    utilities: Decimal = Decimal("0")
    cleaning: Decimal = Decimal("0")
    management: Decimal = Decimal("0")
    maintenance: Decimal = Decimal("0")
    council_tax: Decimal = Decimal("0")
    advertising: Decimal = Decimal("0")
    other_expenses: Decimal = Decimal("0")
    capital_allowances: Decimal = Decimal("0")

    @classmethod
    def from_form(cls, form: Mapping[str, Any], strict: bool = False) -> "HolidayLetInputs":
        reader = FormReader(form, strict)
        expenses = {name: reader.amount(name) for name in EXPENSE_FIELDS}
        return cls(
            gross_income=reader.amount("gross_income"),
            days_available=reader.count("days_available"),
            days_let=reader.count("days_let"),
            tax_bracket=reader.key("tax_bracket", "basic"),
            capital_allowances=reader.amount("capital_allowances"),
            **expenses,
        )

    @property
    def total_expenses(self) -> Decimal:
        return sum((getattr(self, name) for name in EXPENSE_FIELDS), ZERO)


@dataclass(frozen=True)
class FhlQualification:
    qualifies: bool
    reasons: List[str]


@dataclass(frozen=True)
class HolidayLetTax:
    """
    FHL and standard BTL tax on the same letting income.

    fhl_tax_saving compares total FHL tax, Class 4 NI included, with BTL
    income tax after the Section 24 credit. A negative saving means the
    FHL route costs more once Class 4 is counted.
    """

    gross_income: Decimal
    tax_bracket: str
    tax_rate: Decimal
    qualification: FhlQualification

    # FHL treatment
    total_expenses: Decimal
    net_profit_before_allowances: Decimal
    capital_allowances: Decimal
    taxable_profit: Decimal
    income_tax: Decimal
    class4_ni: Decimal
    total_tax: Decimal
    post_tax_profit: Decimal
    effective_tax_rate: Decimal

    # Standard BTL treatment
    btl_profit_before_tax: Decimal
    btl_income_tax: Decimal
    btl_interest_credit: Decimal
    btl_tax_after_credit: Decimal
    btl_post_tax_profit: Decimal

    fhl_tax_saving: Decimal
    revenue_per_day_let: Decimal
    expense_ratio: Decimal


def check_fhl_qualification(
    days_available: int, days_let: int, tables: Optional[RateTables] = None
) -> FhlQualification:
    """
    Apply the FHL day-count gate.

    The property must be available for at least 210 days and actually let
    for at least 105 days in the year.
    """
    tables = tables or get_default_tables()
    reasons = []
    if days_available < tables.fhl_min_days_available:
        reasons.append(
            f"Available for {days_available} days; at least "
            f"{tables.fhl_min_days_available} required"
        )
    if days_let < tables.fhl_min_days_let:
        reasons.append(
            f"Let for {days_let} days; at least {tables.fhl_min_days_let} required"
        )
    if not reasons:
        reasons.append(
            f"Available {days_available} days and let {days_let} days meets both thresholds"
        )
        return FhlQualification(qualifies=True, reasons=reasons)
    return FhlQualification(qualifies=False, reasons=reasons)


def calculate_class4_ni(taxable_profit: Decimal, tables: Optional[RateTables] = None) -> Decimal:
    """Class 4 National Insurance on profit above the lower threshold."""
    tables = tables or get_default_tables()
    return max(ZERO, taxable_profit - tables.class4_threshold) * tables.class4_rate


def calculate_holiday_let_tax(
    inputs: HolidayLetInputs, tables: Optional[RateTables] = None
) -> HolidayLetTax:
    """
    Compare FHL and standard BTL tax on the same holiday let income.

    Qualification is reported but does not change the arithmetic; both
    treatments are always computed so they can be shown side by side.
    """
    tables = tables or get_default_tables()
    bracket, tax_rate = tables.tax_bracket(inputs.tax_bracket)

    total_expenses = inputs.total_expenses
    net_profit = inputs.gross_income - total_expenses
    taxable_profit = max(ZERO, net_profit - inputs.capital_allowances)

    income_tax = taxable_profit * tax_rate
    class4_ni = calculate_class4_ni(taxable_profit, tables)
    total_tax = income_tax + class4_ni

    # Section 24: interest is not deductible, only credited at basic rate
    interest = inputs.mortgage_interest
    btl_profit = inputs.gross_income - (total_expenses - interest)
    btl_income_tax = max(ZERO, btl_profit) * tax_rate
    btl_credit = interest * tables.section24_credit_rate
    btl_tax_after_credit = max(ZERO, btl_income_tax - btl_credit)

    return HolidayLetTax(
        gross_income=inputs.gross_income,
        tax_bracket=bracket,
        tax_rate=tax_rate,
        qualification=check_fhl_qualification(inputs.days_available, inputs.days_let, tables),
        total_expenses=total_expenses,
        net_profit_before_allowances=net_profit,
        capital_allowances=inputs.capital_allowances,
        taxable_profit=taxable_profit,
        income_tax=income_tax,
        class4_ni=class4_ni,
        total_tax=total_tax,
        post_tax_profit=net_profit - total_tax,
        effective_tax_rate=safe_divide(total_tax, net_profit) if net_profit > 0 else ZERO,
        btl_profit_before_tax=btl_profit,
        btl_income_tax=btl_income_tax,
        btl_interest_credit=btl_credit,
        btl_tax_after_credit=btl_tax_after_credit,
        btl_post_tax_profit=btl_profit - btl_tax_after_credit - interest,
        fhl_tax_saving=btl_tax_after_credit - total_tax,
        revenue_per_day_let=safe_divide(inputs.gross_income, Decimal(inputs.days_let)),
        expense_ratio=safe_divide(total_expenses, inputs.gross_income),
    )
