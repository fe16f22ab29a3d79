"""
Loan Amortization Calculations

Interest-only and repayment mortgage payments, annuity schedules and
rolled-up (compounding) bridging balances.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from propcalc.calculations.ratios import MONTHS_PER_YEAR, ONE, ZERO


def interest_only_payment(principal: Decimal, annual_rate: Decimal) -> Decimal:
    """Monthly interest-only payment."""
    return principal * annual_rate / MONTHS_PER_YEAR


def calculate_payment(
    principal: Decimal, annual_rate: Decimal, amortization_months: int
) -> Decimal:
    """
    Calculate monthly repayment (capital and interest).

    Matches Excel's PMT() function.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as a fraction (0.05 for 5%)
        amortization_months: Total amortization period in months

    Returns:
        Monthly payment amount (positive number)
    """
    if principal <= 0:
        return ZERO
    if amortization_months <= 0:
        return ZERO

    monthly_rate = annual_rate / MONTHS_PER_YEAR

    if monthly_rate == 0:
        return principal / amortization_months

    growth = (ONE + monthly_rate) ** amortization_months
    return principal * monthly_rate * growth / (growth - ONE)


def rolled_balance_path(
    principal: Decimal, monthly_rate: Decimal, months: int
) -> List[Decimal]:
    """
    Simulate interest rolling up onto a loan balance month by month.

    balance[m] = balance[m - 1] * (1 + monthly_rate), with balance[0] the
    principal. The returned list has months + 1 entries.
    """
    balances = [principal]
    balance = principal
    for _ in range(max(0, months)):
        balance = balance * (ONE + monthly_rate)
        balances.append(balance)
    return balances


def rolled_interest(principal: Decimal, monthly_rate: Decimal, months: int) -> Decimal:
    """Interest accrued by rolling up for a number of months."""
    return rolled_balance_path(principal, monthly_rate, months)[-1] - principal


@dataclass(frozen=True)
class RepaymentRow:
    """One month of a repayment mortgage."""

    month: int
    payment_date: Optional[date]
    opening_balance: Decimal
    payment: Decimal
    interest: Decimal
    capital: Decimal
    closing_balance: Decimal


def repayment_schedule(
    principal: Decimal,
    annual_rate: Decimal,
    term_months: int,
    interest_only_months: int = 0,
    start_date: Optional[date] = None,
) -> List[RepaymentRow]:
    """
    Split each monthly payment into interest and capital.

    Interest-only months pay interest alone. The remaining months pay a
    level annuity sized on the full principal, and the final month clears
    whatever balance is left. Rows are dated from start_date when given.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as a fraction
        term_months: Full term including any interest-only months
        interest_only_months: Leading months with no capital repaid
        start_date: Date of the first payment

    Returns:
        One row per month; empty for a zero loan or term
    """
    if principal <= 0 or term_months <= 0:
        return []

    monthly_rate = annual_rate / MONTHS_PER_YEAR
    interest_only_months = min(max(0, interest_only_months), term_months)
    level_payment = calculate_payment(principal, annual_rate, term_months - interest_only_months)

    rows = []
    balance = principal
    for month in range(1, term_months + 1):
        interest = balance * monthly_rate
        if month <= interest_only_months:
            capital = ZERO
        elif month == term_months:
            capital = balance
        else:
            capital = min(level_payment - interest, balance)

        rows.append(
            RepaymentRow(
                month=month,
                payment_date=start_date + relativedelta(months=month - 1) if start_date else None,
                opening_balance=balance,
                payment=interest + capital,
                interest=interest,
                capital=capital,
                closing_balance=balance - capital,
            )
        )
        balance -= capital

    return rows


def first_year_split(schedule: Sequence[RepaymentRow]) -> Tuple[Decimal, Decimal]:
    """Interest and capital paid over the first twelve payments."""
    first_year = schedule[:MONTHS_PER_YEAR]
    interest = sum((row.interest for row in first_year), ZERO)
    capital = sum((row.capital for row in first_year), ZERO)
    return interest, capital
