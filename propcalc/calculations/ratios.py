"""
Shared Ratio Calculations

Yield, coverage and return ratios used by every product calculator.
All ratios are returned as fractions (0.0576 for 5.76%), and a zero
denominator always yields zero rather than raising or returning infinity.
"""

from decimal import Decimal

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

# Canonical annualisation: annual = monthly * MONTHS_PER_YEAR
MONTHS_PER_YEAR = 12


def safe_divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide, returning zero when the denominator is zero."""
    if denominator == 0:
        return ZERO
    return numerator / denominator


def annualise(monthly: Decimal) -> Decimal:
    """Convert a monthly amount to an annual amount."""
    return monthly * MONTHS_PER_YEAR


def monthly(annual: Decimal) -> Decimal:
    """Convert an annual amount to a monthly amount."""
    return annual / MONTHS_PER_YEAR


def compute_yield(annual_income: Decimal, capital_base: Decimal) -> Decimal:
    """
    Calculate a yield on capital.

    Gross yield passes annual rent, net yield passes rent less operating
    costs. A non-positive capital base returns zero.
    """
    if capital_base <= 0:
        return ZERO
    return annual_income / capital_base


def compute_dscr(net_operating_income: Decimal, annual_debt_service: Decimal) -> Decimal:
    """
    Calculate Debt Service Coverage Ratio (DSCR).

    Args:
        net_operating_income: Annual NOI
        annual_debt_service: Annual debt service

    Returns:
        DSCR ratio, or zero when there is no debt service
    """
    if annual_debt_service <= 0:
        return ZERO
    return net_operating_income / annual_debt_service


def compute_stressed_interest(principal: Decimal, stress_rate: Decimal) -> Decimal:
    """Annual interest on a loan at a lender's stress rate."""
    return principal * stress_rate


def compute_icr(annual_rent: Decimal, principal: Decimal, stress_rate: Decimal) -> Decimal:
    """
    Calculate Interest Coverage Ratio at a stress rate.

    The stress rate replaces the contract rate; this mirrors lender
    affordability tests rather than the actual payment.
    """
    stressed_interest = compute_stressed_interest(principal, stress_rate)
    if stressed_interest <= 0:
        return ZERO
    return annual_rent / stressed_interest


def compute_cash_on_cash(annual_cashflow: Decimal, cash_invested: Decimal) -> Decimal:
    """Cash-on-cash return; zero when no cash is invested."""
    if cash_invested <= 0:
        return ZERO
    return annual_cashflow / cash_invested


def compute_ltv(loan_amount: Decimal, property_value: Decimal) -> Decimal:
    """Loan-to-value as a fraction."""
    if property_value <= 0:
        return ZERO
    return loan_amount / property_value
