"""
Bridging Loan Calculations

Compares retained interest (deducted from the advance up front, a fixed
cost) with rolled interest (compounded monthly onto the balance and paid
on redemption, a cost that depends on when the loan is repaid).
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Mapping, Optional

from propcalc.calculations.amortization import rolled_balance_path
from propcalc.calculations.formatting import format_currency, format_months, format_percent
from propcalc.calculations.parsing import FormReader
from propcalc.calculations.ratios import MONTHS_PER_YEAR, ONE, compute_ltv
from propcalc.calculations.tables import LtvRateBand, RateTables, get_default_tables


@dataclass(frozen=True)
class BridgingInputs:
    loan_amount: Decimal
    monthly_rate: Decimal  # 0.0085 for 0.85% a month
    term_months: int
    property_value: Decimal = Decimal("0")
    arrangement_fee_rate: Decimal = Decimal("0")
    exit_fee_rate: Decimal = Decimal("0")
    valuation_fee: Decimal = Decimal("0")
    legal_fees: Decimal = Decimal("0")

    @classmethod
    def from_form(cls, form: Mapping[str, Any], strict: bool = False) -> "BridgingInputs":
        reader = FormReader(form, strict)
        return cls(
            loan_amount=reader.amount("loan_amount"),
            property_value=reader.amount("property_value"),
            monthly_rate=reader.rate("monthly_rate"),
            term_months=reader.count("term_months"),
            arrangement_fee_rate=reader.rate("arrangement_fee"),
            exit_fee_rate=reader.rate("exit_fee"),
            valuation_fee=reader.amount("valuation_fee"),
            legal_fees=reader.amount("legal_fees"),
        )


@dataclass(frozen=True)
class InterestOption:
    """Cost profile of one interest treatment."""

    total_interest: Decimal
    net_advance: Decimal
    gross_redemption: Decimal
    total_cost: Decimal


@dataclass(frozen=True)
class BridgingComparison:
    loan_amount: Decimal
    ltv: Decimal
    term_months: int
    arrangement_fee: Decimal
    exit_fee: Decimal
    other_fees: Decimal
    monthly_interest: Decimal
    effective_annual_rate: Decimal
    daily_rate: Decimal

    # Indicative market pricing at this LTV
    indicative_rate_label: str
    indicative_min_rate: Decimal
    indicative_max_rate: Decimal
    rate_position: str  # below, within or above the indicative range

    retained: InterestOption
    rolled: InterestOption

    day_one_difference: Decimal
    redemption_difference: Decimal
    total_cost_difference: Decimal
    better_option: str
    crossover_month: Optional[int]
    verdict: str


@dataclass(frozen=True)
class ExitMonthCost:
    """Retained vs rolled interest if the loan is redeemed in a given month."""

    month: int
    retained_interest: Decimal
    rolled_interest: Decimal
    rolled_balance: Decimal
    difference: Decimal


def retained_interest(loan_amount: Decimal, monthly_rate: Decimal, term_months: int) -> Decimal:
    """Simple interest for the full term, fixed regardless of exit month."""
    return loan_amount * monthly_rate * term_months


def find_crossover_month(
    loan_amount: Decimal,
    monthly_rate: Decimal,
    term_months: int,
    horizon: Optional[int] = None,
) -> Optional[int]:
    """
    Find the first month in which rolled interest exceeds retained interest.

    Steps the balance forward month by month, exactly as
    rolled_balance_path does, rather than solving for the month
    algebraically. The scan covers months 1 to horizon (twice the term by
    default) and stops at the first crossover.

    Returns:
        The crossover month, or None if rolled interest never exceeds
        retained interest within the horizon
    """
    if horizon is None:
        horizon = 2 * term_months
    if loan_amount <= 0 or monthly_rate <= 0:
        return None
    fixed_cost = retained_interest(loan_amount, monthly_rate, term_months)
    balance = loan_amount
    for month in range(1, horizon + 1):
        balance = balance * (ONE + monthly_rate)
        if balance - loan_amount > fixed_cost:
            return month
    return None


def exit_month_costs(
    loan_amount: Decimal, monthly_rate: Decimal, term_months: int, months: int
) -> List[ExitMonthCost]:
    """Interest under each treatment for exits in months 1..months."""
    fixed_cost = retained_interest(loan_amount, monthly_rate, term_months)
    path = rolled_balance_path(loan_amount, monthly_rate, months)
    rows = []
    for month in range(1, months + 1):
        rolled = path[month] - loan_amount
        rows.append(
            ExitMonthCost(
                month=month,
                retained_interest=fixed_cost,
                rolled_interest=rolled,
                rolled_balance=path[month],
                difference=rolled - fixed_cost,
            )
        )
    return rows


def rate_position(monthly_rate: Decimal, band: LtvRateBand) -> str:
    """Where a quoted monthly rate sits against the indicative range."""
    if monthly_rate < band.min_rate:
        return "below"
    if monthly_rate > band.max_rate:
        return "above"
    return "within"


def bridging_verdict(
    better_option: str,
    total_cost_difference: Decimal,
    term_months: int,
    crossover_month: Optional[int],
    monthly_rate: Optional[Decimal] = None,
    band: Optional[LtvRateBand] = None,
) -> str:
    """One-line summary of which interest treatment is cheaper and why."""
    verdict = (
        f"{better_option.capitalize()} interest saves "
        f"{format_currency(abs(total_cost_difference))} over {format_months(term_months)}"
    )
    if crossover_month is not None:
        verdict += f"; rolled interest overtakes retained after {format_months(crossover_month)}"
    if monthly_rate is not None and band is not None:
        verdict += (
            f"; {format_percent(monthly_rate, 2)} a month is {rate_position(monthly_rate, band)} "
            f"the typical {format_percent(band.min_rate, 2)}-{format_percent(band.max_rate, 2)} "
            f"for {band.label}"
        )
    return verdict


def compare_bridging_interest(
    inputs: BridgingInputs, tables: Optional[RateTables] = None
) -> BridgingComparison:
    """
    Compare retained and rolled interest on the same bridging loan.

    Both options pay the same arrangement, exit and third-party fees. The
    arrangement fee is deducted from the day-one advance in both cases.
    The quoted rate is also placed against the indicative range for the
    loan's LTV.
    """
    tables = tables or get_default_tables()
    principal = inputs.loan_amount
    rate = inputs.monthly_rate
    term = inputs.term_months

    arrangement_fee = principal * inputs.arrangement_fee_rate
    exit_fee = principal * inputs.exit_fee_rate
    other_fees = inputs.valuation_fee + inputs.legal_fees
    fees = arrangement_fee + exit_fee + other_fees

    retained_total = retained_interest(principal, rate, term)
    retained = InterestOption(
        total_interest=retained_total,
        net_advance=principal - retained_total - arrangement_fee,
        gross_redemption=principal + exit_fee,
        total_cost=retained_total + fees,
    )

    final_balance = rolled_balance_path(principal, rate, term)[-1]
    rolled_total = final_balance - principal
    rolled = InterestOption(
        total_interest=rolled_total,
        net_advance=principal - arrangement_fee,
        gross_redemption=final_balance + exit_fee,
        total_cost=rolled_total + fees,
    )

    total_cost_difference = rolled.total_cost - retained.total_cost
    better_option = "retained" if total_cost_difference > 0 else "rolled"
    crossover_month = find_crossover_month(principal, rate, term)
    ltv = compute_ltv(principal, inputs.property_value)
    band = tables.bridging_rate_band(ltv)

    return BridgingComparison(
        loan_amount=principal,
        ltv=ltv,
        term_months=term,
        arrangement_fee=arrangement_fee,
        exit_fee=exit_fee,
        other_fees=other_fees,
        monthly_interest=principal * rate,
        effective_annual_rate=(ONE + rate) ** MONTHS_PER_YEAR - ONE,
        daily_rate=rate / tables.bridging_days_per_month,
        indicative_rate_label=band.label,
        indicative_min_rate=band.min_rate,
        indicative_max_rate=band.max_rate,
        rate_position=rate_position(rate, band),
        retained=retained,
        rolled=rolled,
        day_one_difference=rolled.net_advance - retained.net_advance,
        redemption_difference=rolled.gross_redemption - retained.gross_redemption,
        total_cost_difference=total_cost_difference,
        better_option=better_option,
        crossover_month=crossover_month,
        verdict=bridging_verdict(better_option, total_cost_difference, term, crossover_month, rate, band),
    )
