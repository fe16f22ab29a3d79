"""
Scenario and Stress Utilities

Run a calculator repeatedly with one input varied and collect the results
in order, for charting and side-by-side comparison. The base input is
never mutated: every run works on a copy with exactly one field replaced.
"""

import logging
from dataclasses import dataclass, fields, is_dataclass, replace
from decimal import Decimal
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from propcalc.calculations.bridging import BridgingInputs, ExitMonthCost, exit_month_costs
from propcalc.calculations.buy_to_let import BuyToLetInputs, BuyToLetMetrics, derive_buy_to_let
from propcalc.calculations.holiday_let import (
    HolidayLetInputs,
    HolidayLetTax,
    calculate_holiday_let_tax,
)
from propcalc.calculations.serviced_accommodation import (
    OccupancyScenario,
    ServicedAccommodationInputs,
    occupancy_sweep,
)
from propcalc.calculations.tables import RateTables, get_default_tables

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
ResultT = TypeVar("ResultT")

# Added to the contract rate in a BTL rate stress test
DEFAULT_RATE_SHOCKS = [Decimal("0"), Decimal("0.01"), Decimal("0.02"), Decimal("0.03")]


@dataclass(frozen=True)
class ScenarioResult(Generic[ResultT]):
    field: str
    value: Any
    result: ResultT


def sweep(
    derive: Callable[..., ResultT],
    base: InputT,
    field_name: str,
    values: Sequence[Any],
    tables: Optional[RateTables] = None,
) -> List[ScenarioResult]:
    """
    Run derive once per value with field_name overridden.

    Args:
        derive: Calculator taking (inputs, tables)
        base: Frozen dataclass of base inputs
        field_name: Input field to vary
        values: Values to try, in output order
        tables: Rate tables passed through to every run

    Returns:
        One ScenarioResult per value

    Raises:
        ValueError: If field_name is not an input field
    """
    if not is_dataclass(base):
        raise TypeError("Scenario inputs must be a dataclass instance")
    if field_name not in {f.name for f in fields(base)}:
        raise ValueError(f"{type(base).__name__} has no field {field_name!r}")

    tables = tables or get_default_tables()
    logger.debug(f"Sweeping {field_name} over {len(values)} values")
    return [
        ScenarioResult(
            field=field_name,
            value=value,
            result=derive(replace(base, **{field_name: value}), tables),
        )
        for value in values
    ]


def btl_rate_stress(
    inputs: BuyToLetInputs,
    rates: Optional[Sequence[Decimal]] = None,
    tables: Optional[RateTables] = None,
) -> List[ScenarioResult[BuyToLetMetrics]]:
    """
    Re-run a BTL appraisal at higher interest rates.

    Defaults to the contract rate plus 0, 1, 2 and 3 points.
    """
    if rates is None:
        rates = [inputs.interest_rate + shock for shock in DEFAULT_RATE_SHOCKS]
    return sweep(derive_buy_to_let, inputs, "interest_rate", rates, tables)


def btl_rent_sensitivity(
    inputs: BuyToLetInputs,
    rents: Sequence[Decimal],
    tables: Optional[RateTables] = None,
) -> List[ScenarioResult[BuyToLetMetrics]]:
    return sweep(derive_buy_to_let, inputs, "monthly_rent", rents, tables)


def sa_occupancy_scenarios(
    inputs: ServicedAccommodationInputs,
    occupancies: Optional[Sequence[Decimal]] = None,
    tables: Optional[RateTables] = None,
) -> List[OccupancyScenario]:
    """Monthly cashflow across occupancy levels (40% to 80% by default)."""
    return occupancy_sweep(inputs, occupancies, tables)


def bridging_exit_scenarios(
    inputs: BridgingInputs, months: Optional[int] = None
) -> List[ExitMonthCost]:
    """
    Retained vs rolled interest for every possible exit month.

    Covers twice the agreed term by default so early and late exits are
    both visible.
    """
    if months is None:
        months = 2 * inputs.term_months
    return exit_month_costs(inputs.loan_amount, inputs.monthly_rate, inputs.term_months, months)


def fhl_vs_btl_by_bracket(
    inputs: HolidayLetInputs, tables: Optional[RateTables] = None
) -> List[ScenarioResult[HolidayLetTax]]:
    """FHL and Section 24 treatment compared at every tax bracket."""
    tables = tables or get_default_tables()
    return sweep(
        calculate_holiday_let_tax, inputs, "tax_bracket", list(tables.tax_brackets), tables
    )
