"""
Serviced Accommodation Calculations

Break-even and target occupancy for a short-stay let, cross-checked
against an occupancy sweep computed independently from gross bookings.

All figures use a 30-night month; annual figures are monthly * 12.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence

from propcalc.calculations.parsing import FormReader
from propcalc.calculations.ratios import ONE, ZERO, annualise, safe_divide
from propcalc.calculations.tables import RateTables, get_default_tables

# Break-even is verified when the first-principles cashflow at the
# break-even night count is within a penny of zero
BREAKEVEN_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class ServicedAccommodationInputs:
    adr: Decimal  # average daily rate per night
    fixed_costs_monthly: Decimal = Decimal("0")
    variable_cost_per_night: Decimal = Decimal("0")
    mortgage_monthly: Decimal = Decimal("0")
    target_monthly_profit: Decimal = Decimal("0")
    cleaning_fee: Decimal = Decimal("0")  # charged per booking
    cleaning_cost: Decimal = Decimal("0")  # paid per booking
    platform_fee_rate: Decimal = Decimal("0")  # taken from ADR only
    average_stay_length: Decimal = Decimal("0")  # nights per booking

    @classmethod
    def from_form(
        cls, form: Mapping[str, Any], strict: bool = False
    ) -> "ServicedAccommodationInputs":
        reader = FormReader(form, strict)
        return cls(
            adr=reader.amount("adr"),
            fixed_costs_monthly=reader.amount("fixed_costs_monthly"),
            variable_cost_per_night=reader.amount("variable_cost_per_night"),
            mortgage_monthly=reader.amount("mortgage_monthly"),
            target_monthly_profit=reader.amount("target_monthly_profit"),
            cleaning_fee=reader.amount("cleaning_fee"),
            cleaning_cost=reader.amount("cleaning_cost"),
            platform_fee_rate=reader.rate("platform_fee_percent"),
            average_stay_length=reader.amount("average_stay_length"),
        )

    @property
    def total_fixed_costs_monthly(self) -> Decimal:
        return self.fixed_costs_monthly + self.mortgage_monthly


@dataclass(frozen=True)
class OccupancyScenario:
    occupancy: Decimal
    nights_per_month: Decimal
    gross_revenue_monthly: Decimal
    net_revenue_monthly: Decimal
    cashflow_monthly: Decimal
    cashflow_annual: Decimal


@dataclass(frozen=True)
class OccupancyBreakeven:
    adr: Decimal
    net_revenue_per_night: Decimal
    total_fixed_costs_monthly: Decimal
    total_fixed_costs_annual: Decimal

    breakeven_nights_monthly: Decimal
    breakeven_nights_annual: Decimal
    breakeven_occupancy: Decimal
    breakeven_achievable: bool
    breakeven_residual: Decimal
    breakeven_verified: bool

    target_nights_monthly: Decimal
    target_occupancy: Decimal

    scenarios: List[OccupancyScenario]
    revpar_at_50: Decimal
    revpar_at_65: Decimal
    revpar_at_80: Decimal
    safety_margin_nights: Decimal


def net_revenue_per_night(inputs: ServicedAccommodationInputs) -> Decimal:
    """
    Contribution of one occupied night.

    ADR net of platform fee, plus the per-night share of cleaning profit,
    less the per-night variable cost.
    """
    net_adr = inputs.adr * (ONE - inputs.platform_fee_rate)
    cleaning_profit = inputs.cleaning_fee - inputs.cleaning_cost
    cleaning_per_night = safe_divide(cleaning_profit, inputs.average_stay_length)
    return net_adr + cleaning_per_night - inputs.variable_cost_per_night


def cashflow_for_nights(
    inputs: ServicedAccommodationInputs, nights: Decimal, occupancy: Decimal = ZERO
) -> OccupancyScenario:
    """
    Monthly cashflow for a number of occupied nights, built up from gross
    bookings rather than from net_revenue_per_night.
    """
    bookings = safe_divide(nights, inputs.average_stay_length)
    room_revenue = inputs.adr * nights
    gross = room_revenue + inputs.cleaning_fee * bookings
    platform_fees = room_revenue * inputs.platform_fee_rate
    variable_costs = inputs.variable_cost_per_night * nights
    cleaning_costs = inputs.cleaning_cost * bookings
    net = gross - platform_fees - variable_costs - cleaning_costs
    cashflow = net - inputs.total_fixed_costs_monthly
    return OccupancyScenario(
        occupancy=occupancy,
        nights_per_month=nights,
        gross_revenue_monthly=gross,
        net_revenue_monthly=net,
        cashflow_monthly=cashflow,
        cashflow_annual=annualise(cashflow),
    )


def occupancy_cashflow(
    inputs: ServicedAccommodationInputs,
    occupancy: Decimal,
    tables: Optional[RateTables] = None,
) -> OccupancyScenario:
    """Monthly cashflow at an occupancy rate (0.65 for 65%)."""
    tables = tables or get_default_tables()
    nights = Decimal(tables.sa_nights_per_month) * occupancy
    return cashflow_for_nights(inputs, nights, occupancy)


def occupancy_sweep(
    inputs: ServicedAccommodationInputs,
    occupancies: Optional[Sequence[Decimal]] = None,
    tables: Optional[RateTables] = None,
) -> List[OccupancyScenario]:
    tables = tables or get_default_tables()
    if occupancies is None:
        occupancies = tables.sa_occupancy_scenarios
    return [occupancy_cashflow(inputs, occupancy, tables) for occupancy in occupancies]


def calculate_sa_breakeven(
    inputs: ServicedAccommodationInputs, tables: Optional[RateTables] = None
) -> OccupancyBreakeven:
    """
    Break-even and target occupancy for serviced accommodation.

    Break-even nights is fixed costs over net revenue per night. The
    result is then fed back through the gross-booking cashflow model; the
    residual at break-even should be zero, and breakeven_verified reports
    whether the two agree.

    When a night earns nothing (net revenue per night <= 0) there is no
    break-even: nights are reported as zero and breakeven_achievable is
    False.
    """
    tables = tables or get_default_tables()
    nights_per_month = Decimal(tables.sa_nights_per_month)

    per_night = net_revenue_per_night(inputs)
    fixed_monthly = inputs.total_fixed_costs_monthly
    earns = per_night > 0

    breakeven_nights = fixed_monthly / per_night if earns else ZERO
    target_nights = (fixed_monthly + inputs.target_monthly_profit) / per_night if earns else ZERO

    residual = cashflow_for_nights(inputs, breakeven_nights).cashflow_monthly
    verified = earns and abs(residual) < BREAKEVEN_TOLERANCE

    benchmark_nights = tables.sa_benchmark_occupancy * nights_per_month

    return OccupancyBreakeven(
        adr=inputs.adr,
        net_revenue_per_night=per_night,
        total_fixed_costs_monthly=fixed_monthly,
        total_fixed_costs_annual=annualise(fixed_monthly),
        breakeven_nights_monthly=breakeven_nights,
        breakeven_nights_annual=annualise(breakeven_nights),
        breakeven_occupancy=breakeven_nights / nights_per_month,
        breakeven_achievable=earns and breakeven_nights <= nights_per_month,
        breakeven_residual=residual,
        breakeven_verified=verified,
        target_nights_monthly=target_nights,
        target_occupancy=target_nights / nights_per_month,
        scenarios=occupancy_sweep(inputs, tables=tables),
        revpar_at_50=inputs.adr * Decimal("0.50"),
        revpar_at_65=inputs.adr * Decimal("0.65"),
        revpar_at_80=inputs.adr * Decimal("0.80"),
        safety_margin_nights=max(ZERO, benchmark_nights - breakeven_nights),
    )
