"""
HMO Calculations

Viability of a House in Multiple Occupation let room by room, plus
licence fee and fire safety cost estimates.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Optional, Tuple

from propcalc.calculations.parsing import FormReader, coerce_amount, parse_amount
from propcalc.calculations.ratios import (
    MONTHS_PER_YEAR,
    ONE,
    ZERO,
    annualise,
    compute_cash_on_cash,
    compute_dscr,
    compute_icr,
    compute_yield,
    monthly,
    safe_divide,
)
from propcalc.calculations.tables import RateTables, get_default_tables


@dataclass(frozen=True)
class HmoInputs:
    """
    User-entered HMO parameters.

    If room_rents is given it replaces number_of_rooms * average_room_rent.
    """

    purchase_price: Decimal
    number_of_rooms: int
    average_room_rent: Decimal
    deposit_rate: Decimal
    interest_rate: Decimal
    refurb_cost: Decimal = Decimal("0")
    management_rate: Decimal = Decimal("0")
    licence_cost: Decimal = Decimal("0")  # per licence period
    insurance_annual: Decimal = Decimal("0")
    utilities_monthly: Decimal = Decimal("0")
    cleaning_monthly: Decimal = Decimal("0")
    maintenance_rate: Decimal = Decimal("0")
    void_rate: Decimal = Decimal("0")
    room_rents: Tuple[Decimal, ...] = field(default_factory=tuple)

    @classmethod
    def from_form(cls, form: Mapping[str, Any], strict: bool = False) -> "HmoInputs":
        reader = FormReader(form, strict)
        raw_rooms = form.get("room_rents") or ()
        if isinstance(raw_rooms, (str, bytes)) or not isinstance(raw_rooms, (list, tuple)):
            raise TypeError("room_rents must be a list of monthly rents")
        parse = parse_amount if strict else coerce_amount
        room_rents = tuple(parse(rent, "room_rents") for rent in raw_rooms)
        return cls(
            purchase_price=reader.amount("purchase_price"),
            refurb_cost=reader.amount("refurb_cost"),
            number_of_rooms=reader.count("number_of_rooms"),
            average_room_rent=reader.amount("average_room_rent"),
            deposit_rate=reader.rate("deposit_percent", "25"),
            interest_rate=reader.rate("interest_rate"),
            management_rate=reader.rate("management_fee"),
            licence_cost=reader.amount("licence_cost"),
            insurance_annual=reader.amount("insurance_cost"),
            utilities_monthly=reader.amount("utilities_cost"),
            cleaning_monthly=reader.amount("cleaning_cost"),
            maintenance_rate=reader.rate("maintenance_percent"),
            void_rate=reader.rate("void_percent"),
            room_rents=room_rents,
        )


@dataclass(frozen=True)
class HmoMetrics:
    purchase_price: Decimal
    refurb_cost: Decimal
    total_investment: Decimal
    deposit: Decimal
    mortgage_amount: Decimal
    number_of_rooms: int
    monthly_gross_rent: Decimal
    annual_gross_rent: Decimal
    effective_rent: Decimal

    annual_management: Decimal
    insurance_cost: Decimal
    annual_maintenance: Decimal
    annual_utilities: Decimal
    annual_cleaning: Decimal
    annual_licence: Decimal
    total_operating_costs: Decimal
    net_operating_income: Decimal

    monthly_mortgage: Decimal
    annual_mortgage_interest: Decimal
    annual_cashflow: Decimal
    monthly_cashflow: Decimal
    per_room_cashflow: Decimal

    gross_yield: Decimal
    net_yield: Decimal
    cash_on_cash: Decimal
    dscr: Decimal
    icr: Decimal
    cost_per_room: Decimal
    hmo_vs_btl_multiplier: Decimal


def blended_monthly_rent(inputs: HmoInputs) -> Tuple[int, Decimal]:
    """Room count and total monthly rent across all rooms."""
    if inputs.room_rents:
        return len(inputs.room_rents), sum(inputs.room_rents, ZERO)
    return inputs.number_of_rooms, inputs.number_of_rooms * inputs.average_room_rent


def derive_hmo(inputs: HmoInputs, tables: Optional[RateTables] = None) -> HmoMetrics:
    """
    Derive HMO viability metrics.

    Management and maintenance are charged on rent after voids. The
    licence fee is spread evenly over the licence period.
    """
    tables = tables or get_default_tables()

    rooms, monthly_gross_rent = blended_monthly_rent(inputs)
    annual_gross_rent = annualise(monthly_gross_rent)
    effective_rent = annual_gross_rent * (ONE - inputs.void_rate)

    total_investment = inputs.purchase_price + inputs.refurb_cost
    deposit = inputs.purchase_price * inputs.deposit_rate
    mortgage_amount = inputs.purchase_price - deposit

    annual_management = effective_rent * inputs.management_rate
    annual_maintenance = effective_rent * inputs.maintenance_rate
    annual_utilities = annualise(inputs.utilities_monthly)
    annual_cleaning = annualise(inputs.cleaning_monthly)
    annual_licence = safe_divide(inputs.licence_cost, Decimal(tables.hmo_licence_years))
    total_operating_costs = (
        annual_management
        + inputs.insurance_annual
        + annual_maintenance
        + annual_utilities
        + annual_cleaning
        + annual_licence
    )
    noi = effective_rent - total_operating_costs

    annual_mortgage_interest = mortgage_amount * inputs.interest_rate
    annual_cashflow = noi - annual_mortgage_interest
    monthly_cashflow = annual_cashflow / MONTHS_PER_YEAR

    btl_equivalent_rent = monthly(inputs.purchase_price * tables.btl_benchmark_gross_yield)

    return HmoMetrics(
        purchase_price=inputs.purchase_price,
        refurb_cost=inputs.refurb_cost,
        total_investment=total_investment,
        deposit=deposit,
        mortgage_amount=mortgage_amount,
        number_of_rooms=rooms,
        monthly_gross_rent=monthly_gross_rent,
        annual_gross_rent=annual_gross_rent,
        effective_rent=effective_rent,
        annual_management=annual_management,
        insurance_cost=inputs.insurance_annual,
        annual_maintenance=annual_maintenance,
        annual_utilities=annual_utilities,
        annual_cleaning=annual_cleaning,
        annual_licence=annual_licence,
        total_operating_costs=total_operating_costs,
        net_operating_income=noi,
        monthly_mortgage=monthly(annual_mortgage_interest),
        annual_mortgage_interest=annual_mortgage_interest,
        annual_cashflow=annual_cashflow,
        monthly_cashflow=monthly_cashflow,
        per_room_cashflow=safe_divide(monthly_cashflow, Decimal(rooms)),
        gross_yield=compute_yield(annual_gross_rent, total_investment),
        net_yield=compute_yield(noi, total_investment),
        cash_on_cash=compute_cash_on_cash(annual_cashflow, deposit),
        dscr=compute_dscr(noi, annual_mortgage_interest),
        icr=compute_icr(annual_gross_rent, mortgage_amount, tables.btl_stress_rate),
        cost_per_room=safe_divide(total_investment, Decimal(rooms)),
        hmo_vs_btl_multiplier=safe_divide(monthly_gross_rent, btl_equivalent_rent),
    )


@dataclass(frozen=True)
class HmoLicenceEstimate:
    council_tier: str
    bedrooms: int
    licence_fee: Decimal
    licence_years: int
    annual_cost: Decimal
    fire_safety_cost: Decimal


def estimate_fire_safety_cost(
    storeys: int,
    bedrooms: int,
    has_fire_doors: bool,
    has_alarm_system: bool,
    has_emergency_lighting: bool,
) -> Decimal:
    """Rough cost of bringing a property up to HMO fire safety standard."""
    cost = ZERO
    if not has_fire_doors:
        cost += Decimal(bedrooms * 350 + 500)
    if not has_alarm_system:
        cost += Decimal(storeys * 400 + 500)
    if not has_emergency_lighting:
        cost += Decimal(storeys * 200)
    # Protected staircase upgrades for three or more storeys
    if storeys >= 3:
        cost += Decimal(1500)
    return cost


def estimate_licence(
    form: Mapping[str, Any], strict: bool = False, tables: Optional[RateTables] = None
) -> HmoLicenceEstimate:
    """Estimate licence fee and fire safety spend from a raw form."""
    tables = tables or get_default_tables()
    reader = FormReader(form, strict)

    bedrooms = reader.count("bedrooms")
    storeys = reader.count("storeys", "2")
    tier = reader.key("council_tier", tables.hmo_default_council_tier)
    if tier not in tables.hmo_licence_fees:
        tier = tables.hmo_default_council_tier
    fees = tables.hmo_licence_fee(tier)
    licence_fee = fees.base_fee + fees.per_bedroom_fee * bedrooms

    return HmoLicenceEstimate(
        council_tier=tier,
        bedrooms=bedrooms,
        licence_fee=licence_fee,
        licence_years=tables.hmo_licence_years,
        annual_cost=safe_divide(licence_fee, Decimal(tables.hmo_licence_years)),
        fire_safety_cost=estimate_fire_safety_cost(
            storeys,
            bedrooms,
            reader.flag("has_fire_doors"),
            reader.flag("has_alarm_system"),
            reader.flag("has_emergency_lighting"),
        ),
    )
