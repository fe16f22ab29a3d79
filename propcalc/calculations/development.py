"""
Development Appraisal Calculations

Gross development value, total scheme cost, profit on cost and on GDV,
rolled-up development finance and residual land value.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from propcalc.calculations.amortization import rolled_interest
from propcalc.calculations.parsing import FormReader
from propcalc.calculations.ratios import MONTHS_PER_YEAR, ONE, ZERO, safe_divide
from propcalc.calculations.tables import RateTables, get_default_tables


@dataclass(frozen=True)
class UnitType:
    """A line of the accommodation schedule."""

    quantity: int
    average_size: Decimal  # sq ft
    price_per_sqft: Decimal


@dataclass(frozen=True)
class GdvSummary:
    gdv: Decimal
    total_units: int
    total_area: Decimal
    gdv_per_unit: Decimal
    gdv_per_sqft: Decimal


def calculate_gdv(units: Sequence[UnitType], new_build_premium: Decimal = Decimal("0")) -> GdvSummary:
    """Sum the sales value of every unit, uplifted by any new-build premium."""
    gdv = ZERO
    total_units = 0
    total_area = ZERO
    for unit in units:
        unit_value = unit.average_size * unit.price_per_sqft * (ONE + new_build_premium)
        gdv += unit_value * unit.quantity
        total_units += unit.quantity
        total_area += unit.average_size * unit.quantity
    return GdvSummary(
        gdv=gdv,
        total_units=total_units,
        total_area=total_area,
        gdv_per_unit=safe_divide(gdv, Decimal(total_units)),
        gdv_per_sqft=safe_divide(gdv, total_area),
    )


@dataclass(frozen=True)
class DevelopmentInputs:
    gdv: Decimal
    land_cost: Decimal
    build_cost: Decimal
    professional_fee_rate: Decimal = Decimal("0")  # of build cost
    contingency_rate: Decimal = Decimal("0")  # of build cost
    sales_cost_rate: Decimal = Decimal("0")  # of GDV
    other_costs: Decimal = Decimal("0")
    finance_rate: Decimal = Decimal("0")  # annual
    term_months: int = 0
    target_profit_rate: Decimal = Decimal("0.20")  # on cost
    units: Tuple[UnitType, ...] = field(default_factory=tuple)
    new_build_premium: Decimal = Decimal("0")

    @classmethod
    def from_form(cls, form: Mapping[str, Any], strict: bool = False) -> "DevelopmentInputs":
        reader = FormReader(form, strict)
        raw_units = form.get("units") or ()
        if not isinstance(raw_units, (list, tuple)):
            raise TypeError("units must be a list of unit types")
        units = []
        for raw in raw_units:
            if not isinstance(raw, Mapping):
                raise TypeError("each unit must be a mapping")
            unit_reader = FormReader(raw, strict)
            units.append(
                UnitType(
                    quantity=unit_reader.count("quantity", "1"),
                    average_size=unit_reader.amount("average_size"),
                    price_per_sqft=unit_reader.amount("price_per_sqft"),
                )
            )
        return cls(
            gdv=reader.amount("gdv"),
            land_cost=reader.amount("land_cost"),
            build_cost=reader.amount("build_cost"),
            professional_fee_rate=reader.rate("professional_fees"),
            contingency_rate=reader.rate("contingency"),
            sales_cost_rate=reader.rate("sales_costs"),
            other_costs=reader.amount("other_costs"),
            finance_rate=reader.rate("finance_rate"),
            term_months=reader.count("term_months"),
            target_profit_rate=reader.rate("target_profit", "20"),
            units=tuple(units),
            new_build_premium=reader.rate("new_build_premium"),
        )


@dataclass(frozen=True)
class ResidualLandValue:
    target_profit_rate: Decimal
    max_total_costs: Decimal
    residual_land_value: Decimal
    is_viable: bool


@dataclass(frozen=True)
class DevelopmentAppraisal:
    gdv: Decimal
    gdv_summary: Optional[GdvSummary]
    land_cost: Decimal
    build_cost: Decimal
    professional_fees: Decimal
    contingency: Decimal
    sales_costs: Decimal
    other_costs: Decimal
    land_finance: Decimal
    build_finance: Decimal
    finance_costs: Decimal
    total_costs: Decimal

    profit: Decimal
    profit_on_cost: Decimal
    profit_on_gdv: Decimal
    equity_required: Decimal
    return_on_equity: Decimal
    land_share: Decimal
    build_share: Decimal

    residual: ResidualLandValue
    sensitivity: List[ResidualLandValue]


def finance_growth(annual_rate: Decimal, term_months: int) -> Decimal:
    """Interest per £1 borrowed for the whole term, compounding monthly."""
    return rolled_interest(ONE, annual_rate / MONTHS_PER_YEAR, term_months)


def residual_land_value(
    gdv: Decimal,
    non_land_costs: Decimal,
    target_profit_rate: Decimal,
    land_finance_growth: Decimal = Decimal("0"),
) -> ResidualLandValue:
    """
    The most that can be paid for land while still earning the target
    profit on cost.

    Total costs may not exceed GDV / (1 + target). Land is financed for the
    full term, so land plus its rolled-up interest must fit in what is left
    after the other costs.
    """
    max_total = gdv / (ONE + target_profit_rate)
    rlv = (max_total - non_land_costs) / (ONE + land_finance_growth)
    return ResidualLandValue(
        target_profit_rate=target_profit_rate,
        max_total_costs=max_total,
        residual_land_value=rlv,
        is_viable=rlv > 0,
    )


def appraise_development(
    inputs: DevelopmentInputs, tables: Optional[RateTables] = None
) -> DevelopmentAppraisal:
    """
    Appraise a development scheme.

    The land loan is drawn in full on day one; the build loan is drawn
    progressively, so interest accrues on its average exposure. If a unit
    schedule is supplied its GDV replaces the entered figure.
    """
    tables = tables or get_default_tables()

    gdv_summary = None
    gdv = inputs.gdv
    if inputs.units:
        gdv_summary = calculate_gdv(inputs.units, inputs.new_build_premium)
        gdv = gdv_summary.gdv

    build = inputs.build_cost
    professional_fees = build * inputs.professional_fee_rate
    contingency = build * inputs.contingency_rate
    sales_costs = gdv * inputs.sales_cost_rate

    growth = finance_growth(inputs.finance_rate, inputs.term_months)
    land_finance = inputs.land_cost * growth
    build_finance = build * tables.build_loan_average_exposure * growth
    finance_costs = land_finance + build_finance

    non_land_costs = (
        build + professional_fees + contingency + sales_costs + inputs.other_costs + build_finance
    )
    total_costs = inputs.land_cost + land_finance + non_land_costs
    profit = gdv - total_costs
    equity = total_costs * tables.development_equity_share

    return DevelopmentAppraisal(
        gdv=gdv,
        gdv_summary=gdv_summary,
        land_cost=inputs.land_cost,
        build_cost=build,
        professional_fees=professional_fees,
        contingency=contingency,
        sales_costs=sales_costs,
        other_costs=inputs.other_costs,
        land_finance=land_finance,
        build_finance=build_finance,
        finance_costs=finance_costs,
        total_costs=total_costs,
        profit=profit,
        profit_on_cost=safe_divide(profit, total_costs),
        profit_on_gdv=safe_divide(profit, gdv),
        equity_required=equity,
        return_on_equity=safe_divide(profit, equity),
        land_share=safe_divide(inputs.land_cost, total_costs),
        build_share=safe_divide(build, total_costs),
        residual=residual_land_value(gdv, non_land_costs, inputs.target_profit_rate, growth),
        sensitivity=[
            residual_land_value(gdv, non_land_costs, target, growth)
            for target in tables.rlv_sensitivity_targets
        ],
    )
