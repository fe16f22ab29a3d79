"""
Loft Conversion Calculations

Cost range and value uplift for converting a loft into habitable space.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from propcalc.calculations.parsing import FormReader
from propcalc.calculations.ratios import ZERO, safe_divide
from propcalc.calculations.tables import RateTables, get_default_tables


@dataclass(frozen=True)
class LoftConversionInputs:
    conversion_type: str
    region: str
    loft_size: Decimal  # sqm
    bedrooms_added: int
    current_value: Decimal
    include_en_suite: bool = False

    @classmethod
    def from_form(cls, form: Mapping[str, Any], strict: bool = False) -> "LoftConversionInputs":
        reader = FormReader(form, strict)
        return cls(
            conversion_type=reader.key("conversion_type", "dormer-rear"),
            region=reader.key("region", "other"),
            loft_size=reader.amount("loft_size"),
            bedrooms_added=reader.count("bedrooms_added", "1"),
            current_value=reader.amount("current_value"),
            include_en_suite=reader.flag("include_en_suite"),
        )


@dataclass(frozen=True)
class LoftConversionEstimate:
    conversion_type: str
    conversion_description: str
    region_multiplier: Decimal
    value_add_rate: Decimal
    en_suite_cost: Decimal
    cost_low: Decimal
    cost_mid: Decimal
    cost_high: Decimal
    value_add: Decimal
    profit_loss: Decimal
    roi: Decimal
    new_value: Decimal
    cost_per_sqm: Decimal
    value_per_sqm: Decimal


def estimate_loft_conversion(
    inputs: LoftConversionInputs, tables: Optional[RateTables] = None
) -> LoftConversionEstimate:
    """
    Estimate build cost and value added by a loft conversion.

    Costs are per sqm for the conversion type, scaled by the regional
    multiplier. ROI is measured against the mid-range cost.
    """
    tables = tables or get_default_tables()

    conversion_type = inputs.conversion_type
    if conversion_type not in tables.loft_conversion_costs:
        conversion_type = tables.loft_default_conversion
    costs = tables.loft_cost(conversion_type)
    multiplier = tables.region_multiplier(inputs.region)
    value_add_rate = tables.loft_value_add_rate(inputs.region)

    en_suite_cost = tables.en_suite_cost * multiplier if inputs.include_en_suite else ZERO
    cost_low = inputs.loft_size * costs.low * multiplier + en_suite_cost
    cost_mid = inputs.loft_size * costs.mid * multiplier + en_suite_cost
    cost_high = inputs.loft_size * costs.high * multiplier + en_suite_cost

    value_add = inputs.current_value * value_add_rate * inputs.bedrooms_added
    if inputs.include_en_suite:
        value_add += inputs.current_value * tables.en_suite_value_uplift

    profit_loss = value_add - cost_mid

    return LoftConversionEstimate(
        conversion_type=conversion_type,
        conversion_description=costs.description,
        region_multiplier=multiplier,
        value_add_rate=value_add_rate,
        en_suite_cost=en_suite_cost,
        cost_low=cost_low,
        cost_mid=cost_mid,
        cost_high=cost_high,
        value_add=value_add,
        profit_loss=profit_loss,
        roi=safe_divide(profit_loss, cost_mid),
        new_value=inputs.current_value + value_add,
        cost_per_sqm=safe_divide(cost_mid, inputs.loft_size),
        value_per_sqm=safe_divide(value_add, inputs.loft_size),
    )
