"""
Community Infrastructure Levy Calculations

CIL is charged per square metre of net additional floor space at the
authority's adopted rate, indexed from the adoption year to the year of
permission by the BCIS All-in Tender Price Index.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, List, Mapping, Optional

from dateutil.relativedelta import relativedelta

from propcalc.calculations.parsing import FormReader
from propcalc.calculations.ratios import HUNDRED, ZERO, safe_divide
from propcalc.calculations.tables import RateTables, get_default_tables


@dataclass(frozen=True)
class CilInputs:
    local_authority: str
    charging_zone: str
    gross_floor_area: Decimal
    existing_floor_area: Decimal = Decimal("0")
    existing_use_lawful: bool = False
    social_housing_relief: Decimal = Decimal("0")  # share of net area
    self_build_exemption: bool = False
    indexation_year: str = ""
    commencement_date: Optional[date] = None

    @classmethod
    def from_form(cls, form: Mapping[str, Any], strict: bool = False) -> "CilInputs":
        reader = FormReader(form, strict)
        return cls(
            local_authority=reader.key("local_authority", "other"),
            charging_zone=reader.key("charging_zone"),
            gross_floor_area=reader.amount("gross_floor_area"),
            existing_floor_area=reader.amount("existing_floor_area"),
            existing_use_lawful=reader.flag("existing_use_lawful"),
            social_housing_relief=reader.rate("social_housing_relief"),
            self_build_exemption=reader.flag("self_build_exemption"),
            indexation_year=reader.key("indexation_year"),
            commencement_date=reader.iso_date("commencement_date"),
        )


@dataclass(frozen=True)
class CilInstalment:
    stage: str
    day_offset: int
    percentage: Decimal
    amount: Decimal
    due_date: Optional[date] = None


@dataclass(frozen=True)
class CilLiability:
    gross_floor_area: Decimal
    existing_floor_area: Decimal
    net_floor_area: Decimal
    relief_area: Decimal
    chargeable_area: Decimal
    base_rate: Decimal
    adoption_index: Decimal
    current_index: Decimal
    indexation_multiplier: Decimal
    indexed_rate: Decimal
    liability: Decimal
    liability_per_sqm: Decimal
    self_build_exemption: bool
    payment_schedule: List[CilInstalment]


def instalment_stage(day_offset: int) -> str:
    if day_offset == 0:
        return "On commencement"
    return f"{day_offset} days"


def build_payment_schedule(
    liability: Decimal,
    tables: Optional[RateTables] = None,
    commencement_date: Optional[date] = None,
) -> List[CilInstalment]:
    """
    Split a liability into equal instalments per the instalment policy.

    The tier is chosen by the size of the total liability. A zero
    liability has no payment schedule.
    """
    tables = tables or get_default_tables()
    if liability <= 0:
        return []

    tier = tables.cil_instalment_tier(liability)
    count = len(tier.day_offsets)
    share = liability / count

    return [
        CilInstalment(
            stage=instalment_stage(offset),
            day_offset=offset,
            percentage=HUNDRED / count,
            amount=share,
            due_date=(
                commencement_date + relativedelta(days=offset)
                if commencement_date is not None
                else None
            ),
        )
        for offset in tier.day_offsets
    ]


def calculate_cil(inputs: CilInputs, tables: Optional[RateTables] = None) -> CilLiability:
    """
    Calculate CIL liability and its instalment schedule.

    Existing floor space is only netted off when its use is lawful.
    Social housing relief reduces the chargeable area rather than the rate,
    and a self-build exemption zeroes the liability entirely.
    """
    tables = tables or get_default_tables()

    net_area = inputs.gross_floor_area
    if inputs.existing_use_lawful and inputs.existing_floor_area > 0:
        net_area = max(ZERO, inputs.gross_floor_area - inputs.existing_floor_area)

    relief_area = net_area * inputs.social_housing_relief
    chargeable_area = net_area - relief_area

    base_rate = tables.cil_zone_rate(inputs.local_authority, inputs.charging_zone)
    adoption_index = tables.bcis_index(tables.cil_adoption_year)
    current_index = tables.bcis_index(inputs.indexation_year or tables.cil_current_year)
    multiplier = safe_divide(current_index, adoption_index)
    indexed_rate = base_rate * multiplier

    liability = chargeable_area * indexed_rate
    if inputs.self_build_exemption:
        liability = ZERO

    return CilLiability(
        gross_floor_area=inputs.gross_floor_area,
        existing_floor_area=inputs.existing_floor_area,
        net_floor_area=net_area,
        relief_area=relief_area,
        chargeable_area=chargeable_area,
        base_rate=base_rate,
        adoption_index=adoption_index,
        current_index=current_index,
        indexation_multiplier=multiplier,
        indexed_rate=indexed_rate,
        liability=liability,
        liability_per_sqm=safe_divide(liability, inputs.gross_floor_area),
        self_build_exemption=inputs.self_build_exemption,
        payment_schedule=build_payment_schedule(liability, tables, inputs.commencement_date),
    )
