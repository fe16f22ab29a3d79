"""
Stamp Duty Land Tax Calculations

SDLT on an English or Northern Irish purchase. Tax is the sum of the
marginal slices of the price across the applicable bands; surcharges
for additional, non-resident and company purchases are added to every
band's rate.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence

from propcalc.calculations.formatting import format_band_label, format_currency, format_percent
from propcalc.calculations.parsing import FormReader
from propcalc.calculations.ratios import ZERO, safe_divide
from propcalc.calculations.schedule import BandSlice
from propcalc.calculations.tables import RateTables, get_default_tables

BUYER_TYPES = ("first-time", "home-mover", "additional", "non-resident", "company")
PROPERTY_TYPES = ("residential", "non-residential", "mixed")


@dataclass(frozen=True)
class StampDutyInputs:
    price: Decimal
    buyer_type: str = "home-mover"
    property_type: str = "residential"

    @classmethod
    def from_form(cls, form: Mapping[str, Any], strict: bool = False) -> "StampDutyInputs":
        reader = FormReader(form, strict)
        buyer_type = reader.key("buyer_type", "home-mover")
        property_type = reader.key("property_type", "residential")
        return cls(
            price=reader.amount("price"),
            buyer_type=buyer_type if buyer_type in BUYER_TYPES else "home-mover",
            property_type=property_type if property_type in PROPERTY_TYPES else "residential",
        )


@dataclass(frozen=True)
class StampDutyResult:
    price: Decimal
    buyer_type: str
    property_type: str
    total_tax: Decimal
    effective_rate: Decimal
    surcharge: Decimal
    breakdown: List[BandSlice]
    band_summary: List[str]
    explanation: str
    warnings: List[str]


def describe_slices(breakdown: Sequence[BandSlice]) -> List[str]:
    """One display line per band, e.g. £250,000 - £925,000 at 5.0%: £2,500."""
    return [
        f"{format_band_label(s.lower, s.upper)} at {format_percent(s.rate)}: {format_currency(s.tax)}"
        for s in breakdown
    ]

def calculate_stamp_duty(
    inputs: StampDutyInputs, tables: Optional[RateTables] = None
) -> StampDutyResult:
    """
    Calculate SDLT for a purchase.

    First-time buyer relief is lost entirely, not tapered, once the price
    exceeds the relief ceiling. Non-residential and mixed-use purchases use
    their own bands and never attract residential surcharges.
    """
    tables = tables or get_default_tables()
    price = inputs.price
    surcharge = ZERO
    warnings = []

    if inputs.property_type in ("non-residential", "mixed"):
        schedule = tables.schedule("sdlt_non_residential")
        explanation = "Non-residential/mixed use SDLT rates apply"
    elif inputs.buyer_type == "first-time":
        if price <= tables.sdlt_first_time_buyer_max_price:
            schedule = tables.schedule("sdlt_first_time_buyer")
            explanation = "First-time buyer relief applies"
        else:
            schedule = tables.schedule("sdlt_standard")
            ceiling = format_currency(tables.sdlt_first_time_buyer_max_price)
            explanation = f"Property over {ceiling} - standard rates apply"
            warnings.append(f"First-time buyer relief not available for properties over {ceiling}")
    elif inputs.buyer_type == "additional":
        schedule = tables.schedule("sdlt_standard")
        surcharge = tables.sdlt_additional_surcharge
        explanation = "Additional property surcharge applies"
        warnings.append("This is your second or subsequent property - surcharge applies")
    elif inputs.buyer_type == "non-resident":
        schedule = tables.schedule("sdlt_standard")
        surcharge = tables.sdlt_additional_surcharge + tables.sdlt_non_resident_surcharge
        explanation = "Additional property and non-resident surcharges apply"
        warnings.append("Non-UK resident surcharge applies")
    elif inputs.buyer_type == "company":
        schedule = tables.schedule("sdlt_standard")
        surcharge = tables.sdlt_additional_surcharge
        explanation = "Company purchase - additional property surcharge applies"
        if price > tables.sdlt_company_warning_price:
            warnings.append(
                f"For properties over {format_currency(tables.sdlt_company_warning_price)} "
                "purchased by companies, consider ATED implications"
            )
    else:
        schedule = tables.schedule("sdlt_standard")
        explanation = "Standard residential SDLT rates"

    breakdown = schedule.slices(price, surcharge)
    total_tax = sum((s.tax for s in breakdown), ZERO)

    return StampDutyResult(
        price=price,
        buyer_type=inputs.buyer_type,
        property_type=inputs.property_type,
        total_tax=total_tax,
        effective_rate=safe_divide(total_tax, price),
        surcharge=surcharge,
        breakdown=breakdown,
        band_summary=describe_slices(breakdown),
        explanation=explanation,
        warnings=warnings,
    )
