"""
Leasehold Calculations

Lease extension premium under a simplified statutory valuation:
capitalised ground rent, diminution in the freeholder's reversion and,
for leases under 80 years, the freeholder's share of marriage value.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from propcalc.calculations.parsing import FormReader
from propcalc.calculations.ratios import ONE, ZERO, safe_divide
from propcalc.calculations.tables import RateTables, get_default_tables


def years_purchase(rate: Decimal, years: int) -> Decimal:
    """
    Present value of £1 a year for a number of years.

    YP = (1 - (1 + rate) ** -years) / rate; with a zero rate it is just the
    number of years.
    """
    if years <= 0:
        return ZERO
    if rate == 0:
        return Decimal(years)
    return (ONE - (ONE + rate) ** -years) / rate


def present_value(amount: Decimal, rate: Decimal, years: int) -> Decimal:
    """Value today of an amount receivable after a number of years."""
    return amount / (ONE + rate) ** years


def capitalise_ground_rent(
    ground_rent: Decimal, years: int, tables: Optional[RateTables] = None
) -> Decimal:
    """Ground rent income stream valued as an annuity."""
    tables = tables or get_default_tables()
    return ground_rent * years_purchase(tables.ground_rent_capitalisation_rate, years)


@dataclass(frozen=True)
class LeaseExtensionInputs:
    flat_value: Decimal  # long lease / freehold equivalent value
    current_lease_years: int
    ground_rent: Decimal = Decimal("0")
    extension_years: Optional[int] = None  # statutory extension when None
    marriage_value_share: Optional[Decimal] = None

    @classmethod
    def from_form(cls, form: Mapping[str, Any], strict: bool = False) -> "LeaseExtensionInputs":
        reader = FormReader(form, strict)
        extension = reader.count("extension_years", "")
        return cls(
            flat_value=reader.amount("flat_value"),
            current_lease_years=reader.count("current_lease_years"),
            ground_rent=reader.amount("ground_rent"),
            extension_years=extension or None,
            marriage_value_share=reader.optional_rate("marriage_value_share"),
        )


@dataclass(frozen=True)
class LeaseExtensionPremium:
    flat_value: Decimal
    current_lease_years: int
    extended_lease_years: int
    current_relativity: Decimal
    extended_relativity: Decimal
    current_lease_value: Decimal
    extended_lease_value: Decimal

    capitalised_ground_rent: Decimal
    reversion_diminution: Decimal
    marriage_value: Decimal
    freeholder_marriage_share: Decimal
    premium: Decimal

    professional_fees: Dict[str, Decimal]
    total_professional_fees: Decimal
    total_cost: Decimal

    value_uplift: Decimal
    net_gain: Decimal
    roi: Decimal
    years_to_marriage_value: int
    in_marriage_value_zone: bool
    is_critical: bool


def calculate_lease_extension(
    inputs: LeaseExtensionInputs, tables: Optional[RateTables] = None
) -> LeaseExtensionPremium:
    """
    Estimate the premium and total cost of extending a lease.

    Marriage value is only payable when the unexpired term is below the
    threshold (80 years). It is the uplift in the lease value less what
    the freeholder gives up, split with the freeholder at the configured
    share, and never negative.
    """
    tables = tables or get_default_tables()
    years = inputs.current_lease_years
    extension = inputs.extension_years or tables.statutory_extension_years
    extended_years = years + extension
    share = (
        inputs.marriage_value_share
        if inputs.marriage_value_share is not None
        else tables.freeholder_marriage_share
    )

    current_relativity = tables.relativity(Decimal(years))
    extended_relativity = tables.relativity(Decimal(extended_years))
    current_value = inputs.flat_value * current_relativity
    extended_value = inputs.flat_value * extended_relativity

    capitalised_rent = capitalise_ground_rent(inputs.ground_rent, years, tables)
    # Freeholder's reversion moves from the end of the current term to the
    # end of the extended term
    reversion_diminution = present_value(
        inputs.flat_value, tables.deferment_rate, years
    ) - present_value(inputs.flat_value, tables.deferment_rate, extended_years)

    in_zone = years < tables.marriage_value_threshold_years
    marriage_value = ZERO
    if in_zone:
        marriage_value = max(
            ZERO,
            extended_value - current_value - capitalised_rent - reversion_diminution,
        )
    freeholder_share = marriage_value * share

    premium = capitalised_rent + reversion_diminution + freeholder_share

    fees = {
        fee.name: max(fee.minimum, inputs.flat_value * fee.rate)
        for fee in tables.lease_professional_fees
    }
    total_fees = sum(fees.values(), ZERO)
    total_cost = premium + total_fees

    value_uplift = extended_value - current_value
    net_gain = value_uplift - total_cost

    return LeaseExtensionPremium(
        flat_value=inputs.flat_value,
        current_lease_years=years,
        extended_lease_years=extended_years,
        current_relativity=current_relativity,
        extended_relativity=extended_relativity,
        current_lease_value=current_value,
        extended_lease_value=extended_value,
        capitalised_ground_rent=capitalised_rent,
        reversion_diminution=reversion_diminution,
        marriage_value=marriage_value,
        freeholder_marriage_share=freeholder_share,
        premium=premium,
        professional_fees=fees,
        total_professional_fees=total_fees,
        total_cost=total_cost,
        value_uplift=value_uplift,
        net_gain=net_gain,
        roi=safe_divide(net_gain, total_cost),
        years_to_marriage_value=max(0, years - tables.marriage_value_threshold_years),
        in_marriage_value_zone=in_zone,
        is_critical=years < tables.lease_critical_years,
    )
