"""
Property Calculation Engine

Pure calculators for UK property investment: buy-to-let and HMO yields,
bridging interest, CIL, loft conversions, holiday let and landlord tax,
serviced accommodation occupancy, stamp duty, leasehold and development
appraisals. No module here performs I/O or keeps state, apart from the
explicit JSON rate-table loader.
"""

from propcalc.calculations import (
    amortization,
    bridging,
    buy_to_let,
    cil,
    development,
    hmo,
    holiday_let,
    icr,
    leasehold,
    loft_conversion,
    ratios,
    scenarios,
    schedule,
    serviced_accommodation,
    stamp_duty,
    tables,
    tax,
)

__all__ = [
    "amortization",
    "bridging",
    "buy_to_let",
    "cil",
    "development",
    "hmo",
    "holiday_let",
    "icr",
    "leasehold",
    "loft_conversion",
    "ratios",
    "scenarios",
    "schedule",
    "serviced_accommodation",
    "stamp_duty",
    "tables",
    "tax",
]
