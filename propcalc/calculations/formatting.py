"""
Display formatting for calculator outputs.

Formatting is lossy and only happens at the edge, after every metric has
been computed at full precision.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from propcalc.calculations.ratios import HUNDRED


def _quantize(value: Decimal, decimals: int) -> Decimal:
    exponent = Decimal(1).scaleb(-decimals)
    return value.quantize(exponent, rounding=ROUND_HALF_UP)


def format_currency(value: Decimal, decimals: int = 0) -> str:
    """Format as GBP, e.g. £250,000 or -£1,234.50."""
    rounded = _quantize(Decimal(value), decimals)
    sign = "-" if rounded < 0 else ""
    return f"{sign}£{abs(rounded):,.{decimals}f}"


def format_currency_compact(value: Decimal) -> str:
    """Format large amounts compactly: £1.25m, £450k, or full below £100k."""
    value = Decimal(value)
    if value >= 1_000_000:
        return f"£{_quantize(value / 1_000_000, 2)}m"
    if value >= 100_000:
        return f"£{_quantize(value / 1_000, 0)}k"
    return format_currency(value)


def format_percent(rate: Decimal, decimals: int = 1) -> str:
    """Format a fractional rate as a percentage, e.g. 0.0576 -> 5.8%."""
    return f"{_quantize(Decimal(rate) * HUNDRED, decimals)}%"


def format_ratio(value: Decimal) -> str:
    """Format a coverage ratio, e.g. 1.25x."""
    return f"{_quantize(Decimal(value), 2)}x"


def format_band_label(lower: Decimal, upper: Optional[Decimal]) -> str:
    """Label a band, e.g. £250,000 - £925,000 or £1,500,000+."""
    if upper is None:
        return f"{format_currency(lower)}+"
    return f"{format_currency(lower)} - {format_currency(upper)}"


def format_months(months: int) -> str:
    """Format a month count, e.g. 18 -> 1y 6m."""
    if months == 1:
        return "1 month"
    if months < 12:
        return f"{months} months"
    years, remaining = divmod(months, 12)
    if remaining == 0:
        return "1 year" if years == 1 else f"{years} years"
    return f"{years}y {remaining}m"
