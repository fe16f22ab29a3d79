"""
Tiered Schedule Calculations

Ordered, contiguous bands used for marginal taxes (stamp duty, income tax)
and step-function policies (CIL instalments, LTV rate bands).

Bands are half-open [lower, upper). The topmost band may leave upper as
None, meaning unbounded.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple, TypeVar

from propcalc.calculations.ratios import ZERO


@dataclass(frozen=True)
class RateBand:
    """A single marginal band."""

    lower: Decimal
    upper: Optional[Decimal]
    rate: Decimal

    def contains(self, value: Decimal) -> bool:
        if value < self.lower:
            return False
        return self.upper is None or value < self.upper


@dataclass(frozen=True)
class BandSlice:
    """The portion of a value taxed within one band."""

    lower: Decimal
    upper: Optional[Decimal]
    taxable: Decimal
    rate: Decimal
    tax: Decimal


BandT = TypeVar("BandT")


def validate_bands(bands: Sequence) -> None:
    """
    Check bands are contiguous, strictly increasing and only the last is open.

    Works on any band-like object with lower and upper attributes.

    Raises:
        ValueError: If the bands overlap, leave gaps or are out of order
    """
    if not bands:
        raise ValueError("At least one band required")

    for i, band in enumerate(bands):
        is_last = i == len(bands) - 1
        if band.upper is None and not is_last:
            raise ValueError("Only the topmost band may be unbounded")
        if band.upper is not None and band.upper <= band.lower:
            raise ValueError(f"Band {i} upper bound must exceed its lower bound")
        if not is_last and bands[i + 1].lower != band.upper:
            raise ValueError(f"Band {i + 1} does not start where band {i} ends")


def find_band(bands: Sequence[BandT], value: Decimal) -> BandT:
    """
    Find the band containing value.

    Values below the first band fall into the first band, values above a
    bounded final band fall into the final band.
    """
    for band in bands:
        if band.upper is None or value < band.upper:
            return band
    return bands[-1]


def find_ceiling_band(bands: Sequence[BandT], value: Decimal) -> Tuple[BandT, bool]:
    """
    Select the first band whose upper bound is >= value.

    Returns the band and whether it matched; when nothing matches the final
    band is returned with matched=False so the caller can apply its
    fallback entry.
    """
    for band in bands:
        if band.upper is None or value <= band.upper:
            return band, True
    return bands[-1], False


class Schedule:
    """Marginal-rate schedule built from contiguous RateBands."""

    def __init__(self, bands: Sequence[RateBand]):
        validate_bands(bands)
        self.bands: Tuple[RateBand, ...] = tuple(bands)

    def band_for(self, value: Decimal) -> RateBand:
        return find_band(self.bands, value)

    def slices(self, value: Decimal, surcharge: Decimal = ZERO) -> List[BandSlice]:
        """
        Split value into per-band taxable slices.

        A surcharge is added to every band's rate, which is how additional
        property stamp duty is levied.
        """
        result = []
        for band in self.bands:
            if value <= band.lower:
                break
            top = value if band.upper is None else min(value, band.upper)
            taxable = top - band.lower
            if taxable <= 0:
                continue
            rate = band.rate + surcharge
            result.append(
                BandSlice(
                    lower=band.lower,
                    upper=band.upper,
                    taxable=taxable,
                    rate=rate,
                    tax=taxable * rate,
                )
            )
        return result

    def evaluate(self, value: Decimal, surcharge: Decimal = ZERO) -> Decimal:
        """Total tax on value: the sum of its marginal slices."""
        return sum((s.tax for s in self.slices(value, surcharge)), ZERO)

    def marginal_rate(self, value: Decimal) -> Decimal:
        return self.band_for(value).rate
