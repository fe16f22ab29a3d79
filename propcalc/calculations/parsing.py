"""
Input Parsing

The single boundary where user-entered form values become engine values.
Currency strings like "£1,200" are stripped to their digits, percentages
are divided by 100 here and nowhere else.

Two modes are supported:
- lenient (default): unparseable values degrade to zero so a partially
  filled form never stops a calculation
- strict: unparseable values raise ParseError so the caller can block
  computation or show a visible default

Non-scalar values (lists, dicts, arbitrary objects) raise TypeError in
both modes.
"""

import logging
import math
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union

from propcalc.calculations.exceptions import ParseError
from propcalc.calculations.ratios import HUNDRED, ZERO

logger = logging.getLogger(__name__)

FormValue = Union[str, int, float, Decimal, bool, None]

_STRIP_PATTERN = re.compile(r"[^0-9.\-]")
_NUMBER_PATTERN = re.compile(r"-?(\d+\.?\d*|\.\d+)")

_TRUE_VALUES = {"yes", "y", "true", "1", "on"}
_FALSE_VALUES = {"no", "n", "false", "0", "off"}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def parse_amount(value: FormValue, field: Optional[str] = None) -> Decimal:
    """
    Parse a currency amount or plain number.

    Raises:
        ParseError: If the value is blank or not numeric
        TypeError: If the value is not a scalar
    """
    if isinstance(value, bool):
        raise TypeError(f"Expected a number, got bool for {field or 'value'}")
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ParseError("not a finite number", field, value)
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise ParseError("not a finite number", field, value)
        return Decimal(str(value))
    if value is None:
        raise ParseError("value is required", field, value)
    if not isinstance(value, str):
        raise TypeError(
            f"Expected a number or string for {field or 'value'}, got {type(value).__name__}"
        )

    cleaned = _STRIP_PATTERN.sub("", value)
    if not cleaned:
        raise ParseError(f"{value!r} is not a number", field, value)
    if not _NUMBER_PATTERN.fullmatch(cleaned):
        raise ParseError(f"{value!r} is not a number", field, value)

    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise ParseError(f"{value!r} is not a number", field, value) from e


def parse_rate(value: FormValue, field: Optional[str] = None) -> Decimal:
    """Parse a whole-number percentage (5.5) into a fraction (0.055)."""
    return parse_amount(value, field) / HUNDRED


def parse_count(value: FormValue, field: Optional[str] = None) -> int:
    """Parse a whole count of months, days, rooms or years."""
    amount = parse_amount(value, field)
    if amount != amount.to_integral_value():
        raise ParseError(f"{value!r} is not a whole number", field, value)
    return int(amount)


def parse_flag(value: FormValue, field: Optional[str] = None) -> bool:
    """Parse a yes/no style flag."""
    if isinstance(value, bool):
        return value
    if value is None:
        raise ParseError("value is required", field, value)
    if isinstance(value, (int, float, Decimal)):
        return value != 0
    if not isinstance(value, str):
        raise TypeError(
            f"Expected a flag for {field or 'value'}, got {type(value).__name__}"
        )

    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ParseError(f"{value!r} is not a yes/no value", field, value)


def parse_key(value: FormValue, field: Optional[str] = None) -> str:
    """Normalise a lookup key (authority, region, bracket)."""
    if value is None:
        raise ParseError("value is required", field, value)
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        raise TypeError(
            f"Expected a string key for {field or 'value'}, got {type(value).__name__}"
        )
    return str(value).strip().lower()


def parse_date(value: Any, field: Optional[str] = None) -> date:
    """Parse an ISO date (2025-03-01)."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise TypeError(
            f"Expected an ISO date for {field or 'value'}, got {type(value).__name__}"
        )
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise ParseError(f"{value!r} is not a date", field, value) from e


def coerce_amount(value: FormValue, field: Optional[str] = None) -> Decimal:
    """Lenient parse_amount: anything unparseable becomes zero."""
    try:
        return parse_amount(value, field)
    except ParseError:
        logger.debug(f"Could not parse {value!r} for {field or 'value'}; using 0")
        return ZERO


class FormReader:
    """
    Reads named fields from a raw form mapping.

    Missing or blank fields take the supplied default. Present but
    unparseable fields become zero (lenient) or raise ParseError (strict).
    """

    def __init__(self, form: Mapping[str, Any], strict: bool = False):
        self.form = form
        self.strict = strict

    def _raw(self, name: str, default: FormValue) -> FormValue:
        value = self.form.get(name)
        if _is_blank(value):
            return default
        return value

    def _read(self, parser, name: str, default: FormValue, fallback):
        raw = self._raw(name, default)
        if _is_blank(raw):
            return fallback
        try:
            return parser(raw, name)
        except ParseError:
            if self.strict:
                raise
            logger.debug(f"Could not parse {raw!r} for {name}; using {fallback!r}")
            return fallback

    def amount(self, name: str, default: FormValue = "0") -> Decimal:
        return self._read(parse_amount, name, default, ZERO)

    def rate(self, name: str, default: FormValue = "0") -> Decimal:
        return self._read(parse_rate, name, default, ZERO)

    def count(self, name: str, default: FormValue = "0") -> int:
        raw = self._raw(name, default)
        if _is_blank(raw):
            return 0
        try:
            return parse_count(raw, name)
        except ParseError:
            if self.strict:
                raise
            # Lenient mode truncates fractional counts like "6.5" rooms
            return int(coerce_amount(raw, name))

    def flag(self, name: str, default: FormValue = False) -> bool:
        return self._read(parse_flag, name, default, False)

    def key(self, name: str, default: str = "") -> str:
        raw = self._raw(name, default)
        if _is_blank(raw):
            return default
        return parse_key(raw, name)

    def iso_date(self, name: str) -> Optional[date]:
        raw = self._raw(name, None)
        if _is_blank(raw):
            return None
        try:
            return parse_date(raw, name)
        except ParseError:
            if self.strict:
                raise
            logger.debug(f"Could not parse {raw!r} for {name}; ignoring")
            return None

    def optional_rate(self, name: str) -> Optional[Decimal]:
        raw = self._raw(name, None)
        if _is_blank(raw):
            return None
        return self.rate(name)
