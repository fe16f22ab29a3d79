"""
Tests for form input parsing.
"""

import pytest
from datetime import date
from decimal import Decimal

from propcalc.calculations.exceptions import ParseError
from propcalc.calculations.parsing import (
    FormReader,
    coerce_amount,
    parse_amount,
    parse_count,
    parse_date,
    parse_flag,
    parse_key,
    parse_rate,
)


class TestParseAmount:
    """Test currency and number parsing."""

    def test_strips_currency_formatting(self):
        assert parse_amount("£1,200") == Decimal("1200")
        assert parse_amount(" £250,000.50 ") == Decimal("250000.50")

    def test_numbers_pass_through(self):
        assert parse_amount(1200) == Decimal("1200")
        assert parse_amount(5.5) == Decimal("5.5")
        assert parse_amount(Decimal("42")) == Decimal("42")

    def test_negative_amount(self):
        assert parse_amount("-£500") == Decimal("-500")

    def test_garbage_raises_parse_error(self):
        with pytest.raises(ParseError) as exc_info:
            parse_amount("abc", "monthly_rent")
        assert exc_info.value.field == "monthly_rent"
        assert "monthly_rent" in str(exc_info.value)

    def test_malformed_number_raises(self):
        with pytest.raises(ParseError):
            parse_amount("1.2.3")

    def test_none_raises_parse_error(self):
        with pytest.raises(ParseError):
            parse_amount(None)

    def test_non_finite_float_raises(self):
        with pytest.raises(ParseError):
            parse_amount(float("nan"))
        with pytest.raises(ParseError):
            parse_amount(float("inf"))

    def test_non_scalar_raises_type_error(self):
        with pytest.raises(TypeError):
            parse_amount([1, 2])
        with pytest.raises(TypeError):
            parse_amount({"value": 1})
        with pytest.raises(TypeError):
            parse_amount(True)

    def test_coerce_amount_defaults_to_zero(self):
        assert coerce_amount("n/a") == Decimal("0")
        assert coerce_amount("£99") == Decimal("99")


class TestParseOtherKinds:
    """Test rates, counts, flags, keys and dates."""

    def test_rate_divides_by_hundred(self):
        assert parse_rate("5.5") == Decimal("0.055")
        assert parse_rate("25%") == Decimal("0.25")

    def test_count_requires_whole_number(self):
        assert parse_count("6") == 6
        with pytest.raises(ParseError):
            parse_count("6.5")

    def test_flags(self):
        assert parse_flag("Yes") is True
        assert parse_flag("off") is False
        assert parse_flag(1) is True
        assert parse_flag(False) is False
        with pytest.raises(ParseError):
            parse_flag("maybe")
        with pytest.raises(TypeError):
            parse_flag(["yes"])

    def test_key_normalised(self):
        assert parse_key("  Westminster ") == "westminster"
        with pytest.raises(TypeError):
            parse_key(3.5)

    def test_dates(self):
        assert parse_date("2025-03-01") == date(2025, 3, 1)
        assert parse_date(date(2025, 3, 1)) == date(2025, 3, 1)
        with pytest.raises(ParseError):
            parse_date("01/03/2025")
        with pytest.raises(TypeError):
            parse_date(20250301)


class TestFormReader:
    """Test reading named fields in lenient and strict modes."""

    def test_missing_field_uses_default(self):
        reader = FormReader({})
        assert reader.rate("deposit_percent", "25") == Decimal("0.25")
        assert reader.amount("monthly_rent") == Decimal("0")
        assert reader.count("mortgage_term", "25") == 25
        assert reader.flag("include_en_suite") is False
        assert reader.key("region", "other") == "other"

    def test_blank_field_uses_default(self):
        reader = FormReader({"deposit_percent": "  "})
        assert reader.rate("deposit_percent", "25") == Decimal("0.25")

    def test_lenient_garbage_becomes_zero(self):
        reader = FormReader({"monthly_rent": "lots"})
        assert reader.amount("monthly_rent") == Decimal("0")

    def test_strict_garbage_raises(self):
        reader = FormReader({"monthly_rent": "lots"}, strict=True)
        with pytest.raises(ParseError):
            reader.amount("monthly_rent")

    def test_lenient_count_truncates(self):
        reader = FormReader({"number_of_rooms": "6.5"})
        assert reader.count("number_of_rooms") == 6

    def test_strict_count_rejects_fraction(self):
        reader = FormReader({"number_of_rooms": "6.5"}, strict=True)
        with pytest.raises(ParseError):
            reader.count("number_of_rooms")

    def test_non_scalar_raises_in_lenient_mode(self):
        reader = FormReader({"monthly_rent": [1200]})
        with pytest.raises(TypeError):
            reader.amount("monthly_rent")

    def test_iso_date(self):
        assert FormReader({"d": "2025-01-31"}).iso_date("d") == date(2025, 1, 31)
        assert FormReader({}).iso_date("d") is None
        assert FormReader({"d": "soon"}).iso_date("d") is None
        with pytest.raises(ParseError):
            FormReader({"d": "soon"}, strict=True).iso_date("d")

    def test_optional_rate(self):
        assert FormReader({}).optional_rate("stress") is None
        assert FormReader({"stress": ""}).optional_rate("stress") is None
        assert FormReader({"stress": "5.5"}).optional_rate("stress") == Decimal("0.055")
        assert FormReader({"stress": "high"}).optional_rate("stress") == 0
        with pytest.raises(ParseError):
            FormReader({"stress": "high"}, strict=True).optional_rate("stress")
