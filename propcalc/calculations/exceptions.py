"""
Calculation engine exceptions.
"""

from typing import Any, Optional


class CalculationError(Exception):
    """Base exception for the calculation engine."""

    pass


class ParseError(CalculationError, ValueError):
    """A user-entered value could not be read as a number, rate or flag."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        self.field = field
        self.value = value
        if field:
            message = f"{field}: {message}"
        super().__init__(message)


class RateTableError(CalculationError, ValueError):
    """Rate table configuration is malformed or could not be loaded."""

    pass
