"""
Shared FastAPI dependencies.
"""

from functools import lru_cache

from fastapi import Depends, HTTPException

from propcalc.calculations.exceptions import RateTableError
from propcalc.calculations.tables import (
    JsonRateTableProvider,
    RateTableProvider,
    RateTables,
    StaticRateTableProvider,
)
from propcalc.config import get_settings


@lru_cache()
def get_rate_table_provider() -> RateTableProvider:
    """Provider chosen by settings: a JSON file if configured, else built-ins."""
    settings = get_settings()
    if settings.rate_tables_path:
        return JsonRateTableProvider(settings.rate_tables_path)
    return StaticRateTableProvider()


def get_rate_tables(
    provider: RateTableProvider = Depends(get_rate_table_provider),
) -> RateTables:
    """Dependency for getting the current rate tables."""
    try:
        return provider.get_tables()
    except RateTableError as e:
        raise HTTPException(status_code=503, detail=str(e))
