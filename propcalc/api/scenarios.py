"""
Scenario and stress test API endpoints.

Each endpoint runs one calculator several times with a single input
varied and returns the results in order.
"""

from typing import List, Optional, Sequence, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from propcalc.api.calculations import (
    BridgingForm,
    BuyToLetForm,
    HolidayLetForm,
    ServicedAccommodationForm,
    check_finance_terms,
    parse_form,
)
from propcalc.api.dependencies import get_rate_tables
from propcalc.calculations import scenarios
from propcalc.calculations.bridging import BridgingInputs
from propcalc.calculations.buy_to_let import BuyToLetInputs
from propcalc.calculations.exceptions import ParseError
from propcalc.calculations.holiday_let import HolidayLetInputs
from propcalc.calculations.parsing import coerce_amount, parse_rate
from propcalc.calculations.ratios import HUNDRED
from propcalc.calculations.serviced_accommodation import ServicedAccommodationInputs
from propcalc.calculations.tables import RateTables

router = APIRouter()

# Longest exit horizon a bridging sweep may request
MAX_EXIT_MONTHS = 120


def parse_percentages(values: Sequence[Union[float, str]], field: str, strict: bool) -> list:
    """Parse a list of whole percentages into fractions."""
    rates = []
    for value in values:
        if strict:
            try:
                rates.append(parse_rate(value, field))
            except ParseError as e:
                raise HTTPException(status_code=400, detail=str(e))
        else:
            rates.append(coerce_amount(value, field) / HUNDRED)
    return rates


class BtlStressRequest(BaseModel):
    """BTL inputs plus the interest rates to test (whole percentages)."""

    inputs: BuyToLetForm
    rates: Optional[List[Union[float, str]]] = None


@router.post("/btl-stress")
async def btl_stress(
    request: BtlStressRequest,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Re-run a BTL appraisal at each stressed interest rate."""
    inputs = parse_form(BuyToLetInputs.from_form, request.inputs, strict)
    rates = None
    if request.rates:
        rates = parse_percentages(request.rates, "rates", strict)
    return scenarios.btl_rate_stress(inputs, rates, tables)


class SaOccupancyRequest(BaseModel):
    """SA inputs plus occupancy levels to model (whole percentages)."""

    inputs: ServicedAccommodationForm
    occupancies: Optional[List[Union[float, str]]] = None


@router.post("/sa-occupancy")
async def sa_occupancy(
    request: SaOccupancyRequest,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Monthly and annual cashflow at each occupancy level."""
    inputs = parse_form(ServicedAccommodationInputs.from_form, request.inputs, strict)
    occupancies = None
    if request.occupancies:
        occupancies = parse_percentages(request.occupancies, "occupancies", strict)
    return scenarios.sa_occupancy_scenarios(inputs, occupancies, tables)


class BridgingExitRequest(BaseModel):
    """Bridging inputs plus how many exit months to model."""

    inputs: BridgingForm
    months: Optional[int] = None


@router.post("/bridging-exit")
async def bridging_exit(request: BridgingExitRequest, strict: bool = False):
    """Retained vs rolled interest for each possible exit month."""
    inputs = parse_form(BridgingInputs.from_form, request.inputs, strict)
    check_finance_terms(inputs.term_months, inputs.monthly_rate)
    if request.months is not None and not 0 < request.months <= MAX_EXIT_MONTHS:
        raise HTTPException(
            status_code=400, detail=f"months must be between 1 and {MAX_EXIT_MONTHS}"
        )
    months = request.months or min(2 * inputs.term_months, MAX_EXIT_MONTHS)
    return scenarios.bridging_exit_scenarios(inputs, months)


@router.post("/fhl-vs-btl")
async def fhl_vs_btl(
    form: HolidayLetForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """FHL and Section 24 tax compared at every tax bracket."""
    inputs = parse_form(HolidayLetInputs.from_form, form, strict)
    return scenarios.fhl_vs_btl_by_bracket(inputs, tables)
