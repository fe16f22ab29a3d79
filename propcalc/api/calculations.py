"""
Property calculation API endpoints.

Each endpoint accepts a raw calculator form and returns the calculator's
full result record. Numeric fields accept numbers or strings such as
"£1,200"; percentages are whole numbers (5.5 for 5.5%).

Parsing is lenient by default: unreadable values are treated as zero.
Pass ?strict=true to reject them with a 400 instead.
"""

from decimal import Decimal
from typing import Any, Callable, List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from propcalc.api.dependencies import get_rate_tables
from propcalc.calculations.bridging import BridgingInputs, compare_bridging_interest
from propcalc.calculations.brrr import BrrrInputs, derive_brrr
from propcalc.calculations.buy_to_let import BuyToLetInputs, derive_buy_to_let
from propcalc.calculations.cil import CilInputs, calculate_cil
from propcalc.calculations.development import DevelopmentInputs, appraise_development
from propcalc.calculations.development_finance import (
    DevelopmentFinanceInputs,
    structure_development_finance,
)
from propcalc.calculations.exceptions import ParseError
from propcalc.calculations.hmo import HmoInputs, derive_hmo, estimate_licence
from propcalc.calculations.holiday_let import HolidayLetInputs, calculate_holiday_let_tax
from propcalc.calculations.icr import IcrInputs, assess_icr
from propcalc.calculations.leasehold import LeaseExtensionInputs, calculate_lease_extension
from propcalc.calculations.loft_conversion import (
    LoftConversionInputs,
    estimate_loft_conversion,
)
from propcalc.calculations.ratios import MONTHS_PER_YEAR, ZERO
from propcalc.calculations.serviced_accommodation import (
    ServicedAccommodationInputs,
    calculate_sa_breakeven,
)
from propcalc.calculations.stamp_duty import StampDutyInputs, calculate_stamp_duty
from propcalc.calculations.tables import RateTables
from propcalc.calculations.tax import (
    IncomeTaxInputs,
    Section24Inputs,
    calculate_income_tax,
    calculate_section24_impact,
)

router = APIRouter()

# Form values as a browser or client sends them
Amount = Optional[Union[float, str]]
Flag = Optional[Union[bool, str]]

# Finance terms beyond these compound past any realistic loan
MAX_TERM_MONTHS = 120
MAX_MONTHLY_RATE = Decimal("1")


def check_finance_terms(term_months: int, monthly_rate: Decimal = ZERO) -> None:
    """Reject loan terms and interest rates outside what the finance calculators model."""
    if term_months > MAX_TERM_MONTHS:
        raise HTTPException(
            status_code=400, detail=f"term_months must be at most {MAX_TERM_MONTHS}"
        )
    if not ZERO <= monthly_rate <= MAX_MONTHLY_RATE:
        raise HTTPException(
            status_code=400, detail="interest rate must be between 0% and 100% a month"
        )


def parse_form(build: Callable[..., Any], body: BaseModel, strict: bool) -> Any:
    """Turn a request body into calculator inputs, mapping parse failures to 400."""
    try:
        return build(body.model_dump(exclude_none=True), strict=strict)
    except ParseError as e:
        raise HTTPException(status_code=400, detail=str(e))


class BuyToLetForm(BaseModel):
    """Buy-to-let calculator form."""

    purchase_price: Amount = None
    monthly_rent: Amount = None
    deposit_percent: Amount = None
    interest_rate: Amount = None
    management_fee: Amount = None
    insurance_cost: Amount = None
    maintenance_percent: Amount = None
    void_percent: Amount = None
    other_costs: Amount = None
    mortgage_term: Amount = None


@router.post("/buy-to-let")
async def calculate_buy_to_let(
    form: BuyToLetForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Yield, cashflow and lender coverage for a single let."""
    inputs = parse_form(BuyToLetInputs.from_form, form, strict)
    return derive_buy_to_let(inputs, tables)


class HmoForm(BaseModel):
    """HMO viability calculator form."""

    purchase_price: Amount = None
    refurb_cost: Amount = None
    number_of_rooms: Amount = None
    average_room_rent: Amount = None
    room_rents: Optional[List[Union[float, str]]] = None
    deposit_percent: Amount = None
    interest_rate: Amount = None
    management_fee: Amount = None
    licence_cost: Amount = None
    insurance_cost: Amount = None
    utilities_cost: Amount = None
    cleaning_cost: Amount = None
    maintenance_percent: Amount = None
    void_percent: Amount = None


@router.post("/hmo-viability")
async def calculate_hmo_viability(
    form: HmoForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Room-by-room HMO yield and cashflow."""
    inputs = parse_form(HmoInputs.from_form, form, strict)
    return derive_hmo(inputs, tables)


class HmoLicenceForm(BaseModel):
    """HMO licence and fire safety estimate form."""

    council_tier: Optional[str] = None
    bedrooms: Amount = None
    storeys: Amount = None
    has_fire_doors: Flag = None
    has_alarm_system: Flag = None
    has_emergency_lighting: Flag = None


@router.post("/hmo-licence-fee")
async def calculate_hmo_licence_fee(
    form: HmoLicenceForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Licence fee for the licence period plus fire safety upgrade cost."""
    try:
        return estimate_licence(form.model_dump(exclude_none=True), strict, tables)
    except ParseError as e:
        raise HTTPException(status_code=400, detail=str(e))


class BridgingForm(BaseModel):
    """Retained vs rolled bridging interest form."""

    loan_amount: Amount = None
    property_value: Amount = None
    monthly_rate: Amount = None
    term_months: Amount = None
    arrangement_fee: Amount = None
    exit_fee: Amount = None
    valuation_fee: Amount = None
    legal_fees: Amount = None


@router.post("/bridging-interest")
async def calculate_bridging_interest(
    form: BridgingForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Compare retained and rolled interest on a bridging loan."""
    inputs = parse_form(BridgingInputs.from_form, form, strict)
    check_finance_terms(inputs.term_months, inputs.monthly_rate)
    return compare_bridging_interest(inputs, tables)


class BrrrForm(BaseModel):
    """Buy, refurbish, refinance, rent form."""

    purchase_price: Amount = None
    refurb_cost: Amount = None
    after_repair_value: Amount = None
    monthly_rent: Amount = None
    refinance_ltv: Amount = None
    refinance_rate: Amount = None
    bridging_rate: Amount = None
    bridging_term: Amount = None
    stamp_duty: Amount = None
    legal_fees: Amount = None
    survey_fees: Amount = None
    management_fee: Amount = None


@router.post("/brrr")
async def calculate_brrr(
    form: BrrrForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Capital recycled on refinance and the returns on money left in."""
    inputs = parse_form(BrrrInputs.from_form, form, strict)
    check_finance_terms(inputs.bridging_term_months, inputs.bridging_rate)
    return derive_brrr(inputs, tables)


class CilForm(BaseModel):
    """Community Infrastructure Levy form."""

    local_authority: Optional[str] = None
    charging_zone: Optional[str] = None
    gross_floor_area: Amount = None
    existing_floor_area: Amount = None
    existing_use_lawful: Flag = None
    social_housing_relief: Amount = None
    self_build_exemption: Flag = None
    indexation_year: Optional[Union[int, str]] = None
    commencement_date: Optional[str] = None


@router.post("/cil")
async def calculate_cil_liability(
    form: CilForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Indexed CIL liability and instalment schedule."""
    inputs = parse_form(CilInputs.from_form, form, strict)
    return calculate_cil(inputs, tables)


class LoftConversionForm(BaseModel):
    """Loft conversion cost and value form."""

    conversion_type: Optional[str] = None
    region: Optional[str] = None
    loft_size: Amount = None
    bedrooms_added: Amount = None
    current_value: Amount = None
    include_en_suite: Flag = None


@router.post("/loft-conversion")
async def calculate_loft_conversion(
    form: LoftConversionForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Loft conversion cost range, value added and ROI."""
    inputs = parse_form(LoftConversionInputs.from_form, form, strict)
    return estimate_loft_conversion(inputs, tables)


class HolidayLetForm(BaseModel):
    """Furnished holiday let tax form."""

    gross_income: Amount = None
    days_available: Amount = None
    days_let: Amount = None
    tax_bracket: Optional[str] = None
    mortgage_interest: Amount = None
    insurance: Amount = None
    utilities: Amount = None
    cleaning: Amount = None
    management: Amount = None
    maintenance: Amount = None
    council_tax: Amount = None
    advertising: Amount = None
    other_expenses: Amount = None
    capital_allowances: Amount = None


@router.post("/holiday-let-tax")
async def calculate_holiday_let(
    form: HolidayLetForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """FHL tax compared with standard BTL (Section 24) tax."""
    inputs = parse_form(HolidayLetInputs.from_form, form, strict)
    return calculate_holiday_let_tax(inputs, tables)


class ServicedAccommodationForm(BaseModel):
    """Serviced accommodation occupancy form."""

    adr: Amount = None
    fixed_costs_monthly: Amount = None
    variable_cost_per_night: Amount = None
    mortgage_monthly: Amount = None
    target_monthly_profit: Amount = None
    cleaning_fee: Amount = None
    cleaning_cost: Amount = None
    platform_fee_percent: Amount = None
    average_stay_length: Amount = None


@router.post("/sa-occupancy")
async def calculate_sa_occupancy(
    form: ServicedAccommodationForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Break-even and target occupancy with an occupancy sweep."""
    inputs = parse_form(ServicedAccommodationInputs.from_form, form, strict)
    return calculate_sa_breakeven(inputs, tables)


class StampDutyForm(BaseModel):
    """Stamp duty form."""

    price: Amount = None
    buyer_type: Optional[str] = None
    property_type: Optional[str] = None


@router.post("/stamp-duty")
async def calculate_sdlt(
    form: StampDutyForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """SDLT with per-band breakdown."""
    inputs = parse_form(StampDutyInputs.from_form, form, strict)
    return calculate_stamp_duty(inputs, tables)


class IcrForm(BaseModel):
    """Lender ICR stress test form."""

    property_value: Amount = None
    loan_amount: Amount = None
    monthly_rent: Amount = None
    actual_rate: Amount = None
    stress_test_rate: Amount = None
    ownership_type: Optional[str] = None


@router.post("/icr")
async def calculate_icr(
    form: IcrForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """ICR at the actual and stress rates against the lender requirement."""
    inputs = parse_form(IcrInputs.from_form, form, strict)
    return assess_icr(inputs, tables)


class Section24Form(BaseModel):
    """Section 24 impact form."""

    annual_rent: Amount = None
    mortgage_interest: Amount = None
    other_expenses: Amount = None
    tax_band: Amount = None


@router.post("/section-24")
async def calculate_section24(
    form: Section24Form,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Tax with and without the Section 24 interest restriction."""
    inputs = parse_form(Section24Inputs.from_form, form, strict)
    return calculate_section24_impact(inputs, tables)


class IncomeTaxForm(BaseModel):
    """Income tax on rental profit form."""

    rental_profit: Amount = None
    other_income: Amount = None


@router.post("/income-tax")
async def calculate_income_tax_endpoint(
    form: IncomeTaxForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Income tax with allowance taper, effective and marginal rates."""
    inputs = parse_form(IncomeTaxInputs.from_form, form, strict)
    return calculate_income_tax(inputs, tables)


class LeaseExtensionForm(BaseModel):
    """Lease extension premium form."""

    flat_value: Amount = None
    current_lease_years: Amount = None
    ground_rent: Amount = None
    extension_years: Amount = None
    marriage_value_share: Amount = None


@router.post("/lease-extension")
async def calculate_lease_extension_endpoint(
    form: LeaseExtensionForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Lease extension premium, costs and value uplift."""
    inputs = parse_form(LeaseExtensionInputs.from_form, form, strict)
    return calculate_lease_extension(inputs, tables)


class UnitTypeForm(BaseModel):
    quantity: Amount = None
    average_size: Amount = None
    price_per_sqft: Amount = None


class DevelopmentForm(BaseModel):
    """Development appraisal form."""

    gdv: Amount = None
    land_cost: Amount = None
    build_cost: Amount = None
    professional_fees: Amount = None
    contingency: Amount = None
    sales_costs: Amount = None
    other_costs: Amount = None
    finance_rate: Amount = None
    term_months: Amount = None
    target_profit: Amount = None
    units: Optional[List[UnitTypeForm]] = None
    new_build_premium: Amount = None


@router.post("/development-appraisal")
async def calculate_development_appraisal(
    form: DevelopmentForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Profit on cost, finance and residual land value."""
    inputs = parse_form(DevelopmentInputs.from_form, form, strict)
    check_finance_terms(inputs.term_months, inputs.finance_rate / MONTHS_PER_YEAR)
    return appraise_development(inputs, tables)



class DevelopmentFinanceForm(BaseModel):
    """Development finance structure form."""

    purchase_price: Amount = None
    build_cost: Amount = None
    gdv: Amount = None
    term_months: Amount = None
    target_ltc: Amount = None
    require_mezzanine: Flag = None


@router.post("/development-finance")
async def calculate_development_finance(
    form: DevelopmentFinanceForm,
    strict: bool = False,
    tables: RateTables = Depends(get_rate_tables),
):
    """Senior, mezzanine and equity split with indicative terms."""
    inputs = parse_form(DevelopmentFinanceInputs.from_form, form, strict)
    check_finance_terms(inputs.term_months)
    return structure_development_finance(inputs, tables)


@router.get("/rate-tables")
async def get_rate_table_summary(tables: RateTables = Depends(get_rate_tables)):
    """Version of the active rate tables and the tables they contain."""
    return {
        "version": tables.version,
        "tables": sorted(name for name in type(tables).model_fields if name != "version"),
    }
