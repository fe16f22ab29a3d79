"""
Interest Coverage Ratio Calculations

Lender affordability test for a buy-to-let mortgage: annual rent over
annual interest at a stress rate, compared with the ICR the lender
requires for the borrower's ownership type.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from propcalc.calculations.formatting import format_currency, format_ratio
from propcalc.calculations.parsing import FormReader
from propcalc.calculations.ratios import (
    annualise,
    compute_icr,
    compute_ltv,
    compute_stressed_interest,
    monthly,
    safe_divide,
)
from propcalc.calculations.tables import RateTables, get_default_tables


@dataclass(frozen=True)
class IcrInputs:
    loan_amount: Decimal
    monthly_rent: Decimal
    actual_rate: Decimal
    property_value: Decimal = Decimal("0")
    ownership_type: str = "personal-higher"
    stress_rate: Optional[Decimal] = None  # table stress rate when None

    @classmethod
    def from_form(cls, form: Mapping[str, Any], strict: bool = False) -> "IcrInputs":
        reader = FormReader(form, strict)
        return cls(
            property_value=reader.amount("property_value"),
            loan_amount=reader.amount("loan_amount"),
            monthly_rent=reader.amount("monthly_rent"),
            actual_rate=reader.rate("actual_rate"),
            stress_rate=reader.optional_rate("stress_test_rate"),
            ownership_type=reader.key("ownership_type", "personal-higher"),
        )


@dataclass(frozen=True)
class IcrAssessment:
    property_value: Decimal
    loan_amount: Decimal
    ltv: Decimal
    monthly_rent: Decimal
    annual_rent: Decimal
    ownership_type: str

    stress_rate: Decimal
    annual_interest_actual: Decimal
    monthly_interest_actual: Decimal
    annual_interest_stress: Decimal
    monthly_interest_stress: Decimal

    icr_at_actual_rate: Decimal
    icr_at_stress_rate: Decimal
    required_icr: Decimal
    passes_stress_test: bool

    max_loan: Decimal
    loan_headroom: Decimal
    required_rent_monthly: Decimal
    rent_headroom: Decimal
    rental_coverage_ratio: Decimal
    margin_of_safety: Decimal
    verdict: str


def assess_icr(inputs: IcrInputs, tables: Optional[RateTables] = None) -> IcrAssessment:
    """
    Run a lender ICR stress test.

    ICRs are plain ratios (1.25, not 125%). The maximum loan is the loan
    at which the stressed ICR exactly equals the requirement.
    """
    tables = tables or get_default_tables()
    stress_rate = inputs.stress_rate if inputs.stress_rate is not None else tables.btl_stress_rate
    required = tables.icr_requirement(inputs.ownership_type)

    annual_rent = annualise(inputs.monthly_rent)
    annual_actual = inputs.loan_amount * inputs.actual_rate
    annual_stress = compute_stressed_interest(inputs.loan_amount, stress_rate)

    icr_actual = compute_icr(annual_rent, inputs.loan_amount, inputs.actual_rate)
    icr_stress = compute_icr(annual_rent, inputs.loan_amount, stress_rate)
    passes = icr_stress >= required

    max_loan = safe_divide(safe_divide(annual_rent, required), stress_rate)
    required_rent = monthly(inputs.loan_amount * stress_rate * required)

    if passes:
        verdict = (
            f"Passes at {format_ratio(icr_stress)} against {format_ratio(required)} required"
        )
    else:
        verdict = (
            f"Fails at {format_ratio(icr_stress)} against {format_ratio(required)} required; "
            f"rent of {format_currency(required_rent)} a month needed"
        )

    return IcrAssessment(
        property_value=inputs.property_value,
        loan_amount=inputs.loan_amount,
        ltv=compute_ltv(inputs.loan_amount, inputs.property_value),
        monthly_rent=inputs.monthly_rent,
        annual_rent=annual_rent,
        ownership_type=inputs.ownership_type,
        stress_rate=stress_rate,
        annual_interest_actual=annual_actual,
        monthly_interest_actual=monthly(annual_actual),
        annual_interest_stress=annual_stress,
        monthly_interest_stress=monthly(annual_stress),
        icr_at_actual_rate=icr_actual,
        icr_at_stress_rate=icr_stress,
        required_icr=required,
        passes_stress_test=passes,
        max_loan=max_loan,
        loan_headroom=max_loan - inputs.loan_amount,
        required_rent_monthly=required_rent,
        rent_headroom=inputs.monthly_rent - required_rent,
        rental_coverage_ratio=safe_divide(inputs.monthly_rent, monthly(annual_stress)),
        margin_of_safety=safe_divide(icr_stress - required, required),
        verdict=verdict,
    )
