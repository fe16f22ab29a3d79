"""
Development Finance Structuring

Splits the cost of a scheme into senior debt at a target loan to cost
(LTC), an optional mezzanine layer stretching leverage further, and the
equity left to fund. Senior pricing and lender appetite come from the
rate tables and are keyed on the senior loan to GDV (LTGDV).
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Mapping, Optional

from propcalc.calculations.amortization import rolled_interest
from propcalc.calculations.formatting import (
    format_currency,
    format_currency_compact,
    format_months,
    format_percent,
)
from propcalc.calculations.parsing import FormReader
from propcalc.calculations.ratios import MONTHS_PER_YEAR, ZERO, safe_divide
from propcalc.calculations.tables import RateTables, get_default_tables

APPETITE_NOTES = {
    "strong": "expect competitive terms from several lenders",
    "moderate": "a workable deal, but shop around for terms",
    "weak": "margins are tight, so value engineer or add equity to improve terms",
}


@dataclass(frozen=True)
class DevelopmentFinanceInputs:
    purchase_price: Decimal
    build_cost: Decimal
    gdv: Decimal
    term_months: int = 18
    target_ltc: Decimal = Decimal("0.65")
    require_mezzanine: bool = False

    @classmethod
    def from_form(cls, form: Mapping[str, Any], strict: bool = False) -> "DevelopmentFinanceInputs":
        reader = FormReader(form, strict)
        return cls(
            purchase_price=reader.amount("purchase_price"),
            build_cost=reader.amount("build_cost"),
            gdv=reader.amount("gdv"),
            term_months=reader.count("term_months", "18"),
            target_ltc=reader.rate("target_ltc", "65"),
            require_mezzanine=reader.flag("require_mezzanine"),
        )


@dataclass(frozen=True)
class FinanceStructure:
    """Capital stack for a scheme. Rates and ratios are fractions."""

    total_cost: Decimal

    # Senior debt
    senior_debt: Decimal
    senior_ltgdv: Decimal
    senior_rate: Decimal  # annual
    arrangement_fee_rate: Decimal
    arrangement_fee: Decimal

    # Mezzanine
    mezzanine_ltc: Decimal
    mezzanine_debt: Decimal
    mezzanine_rate: Decimal  # annual

    # Stack
    total_debt: Decimal
    equity_required: Decimal
    total_ltc: Decimal
    total_ltgdv: Decimal

    # Scheme returns
    profit: Decimal
    profit_on_cost: Decimal
    profit_on_gdv: Decimal
    lender_appetite: str

    # Interest if both facilities are drawn in full and rolled up
    senior_interest: Decimal
    mezzanine_interest: Decimal
    total_finance_cost: Decimal

    summary: str


def mezzanine_layer(target_ltc: Decimal, tables: RateTables) -> Decimal:
    """Extra LTC a mezzanine lender will fund above the senior debt."""
    headroom = tables.mezzanine_max_ltc - target_ltc
    return max(ZERO, min(tables.mezzanine_max_layer, headroom))


def mezzanine_rate(layer: Decimal, tables: RateTables) -> Decimal:
    if layer <= 0:
        return ZERO
    if layer > tables.mezzanine_deep_layer:
        return tables.mezzanine_base_rate + tables.mezzanine_deep_premium
    return tables.mezzanine_base_rate


def finance_summary(inputs: DevelopmentFinanceInputs, structure: FinanceStructure) -> str:
    """Describe the recommended structure in a short paragraph."""
    parts = [
        f"Senior debt of {format_currency(structure.senior_debt)} at "
        f"{format_percent(structure.senior_rate)} with a "
        f"{format_percent(structure.arrangement_fee_rate)} arrangement fee "
        f"({format_percent(inputs.target_ltc)} LTC, {format_percent(structure.senior_ltgdv)} LTGDV)."
    ]
    if structure.mezzanine_debt > 0:
        parts.append(
            f"Mezzanine of {format_currency(structure.mezzanine_debt)} at "
            f"{format_percent(structure.mezzanine_rate)} takes leverage to "
            f"{format_percent(structure.total_ltc)} LTC."
        )
    parts.append(f"Equity required: {format_currency(structure.equity_required)}.")
    parts.append(
        f"Profit on cost is {format_percent(structure.profit_on_cost)} on "
        f"{format_currency_compact(inputs.gdv)} GDV over {format_months(inputs.term_months)}."
    )
    parts.append(
        f"Lender appetite is {structure.lender_appetite}: "
        f"{APPETITE_NOTES.get(structure.lender_appetite, APPETITE_NOTES['weak'])}."
    )
    return " ".join(parts)


def structure_development_finance(
    inputs: DevelopmentFinanceInputs, tables: Optional[RateTables] = None
) -> FinanceStructure:
    """
    Structure senior, mezzanine and equity funding for a scheme.

    Mezzanine is only added when requested, and never takes total
    leverage beyond the mezzanine lender's maximum LTC. Finance costs
    assume each facility is drawn on day one and its interest rolled up
    for the full term.
    """
    tables = tables or get_default_tables()

    total_cost = inputs.purchase_price + inputs.build_cost
    senior_debt = total_cost * inputs.target_ltc
    senior_ltgdv = safe_divide(senior_debt, inputs.gdv)
    senior_terms = tables.senior_debt(senior_ltgdv)

    layer = mezzanine_layer(inputs.target_ltc, tables) if inputs.require_mezzanine else ZERO
    mezzanine_debt = total_cost * layer
    mezz_rate = mezzanine_rate(layer, tables)

    total_debt = senior_debt + mezzanine_debt
    profit = inputs.gdv - total_cost
    profit_on_cost = safe_divide(profit, total_cost)

    arrangement_fee = senior_debt * senior_terms.arrangement_fee
    senior_interest = rolled_interest(
        senior_debt, senior_terms.rate / MONTHS_PER_YEAR, inputs.term_months
    )
    mezzanine_interest = rolled_interest(
        mezzanine_debt, mezz_rate / MONTHS_PER_YEAR, inputs.term_months
    )

    structure = FinanceStructure(
        total_cost=total_cost,
        senior_debt=senior_debt,
        senior_ltgdv=senior_ltgdv,
        senior_rate=senior_terms.rate,
        arrangement_fee_rate=senior_terms.arrangement_fee,
        arrangement_fee=arrangement_fee,
        mezzanine_ltc=layer,
        mezzanine_debt=mezzanine_debt,
        mezzanine_rate=mezz_rate,
        total_debt=total_debt,
        equity_required=total_cost - total_debt,
        total_ltc=safe_divide(total_debt, total_cost),
        total_ltgdv=safe_divide(total_debt, inputs.gdv),
        profit=profit,
        profit_on_cost=profit_on_cost,
        profit_on_gdv=safe_divide(profit, inputs.gdv),
        lender_appetite=tables.lender_appetite(profit_on_cost, senior_ltgdv),
        senior_interest=senior_interest,
        mezzanine_interest=mezzanine_interest,
        total_finance_cost=arrangement_fee + senior_interest + mezzanine_interest,
        summary="",
    )
    return replace(structure, summary=finance_summary(inputs, structure))
