"""
Rate and Benchmark Tables

Static, versioned lookup data used by the calculators: lender rate bands,
council CIL rates, BCIS indices, tax bands, regional cost multipliers.

Tables are a frozen pydantic model so they can be loaded from JSON,
validated once and injected into any calculator. Values are illustrative
guidance figures, not live market data.

Lookups by an unknown key never fail: they resolve to the table's
explicit default entry (usually "other").
"""

import logging
from copy import deepcopy
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from propcalc.calculations.exceptions import RateTableError
from propcalc.calculations.schedule import RateBand, Schedule, find_ceiling_band, validate_bands

logger = logging.getLogger(__name__)

D = Decimal

DEFAULT_KEY = "other"


class TaxBand(BaseModel):
    """A marginal band as it appears in configuration."""

    model_config = ConfigDict(frozen=True)

    lower: Decimal
    upper: Optional[Decimal] = None
    rate: Decimal


class LtvRateBand(BaseModel):
    """Indicative lending rates for LTVs up to max_ltv."""

    model_config = ConfigDict(frozen=True)

    max_ltv: Decimal
    min_rate: Decimal
    max_rate: Decimal
    label: str

    @property
    def upper(self) -> Decimal:
        return self.max_ltv


class SeniorDebtTerms(BaseModel):
    """Senior development loan rate and arrangement fee for LTGDVs up to max_ltgdv."""

    model_config = ConfigDict(frozen=True)

    max_ltgdv: Decimal
    rate: Decimal  # annual
    arrangement_fee: Decimal

    @property
    def upper(self) -> Decimal:
        return self.max_ltgdv


class LenderAppetiteTier(BaseModel):
    """Appetite label earned above a profit on cost and below an LTGDV."""

    model_config = ConfigDict(frozen=True)

    label: str
    min_profit_on_cost: Decimal
    max_ltgdv: Decimal


class InstalmentTier(BaseModel):
    """CIL instalment policy for liabilities in [lower, upper)."""

    model_config = ConfigDict(frozen=True)

    lower: Decimal
    upper: Optional[Decimal] = None
    day_offsets: List[int]


class LoftConversionCost(BaseModel):
    """Build cost per sqm for a conversion type."""

    model_config = ConfigDict(frozen=True)

    low: Decimal
    mid: Decimal
    high: Decimal
    description: str


class HmoLicenceFee(BaseModel):
    """Council licence fee per licence period."""

    model_config = ConfigDict(frozen=True)

    base_fee: Decimal
    per_bedroom_fee: Decimal


class ProfessionalFee(BaseModel):
    """A fee charged as a share of value, subject to a minimum."""

    model_config = ConfigDict(frozen=True)

    name: str
    rate: Decimal
    minimum: Decimal


def _bands(*rows: Tuple[str, Optional[str], str]) -> List[TaxBand]:
    return [
        TaxBand(lower=D(lower), upper=D(upper) if upper is not None else None, rate=D(rate))
        for lower, upper, rate in rows
    ]


# Indicative BTL mortgage rates by LTV (December 2024)
BTL_RATE_BANDS = [
    LtvRateBand(max_ltv=D("0.50"), min_rate=D("0.0429"), max_rate=D("0.0499"), label="50% LTV or less"),
    LtvRateBand(max_ltv=D("0.60"), min_rate=D("0.0449"), max_rate=D("0.0529"), label="51-60% LTV"),
    LtvRateBand(max_ltv=D("0.65"), min_rate=D("0.0469"), max_rate=D("0.0549"), label="61-65% LTV"),
    LtvRateBand(max_ltv=D("0.70"), min_rate=D("0.0489"), max_rate=D("0.0569"), label="66-70% LTV"),
    LtvRateBand(max_ltv=D("0.75"), min_rate=D("0.0509"), max_rate=D("0.0599"), label="71-75% LTV"),
    LtvRateBand(max_ltv=D("0.80"), min_rate=D("0.0549"), max_rate=D("0.0649"), label="76-80% LTV"),
    LtvRateBand(max_ltv=D("0.85"), min_rate=D("0.0599"), max_rate=D("0.0699"), label="81-85% LTV"),
]

BTL_RATE_FALLBACK = LtvRateBand(
    max_ltv=D("1"), min_rate=D("0.0649"), max_rate=D("0.0749"), label="85%+ LTV (limited availability)"
)

# Indicative bridging rates per month by LTV
BRIDGING_RATE_BANDS = [
    LtvRateBand(max_ltv=D("0.50"), min_rate=D("0.0055"), max_rate=D("0.0075"), label="50% LTV or less"),
    LtvRateBand(max_ltv=D("0.60"), min_rate=D("0.0065"), max_rate=D("0.0085"), label="51-60% LTV"),
    LtvRateBand(max_ltv=D("0.65"), min_rate=D("0.0070"), max_rate=D("0.0090"), label="61-65% LTV"),
    LtvRateBand(max_ltv=D("0.70"), min_rate=D("0.0075"), max_rate=D("0.0095"), label="66-70% LTV"),
    LtvRateBand(max_ltv=D("0.75"), min_rate=D("0.0085"), max_rate=D("0.0110"), label="71-75% LTV"),
]

BRIDGING_RATE_FALLBACK = LtvRateBand(
    max_ltv=D("1"), min_rate=D("0.0095"), max_rate=D("0.0125"), label="75%+ LTV"
)

# Senior development debt pricing by loan to GDV
SENIOR_DEBT_TERMS = [
    SeniorDebtTerms(max_ltgdv=D("0.60"), rate=D("0.105"), arrangement_fee=D("0.015")),
    SeniorDebtTerms(max_ltgdv=D("0.65"), rate=D("0.115"), arrangement_fee=D("0.015")),
]

SENIOR_DEBT_FALLBACK = SeniorDebtTerms(max_ltgdv=D("1"), rate=D("0.125"), arrangement_fee=D("0.02"))

LENDER_APPETITE_TIERS = [
    LenderAppetiteTier(label="strong", min_profit_on_cost=D("0.25"), max_ltgdv=D("0.65")),
    LenderAppetiteTier(label="moderate", min_profit_on_cost=D("0.18"), max_ltgdv=D("0.70")),
]

# Required ICR by ownership type, all tested at the stress rate
ICR_REQUIREMENTS = {
    "personal-basic": D("1.25"),
    "personal-higher": D("1.45"),
    "limited-company": D("1.25"),
    "portfolio": D("1.45"),
    DEFAULT_KEY: D("1.45"),
}

# Sample CIL charging schedules, £ per sqm at adoption
CIL_RATES = {
    "london-mayoral": {"zone-1": D("80"), "zone-2": D("60"), "zone-3": D("25")},
    "westminster": {
        "residential-prime": D("550"),
        "residential-core": D("400"),
        "residential-other": D("200"),
    },
    "tower-hamlets": {"zone-1": D("200"), "zone-2": D("120"), "zone-3": D("65")},
    "manchester": {"city-centre": D("50"), "inner": D("30"), "outer": D("10")},
    "birmingham": {"city-centre": D("69"), "outer": D("35")},
    DEFAULT_KEY: {"high": D("150"), "medium": D("100"), "low": D("50")},
}

# BCIS All-in TPI (sample values)
BCIS_INDICES = {
    "2012": D("286"),
    "2020": D("334"),
    "2021": D("353"),
    "2022": D("388"),
    "2023": D("399"),
    "2024": D("412"),
}

CIL_INSTALMENTS = [
    InstalmentTier(lower=D("0"), upper=D("50000"), day_offsets=[0]),
    InstalmentTier(lower=D("50000"), upper=D("500000"), day_offsets=[0, 60]),
    InstalmentTier(lower=D("500000"), upper=None, day_offsets=[0, 60, 120, 180]),
]

LOFT_CONVERSION_COSTS = {
    "velux": LoftConversionCost(
        low=D("1100"), mid=D("1300"), high=D("1600"),
        description="Roof windows only, no structural changes",
    ),
    "dormer-rear": LoftConversionCost(
        low=D("1400"), mid=D("1700"), high=D("2100"),
        description="Single rear dormer extension",
    ),
    "dormer-l-shaped": LoftConversionCost(
        low=D("1600"), mid=D("2000"), high=D("2500"),
        description="L-shaped dormer on rear and side",
    ),
    "hip-to-gable": LoftConversionCost(
        low=D("1800"), mid=D("2200"), high=D("2700"),
        description="Hip roof converted to gable end",
    ),
    "mansard": LoftConversionCost(
        low=D("2200"), mid=D("2700"), high=D("3300"),
        description="Full mansard with new roof structure",
    ),
}

REGION_MULTIPLIERS = {
    "london-prime": D("1.40"),
    "london-outer": D("1.25"),
    "south-east": D("1.10"),
    "south-west": D("1.00"),
    "midlands": D("0.90"),
    "north-west": D("0.85"),
    "north-east": D("0.80"),
    "scotland": D("0.85"),
    "wales": D("0.80"),
    DEFAULT_KEY: D("1.00"),
}

# Share of property value added per bedroom
LOFT_VALUE_ADD = {
    "london-prime": D("0.12"),
    "london-outer": D("0.10"),
    "south-east": D("0.09"),
    "south-west": D("0.08"),
    "midlands": D("0.08"),
    "north-west": D("0.07"),
    "north-east": D("0.07"),
    "scotland": D("0.07"),
    "wales": D("0.07"),
    DEFAULT_KEY: D("0.08"),
}

TAX_BRACKETS = {
    "basic": D("0.20"),
    "higher": D("0.40"),
    "additional": D("0.45"),
}

DIVIDEND_TAX_RATES = {
    "basic": D("0.0875"),
    "higher": D("0.3375"),
    "additional": D("0.3935"),
}

# 2024/25 bands on income above the personal allowance
INCOME_TAX_BANDS = _bands(
    ("0", "37700", "0.20"),
    ("37700", "125140", "0.40"),
    ("125140", None, "0.45"),
)

SDLT_STANDARD_BANDS = _bands(
    ("0", "250000", "0"),
    ("250000", "925000", "0.05"),
    ("925000", "1500000", "0.10"),
    ("1500000", None, "0.12"),
)

SDLT_FIRST_TIME_BUYER_BANDS = _bands(
    ("0", "425000", "0"),
    ("425000", None, "0.05"),
)

SDLT_NON_RESIDENTIAL_BANDS = _bands(
    ("0", "150000", "0"),
    ("150000", "250000", "0.02"),
    ("250000", None, "0.05"),
)

# Lease value as a share of freehold value by unexpired term (Savills/RICS
# graphs, approximate). Intermediate terms are interpolated.
LEASE_RELATIVITY = {
    100: D("0.995"),
    95: D("0.985"),
    90: D("0.970"),
    85: D("0.950"),
    80: D("0.925"),
    79: D("0.915"),
    78: D("0.905"),
    77: D("0.895"),
    76: D("0.880"),
    75: D("0.865"),
    70: D("0.820"),
    65: D("0.770"),
    60: D("0.720"),
    55: D("0.660"),
    50: D("0.600"),
    45: D("0.530"),
    40: D("0.460"),
    35: D("0.380"),
    30: D("0.300"),
    25: D("0.220"),
    20: D("0.150"),
}

LEASE_PROFESSIONAL_FEES = [
    ProfessionalFee(name="surveyor", rate=D("0.003"), minimum=D("1500")),
    ProfessionalFee(name="legal", rate=D("0.002"), minimum=D("1500")),
    ProfessionalFee(name="freeholder", rate=D("0.002"), minimum=D("1000")),
]

HMO_LICENCE_FEES = {
    "low": HmoLicenceFee(base_fee=D("500"), per_bedroom_fee=D("30")),
    "medium": HmoLicenceFee(base_fee=D("900"), per_bedroom_fee=D("50")),
    "high": HmoLicenceFee(base_fee=D("1500"), per_bedroom_fee=D("80")),
}


class RateTables(BaseModel):
    """Every static table the calculators read, under one version tag."""

    model_config = ConfigDict(frozen=True)

    version: str = "2024.12"

    # Buy-to-let lending
    btl_stress_rate: Decimal = D("0.055")
    btl_rate_bands: List[LtvRateBand] = Field(default_factory=lambda: list(BTL_RATE_BANDS))
    btl_rate_fallback: LtvRateBand = BTL_RATE_FALLBACK
    btl_benchmark_gross_yield: Decimal = D("0.05")
    icr_requirements: Dict[str, Decimal] = Field(default_factory=lambda: dict(ICR_REQUIREMENTS))

    # Community Infrastructure Levy
    cil_rates: Dict[str, Dict[str, Decimal]] = Field(default_factory=lambda: deepcopy(CIL_RATES))
    cil_default_zone_rate: Decimal = D("100")
    bcis_indices: Dict[str, Decimal] = Field(default_factory=lambda: dict(BCIS_INDICES))
    cil_adoption_year: str = "2020"
    cil_current_year: str = "2024"
    cil_instalments: List[InstalmentTier] = Field(default_factory=lambda: list(CIL_INSTALMENTS))

    # Loft conversions
    loft_conversion_costs: Dict[str, LoftConversionCost] = Field(
        default_factory=lambda: dict(LOFT_CONVERSION_COSTS)
    )
    loft_default_conversion: str = "dormer-rear"
    region_multipliers: Dict[str, Decimal] = Field(default_factory=lambda: dict(REGION_MULTIPLIERS))
    loft_value_add: Dict[str, Decimal] = Field(default_factory=lambda: dict(LOFT_VALUE_ADD))
    en_suite_cost: Decimal = D("8000")
    en_suite_value_uplift: Decimal = D("0.02")

    # Personal tax
    tax_brackets: Dict[str, Decimal] = Field(default_factory=lambda: dict(TAX_BRACKETS))
    tax_bracket_default: str = "basic"
    income_tax_bands: List[TaxBand] = Field(default_factory=lambda: list(INCOME_TAX_BANDS))
    personal_allowance: Decimal = D("12570")
    allowance_taper_threshold: Decimal = D("100000")
    class4_threshold: Decimal = D("12570")
    class4_rate: Decimal = D("0.06")
    section24_credit_rate: Decimal = D("0.20")
    dividend_allowance: Decimal = D("500")
    dividend_tax_rates: Dict[str, Decimal] = Field(default_factory=lambda: dict(DIVIDEND_TAX_RATES))
    corporation_tax_main_rate: Decimal = D("0.25")
    corporation_tax_small_rate: Decimal = D("0.19")
    corporation_tax_small_profits_limit: Decimal = D("50000")
    fhl_min_days_available: int = 210
    fhl_min_days_let: int = 105

    # Stamp duty
    sdlt_standard_bands: List[TaxBand] = Field(default_factory=lambda: list(SDLT_STANDARD_BANDS))
    sdlt_first_time_buyer_bands: List[TaxBand] = Field(
        default_factory=lambda: list(SDLT_FIRST_TIME_BUYER_BANDS)
    )
    sdlt_first_time_buyer_max_price: Decimal = D("625000")
    sdlt_non_residential_bands: List[TaxBand] = Field(
        default_factory=lambda: list(SDLT_NON_RESIDENTIAL_BANDS)
    )
    sdlt_additional_surcharge: Decimal = D("0.05")
    sdlt_non_resident_surcharge: Decimal = D("0.02")
    sdlt_company_warning_price: Decimal = D("500000")

    # HMO
    hmo_licence_fees: Dict[str, HmoLicenceFee] = Field(default_factory=lambda: dict(HMO_LICENCE_FEES))
    hmo_default_council_tier: str = "medium"
    hmo_licence_years: int = 5

    # Serviced accommodation
    sa_nights_per_month: int = 30
    sa_occupancy_scenarios: List[Decimal] = Field(
        default_factory=lambda: [D("0.40"), D("0.50"), D("0.60"), D("0.70"), D("0.80")]
    )
    sa_benchmark_occupancy: Decimal = D("0.65")

    # Leasehold
    marriage_value_threshold_years: int = 80
    lease_critical_years: int = 70
    statutory_extension_years: int = 90
    freeholder_marriage_share: Decimal = D("0.5")
    ground_rent_capitalisation_rate: Decimal = D("0.065")
    deferment_rate: Decimal = D("0.05")
    lease_relativity: Dict[int, Decimal] = Field(default_factory=lambda: dict(LEASE_RELATIVITY))
    lease_professional_fees: List[ProfessionalFee] = Field(
        default_factory=lambda: list(LEASE_PROFESSIONAL_FEES)
    )

    # Development
    build_loan_average_exposure: Decimal = D("0.5")
    development_equity_share: Decimal = D("0.30")
    rlv_sensitivity_targets: List[Decimal] = Field(
        default_factory=lambda: [D("0.15"), D("0.20"), D("0.25")]
    )

    # BRRR: money left in below this share of the investment counts as a good recycle
    brrr_good_recycle_share: Decimal = D("0.20")

    # Bridging
    bridging_rate_bands: List[LtvRateBand] = Field(default_factory=lambda: list(BRIDGING_RATE_BANDS))
    bridging_rate_fallback: LtvRateBand = BRIDGING_RATE_FALLBACK
    bridging_days_per_month: int = 30

    # Development finance
    senior_debt_terms: List[SeniorDebtTerms] = Field(default_factory=lambda: list(SENIOR_DEBT_TERMS))
    senior_debt_fallback: SeniorDebtTerms = SENIOR_DEBT_FALLBACK
    mezzanine_max_ltc: Decimal = D("0.85")
    mezzanine_max_layer: Decimal = D("0.15")
    mezzanine_base_rate: Decimal = D("0.15")
    mezzanine_deep_layer: Decimal = D("0.10")  # layers above this pay the premium
    mezzanine_deep_premium: Decimal = D("0.03")
    lender_appetite_tiers: List[LenderAppetiteTier] = Field(
        default_factory=lambda: list(LENDER_APPETITE_TIERS)
    )
    lender_appetite_fallback: str = "weak"

    @model_validator(mode="after")
    def check_tables(self) -> "RateTables":
        for name in (
            "income_tax_bands",
            "sdlt_standard_bands",
            "sdlt_first_time_buyer_bands",
            "sdlt_non_residential_bands",
            "cil_instalments",
        ):
            try:
                validate_bands(getattr(self, name))
            except ValueError as e:
                raise ValueError(f"{name}: {e}") from e

        for name in ("btl_rate_bands", "bridging_rate_bands", "senior_debt_terms"):
            ceilings = [band.upper for band in getattr(self, name)]
            if ceilings != sorted(ceilings) or len(set(ceilings)) != len(ceilings):
                raise ValueError(f"{name} must be strictly increasing by their ceilings")

        for name in ("cil_rates", "region_multipliers", "loft_value_add", "icr_requirements"):
            if DEFAULT_KEY not in getattr(self, name):
                raise ValueError(f"{name} must define an '{DEFAULT_KEY}' entry")
        if self.tax_bracket_default not in self.tax_brackets:
            raise ValueError("tax_bracket_default must be a key of tax_brackets")
        if set(self.dividend_tax_rates) != set(self.tax_brackets):
            raise ValueError("dividend_tax_rates must cover exactly the tax_brackets keys")
        if self.loft_default_conversion not in self.loft_conversion_costs:
            raise ValueError("loft_default_conversion must be a key of loft_conversion_costs")
        if self.hmo_default_council_tier not in self.hmo_licence_fees:
            raise ValueError("hmo_default_council_tier must be a key of hmo_licence_fees")
        if len(self.lease_relativity) < 2:
            raise ValueError("lease_relativity needs at least two points")
        for year in (self.cil_adoption_year, self.cil_current_year):
            if year not in self.bcis_indices:
                raise ValueError(f"bcis_indices has no entry for {year}")
        return self

    # === Lookups ===

    def btl_rate_band(self, ltv: Decimal) -> LtvRateBand:
        band, matched = find_ceiling_band(self.btl_rate_bands, ltv)
        return band if matched else self.btl_rate_fallback

    def bridging_rate_band(self, ltv: Decimal) -> LtvRateBand:
        band, matched = find_ceiling_band(self.bridging_rate_bands, ltv)
        return band if matched else self.bridging_rate_fallback

    def senior_debt(self, ltgdv: Decimal) -> SeniorDebtTerms:
        terms, matched = find_ceiling_band(self.senior_debt_terms, ltgdv)
        return terms if matched else self.senior_debt_fallback

    def lender_appetite(self, profit_on_cost: Decimal, ltgdv: Decimal) -> str:
        for tier in self.lender_appetite_tiers:
            if profit_on_cost > tier.min_profit_on_cost and ltgdv < tier.max_ltgdv:
                return tier.label
        return self.lender_appetite_fallback

    def icr_requirement(self, ownership_type: str) -> Decimal:
        return self.icr_requirements.get(ownership_type, self.icr_requirements[DEFAULT_KEY])

    def cil_zone_rate(self, authority: str, zone: str) -> Decimal:
        zones = self.cil_rates.get(authority, self.cil_rates[DEFAULT_KEY])
        return zones.get(zone, self.cil_default_zone_rate)

    def bcis_index(self, year: str) -> Decimal:
        return self.bcis_indices.get(year, self.bcis_indices[self.cil_current_year])

    def cil_instalment_tier(self, liability: Decimal) -> InstalmentTier:
        for tier in self.cil_instalments:
            if tier.upper is None or liability < tier.upper:
                return tier
        return self.cil_instalments[-1]

    def loft_cost(self, conversion_type: str) -> LoftConversionCost:
        return self.loft_conversion_costs.get(
            conversion_type, self.loft_conversion_costs[self.loft_default_conversion]
        )

    def region_multiplier(self, region: str) -> Decimal:
        return self.region_multipliers.get(region, self.region_multipliers[DEFAULT_KEY])

    def loft_value_add_rate(self, region: str) -> Decimal:
        return self.loft_value_add.get(region, self.loft_value_add[DEFAULT_KEY])

    def tax_bracket(self, bracket: str) -> Tuple[str, Decimal]:
        """Resolve a bracket name, falling back to the default bracket."""
        if bracket not in self.tax_brackets:
            bracket = self.tax_bracket_default
        return bracket, self.tax_brackets[bracket]

    def bracket_for_rate(self, rate: Decimal) -> str:
        """Name of the bracket charging exactly this rate, else the default."""
        for bracket, bracket_rate in self.tax_brackets.items():
            if bracket_rate == rate:
                return bracket
        return self.tax_bracket_default

    def hmo_licence_fee(self, council_tier: str) -> HmoLicenceFee:
        return self.hmo_licence_fees.get(
            council_tier, self.hmo_licence_fees[self.hmo_default_council_tier]
        )

    def relativity(self, years: Decimal) -> Decimal:
        """
        Lease value as a share of freehold value.

        Interpolates linearly between curve points and clamps to the
        shortest and longest terms on the curve.
        """
        points = sorted(self.lease_relativity.items())
        if years <= points[0][0]:
            return points[0][1]
        if years >= points[-1][0]:
            return points[-1][1]
        for (lower_years, lower), (upper_years, upper) in zip(points, points[1:]):
            if lower_years <= years <= upper_years:
                ratio = (Decimal(years) - lower_years) / (upper_years - lower_years)
                return lower + ratio * (upper - lower)
        return points[-1][1]

    def schedule(self, name: str) -> Schedule:
        """Build a Schedule from one of the *_bands tables."""
        bands = getattr(self, f"{name}_bands")
        return Schedule(
            [RateBand(lower=band.lower, upper=band.upper, rate=band.rate) for band in bands]
        )


DEFAULT_RATE_TABLES = RateTables()


def get_default_tables() -> RateTables:
    return DEFAULT_RATE_TABLES


def load_rate_tables(path: str) -> RateTables:
    """
    Load rate tables from a JSON file.

    Any table omitted from the file keeps its built-in default.

    Raises:
        RateTableError: If the file is missing or fails validation
    """
    file_path = Path(path)
    try:
        raw = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise RateTableError(f"Could not read rate tables from {path}: {e}") from e

    try:
        tables = RateTables.model_validate_json(raw)
    except ValidationError as e:
        raise RateTableError(f"Invalid rate tables in {path}: {e}") from e

    logger.info(f"Loaded rate tables version {tables.version} from {path}")
    return tables


class RateTableProvider(Protocol):
    """Anything that can supply the current rate tables."""

    def get_tables(self) -> RateTables:
        ...


class StaticRateTableProvider:
    """Provides a fixed set of tables, the built-in defaults unless given."""

    def __init__(self, tables: Optional[RateTables] = None):
        self._tables = tables or DEFAULT_RATE_TABLES

    def get_tables(self) -> RateTables:
        return self._tables


class JsonRateTableProvider:
    """Loads tables from a JSON file on first use."""

    def __init__(self, path: str):
        self.path = path
        self._tables: Optional[RateTables] = None

    def get_tables(self) -> RateTables:
        if self._tables is None:
            self._tables = load_rate_tables(self.path)
        return self._tables
