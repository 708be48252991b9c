"""Annual fiscal parameters for Mexico (ISR, IMSS, RESICO, UMA).

Values are floats; rates are fractions (0.0192 = 1.92%).
Sources: SAT Anexo 8 RMF (monthly ISR table), LISR Art. 113-E (RESICO),
Ley del Seguro Social (IMSS quotas and the 2020 Cesantia reform schedule),
INEGI (UMA 2025), CONASAMI (minimum wages 2025).
"""

import math
from dataclasses import dataclass

INFINITY = math.inf

CESANTIA_CONCEPT = "Cesantía en Edad Avanzada y Vejez"


@dataclass(frozen=True)
class FiscalYear:
    """Fiscal-year configuration: UMA, minimum wages, subsidy, legal caps."""

    id: int
    year: int
    uma_daily: float
    uma_monthly: float
    uma_annual: float
    smg_general: float  # General daily minimum wage
    smg_border: float  # Northern border free zone
    subsidy_factor: float
    subsidy_threshold_monthly: float
    fa_legal_cap_uma_factor: float = 1.3  # Fondo de ahorro: 1.3 yearly UMA
    fa_legal_max_percentage: float = 13.0
    pantry_vouchers_uma_cap: float = 1.0  # Vales: 1 monthly UMA
    usd_mxn_rate: float = 20.00


@dataclass(frozen=True)
class ISRBracket:
    """One row of the monthly ISR table."""

    lower_limit: float
    upper_limit: float
    fixed_fee: float
    surplus_percent: float


@dataclass(frozen=True)
class IMSSConcept:
    """One IMSS contribution line (rama de aseguramiento)."""

    concept_name: str
    worker_percent: float
    employer_percent: float
    base_cap_in_umas: int = 25  # 0 = no cap
    is_fixed_rate: bool = True


@dataclass(frozen=True)
class CesantiaBracket:
    """Employer Cesantia rate for a salary range expressed in UMAs."""

    lower_bound_uma: float
    upper_bound_uma: float
    employer_percent: float


@dataclass(frozen=True)
class RESICOBracket:
    """Monthly RESICO flat rate up to an income limit."""

    upper_limit: float
    applicable_rate: float


@dataclass(frozen=True)
class FiscalTables:
    """Complete set of tables for one fiscal year."""

    fiscal_year: FiscalYear
    isr_brackets: tuple[ISRBracket, ...]
    imss_concepts: tuple[IMSSConcept, ...]
    cesantia_brackets: tuple[CesantiaBracket, ...]
    resico_brackets: tuple[RESICOBracket, ...]


FISCAL_YEAR_2025 = FiscalYear(
    id=2025,
    year=2025,
    uma_daily=113.14,
    uma_monthly=3439.46,
    uma_annual=41273.52,
    smg_general=278.80,
    smg_border=419.88,
    # Subsidio 2025: 13.8% of the monthly UMA (474.64) up to 10,171.00 of income
    subsidy_factor=0.0467,
    subsidy_threshold_monthly=10171.00,
)

# Lower limits repeat the previous upper limit (SAT publishes them one cent
# higher) so the table covers [0, inf) without gaps.
ISR_BRACKETS_2025 = (
    ISRBracket(0.00, 746.04, 0.00, 0.0192),
    ISRBracket(746.04, 6332.05, 14.32, 0.064),
    ISRBracket(6332.05, 11128.01, 371.83, 0.1088),
    ISRBracket(11128.01, 12935.82, 893.63, 0.16),
    ISRBracket(12935.82, 15487.71, 1182.88, 0.1792),
    ISRBracket(15487.71, 31236.49, 1640.18, 0.2136),
    ISRBracket(31236.49, 49233.00, 4998.95, 0.2352),
    ISRBracket(49233.00, 93993.90, 9236.89, 0.30),
    ISRBracket(93993.90, 125325.20, 22665.17, 0.32),
    ISRBracket(125325.20, 375975.61, 32691.18, 0.34),
    ISRBracket(375975.61, INFINITY, 117912.32, 0.35),
)

IMSS_CONCEPTS = (
    IMSSConcept("Enfermedad y Maternidad (Prestaciones en Dinero)", 0.0025, 0.0070),
    IMSSConcept("Enfermedad y Maternidad (Gastos Médicos Pensionados)", 0.00375, 0.0105),
    IMSSConcept("Invalidez y Vida", 0.00625, 0.0175),
    IMSSConcept("Retiro", 0.0, 0.02),
    IMSSConcept(CESANTIA_CONCEPT, 0.01125, 0.0315, is_fixed_rate=False),
    IMSSConcept("Guarderías y Prestaciones Sociales", 0.0, 0.01),
    IMSSConcept("Riesgos de Trabajo (Clase I)", 0.0, 0.0054355),
)

# 2020 reform, transitional table in force for 2025
CESANTIA_BRACKETS_2025 = (
    CesantiaBracket(0.00, 1.00, 0.03150),
    CesantiaBracket(1.00, 1.50, 0.03544),
    CesantiaBracket(1.50, 2.00, 0.04426),
    CesantiaBracket(2.00, 2.50, 0.04954),
    CesantiaBracket(2.50, 3.00, 0.05307),
    CesantiaBracket(3.00, 3.50, 0.05559),
    CesantiaBracket(3.50, 4.00, 0.05747),
    CesantiaBracket(4.00, INFINITY, 0.06422),
)

RESICO_BRACKETS_2025 = (
    RESICOBracket(25000.00, 0.0100),
    RESICOBracket(50000.00, 0.0110),
    RESICOBracket(83333.33, 0.0150),
    RESICOBracket(208333.33, 0.0200),
    RESICOBracket(291666.67, 0.0250),
)

TABLES_2025 = FiscalTables(
    fiscal_year=FISCAL_YEAR_2025,
    isr_brackets=ISR_BRACKETS_2025,
    imss_concepts=IMSS_CONCEPTS,
    cesantia_brackets=CESANTIA_BRACKETS_2025,
    resico_brackets=RESICO_BRACKETS_2025,
)

# Multi-year registry
TABLES: dict[int, FiscalTables] = {2025: TABLES_2025}


def obtain_tables(year: int) -> FiscalTables:
    """Return the built-in tables for a fiscal year.

    Raises:
        ValueError: If no tables are available for the requested year.
    """
    if year not in TABLES:
        raise ValueError(
            f"Tables not available for fiscal year {year}. "
            f"Available years: {sorted(TABLES.keys())}"
        )
    return TABLES[year]
