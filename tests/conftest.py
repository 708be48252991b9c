"""Shared fixtures: simple fiscal tables with round numbers.

Daily UMA 100 (monthly 3040), a single 10% ISR bracket and a single IMSS
concept, so expected results can be worked out by hand.
"""

from __future__ import annotations

import pytest

from totalcompmx.mexico.rates import (
    INFINITY,
    TABLES_2025,
    CesantiaBracket,
    FiscalTables,
    FiscalYear,
    IMSSConcept,
    ISRBracket,
    RESICOBracket,
)
from totalcompmx.mexico.store import StaticFiscalStore


@pytest.fixture
def simple_year() -> FiscalYear:
    return FiscalYear(
        id=1,
        year=2099,
        uma_daily=100.0,
        uma_monthly=3040.0,
        uma_annual=36500.0,
        smg_general=0.0,
        smg_border=0.0,
        subsidy_factor=0.0,
        subsidy_threshold_monthly=10000.0,
    )


@pytest.fixture
def flat_brackets() -> tuple[ISRBracket, ...]:
    """A single bracket: 10% from 0, no fixed fee."""
    return (ISRBracket(0.0, INFINITY, 0.0, 0.10),)


@pytest.fixture
def simple_tables(simple_year, flat_brackets) -> FiscalTables:
    return FiscalTables(
        fiscal_year=simple_year,
        isr_brackets=flat_brackets,
        imss_concepts=(
            IMSSConcept("Unico", 0.01, 0.02),
        ),
        cesantia_brackets=(),
        resico_brackets=(
            RESICOBracket(50000.0, 0.02),
        ),
    )


@pytest.fixture
def simple_store(simple_tables) -> StaticFiscalStore:
    return StaticFiscalStore([simple_tables])


@pytest.fixture
def store_2025() -> StaticFiscalStore:
    return StaticFiscalStore([TABLES_2025])


@pytest.fixture
def cesantia_tables(simple_year, flat_brackets) -> FiscalTables:
    """Cesantia only: employer rate 3% up to 1 UMA, 6% above."""
    return FiscalTables(
        fiscal_year=simple_year,
        isr_brackets=flat_brackets,
        imss_concepts=(
            IMSSConcept(
                "Cesantía en Edad Avanzada y Vejez",
                0.01125,
                0.0315,
                is_fixed_rate=False,
            ),
        ),
        cesantia_brackets=(
            CesantiaBracket(0.0, 1.0, 0.03),
            CesantiaBracket(1.0, INFINITY, 0.06),
        ),
        resico_brackets=(),
    )
