"""Fiscal configuration lookups consumed by the payroll engine.

The engine never reads tables directly: it asks a ``FiscalStore`` for the
active fiscal year and for the brackets that apply to an income. The store
bundled here serves immutable in-memory tables, either the built-in ones from
``rates.py`` or a YAML document validated with Pydantic.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

import yaml
from pydantic import BaseModel, Field

from totalcompmx.errors import ConfigurationError
from totalcompmx.mexico.rates import (
    INFINITY,
    CesantiaBracket,
    FiscalTables,
    FiscalYear,
    IMSSConcept,
    ISRBracket,
    RESICOBracket,
    obtain_tables,
)

logger = logging.getLogger(__name__)

DEFAULT_YEAR = 2025


class FiscalStore(Protocol):
    """Read-only access to the fiscal configuration."""

    def get_active_fiscal_year(self) -> FiscalYear | None: ...

    def get_isr_brackets(self, fiscal_year_id: int) -> tuple[ISRBracket, ...]: ...

    def get_imss_concepts(self) -> tuple[IMSSConcept, ...]: ...

    def get_cesantia_bracket(
        self, fiscal_year_id: int, salary_in_umas: float,
    ) -> CesantiaBracket | None: ...

    def get_resico_bracket(
        self, fiscal_year_id: int, monthly_income: float,
    ) -> RESICOBracket | None: ...


class StaticFiscalStore:
    """In-memory store over one or more ``FiscalTables``.

    The active fiscal year is ``active_year`` when given, otherwise the most
    recent year supplied.
    """

    def __init__(
        self,
        tables: Iterable[FiscalTables],
        active_year: int | None = None,
    ) -> None:
        self._tables: dict[int, FiscalTables] = {t.fiscal_year.id: t for t in tables}
        self._active: FiscalTables | None = None
        candidates = [
            t for t in self._tables.values()
            if active_year is None or t.fiscal_year.year == active_year
        ]
        if candidates:
            self._active = max(candidates, key=lambda t: t.fiscal_year.year)

    def _tables_for(self, fiscal_year_id: int) -> FiscalTables:
        try:
            return self._tables[fiscal_year_id]
        except KeyError:
            raise ConfigurationError(
                f"No tables configured for fiscal year id {fiscal_year_id}"
            ) from None

    def get_active_fiscal_year(self) -> FiscalYear | None:
        return self._active.fiscal_year if self._active else None

    def get_isr_brackets(self, fiscal_year_id: int) -> tuple[ISRBracket, ...]:
        brackets = self._tables_for(fiscal_year_id).isr_brackets
        if not brackets:
            raise ConfigurationError(
                f"No ISR brackets configured for fiscal year id {fiscal_year_id}"
            )
        return tuple(sorted(brackets, key=lambda b: b.lower_limit))

    def get_imss_concepts(self) -> tuple[IMSSConcept, ...]:
        if self._active is None:
            raise ConfigurationError("No IMSS concepts: no active fiscal year")
        return self._active.imss_concepts

    def get_cesantia_bracket(
        self, fiscal_year_id: int, salary_in_umas: float,
    ) -> CesantiaBracket | None:
        for bracket in self._tables_for(fiscal_year_id).cesantia_brackets:
            if bracket.lower_bound_uma <= salary_in_umas <= bracket.upper_bound_uma:
                return bracket
        return None

    def get_resico_bracket(
        self, fiscal_year_id: int, monthly_income: float,
    ) -> RESICOBracket | None:
        brackets = sorted(
            self._tables_for(fiscal_year_id).resico_brackets,
            key=lambda b: b.upper_limit,
        )
        for bracket in brackets:
            if monthly_income <= bracket.upper_limit:
                return bracket
        return None


# =============================================================================
# YAML tables
# =============================================================================
class FiscalYearModel(BaseModel):
    id: int | None = None
    year: int
    uma_daily: float
    uma_monthly: float
    uma_annual: float
    smg_general: float = 0.0
    smg_border: float = 0.0
    subsidy_factor: float = 0.0
    subsidy_threshold_monthly: float = 0.0
    fa_legal_cap_uma_factor: float = 1.3
    fa_legal_max_percentage: float = 13.0
    pantry_vouchers_uma_cap: float = 1.0
    usd_mxn_rate: float | None = Field(default=None, description="Defaults to 20.00")


class ISRBracketModel(BaseModel):
    lower_limit: float
    upper_limit: float | None = Field(default=None, description="None = no upper limit")
    fixed_fee: float
    surplus_percent: float


class IMSSConceptModel(BaseModel):
    concept_name: str
    worker_percent: float
    employer_percent: float
    base_cap_in_umas: int = Field(default=25, ge=0)
    is_fixed_rate: bool = True


class CesantiaBracketModel(BaseModel):
    lower_bound_uma: float
    upper_bound_uma: float | None = None
    employer_percent: float


class RESICOBracketModel(BaseModel):
    upper_limit: float
    applicable_rate: float


class FiscalTablesModel(BaseModel):
    """Schema of a fiscal tables YAML document."""

    fiscal_year: FiscalYearModel
    isr_brackets: list[ISRBracketModel] = Field(min_length=1)
    imss_concepts: list[IMSSConceptModel] = Field(default_factory=list)
    cesantia_brackets: list[CesantiaBracketModel] = Field(default_factory=list)
    resico_brackets: list[RESICOBracketModel] = Field(default_factory=list)

    def to_tables(self) -> FiscalTables:
        fy = self.fiscal_year
        values = fy.model_dump(exclude={"id", "usd_mxn_rate"})
        fiscal_year = FiscalYear(
            id=fy.id if fy.id is not None else fy.year,
            usd_mxn_rate=fy.usd_mxn_rate if fy.usd_mxn_rate is not None else 20.00,
            **values,
        )
        return FiscalTables(
            fiscal_year=fiscal_year,
            isr_brackets=tuple(
                ISRBracket(
                    lower_limit=b.lower_limit,
                    upper_limit=b.upper_limit if b.upper_limit is not None else INFINITY,
                    fixed_fee=b.fixed_fee,
                    surplus_percent=b.surplus_percent,
                )
                for b in self.isr_brackets
            ),
            imss_concepts=tuple(IMSSConcept(**c.model_dump()) for c in self.imss_concepts),
            cesantia_brackets=tuple(
                CesantiaBracket(
                    lower_bound_uma=c.lower_bound_uma,
                    upper_bound_uma=c.upper_bound_uma if c.upper_bound_uma is not None else INFINITY,
                    employer_percent=c.employer_percent,
                )
                for c in self.cesantia_brackets
            ),
            resico_brackets=tuple(RESICOBracket(**r.model_dump()) for r in self.resico_brackets),
        )


def load_tables(path: Path) -> FiscalTables:
    """Load fiscal tables from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the YAML does not match the schema.
    """
    if not path.exists():
        raise FileNotFoundError(f"Fiscal tables file not found: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        raise ConfigurationError(f"Fiscal tables file is empty: {path}")

    try:
        model = FiscalTablesModel.model_validate(data)
    except Exception as e:
        raise ConfigurationError(f"Invalid fiscal tables file ({path}): {e}") from e

    tables = model.to_tables()
    logger.info(
        "Fiscal tables %d loaded from %s (%d ISR brackets)",
        tables.fiscal_year.year, path, len(tables.isr_brackets),
    )
    return tables


def store_from_environment() -> StaticFiscalStore:
    """Build the store described by the environment.

    TOTALCOMP_TABLES        -- YAML tables file (default: built-in tables)
    TOTALCOMP_YEAR          -- built-in fiscal year (default: 2025)
    TOTALCOMP_EXCHANGE_RATE -- USD/MXN override for the active year
    """
    path = os.environ.get("TOTALCOMP_TABLES")
    if path:
        tables = load_tables(Path(path))
    else:
        tables = obtain_tables(int(os.environ.get("TOTALCOMP_YEAR", DEFAULT_YEAR)))

    rate = os.environ.get("TOTALCOMP_EXCHANGE_RATE")
    if rate:
        tables = dataclasses.replace(
            tables,
            fiscal_year=dataclasses.replace(tables.fiscal_year, usd_mxn_rate=float(rate)),
        )
    return StaticFiscalStore([tables])
