"""Side-by-side comparison of compensation packages.

A package file (YAML) lists offers under ``paquetes``; each one is normalized
to MXN per month, calculated under its regime, optionally paired with an
equity schedule, and the offer with the highest yearly net wins.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

from totalcompmx.equity.vesting import (
    DEFAULT_VESTING_YEARS,
    EquityConfig,
    YearlyEquity,
    build_equity_config,
    calculate_equity_schedule,
)
from totalcompmx.errors import ConfigurationError
from totalcompmx.mexico.nomina.entrada import PayFrequency, to_monthly_salary
from totalcompmx.mexico.nomina.montos import ZERO
from totalcompmx.mexico.nomina.motor import (
    PackageInput,
    Regime,
    ResicoInput,
    SalaryCalculation,
    SueldosInput,
    active_fiscal_year,
    calculate_package,
)
from totalcompmx.mexico.nomina.prestaciones import OtherBenefit
from totalcompmx.mexico.rates import FiscalYear
from totalcompmx.mexico.store import FiscalStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageSpec:
    """A named package: regime input plus an optional equity grant."""

    name: str
    package: PackageInput
    equity: EquityConfig | None = None


@dataclass(frozen=True)
class PackageResult:
    name: str
    calculation: SalaryCalculation
    equity_config: EquityConfig | None = None
    equity_schedule: tuple[YearlyEquity, ...] = ()


@dataclass(frozen=True)
class Comparison:
    results: tuple[PackageResult, ...]
    best: PackageResult | None


def compare_packages(
    packages: Sequence[PackageSpec],
    store: FiscalStore,
    equity_years: int = DEFAULT_VESTING_YEARS,
) -> Comparison:
    """Calculate every package and pick the one with the highest yearly net.

    On a tie the first package wins.
    """
    fiscal_year = active_fiscal_year(store)
    results: list[PackageResult] = []
    best: PackageResult | None = None

    for spec in packages:
        calculation = calculate_package(spec.package, store, fiscal_year)
        schedule: tuple[YearlyEquity, ...] = ()
        if spec.equity is not None:
            schedule = tuple(calculate_equity_schedule(spec.equity, equity_years))

        result = PackageResult(
            name=spec.name,
            calculation=calculation,
            equity_config=spec.equity,
            equity_schedule=schedule,
        )
        results.append(result)

        if best is None or calculation.yearly_net > best.calculation.yearly_net:
            best = result

    if best is not None:
        logger.info(
            "Best of %d packages: %s (yearly net %s)",
            len(results), best.name, best.calculation.yearly_net,
        )
    return Comparison(results=tuple(results), best=best)


# =============================================================================
# Package file (YAML)
# =============================================================================
class OtraPrestacionModel(BaseModel):
    nombre: str
    monto: float = Field(gt=0)
    moneda: Literal["MXN", "USD"] = "MXN"
    periodicidad: Literal["monthly", "annual"] = "monthly"
    exenta: bool = False
    porcentaje: bool = Field(default=False, description="monto es % del salario bruto anual")

    def to_benefit(self) -> OtherBenefit:
        return OtherBenefit(
            name=self.nombre,
            amount=self.monto,
            currency=self.moneda,
            cadence=self.periodicidad,
            tax_free=self.exenta,
            is_percentage=self.porcentaje,
        )


class PrimaVacacionalModel(BaseModel):
    porcentaje: float = 25.0
    dias: int = Field(default=12, ge=0)


class EquityModel(BaseModel):
    grant_usd: float = Field(gt=0)
    refresh_min: float | None = None
    refresh_max: float | None = None
    vesting: int = Field(default=DEFAULT_VESTING_YEARS, ge=1)


class PaqueteModel(BaseModel):
    nombre: str | None = None
    regimen: Regime = Regime.SUELDOS_SALARIOS
    salario: float = Field(gt=0)
    moneda: Literal["MXN", "USD"] = "MXN"
    tipo_cambio: float | None = None
    frecuencia: PayFrequency = PayFrequency.MONTHLY
    horas_semana: float = 40.0
    aguinaldo_dias: int | None = Field(default=None, ge=0)
    vales_despensa: float | None = None
    prima_vacacional: PrimaVacacionalModel | None = None
    fondo_ahorro: float | None = Field(default=None, description="Porcentaje del salario")
    infonavit: bool = False
    dias_sin_goce: int = Field(default=0, ge=0)
    otras_prestaciones: list[OtraPrestacionModel] = Field(default_factory=list)
    equity: EquityModel | None = None

    def to_spec(self, position: int, fiscal_year: FiscalYear) -> PackageSpec:
        exchange_rate = fiscal_year.usd_mxn_rate
        if self.tipo_cambio is not None:
            exchange_rate = self.tipo_cambio
        salary = to_monthly_salary(
            self.salario, self.frecuencia, self.moneda, exchange_rate, self.horas_semana,
        )
        benefits = tuple(p.to_benefit() for p in self.otras_prestaciones)

        package: PackageInput
        if self.regimen is Regime.RESICO:
            package = ResicoInput(
                monthly_income=salary,
                unpaid_vacation_days=self.dias_sin_goce,
                other_benefits=benefits,
                exchange_rate=exchange_rate,
            )
        else:
            prima = self.prima_vacacional
            package = SueldosInput(
                gross_monthly_salary=salary,
                has_aguinaldo=self.aguinaldo_dias is not None,
                aguinaldo_days=self.aguinaldo_dias or 0,
                has_vales_despensa=self.vales_despensa is not None,
                vales_despensa_amount=self.vales_despensa if self.vales_despensa is not None else ZERO,
                has_prima_vacacional=prima is not None,
                vacation_days=prima.dias if prima else 12,
                prima_vacacional_percent=prima.porcentaje if prima else 25.0,
                has_fondo_ahorro=self.fondo_ahorro is not None,
                fondo_ahorro_percent=self.fondo_ahorro if self.fondo_ahorro is not None else ZERO,
                has_infonavit_credit=self.infonavit,
                other_benefits=benefits,
                exchange_rate=exchange_rate,
            )

        equity = None
        if self.equity is not None:
            equity = build_equity_config(
                self.equity.grant_usd,
                exchange_rate,
                self.equity.refresh_min,
                self.equity.refresh_max,
                self.equity.vesting,
            )

        return PackageSpec(
            name=self.nombre or f"Paquete {position}",
            package=package,
            equity=equity,
        )


class PaquetesFile(BaseModel):
    paquetes: list[PaqueteModel] = Field(min_length=1)


def load_packages(path: Path, fiscal_year: FiscalYear) -> list[PackageSpec]:
    """Read a YAML package file into ``PackageSpec`` objects.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the YAML does not match the schema.
    """
    if not path.exists():
        raise FileNotFoundError(f"Package file not found: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    try:
        model = PaquetesFile.model_validate(data or {})
    except Exception as e:
        raise ConfigurationError(f"Invalid package file ({path}): {e}") from e

    return [p.to_spec(i, fiscal_year) for i, p in enumerate(model.paquetes, start=1)]
