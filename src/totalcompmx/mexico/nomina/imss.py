"""IMSS worker and employer contributions, and the SBC.

For each concept the daily salary (monthly / 30.4) is capped at
``base_cap_in_umas`` daily UMAs, brought back to a monthly base (* 30.4) and
multiplied by the worker or employer rate. The employer rate of Cesantia en
Edad Avanzada y Vejez is progressive: it comes from the Cesantia table, keyed
by the daily salary expressed in UMAs. The worker rate of that concept stays
flat. Only the total is rounded.

Store errors propagate as they are: a missing table is a configuration
defect, not something to retry.
"""

from __future__ import annotations

from typing import Literal

from totalcompmx.mexico.nomina.montos import (
    DAYS_PER_MONTH,
    ZERO,
    daily_from_monthly,
    round_money,
)
from totalcompmx.mexico.rates import CESANTIA_CONCEPT, FiscalYear, IMSSConcept
from totalcompmx.mexico.store import FiscalStore

BASE_INTEGRATION_FACTOR = 1.0493  # 15 aguinaldo days + 25% of 12 vacation days
INTEGRATION_PER_YEAR = 0.001
SBC_CAP_UMAS = 25


def _monthly_base(daily_salary: float, concept: IMSSConcept, fiscal_year: FiscalYear) -> float:
    base = daily_salary
    if concept.base_cap_in_umas > 0:
        cap = concept.base_cap_in_umas * fiscal_year.uma_daily
        base = min(daily_salary, cap)
    return base * DAYS_PER_MONTH


def _is_progressive_cesantia(concept: IMSSConcept) -> bool:
    return not concept.is_fixed_rate and concept.concept_name == CESANTIA_CONCEPT


def _calculate_imss(
    gross_monthly_salary: float,
    fiscal_year: FiscalYear,
    store: FiscalStore,
    side: Literal["worker", "employer"],
) -> float:
    daily_salary = daily_from_monthly(gross_monthly_salary)
    total = ZERO

    for concept in store.get_imss_concepts():
        monthly_base = _monthly_base(daily_salary, concept, fiscal_year)

        if side == "worker":
            rate = concept.worker_percent
        else:
            rate = concept.employer_percent
            if _is_progressive_cesantia(concept):
                salary_in_umas = daily_salary / fiscal_year.uma_daily
                bracket = store.get_cesantia_bracket(fiscal_year.id, salary_in_umas)
                if bracket is not None:
                    rate = bracket.employer_percent

        total += monthly_base * rate

    return round_money(total)


def calculate_imss_worker(
    gross_monthly_salary: float,
    fiscal_year: FiscalYear,
    store: FiscalStore,
) -> float:
    """Monthly IMSS withheld from the worker (cuotas obreras)."""
    return _calculate_imss(gross_monthly_salary, fiscal_year, store, "worker")


def calculate_imss_employer(
    gross_monthly_salary: float,
    fiscal_year: FiscalYear,
    store: FiscalStore,
) -> float:
    """Monthly IMSS paid by the employer (cuotas patronales), non-liquid."""
    return _calculate_imss(gross_monthly_salary, fiscal_year, store, "employer")


def calculate_sbc(
    gross_monthly_salary: float,
    years_of_service: int,
    fiscal_year: FiscalYear,
) -> float:
    """Daily Salario Base de Cotizacion, capped at 25 daily UMAs.

    Integration factor 1.0493 plus 0.001 per year of service. Negative years
    are the caller's responsibility and are not validated.
    """
    factor = BASE_INTEGRATION_FACTOR
    if years_of_service > 0:
        factor += years_of_service * INTEGRATION_PER_YEAR

    sbc = daily_from_monthly(gross_monthly_salary) * factor
    return round_money(min(sbc, SBC_CAP_UMAS * fiscal_year.uma_daily))
