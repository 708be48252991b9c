"""Motor de nomina: orchestration of a full compensation package.

Combines ISR (isr.py), IMSS (imss.py) and the benefit lines (prestaciones.py)
into one ``SalaryCalculation`` for either regime:

- Sueldos y Salarios: progressive ISR, subsidio al empleo, IMSS, SBC, the
  yearly bonuses taxed with Art. 174 and the employer-side contributions;
- RESICO: flat rate on income, no IMSS, no subsidy, no SBC.

The order of the steps matters: every step feeds the following ones.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import assert_never

from totalcompmx.errors import BracketNotFoundError, NoActiveFiscalYearError
from totalcompmx.mexico.nomina.imss import (
    calculate_imss_employer,
    calculate_imss_worker,
    calculate_sbc,
)
from totalcompmx.mexico.nomina.isr import (
    calculate_article174_tax,
    calculate_isr,
    taxable_excess,
)
from totalcompmx.mexico.nomina.montos import (
    DAYS_PER_MONTH,
    MONTHS_PER_YEAR,
    ZERO,
    daily_from_monthly,
    round_money,
)
from totalcompmx.mexico.nomina.prestaciones import (
    OtherBenefit,
    OtherBenefitResult,
    process_other_benefits,
    resico_benefit_tax,
    sueldos_benefit_tax,
)
from totalcompmx.mexico.rates import FiscalYear
from totalcompmx.mexico.store import FiscalStore

logger = logging.getLogger(__name__)

AGUINALDO_EXEMPT_UMAS = 30  # LISR Art. 93 fr. XIV
PRIMA_VACACIONAL_EXEMPT_UMAS = 15  # LISR Art. 93 fr. XIV
INFONAVIT_EMPLOYER_RATE = 0.05  # Art. 29 Ley Infonavit
FONDO_AHORRO_EMPLOYER_MULTIPLE = 2


class Regime(str, Enum):
    SUELDOS_SALARIOS = "sueldos_salarios"
    RESICO = "resico"


@dataclass(frozen=True)
class SueldosInput:
    """Salaried package: monthly gross salary plus benefit elections."""

    gross_monthly_salary: float
    has_aguinaldo: bool = False
    aguinaldo_days: int = 15
    has_vales_despensa: bool = False
    vales_despensa_amount: float = ZERO
    has_prima_vacacional: bool = False
    vacation_days: int = 12
    prima_vacacional_percent: float = 25.0
    has_fondo_ahorro: bool = False
    fondo_ahorro_percent: float = 13.0
    has_infonavit_credit: bool = False
    other_benefits: tuple[OtherBenefit, ...] = ()
    exchange_rate: float | None = None  # None = rate of the fiscal year
    years_of_service: int = 1


@dataclass(frozen=True)
class ResicoInput:
    """Independent contractor under RESICO."""

    monthly_income: float
    unpaid_vacation_days: int = 0
    other_benefits: tuple[OtherBenefit, ...] = ()
    exchange_rate: float | None = None


PackageInput = SueldosInput | ResicoInput


@dataclass(frozen=True)
class SalaryCalculation:
    """Complete breakdown of a package. All amounts in MXN, rounded to the cent."""

    regime: Regime
    gross_salary: float

    # Monthly
    isr_tax: float = ZERO
    subsidio_empleo: float = ZERO
    imss_worker: float = ZERO
    fondo_ahorro_employee: float = ZERO
    vales_despensa_monthly: float = ZERO
    other_benefits_monthly_net: float = ZERO
    net_salary: float = ZERO
    sbc: float = ZERO

    # Yearly payments
    aguinaldo_gross: float = ZERO
    aguinaldo_isr: float = ZERO
    aguinaldo_net: float = ZERO
    prima_vacacional_gross: float = ZERO
    prima_vacacional_isr: float = ZERO
    prima_vacacional_net: float = ZERO
    fondo_ahorro_yearly: float = ZERO

    # Employer contributions (non-liquid)
    infonavit_employer_monthly: float = ZERO
    infonavit_employer_annual: float = ZERO
    imss_employer_monthly: float = ZERO
    imss_employer_annual: float = ZERO
    has_infonavit_credit: bool = False

    # Totals
    yearly_gross_base: float = ZERO
    yearly_gross: float = ZERO
    yearly_net: float = ZERO
    monthly_adjusted: float = ZERO

    # RESICO
    unpaid_vacation_days: int = 0
    unpaid_vacation_loss: float = ZERO

    other_benefits: tuple[OtherBenefitResult, ...] = ()


def _exchange_rate(override: float | None, fiscal_year: FiscalYear) -> float:
    """USD/MXN rate of the package; an explicit 0 is kept."""
    if override is None:
        return fiscal_year.usd_mxn_rate
    return override


def _yearly_bonus(
    gross: float,
    exempt_umas: int,
    monthly_salary: float,
    fiscal_year: FiscalYear,
    store: FiscalStore,
) -> tuple[float, float]:
    """(ISR, net) of a yearly bonus whose first ``exempt_umas`` daily UMAs are exempt."""
    taxable = taxable_excess(gross, exempt_umas, fiscal_year.uma_daily)
    isr = ZERO
    if taxable > ZERO:
        brackets = store.get_isr_brackets(fiscal_year.id)
        isr = calculate_article174_tax(monthly_salary, taxable, brackets)
    return isr, round_money(gross - isr)


def calculate_sueldos_y_salarios(
    package: SueldosInput,
    fiscal_year: FiscalYear,
    store: FiscalStore,
) -> SalaryCalculation:
    """Calculate a salaried (Sueldos y Salarios) package.

    Raises:
        ConfigurationError: If the store lacks the tables for ``fiscal_year``.
    """
    gross = package.gross_monthly_salary
    brackets = store.get_isr_brackets(fiscal_year.id)
    exchange_rate = _exchange_rate(package.exchange_rate, fiscal_year)

    # --- 1. Monthly base ---
    isr_tax = calculate_isr(gross, brackets)
    subsidio = ZERO
    if gross <= fiscal_year.subsidy_threshold_monthly:
        subsidio = round_money(gross * fiscal_year.subsidy_factor)
    imss_worker = calculate_imss_worker(gross, fiscal_year, store)
    sbc = calculate_sbc(gross, package.years_of_service, fiscal_year)
    net = round_money(gross - isr_tax + subsidio - imss_worker)

    # --- 2. Fondo de ahorro ---
    fondo_employee = ZERO
    if package.has_fondo_ahorro:
        deduction = gross * package.fondo_ahorro_percent / 100
        cap = fiscal_year.uma_annual * fiscal_year.fa_legal_cap_uma_factor / MONTHS_PER_YEAR
        fondo_employee = round_money(min(deduction, cap))
        net -= fondo_employee

    # --- 3. Vales de despensa (tax-free, capped at 1 monthly UMA) ---
    vales = ZERO
    if package.has_vales_despensa:
        cap = fiscal_year.uma_monthly * fiscal_year.pantry_vouchers_uma_cap
        vales = round_money(min(package.vales_despensa_amount, cap))
        net += vales

    # --- 4. Other benefits ---
    benefits = process_other_benefits(
        package.other_benefits,
        exchange_rate,
        sueldos_benefit_tax(gross, brackets),
        gross_monthly_salary=gross,
    )
    net += benefits.monthly_net

    daily_salary = daily_from_monthly(gross)

    # --- 5. Aguinaldo ---
    aguinaldo_gross = aguinaldo_isr = aguinaldo_net = ZERO
    if package.has_aguinaldo:
        aguinaldo_gross = round_money(daily_salary * package.aguinaldo_days)
        aguinaldo_isr, aguinaldo_net = _yearly_bonus(
            aguinaldo_gross, AGUINALDO_EXEMPT_UMAS, gross, fiscal_year, store,
        )

    # --- 6. Prima vacacional ---
    prima_gross = prima_isr = prima_net = ZERO
    if package.has_prima_vacacional:
        vacation_salary = daily_salary * package.vacation_days
        prima_gross = round_money(vacation_salary * package.prima_vacacional_percent / 100)
        prima_isr, prima_net = _yearly_bonus(
            prima_gross, PRIMA_VACACIONAL_EXEMPT_UMAS, gross, fiscal_year, store,
        )

    # --- 7. Fondo de ahorro: yearly payout (employer matches 100%) ---
    fondo_yearly = ZERO
    if package.has_fondo_ahorro:
        fondo_yearly = round_money(
            fondo_employee * MONTHS_PER_YEAR * FONDO_AHORRO_EMPLOYER_MULTIPLE
        )

    # --- 8. Employer Infonavit (non-liquid) ---
    infonavit_monthly = round_money(sbc * DAYS_PER_MONTH * INFONAVIT_EMPLOYER_RATE)
    infonavit_annual = round_money(infonavit_monthly * MONTHS_PER_YEAR)

    # --- 9. Employer IMSS (non-liquid) ---
    imss_employer = calculate_imss_employer(gross, fiscal_year, store)
    imss_employer_annual = round_money(imss_employer * MONTHS_PER_YEAR)

    # --- 10. Totals ---
    net = round_money(net)
    yearly_gross_base = round_money(gross * MONTHS_PER_YEAR)
    yearly_gross = round_money(
        yearly_gross_base + aguinaldo_gross + prima_gross
        + infonavit_annual + imss_employer_annual
    )
    yearly_net = round_money(
        net * MONTHS_PER_YEAR + aguinaldo_net + prima_net
        + fondo_yearly + benefits.annual_net
    )

    return SalaryCalculation(
        regime=Regime.SUELDOS_SALARIOS,
        gross_salary=gross,
        isr_tax=isr_tax,
        subsidio_empleo=subsidio,
        imss_worker=imss_worker,
        fondo_ahorro_employee=fondo_employee,
        vales_despensa_monthly=vales,
        other_benefits_monthly_net=benefits.monthly_net,
        net_salary=net,
        sbc=sbc,
        aguinaldo_gross=aguinaldo_gross,
        aguinaldo_isr=aguinaldo_isr,
        aguinaldo_net=aguinaldo_net,
        prima_vacacional_gross=prima_gross,
        prima_vacacional_isr=prima_isr,
        prima_vacacional_net=prima_net,
        fondo_ahorro_yearly=fondo_yearly,
        infonavit_employer_monthly=infonavit_monthly,
        infonavit_employer_annual=infonavit_annual,
        imss_employer_monthly=imss_employer,
        imss_employer_annual=imss_employer_annual,
        has_infonavit_credit=package.has_infonavit_credit,
        yearly_gross_base=yearly_gross_base,
        yearly_gross=yearly_gross,
        yearly_net=yearly_net,
        monthly_adjusted=round_money(yearly_net / MONTHS_PER_YEAR),
        other_benefits=benefits.results,
    )


def calculate_resico(
    package: ResicoInput,
    fiscal_year: FiscalYear,
    store: FiscalStore,
) -> SalaryCalculation:
    """Calculate a RESICO package (flat rate, no IMSS, no subsidy, no SBC).

    Raises:
        BracketNotFoundError: If the income exceeds every RESICO limit.
    """
    income = package.monthly_income
    bracket = store.get_resico_bracket(fiscal_year.id, income)
    if bracket is None:
        logger.error("No RESICO bracket for income %s (fiscal year %d)", income, fiscal_year.year)
        raise BracketNotFoundError("RESICO", income)

    isr_tax = round_money(income * bracket.applicable_rate)
    net = round_money(income - isr_tax)

    benefits = process_other_benefits(
        package.other_benefits,
        _exchange_rate(package.exchange_rate, fiscal_year),
        resico_benefit_tax(bracket.applicable_rate),
        gross_monthly_salary=income,
    )
    net = round_money(net + benefits.monthly_net)

    # Unpaid days: income the contractor does not earn
    loss = ZERO
    if package.unpaid_vacation_days > 0:
        loss = round_money(daily_from_monthly(income) * package.unpaid_vacation_days)

    yearly_gross_base = round_money(round_money(income * MONTHS_PER_YEAR) - loss)
    yearly_net = round_money(net * MONTHS_PER_YEAR + benefits.annual_net - loss)

    return SalaryCalculation(
        regime=Regime.RESICO,
        gross_salary=income,
        isr_tax=isr_tax,
        other_benefits_monthly_net=benefits.monthly_net,
        net_salary=net,
        yearly_gross_base=yearly_gross_base,
        yearly_gross=yearly_gross_base,
        yearly_net=yearly_net,
        monthly_adjusted=round_money(yearly_net / MONTHS_PER_YEAR),
        unpaid_vacation_days=package.unpaid_vacation_days,
        unpaid_vacation_loss=loss,
        other_benefits=benefits.results,
    )


def active_fiscal_year(store: FiscalStore) -> FiscalYear:
    """Return the active fiscal year.

    Raises:
        NoActiveFiscalYearError: If the store has none.
    """
    fiscal_year = store.get_active_fiscal_year()
    if fiscal_year is None:
        raise NoActiveFiscalYearError()
    return fiscal_year


def calculate_package(
    package: PackageInput,
    store: FiscalStore,
    fiscal_year: FiscalYear | None = None,
) -> SalaryCalculation:
    """Dispatch a package to its regime, on the active fiscal year by default."""
    if fiscal_year is None:
        fiscal_year = active_fiscal_year(store)

    match package:
        case SueldosInput():
            return calculate_sueldos_y_salarios(package, fiscal_year, store)
        case ResicoInput():
            return calculate_resico(package, fiscal_year, store)
        case _:
            assert_never(package)
