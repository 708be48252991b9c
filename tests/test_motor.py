"""Integration tests for the payroll engine (Sueldos y Salarios and RESICO).

Main case: a 20,000 salary with a flat 10% ISR and a single IMSS concept of
1% worker / 2% employer, daily UMA 100.
"""

from __future__ import annotations

import dataclasses

import pytest

from totalcompmx.errors import BracketNotFoundError, NoActiveFiscalYearError
from totalcompmx.mexico.nomina import (
    OtherBenefit,
    Regime,
    ResicoInput,
    SueldosInput,
    calculate_package,
    calculate_resico,
    calculate_sueldos_y_salarios,
)
from totalcompmx.mexico.store import StaticFiscalStore


@pytest.fixture
def base_salary() -> SueldosInput:
    return SueldosInput(gross_monthly_salary=20000.0)


# =============================================================================
# Sueldos y Salarios
# =============================================================================
class TestSueldosBase:
    def test_isr_and_net(self, base_salary, simple_year, simple_store) -> None:
        calc = calculate_sueldos_y_salarios(base_salary, simple_year, simple_store)
        assert calc.regime is Regime.SUELDOS_SALARIOS
        assert calc.isr_tax == 2000.00
        assert calc.subsidio_empleo == 0.0
        assert calc.imss_worker == 200.00
        assert calc.net_salary == 17800.00

    def test_sbc_and_infonavit(self, base_salary, simple_year, simple_store) -> None:
        """SBC = 20,000/30.4 * 1.0503 = 690.99; Infonavit = 690.99 * 30.4 * 5% = 1,050.30."""
        calc = calculate_sueldos_y_salarios(base_salary, simple_year, simple_store)
        assert calc.sbc == 690.99
        assert calc.infonavit_employer_monthly == 1050.30
        assert calc.infonavit_employer_annual == 12603.60

    def test_yearly_totals(self, base_salary, simple_year, simple_store) -> None:
        calc = calculate_sueldos_y_salarios(base_salary, simple_year, simple_store)
        assert calc.imss_employer_monthly == 400.00
        assert calc.yearly_gross_base == 240000.00
        # 240,000 + Infonavit 12,603.60 + employer IMSS 4,800
        assert calc.yearly_gross == 257403.60
        assert calc.yearly_net == 213600.00
        assert calc.monthly_adjusted == 17800.00

    def test_idempotent(self, base_salary, simple_year, simple_store) -> None:
        first = calculate_sueldos_y_salarios(base_salary, simple_year, simple_store)
        second = calculate_sueldos_y_salarios(base_salary, simple_year, simple_store)
        assert first == second

    def test_subsidy_below_threshold(self, simple_year, simple_store) -> None:
        year = dataclasses.replace(simple_year, subsidy_factor=0.05)
        calc = calculate_sueldos_y_salarios(
            SueldosInput(gross_monthly_salary=8000.0), year, simple_store,
        )
        assert calc.subsidio_empleo == 400.00
        # 8,000 - 800 + 400 - 80
        assert calc.net_salary == 7520.00

    def test_infonavit_credit_keeps_net(self, simple_year, simple_store) -> None:
        without = calculate_sueldos_y_salarios(
            SueldosInput(gross_monthly_salary=20000.0), simple_year, simple_store,
        )
        with_credit = calculate_sueldos_y_salarios(
            SueldosInput(gross_monthly_salary=20000.0, has_infonavit_credit=True),
            simple_year,
            simple_store,
        )
        assert with_credit.has_infonavit_credit is True
        assert with_credit.net_salary == without.net_salary


class TestSueldosBenefits:
    def test_aguinaldo_exactly_exempt(self, simple_year, simple_store) -> None:
        """Daily 200 * 15 days = 3,000 = 30 UMAs: no ISR."""
        package = SueldosInput(
            gross_monthly_salary=6080.0, has_aguinaldo=True, aguinaldo_days=15,
        )
        calc = calculate_sueldos_y_salarios(package, simple_year, simple_store)
        assert calc.aguinaldo_gross == 3000.00
        assert calc.aguinaldo_isr == 0.0
        assert calc.aguinaldo_net == 3000.00

    def test_taxable_aguinaldo(self, simple_year, simple_store) -> None:
        """16 days = 3,200: 200 taxed with Art. 174 -> 20.05."""
        package = SueldosInput(
            gross_monthly_salary=6080.0, has_aguinaldo=True, aguinaldo_days=16,
        )
        calc = calculate_sueldos_y_salarios(package, simple_year, simple_store)
        assert calc.aguinaldo_isr == 20.05
        assert calc.aguinaldo_net == 3179.95

    def test_prima_vacacional(self, simple_year, simple_store) -> None:
        """Daily 200 * 12 days * 25% = 600, exempt (cap 15 UMAs = 1,500)."""
        package = SueldosInput(gross_monthly_salary=6080.0, has_prima_vacacional=True)
        calc = calculate_sueldos_y_salarios(package, simple_year, simple_store)
        assert calc.prima_vacacional_gross == 600.00
        assert calc.prima_vacacional_isr == 0.0
        assert calc.prima_vacacional_net == 600.00

    def test_fondo_de_ahorro(self, simple_year, simple_store) -> None:
        """13% of 20,000 = 2,600 (cap 36,500 * 1.3 / 12 = 3,954.17); employer matches."""
        package = SueldosInput(gross_monthly_salary=20000.0, has_fondo_ahorro=True)
        calc = calculate_sueldos_y_salarios(package, simple_year, simple_store)
        assert calc.fondo_ahorro_employee == 2600.00
        assert calc.net_salary == 15200.00
        assert calc.fondo_ahorro_yearly == 62400.00

    def test_fondo_de_ahorro_capped(self, simple_year, simple_store) -> None:
        package = SueldosInput(gross_monthly_salary=100000.0, has_fondo_ahorro=True)
        calc = calculate_sueldos_y_salarios(package, simple_year, simple_store)
        assert calc.fondo_ahorro_employee == 3954.17

    def test_vales_capped_at_monthly_uma(self, simple_year, simple_store) -> None:
        package = SueldosInput(
            gross_monthly_salary=20000.0,
            has_vales_despensa=True,
            vales_despensa_amount=5000.0,
        )
        calc = calculate_sueldos_y_salarios(package, simple_year, simple_store)
        assert calc.vales_despensa_monthly == 3040.00
        assert calc.net_salary == 20840.00

    def test_other_benefits_add_to_net(self, simple_year, simple_store) -> None:
        package = SueldosInput(
            gross_monthly_salary=20000.0,
            other_benefits=(OtherBenefit("Gimnasio", 500.0, tax_free=True),),
        )
        calc = calculate_sueldos_y_salarios(package, simple_year, simple_store)
        assert calc.other_benefits_monthly_net == 500.00
        assert calc.net_salary == 18300.00


class TestExchangeRate:
    def test_fiscal_year_rate_by_default(self, simple_year, simple_store) -> None:
        package = SueldosInput(
            gross_monthly_salary=20000.0,
            other_benefits=(OtherBenefit("Home office", 50.0, currency="USD", tax_free=True),),
        )
        calc = calculate_sueldos_y_salarios(package, simple_year, simple_store)
        assert calc.other_benefits[0].amount == 1000.00

    def test_explicit_zero_rate_is_kept(self, simple_year, simple_store) -> None:
        package = SueldosInput(
            gross_monthly_salary=20000.0,
            other_benefits=(OtherBenefit("Home office", 50.0, currency="USD", tax_free=True),),
            exchange_rate=0.0,
        )
        calc = calculate_sueldos_y_salarios(package, simple_year, simple_store)
        assert calc.other_benefits[0].amount == 0.0
        assert calc.net_salary == 17800.00

    def test_explicit_zero_rate_resico(self, simple_year, simple_store) -> None:
        package = ResicoInput(
            monthly_income=30000.0,
            other_benefits=(OtherBenefit("Home office", 50.0, currency="USD"),),
            exchange_rate=0.0,
        )
        calc = calculate_resico(package, simple_year, simple_store)
        assert calc.other_benefits[0].amount == 0.0
        assert calc.net_salary == 29400.00


# =============================================================================
# RESICO
# =============================================================================
class TestResico:
    def test_flat_rate(self, simple_year, simple_store) -> None:
        calc = calculate_resico(ResicoInput(monthly_income=30000.0), simple_year, simple_store)
        assert calc.regime is Regime.RESICO
        assert calc.isr_tax == 600.00
        assert calc.net_salary == 29400.00
        assert calc.yearly_gross == 360000.00
        assert calc.yearly_net == 352800.00

    def test_no_imss_no_subsidy(self, simple_year, simple_store) -> None:
        calc = calculate_resico(ResicoInput(monthly_income=30000.0), simple_year, simple_store)
        assert calc.imss_worker == 0.0
        assert calc.imss_employer_monthly == 0.0
        assert calc.subsidio_empleo == 0.0
        assert calc.sbc == 0.0

    def test_unpaid_days(self, simple_year, simple_store) -> None:
        """30,000 / 30.4 * 10 = 9,868.42 of lost income."""
        calc = calculate_resico(
            ResicoInput(monthly_income=30000.0, unpaid_vacation_days=10),
            simple_year,
            simple_store,
        )
        assert calc.unpaid_vacation_loss == 9868.42
        assert calc.yearly_gross == 350131.58
        assert calc.yearly_net == 342931.58

    def test_income_above_table(self, simple_year, simple_store) -> None:
        with pytest.raises(BracketNotFoundError, match="no RESICO bracket found for income 60000.00"):
            calculate_resico(ResicoInput(monthly_income=60000.0), simple_year, simple_store)


# =============================================================================
# Regime dispatch
# =============================================================================
class TestCalculatePackage:
    def test_uses_active_year(self, simple_store) -> None:
        calc = calculate_package(SueldosInput(gross_monthly_salary=20000.0), simple_store)
        assert calc.net_salary == 17800.00

    def test_dispatches_resico(self, simple_store) -> None:
        calc = calculate_package(ResicoInput(monthly_income=30000.0), simple_store)
        assert calc.regime is Regime.RESICO

    def test_no_active_year(self) -> None:
        with pytest.raises(NoActiveFiscalYearError):
            calculate_package(SueldosInput(gross_monthly_salary=20000.0), StaticFiscalStore([]))

    def test_2025_tables(self, store_2025) -> None:
        calc = calculate_package(
            SueldosInput(
                gross_monthly_salary=45000.0,
                has_aguinaldo=True,
                has_prima_vacacional=True,
                has_vales_despensa=True,
                vales_despensa_amount=3000.0,
            ),
            store_2025,
        )
        assert calc.subsidio_empleo == 0.0
        assert 0.0 < calc.net_salary < 45000.0
        assert calc.yearly_net > calc.net_salary * 12
