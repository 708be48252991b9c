"""Tests for the built-in fiscal tables (rates.py) and the static store."""

from __future__ import annotations

import pytest

from totalcompmx.errors import ConfigurationError, NoActiveFiscalYearError
from totalcompmx.mexico.nomina.isr import validate_isr_brackets
from totalcompmx.mexico.nomina.motor import active_fiscal_year
from totalcompmx.mexico.rates import (
    INFINITY,
    TABLES_2025,
    FiscalTables,
    obtain_tables,
)
from totalcompmx.mexico.store import StaticFiscalStore


class TestObtainTables:
    def test_2025_available(self) -> None:
        tables = obtain_tables(2025)
        assert isinstance(tables, FiscalTables)
        assert tables.fiscal_year.year == 2025

    def test_unknown_year_raises(self) -> None:
        with pytest.raises(ValueError, match="Tables not available for fiscal year 1999"):
            obtain_tables(1999)


class TestTables2025:
    def test_uma(self) -> None:
        fy = TABLES_2025.fiscal_year
        assert fy.uma_daily == 113.14
        assert fy.uma_monthly == 3439.46
        assert fy.uma_annual == 41273.52

    def test_isr_table_is_contiguous(self) -> None:
        validate_isr_brackets(TABLES_2025.isr_brackets)
        assert len(TABLES_2025.isr_brackets) == 11

    def test_last_bracket_unbounded(self) -> None:
        last = TABLES_2025.isr_brackets[-1]
        assert last.upper_limit == INFINITY
        assert last.surplus_percent == 0.35

    def test_cesantia_progressive(self) -> None:
        rates = [b.employer_percent for b in TABLES_2025.cesantia_brackets]
        assert rates == sorted(rates)
        assert rates[0] == 0.03150
        assert rates[-1] == 0.06422

    def test_resico_five_rates(self) -> None:
        assert [b.applicable_rate for b in TABLES_2025.resico_brackets] == [
            0.01, 0.011, 0.015, 0.02, 0.025,
        ]


class TestStaticFiscalStore:
    def test_active_year(self, store_2025) -> None:
        assert store_2025.get_active_fiscal_year().year == 2025

    def test_no_active_year(self) -> None:
        store = StaticFiscalStore([])
        assert store.get_active_fiscal_year() is None
        with pytest.raises(NoActiveFiscalYearError, match="No active fiscal year"):
            active_fiscal_year(store)

    def test_most_recent_year_is_active(self, simple_tables) -> None:
        store = StaticFiscalStore([TABLES_2025, simple_tables])
        assert store.get_active_fiscal_year().year == 2099

    def test_explicit_active_year(self, simple_tables) -> None:
        store = StaticFiscalStore([TABLES_2025, simple_tables], active_year=2025)
        assert store.get_active_fiscal_year().year == 2025

    def test_unknown_id(self, store_2025) -> None:
        with pytest.raises(ConfigurationError, match="fiscal year id 42"):
            store_2025.get_isr_brackets(42)

    def test_imss_concepts_without_active_year(self) -> None:
        with pytest.raises(ConfigurationError, match="no active fiscal year"):
            StaticFiscalStore([]).get_imss_concepts()

    def test_resico_smallest_covering_limit(self, store_2025) -> None:
        assert store_2025.get_resico_bracket(2025, 25000.0).applicable_rate == 0.01
        assert store_2025.get_resico_bracket(2025, 25000.01).applicable_rate == 0.011

    def test_resico_above_table(self, store_2025) -> None:
        assert store_2025.get_resico_bracket(2025, 300000.0) is None

    def test_cesantia_by_umas(self, store_2025) -> None:
        bracket = store_2025.get_cesantia_bracket(2025, 1.2)
        assert bracket.employer_percent == 0.03544
        top = store_2025.get_cesantia_bracket(2025, 25.0)
        assert top.employer_percent == 0.06422
