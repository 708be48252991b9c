"""Tests for loading fiscal tables from YAML and from the environment."""

from __future__ import annotations

import pytest

from totalcompmx.errors import ConfigurationError
from totalcompmx.mexico.rates import INFINITY
from totalcompmx.mexico.store import load_tables, store_from_environment

TABLES_YAML = """\
fiscal_year:
  year: 2026
  uma_daily: 117.31
  uma_monthly: 3566.22
  uma_annual: 42794.64
  subsidy_factor: 0.0467
  subsidy_threshold_monthly: 10171.00
  usd_mxn_rate: 18.75
isr_brackets:
  - {lower_limit: 0, upper_limit: 746.04, fixed_fee: 0, surplus_percent: 0.0192}
  - {lower_limit: 746.04, fixed_fee: 14.32, surplus_percent: 0.064}
imss_concepts:
  - {concept_name: Retiro, worker_percent: 0, employer_percent: 0.02}
resico_brackets:
  - {upper_limit: 25000, applicable_rate: 0.01}
"""


@pytest.fixture
def tables_yaml(tmp_path):
    path = tmp_path / "tables.yaml"
    path.write_text(TABLES_YAML, encoding="utf-8")
    return path


@pytest.fixture
def clean_env(monkeypatch):
    for var in ("TOTALCOMP_TABLES", "TOTALCOMP_YEAR", "TOTALCOMP_EXCHANGE_RATE"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestLoadTables:
    def test_values_as_written(self, tables_yaml) -> None:
        tables = load_tables(tables_yaml)
        assert tables.fiscal_year.uma_daily == 117.31
        assert tables.fiscal_year.usd_mxn_rate == 18.75
        assert tables.isr_brackets[0].surplus_percent == 0.0192

    def test_id_defaults_to_year(self, tables_yaml) -> None:
        assert load_tables(tables_yaml).fiscal_year.id == 2026

    def test_missing_upper_limit_is_infinite(self, tables_yaml) -> None:
        assert load_tables(tables_yaml).isr_brackets[-1].upper_limit == INFINITY

    def test_defaults(self, tables_yaml) -> None:
        tables = load_tables(tables_yaml)
        assert tables.fiscal_year.fa_legal_cap_uma_factor == 1.3
        assert tables.imss_concepts[0].base_cap_in_umas == 25
        assert tables.cesantia_brackets == ()

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_tables(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="empty"):
            load_tables(path)

    def test_without_isr_brackets(self, tmp_path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(
            "fiscal_year: {year: 2026, uma_daily: 1, uma_monthly: 1, uma_annual: 1}\n"
            "isr_brackets: []\n",
            encoding="utf-8",
        )
        with pytest.raises(ConfigurationError, match="Invalid fiscal tables file"):
            load_tables(path)


class TestStoreFromEnvironment:
    def test_builtin_tables_by_default(self, clean_env) -> None:
        store = store_from_environment()
        assert store.get_active_fiscal_year().year == 2025

    def test_exchange_rate_override(self, clean_env) -> None:
        clean_env.setenv("TOTALCOMP_EXCHANGE_RATE", "18.50")
        fy = store_from_environment().get_active_fiscal_year()
        assert fy.usd_mxn_rate == 18.50
        assert fy.uma_daily == 113.14

    def test_tables_file(self, clean_env, tables_yaml) -> None:
        clean_env.setenv("TOTALCOMP_TABLES", str(tables_yaml))
        assert store_from_environment().get_active_fiscal_year().year == 2026

    def test_year_without_tables(self, clean_env) -> None:
        clean_env.setenv("TOTALCOMP_YEAR", "1999")
        with pytest.raises(ValueError, match="1999"):
            store_from_environment()

    def test_invalid_exchange_rate(self, clean_env) -> None:
        clean_env.setenv("TOTALCOMP_EXCHANGE_RATE", "veinte")
        with pytest.raises(ValueError):
            store_from_environment()
