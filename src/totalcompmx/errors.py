"""Exceptions raised by the calculator.

Configuration gaps (no active fiscal year, no bracket for an income, a broken
ISR table) are raised as soon as they are found and never retried here:
the cause is missing data, not a transient fault.
"""

from __future__ import annotations


class TotalCompError(ValueError):
    """Base class for every error raised by totalcompmx."""


class ConfigurationError(TotalCompError):
    """The fiscal configuration is missing or inconsistent."""


class NoActiveFiscalYearError(ConfigurationError):
    """No fiscal year is marked as active in the store."""

    def __init__(self) -> None:
        super().__init__("No active fiscal year configuration found")


class BracketNotFoundError(ConfigurationError):
    """No bracket of a table covers the requested income."""

    def __init__(self, table: str, income: float) -> None:
        self.table = table
        self.income = income
        super().__init__(f"no {table} bracket found for income {income:.2f}")
