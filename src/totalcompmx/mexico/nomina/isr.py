"""Progressive ISR on the monthly table and the Art. 174 RLISR bonus method.

A yearly bonus cannot be taxed at its own isolated marginal rate: the base
salary has already consumed the lower brackets. Art. 174 spreads the bonus
over a month, measures the extra tax that share causes on top of the salary
and applies that effective rate to the whole bonus:

1. share = (bonus / 365) * 30.4
2. rate = (ISR(salary + share) - ISR(salary)) / share
3. tax = round(bonus * rate)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from totalcompmx.errors import ConfigurationError
from totalcompmx.mexico.nomina.montos import (
    DAYS_PER_MONTH,
    DAYS_PER_YEAR,
    ZERO,
    round_money,
)
from totalcompmx.mexico.rates import ISRBracket

logger = logging.getLogger(__name__)


def calculate_isr(income: float, brackets: Sequence[ISRBracket]) -> float:
    """Monthly ISR: fixed fee + (income - lower limit) * surplus rate.

    Brackets are scanned in ascending order and the first one with
    ``lower <= income <= upper`` applies. When none matches the result is
    zero; a contiguous table never gets there.
    """
    for bracket in brackets:
        if bracket.lower_limit <= income <= bracket.upper_limit:
            surplus = income - bracket.lower_limit
            return round_money(bracket.fixed_fee + surplus * bracket.surplus_percent)

    logger.warning("No ISR bracket covers income %s; ISR taken as 0", income)
    return ZERO


def calculate_article174_tax(
    monthly_salary: float,
    annual_bonus: float,
    brackets: Sequence[ISRBracket],
) -> float:
    """ISR to withhold on a yearly bonus paid on top of ``monthly_salary``."""
    if annual_bonus <= ZERO:
        return ZERO

    share = (annual_bonus / DAYS_PER_YEAR) * DAYS_PER_MONTH

    tax_on_total = calculate_isr(monthly_salary + share, brackets)
    tax_on_salary = calculate_isr(monthly_salary, brackets)

    effective_rate = ZERO
    if share > ZERO:
        effective_rate = (tax_on_total - tax_on_salary) / share

    return round_money(annual_bonus * effective_rate)


def taxable_excess(gross: float, exempt_umas: int, uma_daily: float) -> float:
    """Part of a bonus above its LISR Art. 93 exemption (``exempt_umas`` daily UMAs)."""
    return max(ZERO, gross - exempt_umas * uma_daily)


def validate_isr_brackets(brackets: Sequence[ISRBracket]) -> None:
    """Check that a table is contiguous, increasing and covers [0, inf).

    Raises:
        ConfigurationError: On the first defect found.
    """
    if not brackets:
        raise ConfigurationError("ISR table is empty")

    ordered = sorted(brackets, key=lambda b: b.lower_limit)
    if ordered[0].lower_limit > ZERO:
        raise ConfigurationError(
            f"ISR table starts at {ordered[0].lower_limit}, not at 0"
        )

    for previous, current in zip(ordered, ordered[1:]):
        if current.lower_limit > previous.upper_limit:
            raise ConfigurationError(
                f"Gap in ISR table between {previous.upper_limit} "
                f"and {current.lower_limit}"
            )
        if current.upper_limit <= previous.upper_limit:
            raise ConfigurationError(
                f"ISR table not increasing at {current.lower_limit}"
            )

    if not math.isinf(ordered[-1].upper_limit):
        raise ConfigurationError(
            f"ISR table ends at {ordered[-1].upper_limit}, not at infinity"
        )
