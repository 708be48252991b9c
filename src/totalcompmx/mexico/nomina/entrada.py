"""Normalization of a quoted salary to MXN per month."""

from __future__ import annotations

from enum import Enum

from totalcompmx.mexico.nomina.montos import round_money

WEEKS_PER_MONTH = 4.33
BIWEEKLY_PER_MONTH = 2.17  # 26 periods / 12 months
DAYS_PER_MONTH_QUOTED = 30.0
DEFAULT_HOURS_PER_WEEK = 40.0


class PayFrequency(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


def to_monthly_salary(
    amount: float,
    frequency: PayFrequency = PayFrequency.MONTHLY,
    currency: str = "MXN",
    exchange_rate: float = 1.0,
    hours_per_week: float = DEFAULT_HOURS_PER_WEEK,
) -> float:
    """Convert a salary quoted per hour/day/week/fortnight, in MXN or USD, to MXN per month.

    USD amounts are converted first, then the frequency factor applies:
    hourly * hours per week * 4.33, daily * 30, weekly * 4.33,
    biweekly * 2.17.
    """
    monthly = amount
    if currency == "USD":
        monthly = monthly * exchange_rate

    match PayFrequency(frequency):
        case PayFrequency.HOURLY:
            monthly = monthly * hours_per_week * WEEKS_PER_MONTH
        case PayFrequency.DAILY:
            monthly = monthly * DAYS_PER_MONTH_QUOTED
        case PayFrequency.WEEKLY:
            monthly = monthly * WEEKS_PER_MONTH
        case PayFrequency.BIWEEKLY:
            monthly = monthly * BIWEEKLY_PER_MONTH
        case PayFrequency.MONTHLY:
            pass

    return round_money(monthly)
