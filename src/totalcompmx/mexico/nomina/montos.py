"""Money helpers shared by every payroll calculation.

Amounts are 64-bit floats. Each monetary amount is rounded to the cent as
soon as it is computed, never in a final pass: intermediate rates (daily
salary, Art. 174 share, effective rate) stay unrounded, stored amounts do not.
"""

import math

ZERO = 0.0

DAYS_PER_MONTH = 30.4  # Average days per month (IMSS / SAT)
DAYS_PER_YEAR = 365.0
MONTHS_PER_YEAR = 12


def round_money(amount: float) -> float:
    """Round to the cent, half away from zero on ``amount * 100``.

    The tie test runs on the scaled float itself, so 2290.325 (stored as
    2290.32499...) rounds down to 2290.32.
    """
    if not math.isfinite(amount):
        return amount
    scaled = amount * 100
    whole = math.trunc(scaled)
    if abs(scaled - whole) >= 0.5:
        whole += int(math.copysign(1, scaled))
    return whole / 100


def daily_from_monthly(monthly: float) -> float:
    """Daily salary from a monthly amount (monthly / 30.4), unrounded."""
    return monthly / DAYS_PER_MONTH


def format_amount(amount: float) -> str:
    """Format as 12,345.67."""
    return f"{round_money(amount):,.2f}"
