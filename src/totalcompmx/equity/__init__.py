"""Stock (RSU) vesting schedule with refreshers."""

from totalcompmx.equity.vesting import (
    EquityConfig,
    YearlyEquity,
    build_equity_config,
    calculate_equity_schedule,
    total_equity,
)

__all__ = [
    "EquityConfig",
    "YearlyEquity",
    "build_equity_config",
    "calculate_equity_schedule",
    "total_equity",
]
