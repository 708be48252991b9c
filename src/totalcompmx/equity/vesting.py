"""Year-by-year vesting of a stock grant with stacked refreshers.

Year 0 is the join date: the grant is awarded, nothing vests. The initial
grant vests in equal parts during years 1..N (no cliff). When refreshers are
enabled, every year receives a new grant (average of the configured range)
that starts vesting the following year, also over N years, so cohorts
overlap and stack.

Cohorts are kept as an insertion-only mapping grant year -> amount; a cohort
granted in year g vests during years g+1 .. g+N.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from totalcompmx.mexico.nomina.montos import ZERO, round_money

DEFAULT_VESTING_YEARS = 4


@dataclass(frozen=True)
class EquityConfig:
    """Grant parameters. Amounts in USD; ``exchange_rate`` is MXN per USD."""

    initial_grant_usd: float
    has_refreshers: bool = False
    refresher_min_usd: float = ZERO
    refresher_max_usd: float = ZERO
    vesting_years: int = DEFAULT_VESTING_YEARS
    exchange_rate: float = 1.0


@dataclass(frozen=True)
class YearlyEquity:
    """Vesting of one year. ``refresher_vested`` maps grant year -> USD vested."""

    year: int
    initial_grant_vested: float = ZERO
    refresher_vested: dict[int, float] = field(default_factory=dict)
    refresher_total: float = ZERO
    total_vested: float = ZERO
    new_refresher_granted: float = ZERO
    total_vested_mxn: float = ZERO


def build_equity_config(
    initial_grant_usd: float,
    exchange_rate: float,
    refresher_min_usd: float | None = None,
    refresher_max_usd: float | None = None,
    vesting_years: int = DEFAULT_VESTING_YEARS,
) -> EquityConfig:
    """Build a config from user input.

    A reversed refresher range is swapped. Refreshers are enabled only when
    both bounds are positive.

    Raises:
        ValueError: If ``vesting_years`` is lower than 1.
    """
    if vesting_years < 1:
        raise ValueError(f"vesting_years must be at least 1, got {vesting_years}")

    minimum = refresher_min_usd if refresher_min_usd is not None else ZERO
    maximum = refresher_max_usd if refresher_max_usd is not None else ZERO
    if minimum > maximum:
        minimum, maximum = maximum, minimum

    return EquityConfig(
        initial_grant_usd=initial_grant_usd,
        has_refreshers=minimum > ZERO and maximum > ZERO,
        refresher_min_usd=minimum,
        refresher_max_usd=maximum,
        vesting_years=vesting_years,
        exchange_rate=exchange_rate,
    )


def calculate_equity_schedule(config: EquityConfig, years: int) -> list[YearlyEquity]:
    """Vesting table for years 0..``years`` (``years + 1`` rows).

    The refresher range is used as given: ordering is ``build_equity_config``'s job.
    Sums and the MXN conversion work on the unrounded amounts; only the
    stored fields of each row are rounded to the cent.
    """
    schedule = [YearlyEquity(year=0)]

    average_refresher = ZERO
    if config.has_refreshers:
        average_refresher = (config.refresher_min_usd + config.refresher_max_usd) / 2

    annual_vest_percent = 1.0 / config.vesting_years
    refresher_grants: dict[int, float] = {}

    for year in range(1, years + 1):
        initial_vested = ZERO
        if year <= config.vesting_years:
            initial_vested = config.initial_grant_usd * annual_vest_percent

        refresher_vested: dict[int, float] = {}
        for grant_year, grant_amount in refresher_grants.items():
            if grant_year + 1 <= year <= grant_year + config.vesting_years:
                refresher_vested[grant_year] = grant_amount * annual_vest_percent

        new_refresher = ZERO
        if config.has_refreshers:
            new_refresher = average_refresher
            refresher_grants[year] = average_refresher

        refresher_total = sum(refresher_vested.values(), ZERO)
        total_vested = initial_vested + refresher_total

        schedule.append(
            YearlyEquity(
                year=year,
                initial_grant_vested=round_money(initial_vested),
                refresher_vested={
                    grant_year: round_money(amount)
                    for grant_year, amount in refresher_vested.items()
                },
                refresher_total=round_money(refresher_total),
                total_vested=round_money(total_vested),
                new_refresher_granted=round_money(new_refresher),
                total_vested_mxn=round_money(total_vested * config.exchange_rate),
            )
        )

    return schedule


def total_equity(config: EquityConfig, years: int = DEFAULT_VESTING_YEARS) -> tuple[float, float]:
    """(USD, MXN) vested over the first ``years`` years, summed from the rounded rows."""
    schedule = calculate_equity_schedule(config, years)
    total_usd = round_money(sum((y.total_vested for y in schedule), ZERO))
    total_mxn = round_money(sum((y.total_vested_mxn for y in schedule), ZERO))
    return total_usd, total_mxn
