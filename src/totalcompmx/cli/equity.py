"""Equity CLI command: vesting schedule with refreshers.

Usage:
    tcmx equity 100000
    tcmx equity 100000 --refresh-min 20000 --refresh-max 40000 --anios 6
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.table import Table

from totalcompmx.cli.app import console, get_store, parse_amount
from totalcompmx.equity.vesting import (
    DEFAULT_VESTING_YEARS,
    YearlyEquity,
    build_equity_config,
    calculate_equity_schedule,
)
from totalcompmx.errors import TotalCompError
from totalcompmx.mexico.nomina.montos import ZERO, format_amount
from totalcompmx.mexico.nomina.motor import active_fiscal_year


def equity(
    grant_usd: str = typer.Argument(..., help="Grant inicial en USD"),
    refresh_min: Optional[str] = typer.Option(
        None, "--refresh-min", help="Refresher anual minimo en USD",
    ),
    refresh_max: Optional[str] = typer.Option(
        None, "--refresh-max", help="Refresher anual maximo en USD",
    ),
    anios: int = typer.Option(
        DEFAULT_VESTING_YEARS, "--anios", min=1, help="Anios a proyectar",
    ),
    vesting: int = typer.Option(
        DEFAULT_VESTING_YEARS, "--vesting", min=1, help="Anios de vesting por grant",
    ),
    tipo_cambio: Optional[str] = typer.Option(
        None, "--tipo-cambio", help="MXN por USD (default: el del ejercicio)",
    ),
) -> None:
    """Print the year-by-year vesting schedule."""
    if tipo_cambio:
        exchange_rate = parse_amount(tipo_cambio, "Tipo de cambio")
    else:
        try:
            exchange_rate = active_fiscal_year(get_store()).usd_mxn_rate
        except TotalCompError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)

    config = build_equity_config(
        parse_amount(grant_usd, "Grant"),
        exchange_rate,
        parse_amount(refresh_min, "Refresher minimo") if refresh_min else None,
        parse_amount(refresh_max, "Refresher maximo") if refresh_max else None,
        vesting,
    )
    schedule = calculate_equity_schedule(config, anios)
    _render_schedule(schedule, config.has_refreshers, exchange_rate)


def _render_schedule(
    schedule: list[YearlyEquity], has_refreshers: bool, exchange_rate,
) -> None:
    table = Table(
        title=f"Vesting de equity (tipo de cambio {exchange_rate})",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Anio", justify="right", style="cyan")
    table.add_column("Grant inicial (USD)", justify="right")
    if has_refreshers:
        table.add_column("Refreshers (USD)", justify="right")
        table.add_column("Nuevo refresher (USD)", justify="right")
    table.add_column("Total (USD)", justify="right")
    table.add_column("Total (MXN)", justify="right")

    for row in schedule:
        cells = [str(row.year), format_amount(row.initial_grant_vested)]
        if has_refreshers:
            cells += [format_amount(row.refresher_total), format_amount(row.new_refresher_granted)]
        cells += [format_amount(row.total_vested), format_amount(row.total_vested_mxn)]
        table.add_row(*cells)

    total_usd = sum((r.total_vested for r in schedule), ZERO)
    total_mxn = sum((r.total_vested_mxn for r in schedule), ZERO)
    table.add_section()
    footer = ["[bold]Total[/bold]", ""]
    if has_refreshers:
        footer += ["", ""]
    footer += [
        f"[bold]{format_amount(total_usd)}[/bold]",
        f"[bold green]{format_amount(total_mxn)}[/bold green]",
    ]
    table.add_row(*footer)

    console.print(table)
