"""Main TotalCompMX CLI application."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

import totalcompmx
from totalcompmx.errors import TotalCompError
from totalcompmx.mexico.store import StaticFiscalStore, load_tables, store_from_environment

app = typer.Typer(
    name="tcmx",
    help="TotalCompMX - Calculadora de compensacion total para Mexico",
    no_args_is_help=True,
)

console = Console()

# Global options stored by the callback
_tablas_path: Path | None = None


def get_store() -> StaticFiscalStore:
    """Build the fiscal store from --tablas or from the environment.

    Exits with code 1 when the tables cannot be loaded.
    """
    try:
        if _tablas_path is not None:
            return StaticFiscalStore([load_tables(_tablas_path)])
        return store_from_environment()
    except (FileNotFoundError, TotalCompError, ValueError) as e:
        console.print(f"[red]Error al cargar las tablas fiscales: {e}[/red]")
        raise typer.Exit(1)


def parse_amount(value: str, label: str) -> float:
    """Parse a text argument as an amount, or exit with code 1."""
    try:
        amount = float(value.replace(",", ""))
    except ValueError:
        amount = math.nan
    if not math.isfinite(amount):
        console.print(f"[red]{label} invalido: {value}[/red]")
        raise typer.Exit(1)
    return amount


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"TotalCompMX version {totalcompmx.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    tablas: Optional[str] = typer.Option(
        None,
        "--tablas",
        "-t",
        help="Archivo YAML con las tablas fiscales (default: tablas integradas)",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Mostrar mensajes de diagnostico",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Mostrar la version de TotalCompMX",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """TotalCompMX - Compensacion total bajo Sueldos y Salarios o RESICO."""
    global _tablas_path
    load_dotenv()
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    _tablas_path = Path(tablas) if tablas else None


# Subcommand registration
from totalcompmx.cli.equity import equity  # noqa: E402
from totalcompmx.cli.nomina import comparar, resico, sueldos  # noqa: E402

app.command(name="sueldos", help="Calcular un paquete de Sueldos y Salarios")(sueldos)
app.command(name="resico", help="Calcular ingresos bajo RESICO")(resico)
app.command(name="equity", help="Calendario de vesting de acciones")(equity)
app.command(name="comparar", help="Comparar paquetes definidos en un archivo YAML")(comparar)
