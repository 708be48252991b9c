"""Payroll CLI commands: Sueldos y Salarios, RESICO and package comparison.

Usage:
    tcmx sueldos 45000 --aguinaldo-dias 15 --vales 3000 --fondo-porcentaje 13
    tcmx resico 80000 --dias-sin-goce 10
    tcmx comparar ofertas.yaml
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from totalcompmx.cli.app import console, get_store, parse_amount
from totalcompmx.errors import TotalCompError
from totalcompmx.mexico.nomina.comparacion import (
    Comparison,
    compare_packages,
    load_packages,
)
from totalcompmx.mexico.nomina.entrada import PayFrequency, to_monthly_salary
from totalcompmx.mexico.nomina.montos import ZERO, format_amount
from totalcompmx.mexico.nomina.motor import (
    Regime,
    ResicoInput,
    SalaryCalculation,
    SueldosInput,
    active_fiscal_year,
    calculate_package,
)


def sueldos(
    salario: str = typer.Argument(..., help="Salario bruto en la frecuencia indicada"),
    aguinaldo_dias: Optional[int] = typer.Option(
        None, "--aguinaldo-dias", min=0, help="Dias de aguinaldo (minimo legal: 15)",
    ),
    vales: Optional[str] = typer.Option(
        None, "--vales", help="Vales de despensa mensuales",
    ),
    prima_porcentaje: Optional[str] = typer.Option(
        None, "--prima-porcentaje", help="Prima vacacional en % (minimo legal: 25)",
    ),
    dias_vacaciones: int = typer.Option(
        12, "--dias-vacaciones", min=0, help="Dias de vacaciones al anio",
    ),
    fondo_porcentaje: Optional[str] = typer.Option(
        None, "--fondo-porcentaje", help="Fondo de ahorro en % del salario",
    ),
    infonavit: bool = typer.Option(
        False, "--infonavit", help="El trabajador tiene credito Infonavit",
    ),
    frecuencia: PayFrequency = typer.Option(
        PayFrequency.MONTHLY, "--frecuencia", "-f", help="Frecuencia del salario",
    ),
    horas_semana: str = typer.Option(
        "40", "--horas-semana", help="Horas por semana (frecuencia hourly)",
    ),
    moneda: str = typer.Option("MXN", "--moneda", help="MXN o USD"),
    tipo_cambio: Optional[str] = typer.Option(
        None, "--tipo-cambio", help="MXN por USD (default: el del ejercicio)",
    ),
) -> None:
    """Calculate a Sueldos y Salarios package."""
    store = get_store()
    try:
        fiscal_year = active_fiscal_year(store)
        exchange_rate = (
            parse_amount(tipo_cambio, "Tipo de cambio") if tipo_cambio
            else fiscal_year.usd_mxn_rate
        )
        salary = to_monthly_salary(
            parse_amount(salario, "Salario"),
            frecuencia,
            _currency(moneda),
            exchange_rate,
            parse_amount(horas_semana, "Horas por semana"),
        )
        package = SueldosInput(
            gross_monthly_salary=salary,
            has_aguinaldo=aguinaldo_dias is not None,
            aguinaldo_days=aguinaldo_dias or 0,
            has_vales_despensa=vales is not None,
            vales_despensa_amount=parse_amount(vales, "Vales") if vales else ZERO,
            has_prima_vacacional=prima_porcentaje is not None,
            vacation_days=dias_vacaciones,
            prima_vacacional_percent=(
                parse_amount(prima_porcentaje, "Prima vacacional") if prima_porcentaje else ZERO
            ),
            has_fondo_ahorro=fondo_porcentaje is not None,
            fondo_ahorro_percent=(
                parse_amount(fondo_porcentaje, "Fondo de ahorro") if fondo_porcentaje else ZERO
            ),
            has_infonavit_credit=infonavit,
            exchange_rate=exchange_rate,
        )
        calculation = calculate_package(package, store, fiscal_year)
    except TotalCompError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    render_calculation(calculation)


def resico(
    ingreso: str = typer.Argument(..., help="Ingreso en la frecuencia indicada"),
    dias_sin_goce: int = typer.Option(
        0, "--dias-sin-goce", min=0, help="Dias de vacaciones sin goce de sueldo",
    ),
    frecuencia: PayFrequency = typer.Option(
        PayFrequency.MONTHLY, "--frecuencia", "-f", help="Frecuencia del ingreso",
    ),
    horas_semana: str = typer.Option(
        "40", "--horas-semana", help="Horas por semana (frecuencia hourly)",
    ),
    moneda: str = typer.Option("MXN", "--moneda", help="MXN o USD"),
    tipo_cambio: Optional[str] = typer.Option(
        None, "--tipo-cambio", help="MXN por USD (default: el del ejercicio)",
    ),
) -> None:
    """Calculate a RESICO contractor income."""
    store = get_store()
    try:
        fiscal_year = active_fiscal_year(store)
        exchange_rate = (
            parse_amount(tipo_cambio, "Tipo de cambio") if tipo_cambio
            else fiscal_year.usd_mxn_rate
        )
        income = to_monthly_salary(
            parse_amount(ingreso, "Ingreso"),
            frecuencia,
            _currency(moneda),
            exchange_rate,
            parse_amount(horas_semana, "Horas por semana"),
        )
        package = ResicoInput(
            monthly_income=income,
            unpaid_vacation_days=dias_sin_goce,
            exchange_rate=exchange_rate,
        )
        calculation = calculate_package(package, store, fiscal_year)
    except TotalCompError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    render_calculation(calculation)


def comparar(
    archivo: Path = typer.Argument(..., help="Archivo YAML con la lista de paquetes"),
    anios: int = typer.Option(4, "--anios", min=1, help="Anios de equity a considerar"),
) -> None:
    """Compare packages and flag the one with the highest yearly net."""
    store = get_store()
    try:
        fiscal_year = active_fiscal_year(store)
        packages = load_packages(archivo, fiscal_year)
        comparison = compare_packages(packages, store, equity_years=anios)
    except (FileNotFoundError, TotalCompError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    render_comparison(comparison, anios)


def _currency(moneda: str) -> str:
    currency = moneda.upper()
    if currency not in ("MXN", "USD"):
        console.print(f"[red]Moneda no soportada: {moneda} (use MXN o USD)[/red]")
        raise typer.Exit(1)
    return currency


def render_calculation(calc: SalaryCalculation) -> None:
    """Print the full breakdown of a calculation with Rich."""
    regimen = "Sueldos y Salarios" if calc.regime is Regime.SUELDOS_SALARIOS else "RESICO"
    table = Table(
        title=f"{regimen} - Bruto mensual: {format_amount(calc.gross_salary)} MXN",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Concepto", style="cyan")
    table.add_column("Monto", justify="right")

    # Monthly
    table.add_section()
    table.add_row("[bold]Mensual[/bold]", "")
    table.add_row("  ISR", f"-{format_amount(calc.isr_tax)}")
    if calc.regime is Regime.SUELDOS_SALARIOS:
        table.add_row("  Subsidio al empleo", format_amount(calc.subsidio_empleo))
        table.add_row("  IMSS trabajador", f"-{format_amount(calc.imss_worker)}")
        if calc.fondo_ahorro_employee > ZERO:
            table.add_row("  Fondo de ahorro", f"-{format_amount(calc.fondo_ahorro_employee)}")
        if calc.vales_despensa_monthly > ZERO:
            table.add_row("  Vales de despensa", format_amount(calc.vales_despensa_monthly))
    for benefit in calc.other_benefits:
        if benefit.cadence == "monthly":
            table.add_row(f"  {benefit.name}", format_amount(benefit.net))
    table.add_row(
        "[bold green]Neto mensual[/bold green]",
        f"[bold green]{format_amount(calc.net_salary)}[/bold green]",
    )

    # Yearly payments
    annual_lines = [b for b in calc.other_benefits if b.cadence == "annual"]
    if calc.aguinaldo_gross > ZERO or calc.prima_vacacional_gross > ZERO or annual_lines:
        table.add_section()
        table.add_row("[bold]Pagos anuales (neto)[/bold]", "")
        if calc.aguinaldo_gross > ZERO:
            table.add_row(
                f"  Aguinaldo (bruto {format_amount(calc.aguinaldo_gross)})",
                format_amount(calc.aguinaldo_net),
            )
        if calc.prima_vacacional_gross > ZERO:
            table.add_row(
                f"  Prima vacacional (bruto {format_amount(calc.prima_vacacional_gross)})",
                format_amount(calc.prima_vacacional_net),
            )
        if calc.fondo_ahorro_yearly > ZERO:
            table.add_row("  Fondo de ahorro (devolucion)", format_amount(calc.fondo_ahorro_yearly))
        for benefit in annual_lines:
            table.add_row(f"  {benefit.name}", format_amount(benefit.net))

    if calc.regime is Regime.SUELDOS_SALARIOS:
        table.add_section()
        table.add_row("[bold]Aportaciones patronales[/bold]", "")
        table.add_row("  SBC diario", format_amount(calc.sbc))
        table.add_row("  IMSS patronal (mensual)", format_amount(calc.imss_employer_monthly))
        table.add_row("  Infonavit 5% (mensual)", format_amount(calc.infonavit_employer_monthly))
    elif calc.unpaid_vacation_days > 0:
        table.add_section()
        table.add_row(
            f"  Dias sin goce ({calc.unpaid_vacation_days})",
            f"-{format_amount(calc.unpaid_vacation_loss)}",
        )

    # Totals
    table.add_section()
    table.add_row("Bruto anual", format_amount(calc.yearly_gross))
    table.add_row(
        "[bold green]Neto anual[/bold green]",
        f"[bold green]{format_amount(calc.yearly_net)}[/bold green]",
    )
    table.add_row("Neto mensual ajustado", format_amount(calc.monthly_adjusted))

    console.print(table)


def render_comparison(comparison: Comparison, equity_years: int) -> None:
    """Side-by-side table of the packages, best one highlighted."""
    table = Table(title="Comparacion de paquetes", show_header=True, header_style="bold")
    table.add_column("Paquete", style="cyan")
    table.add_column("Regimen")
    table.add_column("Bruto mensual", justify="right")
    table.add_column("Neto mensual", justify="right")
    table.add_column("Neto anual", justify="right")
    table.add_column(f"Equity {equity_years} anios (MXN)", justify="right")

    for result in comparison.results:
        calc = result.calculation
        equity_mxn = "-"
        if result.equity_schedule:
            equity_mxn = format_amount(
                sum((y.total_vested_mxn for y in result.equity_schedule), ZERO)
            )
        name = result.name
        if comparison.best is result:
            name = f"[bold green]{name} *[/bold green]"
        table.add_row(
            name,
            calc.regime.value,
            format_amount(calc.gross_salary),
            format_amount(calc.net_salary),
            format_amount(calc.yearly_net),
            equity_mxn,
        )

    console.print(table)
    if comparison.best is not None:
        console.print(
            f"\n[green]Mejor paquete: {comparison.best.name} "
            f"(neto anual {format_amount(comparison.best.calculation.yearly_net)} MXN)[/green]"
        )
