"""MCP compensation tools: Sueldos y Salarios, RESICO and equity.

Amounts arrive as text (e.g. "45,000.00") and results are returned as dicts
of formatted amounts.
"""

from __future__ import annotations

import logging
import math

from mcp.server.fastmcp import Context
from mcp.server.session import ServerSession

from totalcompmx.equity.vesting import (
    DEFAULT_VESTING_YEARS,
    build_equity_config,
    calculate_equity_schedule,
)
from totalcompmx.errors import TotalCompError
from totalcompmx.mcp.server import AppContext, mcp
from totalcompmx.mexico.nomina.entrada import to_monthly_salary
from totalcompmx.mexico.nomina.montos import ZERO, format_amount
from totalcompmx.mexico.nomina.motor import (
    ResicoInput,
    SalaryCalculation,
    SueldosInput,
    active_fiscal_year,
    calculate_package,
)

logger = logging.getLogger(__name__)


def _parse_amount(value: str, label: str) -> float:
    try:
        amount = float(value.replace(",", ""))
    except ValueError:
        raise ValueError(f"{label} invalido: {value}") from None
    if not math.isfinite(amount):
        raise ValueError(f"{label} invalido: {value}")
    return amount


def _calculo_a_dict(calc: SalaryCalculation) -> dict:
    """Flatten a SalaryCalculation into the structured dict returned by the tools."""
    mensual = {
        "salario_bruto": format_amount(calc.gross_salary),
        "isr": format_amount(calc.isr_tax),
        "subsidio_empleo": format_amount(calc.subsidio_empleo),
        "imss_trabajador": format_amount(calc.imss_worker),
        "fondo_ahorro": format_amount(calc.fondo_ahorro_employee),
        "vales_despensa": format_amount(calc.vales_despensa_monthly),
        "otras_prestaciones": format_amount(calc.other_benefits_monthly_net),
        "salario_neto": format_amount(calc.net_salary),
    }
    anual = {
        "aguinaldo_bruto": format_amount(calc.aguinaldo_gross),
        "aguinaldo_isr": format_amount(calc.aguinaldo_isr),
        "aguinaldo_neto": format_amount(calc.aguinaldo_net),
        "prima_vacacional_bruta": format_amount(calc.prima_vacacional_gross),
        "prima_vacacional_isr": format_amount(calc.prima_vacacional_isr),
        "prima_vacacional_neta": format_amount(calc.prima_vacacional_net),
        "fondo_ahorro_anual": format_amount(calc.fondo_ahorro_yearly),
    }
    patronal = {
        "sbc_diario": format_amount(calc.sbc),
        "imss_patronal_mensual": format_amount(calc.imss_employer_monthly),
        "imss_patronal_anual": format_amount(calc.imss_employer_annual),
        "infonavit_mensual": format_amount(calc.infonavit_employer_monthly),
        "infonavit_anual": format_amount(calc.infonavit_employer_annual),
    }
    return {
        "regimen": calc.regime.value,
        "mensual": mensual,
        "pagos_anuales": anual,
        "aportaciones_patronales": patronal,
        "otras_prestaciones": [
            {
                "nombre": b.name,
                "monto": format_amount(b.amount),
                "isr": format_amount(b.isr),
                "neto": format_amount(b.net),
                "periodicidad": b.cadence,
                "exenta": b.tax_free,
            }
            for b in calc.other_benefits
        ],
        "dias_sin_goce": calc.unpaid_vacation_days,
        "perdida_dias_sin_goce": format_amount(calc.unpaid_vacation_loss),
        "bruto_anual": format_amount(calc.yearly_gross),
        "neto_anual": format_amount(calc.yearly_net),
        "neto_mensual_ajustado": format_amount(calc.monthly_adjusted),
    }


@mcp.tool()
def calcular_sueldos(
    salario_mensual: str,
    aguinaldo_dias: int | None = 15,
    vales_despensa: str | None = None,
    prima_vacacional_porcentaje: str | None = "25",
    dias_vacaciones: int = 12,
    fondo_ahorro_porcentaje: str | None = None,
    infonavit: bool = False,
    moneda: str = "MXN",
    tipo_cambio: str | None = None,
    ctx: Context[ServerSession, AppContext] = None,
) -> dict:
    """Calcular un paquete de Sueldos y Salarios (ISR, subsidio, IMSS, prestaciones).

    Args:
        salario_mensual: Salario bruto mensual (ej: "45000.00").
        aguinaldo_dias: Dias de aguinaldo; None si no hay aguinaldo.
        vales_despensa: Vales de despensa mensuales (opcional).
        prima_vacacional_porcentaje: Prima vacacional en %; None si no hay.
        dias_vacaciones: Dias de vacaciones al anio.
        fondo_ahorro_porcentaje: Fondo de ahorro en % del salario (opcional).
        infonavit: El trabajador tiene credito Infonavit.
        moneda: "MXN" o "USD".
        tipo_cambio: MXN por USD (default: el del ejercicio).
    """
    app = ctx.request_context.lifespan_context
    try:
        fiscal_year = active_fiscal_year(app.store)
        exchange_rate = (
            _parse_amount(tipo_cambio, "Tipo de cambio") if tipo_cambio
            else fiscal_year.usd_mxn_rate
        )
        salary = to_monthly_salary(
            _parse_amount(salario_mensual, "Salario"),
            currency=moneda.upper(),
            exchange_rate=exchange_rate,
        )
        package = SueldosInput(
            gross_monthly_salary=salary,
            has_aguinaldo=aguinaldo_dias is not None,
            aguinaldo_days=aguinaldo_dias or 0,
            has_vales_despensa=vales_despensa is not None,
            vales_despensa_amount=(
                _parse_amount(vales_despensa, "Vales") if vales_despensa else ZERO
            ),
            has_prima_vacacional=prima_vacacional_porcentaje is not None,
            vacation_days=dias_vacaciones,
            prima_vacacional_percent=(
                _parse_amount(prima_vacacional_porcentaje, "Prima vacacional")
                if prima_vacacional_porcentaje else ZERO
            ),
            has_fondo_ahorro=fondo_ahorro_porcentaje is not None,
            fondo_ahorro_percent=(
                _parse_amount(fondo_ahorro_porcentaje, "Fondo de ahorro")
                if fondo_ahorro_porcentaje else ZERO
            ),
            has_infonavit_credit=infonavit,
            exchange_rate=exchange_rate,
        )
        calculation = calculate_package(package, app.store, fiscal_year)
    except TotalCompError as e:
        logger.warning("calcular_sueldos failed: %s", e)
        return {"error": f"Error de calculo: {e}"}
    except ValueError as e:
        return {"error": str(e)}

    return _calculo_a_dict(calculation)


@mcp.tool()
def calcular_resico(
    ingreso_mensual: str,
    dias_sin_goce: int = 0,
    moneda: str = "MXN",
    tipo_cambio: str | None = None,
    ctx: Context[ServerSession, AppContext] = None,
) -> dict:
    """Calcular ingresos de un independiente bajo RESICO (tasa fija, sin IMSS).

    Args:
        ingreso_mensual: Ingreso mensual (ej: "80000.00").
        dias_sin_goce: Dias de vacaciones sin goce de sueldo.
        moneda: "MXN" o "USD".
        tipo_cambio: MXN por USD (default: el del ejercicio).
    """
    app = ctx.request_context.lifespan_context
    try:
        fiscal_year = active_fiscal_year(app.store)
        exchange_rate = (
            _parse_amount(tipo_cambio, "Tipo de cambio") if tipo_cambio
            else fiscal_year.usd_mxn_rate
        )
        income = to_monthly_salary(
            _parse_amount(ingreso_mensual, "Ingreso"),
            currency=moneda.upper(),
            exchange_rate=exchange_rate,
        )
        package = ResicoInput(
            monthly_income=income,
            unpaid_vacation_days=dias_sin_goce,
            exchange_rate=exchange_rate,
        )
        calculation = calculate_package(package, app.store, fiscal_year)
    except TotalCompError as e:
        logger.warning("calcular_resico failed: %s", e)
        return {"error": f"Error de calculo: {e}"}
    except ValueError as e:
        return {"error": str(e)}

    return _calculo_a_dict(calculation)


@mcp.tool()
def calendario_equity(
    grant_usd: str,
    refresh_min: str | None = None,
    refresh_max: str | None = None,
    anios: int = DEFAULT_VESTING_YEARS,
    vesting: int = DEFAULT_VESTING_YEARS,
    tipo_cambio: str | None = None,
    ctx: Context[ServerSession, AppContext] = None,
) -> dict:
    """Calendario de vesting anio por anio, con refreshers opcionales.

    Args:
        grant_usd: Grant inicial en USD (ej: "100000").
        refresh_min: Refresher anual minimo en USD (opcional).
        refresh_max: Refresher anual maximo en USD (opcional).
        anios: Anios a proyectar.
        vesting: Anios de vesting de cada grant.
        tipo_cambio: MXN por USD (default: el del ejercicio).
    """
    app = ctx.request_context.lifespan_context
    try:
        exchange_rate = (
            _parse_amount(tipo_cambio, "Tipo de cambio") if tipo_cambio
            else active_fiscal_year(app.store).usd_mxn_rate
        )
        config = build_equity_config(
            _parse_amount(grant_usd, "Grant"),
            exchange_rate,
            _parse_amount(refresh_min, "Refresher minimo") if refresh_min else None,
            _parse_amount(refresh_max, "Refresher maximo") if refresh_max else None,
            vesting,
        )
    except ValueError as e:
        return {"error": str(e)}

    schedule = calculate_equity_schedule(config, anios)
    return {
        "tipo_cambio": str(exchange_rate),
        "refreshers": config.has_refreshers,
        "anios": [
            {
                "anio": row.year,
                "grant_inicial": format_amount(row.initial_grant_vested),
                "refreshers": {
                    str(grant_year): format_amount(amount)
                    for grant_year, amount in row.refresher_vested.items()
                },
                "refreshers_total": format_amount(row.refresher_total),
                "nuevo_refresher": format_amount(row.new_refresher_granted),
                "total_usd": format_amount(row.total_vested),
                "total_mxn": format_amount(row.total_vested_mxn),
            }
            for row in schedule
        ],
        "total_usd": format_amount(sum((r.total_vested for r in schedule), ZERO)),
        "total_mxn": format_amount(sum((r.total_vested_mxn for r in schedule), ZERO)),
    }
