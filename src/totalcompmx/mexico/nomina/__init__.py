"""Payroll: ISR, IMSS, benefits and regimes.

Package comparison (comparacion.py) depends on equity and is imported from
its own module.
"""

from totalcompmx.mexico.nomina.entrada import PayFrequency, to_monthly_salary
from totalcompmx.mexico.nomina.imss import (
    calculate_imss_employer,
    calculate_imss_worker,
    calculate_sbc,
)
from totalcompmx.mexico.nomina.isr import (
    calculate_article174_tax,
    calculate_isr,
    taxable_excess,
    validate_isr_brackets,
)
from totalcompmx.mexico.nomina.motor import (
    Regime,
    ResicoInput,
    SalaryCalculation,
    SueldosInput,
    active_fiscal_year,
    calculate_package,
    calculate_resico,
    calculate_sueldos_y_salarios,
)
from totalcompmx.mexico.nomina.prestaciones import (
    OtherBenefit,
    OtherBenefitResult,
    process_other_benefits,
)

__all__ = [
    "PayFrequency",
    "to_monthly_salary",
    "calculate_imss_employer",
    "calculate_imss_worker",
    "calculate_sbc",
    "calculate_article174_tax",
    "calculate_isr",
    "taxable_excess",
    "validate_isr_brackets",
    "Regime",
    "ResicoInput",
    "SalaryCalculation",
    "SueldosInput",
    "active_fiscal_year",
    "calculate_package",
    "calculate_resico",
    "calculate_sueldos_y_salarios",
    "OtherBenefit",
    "OtherBenefitResult",
    "process_other_benefits",
]
