"""Other benefits (otras prestaciones) declared by the user.

Each line is converted to MXN, taxed (or not, when tax-free) and accumulated
into a monthly or an annual net total depending on its cadence. The way a
taxable line is taxed depends on the regime, so the caller passes a
``BenefitTax`` strategy:

- Sueldos y Salarios: Art. 174 for annual lines (they share the base salary
  with the other yearly bonuses), plain monthly ISR for monthly lines;
- RESICO: the flat RESICO rate of the month.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Literal

from totalcompmx.mexico.nomina.isr import calculate_article174_tax, calculate_isr
from totalcompmx.mexico.nomina.montos import MONTHS_PER_YEAR, ZERO, round_money
from totalcompmx.mexico.rates import ISRBracket

Cadence = Literal["monthly", "annual"]
Currency = Literal["MXN", "USD"]

# (amount in MXN, cadence) -> ISR
BenefitTax = Callable[[float, str], float]


@dataclass(frozen=True)
class OtherBenefit:
    """A benefit line as declared by the user.

    ``is_percentage`` lines express ``amount`` as a percentage of the gross
    annual base salary; they are always annual.
    """

    name: str
    amount: float
    currency: Currency = "MXN"
    cadence: Cadence = "monthly"
    tax_free: bool = False
    is_percentage: bool = False

    def __post_init__(self) -> None:
        if self.is_percentage and self.cadence != "annual":
            object.__setattr__(self, "cadence", "annual")


@dataclass(frozen=True)
class OtherBenefitResult:
    """A processed benefit line, in MXN."""

    name: str
    amount: float
    tax_free: bool
    isr: float
    net: float
    cadence: str


@dataclass(frozen=True)
class BenefitsSummary:
    results: tuple[OtherBenefitResult, ...]
    monthly_net: float
    annual_net: float


def sueldos_benefit_tax(monthly_salary: float, brackets: Sequence[ISRBracket]) -> BenefitTax:
    """Salaried taxation: Art. 174 for annual lines, monthly ISR otherwise."""

    def tax(amount: float, cadence: str) -> float:
        if cadence == "annual":
            return calculate_article174_tax(monthly_salary, amount, brackets)
        return calculate_isr(amount, brackets)

    return tax


def resico_benefit_tax(rate: float) -> BenefitTax:
    """RESICO taxation: the flat rate of the month, whatever the cadence."""

    def tax(amount: float, cadence: str) -> float:
        return round_money(amount * rate)

    return tax


def _amount_in_mxn(
    benefit: OtherBenefit,
    exchange_rate: float,
    gross_monthly_salary: float,
) -> float:
    if benefit.is_percentage:
        yearly_base = gross_monthly_salary * MONTHS_PER_YEAR
        return round_money(yearly_base * benefit.amount / 100)
    if benefit.currency == "USD":
        return round_money(benefit.amount * exchange_rate)
    return round_money(benefit.amount)


def process_other_benefits(
    benefits: Sequence[OtherBenefit],
    exchange_rate: float,
    tax: BenefitTax,
    gross_monthly_salary: float = ZERO,
) -> BenefitsSummary:
    """Tax every benefit line and split the nets by cadence.

    Lines with a cadence other than "annual" count as monthly.
    """
    results: list[OtherBenefitResult] = []
    monthly_net = ZERO
    annual_net = ZERO

    for benefit in benefits:
        amount = _amount_in_mxn(benefit, exchange_rate, gross_monthly_salary)

        if benefit.tax_free:
            isr = ZERO
        else:
            isr = tax(amount, benefit.cadence)
        net = round_money(amount - isr)

        results.append(
            OtherBenefitResult(
                name=benefit.name,
                amount=amount,
                tax_free=benefit.tax_free,
                isr=isr,
                net=net,
                cadence=benefit.cadence,
            )
        )

        if benefit.cadence == "annual":
            annual_net += net
        else:
            monthly_net += net

    return BenefitsSummary(
        results=tuple(results),
        monthly_net=round_money(monthly_net),
        annual_net=round_money(annual_net),
    )
