"""What-if scenarios for retiring 1..15 years later than planned."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from pension_backend.config import DEFERRAL_YEARS
from pension_backend.domain.annuity import annuity_divisor, calculate_real_value
from pension_backend.domain.capital import contribution_rate
from pension_backend.domain.tables import DivisorTable, YearTable
from pension_backend.models import ContractType, Sex
from pension_backend.schemas.simulation import DeferralScenario


@dataclass
class DeferredPension:
    additional_years: int
    retirement_age: int
    extra_capital: float
    total_capital: float
    divisor: float
    nominal_pension: float


def deferred_pension(
    additional_years: int,
    *,
    base_capital: float,
    base_retirement_age: int,
    last_salary: float,
    contract_type: ContractType,
    sex: Sex,
    divisors: Optional[DivisorTable],
) -> DeferredPension:
    """Pension after working ``additional_years`` more at the last known salary.

    ``base_capital`` is the capital before any program boost.
    """
    extra_capital = additional_years * last_salary * 12 * contribution_rate(contract_type)
    total_capital = base_capital + extra_capital
    retirement_age = base_retirement_age + additional_years
    divisor = annuity_divisor(retirement_age, sex, divisors)
    return DeferredPension(
        additional_years=additional_years,
        retirement_age=retirement_age,
        extra_capital=extra_capital,
        total_capital=total_capital,
        divisor=divisor,
        nominal_pension=total_capital / divisor,
    )


def percent_change(new_value: float, base_value: float) -> Optional[float]:
    if base_value == 0:
        return None
    return (new_value / base_value - 1) * 100


def project_deferral(
    additional_years: int,
    *,
    base_capital: float,
    base_retirement_age: int,
    base_retirement_year: int,
    base_real_pension: float,
    last_salary: float,
    contract_type: ContractType,
    sex: Sex,
    divisors: Optional[DivisorTable],
    cpi: YearTable,
    current_year: int,
) -> DeferralScenario:
    deferred = deferred_pension(
        additional_years,
        base_capital=base_capital,
        base_retirement_age=base_retirement_age,
        last_salary=last_salary,
        contract_type=contract_type,
        sex=sex,
        divisors=divisors,
    )
    retirement_year = base_retirement_year + additional_years
    real_pension = calculate_real_value(
        deferred.nominal_pension, retirement_year, current_year, cpi
    )
    return DeferralScenario(
        additional_years=additional_years,
        retirement_year=retirement_year,
        retirement_age=deferred.retirement_age,
        extra_capital=deferred.extra_capital,
        total_capital=deferred.total_capital,
        annuity_divisor=deferred.divisor,
        nominal_pension=deferred.nominal_pension,
        real_pension=real_pension,
        increase_vs_base=real_pension - base_real_pension,
        percent_increase=percent_change(real_pension, base_real_pension),
    )


def calculate_deferral_scenarios(
    *,
    base_capital: float,
    base_retirement_age: int,
    base_retirement_year: int,
    base_real_pension: float,
    last_salary: float,
    contract_type: ContractType,
    sex: Sex,
    divisors: Optional[DivisorTable],
    cpi: YearTable,
    current_year: int,
    deferral_years: Iterable[int] = DEFERRAL_YEARS,
) -> List[DeferralScenario]:
    """One scenario per offset, each compared with the base case rather than the previous offset."""
    return [
        project_deferral(
            additional_years,
            base_capital=base_capital,
            base_retirement_age=base_retirement_age,
            base_retirement_year=base_retirement_year,
            base_real_pension=base_real_pension,
            last_salary=last_salary,
            contract_type=contract_type,
            sex=sex,
            divisors=divisors,
            cpi=cpi,
            current_year=current_year,
        )
        for additional_years in sorted(set(deferral_years))
    ]
