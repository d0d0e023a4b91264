"""Search for the number of extra working years that reaches an expected pension."""

from __future__ import annotations

from typing import Optional

from pension_backend.config import MAX_ADDITIONAL_YEARS
from pension_backend.domain.annuity import calculate_real_value
from pension_backend.domain.deferral import deferred_pension
from pension_backend.domain.tables import DivisorTable, YearTable
from pension_backend.models import ContractType, Sex


def calculate_years_needed(
    expected_pension: float,
    base_pension: float,
    base_capital: float,
    base_retirement_age: int,
    last_salary: float,
    contract_type: ContractType,
    sex: Sex,
    *,
    divisors: Optional[DivisorTable] = None,
    cpi: Optional[YearTable] = None,
    base_retirement_year: Optional[int] = None,
    current_year: Optional[int] = None,
    max_additional_years: int = MAX_ADDITIONAL_YEARS,
) -> Optional[int]:
    """
    Smallest number of additional years (1..max) whose pension meets the target.

    Returns 0 when the base pension already meets it and None when no offset
    in range does. With ``cpi``, ``base_retirement_year`` and ``current_year``
    the projected pensions are deflated to today's money before comparing,
    so ``base_pension`` must then be the real base pension.
    """
    if base_pension >= expected_pension:
        return 0

    deflate = cpi is not None and base_retirement_year is not None and current_year is not None

    for additional_years in range(1, max_additional_years + 1):
        deferred = deferred_pension(
            additional_years,
            base_capital=base_capital,
            base_retirement_age=base_retirement_age,
            last_salary=last_salary,
            contract_type=contract_type,
            sex=sex,
            divisors=divisors,
        )
        pension = deferred.nominal_pension
        if deflate:
            pension = calculate_real_value(
                pension, base_retirement_year + additional_years, current_year, cpi
            )
        if pension >= expected_pension:
            return additional_years

    return None
