"""Annuitization of capital, inflation adjustment and replacement rate."""

from __future__ import annotations

import logging
import math
from typing import Mapping, Optional, Union

from pension_backend.config import (
    DEFAULT_INFLATION,
    FALLBACK_DIVISORS,
    MIN_DIVISOR_MONTHS,
    MONTHS_PER_YEAR_OF_AGE,
)
from pension_backend.domain.tables import DivisorTable, MissingTableEntryError, YearTable
from pension_backend.models import Sex

logger = logging.getLogger(__name__)


def fallback_divisor(retirement_age: int, sex: Sex) -> float:
    """Linear divisor from a single base age per sex, used when no table exists."""
    base = FALLBACK_DIVISORS[Sex(sex).value]
    divisor = base["months"] - (retirement_age - base["age"]) * MONTHS_PER_YEAR_OF_AGE
    return max(MIN_DIVISOR_MONTHS, divisor)


def _months_for(entry: Union[float, Mapping[int, float]], month: int) -> Optional[float]:
    if isinstance(entry, Mapping):
        return entry.get(month)
    return float(entry)


def annuity_divisor(
    retirement_age: int,
    sex: Sex,
    divisors: Optional[DivisorTable],
    month: int = 0,
) -> float:
    """
    Months of remaining life used to turn capital into a monthly pension.

    An age missing from the table borrows the nearest available age (the
    younger one on a tie) and moves 12 months per year of difference. The
    result never drops below 12 months.
    """
    if divisors is None:
        logger.warning("No annuity divisor table, using the linear fallback divisor")
        return fallback_divisor(retirement_age, sex)

    sex_key = Sex(sex).value
    by_age = divisors.get(sex_key)
    if not by_age:
        raise MissingTableEntryError("annuity divisors", sex_key, "no data for this sex")

    month = min(max(month, 0), 11)
    if retirement_age in by_age:
        nearest_age = retirement_age
    else:
        nearest_age = min(by_age, key=lambda age: (abs(age - retirement_age), age))
        logger.debug(
            "No divisor for age %s, extrapolating from age %s", retirement_age, nearest_age
        )

    months = _months_for(by_age[nearest_age], month)
    if months is None:
        raise MissingTableEntryError("annuity divisors", (sex_key, nearest_age, month))

    divisor = months - (retirement_age - nearest_age) * MONTHS_PER_YEAR_OF_AGE
    return max(MIN_DIVISOR_MONTHS, divisor)


def calculate_pension(
    total_capital: float,
    retirement_age: int,
    sex: Sex,
    divisors: Optional[DivisorTable],
    month: int = 0,
) -> float:
    """Nominal monthly pension = capital / annuity divisor."""
    return total_capital / annuity_divisor(retirement_age, sex, divisors, month)


def cumulative_inflation(retirement_year: int, current_year: int, cpi: YearTable) -> float:
    """Compound CPI for current_year+1 .. retirement_year.

    Table values are used up to the table's last year, 2.5% a year after it.
    """
    last_available_year = max(cpi) if cpi else current_year

    multiplier = 1.0
    for year in range(current_year + 1, retirement_year + 1):
        if year <= last_available_year:
            multiplier *= cpi.get(year, DEFAULT_INFLATION)
        else:
            multiplier *= DEFAULT_INFLATION
    return multiplier


def calculate_real_value(
    nominal_pension: float,
    retirement_year: int,
    current_year: int,
    cpi: YearTable,
) -> float:
    """Express a future pension in today's money."""
    if retirement_year <= current_year:
        return nominal_pension
    return nominal_pension / cumulative_inflation(retirement_year, current_year, cpi)


def round_half_away_from_zero(value: float, digits: int = 1) -> float:
    factor = 10**digits
    rounded = math.floor(abs(value) * factor + 0.5) / factor
    return math.copysign(rounded, value)


def calculate_replacement_rate(nominal_pension: float, final_salary: float) -> Optional[float]:
    """Pension as a percentage of the final monthly salary, one decimal."""
    if final_salary <= 0:
        return None
    return round_half_away_from_zero(nominal_pension / final_salary * 100, 1)
