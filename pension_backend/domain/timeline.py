"""Turns declared employment periods, gaps and sick leave into one salary entry per year."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from pension_backend.config import GAP_PENALTIES, SICK_LEAVE_PENALTY
from pension_backend.domain.tables import YearTable, require_rate
from pension_backend.models import (
    ContractType,
    EmploymentGapPeriod,
    EmploymentPeriod,
    Sex,
    SickLeaveEvent,
    month_index,
)
from pension_backend.schemas.simulation import SalaryPathEntry

logger = logging.getLogger(__name__)


@dataclass
class YearSalary:
    year: int
    monthly_gross: float
    contract_type: ContractType


def months_overlap_in_year(first_month: int, last_month: int, year: int) -> int:
    """Months of ``year`` covered by the absolute month span, clamped to 0..12."""
    year_start = month_index(year, 1)
    year_end = month_index(year, 12)
    overlap = min(last_month, year_end) - max(first_month, year_start) + 1
    return max(0, min(12, overlap))


def period_for_year(periods: Sequence[EmploymentPeriod], year: int) -> Optional[EmploymentPeriod]:
    """First period in input order that overlaps ``year``."""
    for period in periods:
        if months_overlap_in_year(period.first_month, period.last_month, year) > 0:
            return period
    return None


def gap_factor(gap: EmploymentGapPeriod, year: int) -> float:
    months = months_overlap_in_year(gap.first_month, gap.last_month, year)
    if months <= 0:
        return 1.0
    fraction = months / 12
    return 1 - fraction * GAP_PENALTIES[gap.kind.value]


def sick_leave_factor(event: SickLeaveEvent, year: int) -> float:
    months = months_overlap_in_year(event.first_month, event.last_month, year)
    if months <= 0:
        return 1.0
    return 1 - (months / 12) * SICK_LEAVE_PENALTY


def reduction_multiplier(
    year: int,
    gaps: Sequence[EmploymentGapPeriod] = (),
    sick_leave_events: Sequence[SickLeaveEvent] = (),
) -> float:
    """Product of every gap and sick-leave factor touching ``year``.

    Factors are multiplied independently; overlapping gaps are not
    de-duplicated.
    """
    multiplier = 1.0
    for gap in gaps:
        multiplier *= gap_factor(gap, year)
    for event in sick_leave_events:
        multiplier *= sick_leave_factor(event, year)
    return multiplier


def salaries_from_periods(
    periods: Sequence[EmploymentPeriod],
    default_contract: ContractType = ContractType.UOP,
    first_year: Optional[int] = None,
    last_year: Optional[int] = None,
) -> List[YearSalary]:
    """One salary per year of the career window.

    The window defaults to the earliest start through the latest end of the
    periods. Years no period touches are kept with a zero salary, and
    period years outside the window are dropped.
    """
    if not periods:
        return []

    if first_year is None:
        first_year = min(period.start_year for period in periods)
    if last_year is None:
        last_year = max(period.end_year for period in periods)

    salaries: List[YearSalary] = []
    for year in range(first_year, last_year + 1):
        period = period_for_year(periods, year)
        if period is None:
            logger.debug("No employment period covers %s, recording a zero-salary year", year)
            salaries.append(YearSalary(year, 0.0, default_contract))
            continue
        salaries.append(YearSalary(year, period.salary_in(year), period.contract_type))
    return salaries


def salaries_from_wage_index(
    current_salary: float,
    current_year: int,
    work_start_year: int,
    work_end_year: int,
    wage_growth: YearTable,
    contract_type: ContractType = ContractType.UOP,
) -> List[YearSalary]:
    """Index today's salary back to the career start and forward to its end."""
    salary = current_salary
    for year in range(current_year - 1, work_start_year - 1, -1):
        salary /= require_rate(wage_growth, year, "wage growth")

    salaries: List[YearSalary] = []
    for year in range(work_start_year, work_end_year + 1):
        salaries.append(YearSalary(year, salary, contract_type))
        if year < work_end_year:
            salary *= require_rate(wage_growth, year, "wage growth")
    return salaries


def sick_leave_coefficient(
    sex: Sex,
    include_sick_leave: bool,
    sick_leave_stats: Mapping[str, Mapping[str, float]],
) -> float:
    if not include_sick_leave:
        return 1.0
    return sick_leave_stats[Sex(sex).value]["reduction_coefficient"]


def apply_timeline_adjustments(
    salaries: Sequence[YearSalary],
    *,
    current_age: int,
    current_year: int,
    gaps: Sequence[EmploymentGapPeriod] = (),
    sick_leave_events: Sequence[SickLeaveEvent] = (),
    statistical_coefficient: float = 1.0,
    custom_salaries: Optional[Mapping[int, float]] = None,
) -> List[SalaryPathEntry]:
    overrides: Dict[int, float] = dict(custom_salaries or {})
    path: List[SalaryPathEntry] = []

    for item in salaries:
        monthly = overrides.get(item.year, item.monthly_gross)
        multiplier = (
            reduction_multiplier(item.year, gaps, sick_leave_events) * statistical_coefficient
        )
        path.append(
            SalaryPathEntry(
                year=item.year,
                age=current_age - (current_year - item.year),
                monthly_gross=monthly,
                annual_gross=monthly * 12,
                effective_salary=monthly * multiplier,
                reduction_multiplier=multiplier,
                contract_type=item.contract_type,
                is_historical=item.year < current_year,
                is_current_year=item.year == current_year,
                is_future=item.year > current_year,
            )
        )
    return path


def normalize_salary_history(
    periods: Sequence[EmploymentPeriod],
    gaps: Sequence[EmploymentGapPeriod],
    sick_leave_events: Sequence[SickLeaveEvent],
    sex: Sex,
    *,
    current_age: int,
    current_year: int,
    include_sick_leave: bool = False,
    sick_leave_stats: Optional[Mapping[str, Mapping[str, float]]] = None,
    custom_salaries: Optional[Mapping[int, float]] = None,
    default_contract: ContractType = ContractType.UOP,
) -> List[SalaryPathEntry]:
    """Per-year salary path for an explicit list of employment periods.

    When two periods overlap the same year, the one listed first supplies the
    salary and contract type.
    """
    coefficient = (
        sick_leave_coefficient(sex, include_sick_leave, sick_leave_stats)
        if sick_leave_stats is not None
        else 1.0
    )
    return apply_timeline_adjustments(
        salaries_from_periods(periods, default_contract),
        current_age=current_age,
        current_year=current_year,
        gaps=gaps,
        sick_leave_events=sick_leave_events,
        statistical_coefficient=coefficient,
        custom_salaries=custom_salaries,
    )


def last_known_salary(path: Sequence[SalaryPathEntry]) -> float:
    """Nominal monthly gross of the latest year that had any salary."""
    for entry in reversed(path):
        if entry.monthly_gross > 0:
            return entry.monthly_gross
    return 0.0


def last_contract_type(path: Sequence[SalaryPathEntry], default: ContractType) -> ContractType:
    for entry in reversed(path):
        if entry.monthly_gross > 0:
            return entry.contract_type
    return default
