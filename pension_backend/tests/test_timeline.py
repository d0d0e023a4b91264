from __future__ import annotations

from math import isclose

import pytest

from pension_backend.config import SICK_LEAVE_STATS
from pension_backend.domain.tables import MissingTableEntryError
from pension_backend.domain.timeline import (
    months_overlap_in_year,
    normalize_salary_history,
    period_for_year,
    reduction_multiplier,
    salaries_from_wage_index,
)
from pension_backend.models import (
    ContractType,
    EmploymentGapPeriod,
    EmploymentPeriod,
    GapKind,
    Sex,
    SickLeaveEvent,
    month_index,
)


def period(start: int, end: int, gross: float, **kwargs) -> EmploymentPeriod:
    return EmploymentPeriod(start_year=start, end_year=end, monthly_gross=gross, **kwargs)


def normalize(periods, gaps=(), events=(), **kwargs):
    return normalize_salary_history(
        periods,
        gaps,
        events,
        kwargs.pop("sex", Sex.FEMALE),
        current_age=kwargs.pop("current_age", 30),
        current_year=kwargs.pop("current_year", 2025),
        **kwargs,
    )


def by_year(path):
    return {entry.year: entry for entry in path}


def test_months_overlap_spans_year_boundary():
    first = month_index(2020, 3)
    last = month_index(2021, 2)

    assert months_overlap_in_year(first, last, 2019) == 0
    assert months_overlap_in_year(first, last, 2020) == 10
    assert months_overlap_in_year(first, last, 2021) == 2
    assert months_overlap_in_year(first, last, 2022) == 0


def test_first_listed_period_wins_when_periods_overlap():
    first = period(2020, 2025, 5000)
    second = period(2023, 2030, 9000, contract_type=ContractType.B2B)

    assert period_for_year([first, second], 2024) is first
    assert period_for_year([second, first], 2024) is second

    path = by_year(normalize([first, second]))
    assert path[2024].monthly_gross == 5000
    assert path[2024].contract_type == ContractType.UOP
    assert path[2026].monthly_gross == 9000
    assert path[2026].contract_type == ContractType.B2B


def test_year_without_period_is_a_zero_salary_year():
    path = by_year(normalize([period(2010, 2011, 4000), period(2013, 2014, 4000)]))

    assert sorted(path) == [2010, 2011, 2012, 2013, 2014]
    assert path[2012].monthly_gross == 0
    assert path[2012].effective_salary == 0


def test_unpaid_leave_removes_overlapping_share():
    gap = EmploymentGapPeriod(kind=GapKind.UNPAID_LEAVE, start_year=2020, duration_months=6)

    assert isclose(reduction_multiplier(2020, [gap]), 0.5)
    assert reduction_multiplier(2021, [gap]) == 1.0


def test_parental_leave_keeps_seventy_percent():
    gap = EmploymentGapPeriod(kind=GapKind.PARENTAL_LEAVE, start_year=2020, duration_months=12)

    assert isclose(reduction_multiplier(2020, [gap]), 0.7)


def test_gap_crossing_years_is_split_by_month():
    gap = EmploymentGapPeriod(
        kind=GapKind.UNEMPLOYMENT, start_year=2020, start_month=7, duration_months=12
    )

    assert gap.end_year == 2021
    assert gap.end_month == 6
    assert isclose(reduction_multiplier(2020, [gap]), 0.5)
    assert isclose(reduction_multiplier(2021, [gap]), 0.5)


def test_sick_leave_event_costs_thirty_percent_of_covered_months():
    event = SickLeaveEvent(year=2020, month=1, duration_years=0.5)

    assert event.duration_months == 6
    assert isclose(reduction_multiplier(2020, sick_leave_events=[event]), 0.85)


def test_different_reductions_in_one_year_multiply():
    gaps = [
        EmploymentGapPeriod(kind=GapKind.UNPAID_LEAVE, start_year=2020, duration_months=6),
        EmploymentGapPeriod(kind=GapKind.PARENTAL_LEAVE, start_year=2020, duration_months=12),
    ]
    events = [SickLeaveEvent(year=2020, duration_years=1)]

    path = by_year(normalize([period(2019, 2021, 6000)], gaps, events))

    assert isclose(path[2020].reduction_multiplier, 0.5 * 0.7 * 0.7)
    assert isclose(path[2020].effective_salary, 6000 * 0.245)
    assert path[2019].effective_salary == 6000
    assert path[2020].monthly_gross == 6000


def test_statistical_sick_leave_applies_every_year():
    path = normalize(
        [period(2020, 2022, 5000)],
        include_sick_leave=True,
        sick_leave_stats=SICK_LEAVE_STATS,
    )

    coefficient = SICK_LEAVE_STATS["F"]["reduction_coefficient"]
    assert all(isclose(entry.effective_salary, 5000 * coefficient) for entry in path)


def test_annual_raise_compounds_from_start_year():
    path = by_year(normalize([period(2020, 2022, 5000, annual_raise_pct=10)]))

    assert path[2020].monthly_gross == 5000
    assert isclose(path[2022].monthly_gross, 6050)
    assert isclose(path[2022].annual_gross, 6050 * 12)


def test_age_and_time_flags_follow_current_year():
    path = by_year(normalize([period(2015, 2030, 5000)], current_age=30, current_year=2025))

    assert path[2015].age == 20
    assert path[2030].age == 35
    assert path[2024].is_historical
    assert path[2025].is_current_year
    assert path[2026].is_future


def test_custom_salary_overrides_the_period_salary():
    path = by_year(normalize([period(2020, 2022, 5000)], custom_salaries={2021: 8000}))

    assert path[2021].monthly_gross == 8000
    assert path[2021].effective_salary == 8000
    assert path[2022].monthly_gross == 5000


def test_wage_index_path_back_and_forward():
    growth = {year: 1.1 for year in range(2015, 2030)}
    salaries = salaries_from_wage_index(5000, 2022, 2020, 2024, growth)

    amounts = {item.year: item.monthly_gross for item in salaries}
    assert isclose(amounts[2020], 5000 / 1.1 / 1.1)
    assert isclose(amounts[2021], 5000 / 1.1)
    assert isclose(amounts[2022], 5000)
    assert isclose(amounts[2024], 5000 * 1.1 * 1.1)


def test_wage_index_path_requires_growth_data():
    growth = {year: 1.03 for year in range(2018, 2023)}

    with pytest.raises(MissingTableEntryError) as excinfo:
        salaries_from_wage_index(5000, 2022, 2015, 2024, growth)

    assert excinfo.value.table == "wage growth"
    assert excinfo.value.key == 2017


def test_period_must_not_end_before_it_starts():
    with pytest.raises(ValueError):
        EmploymentPeriod(start_year=2020, start_month=6, end_year=2020, end_month=5, monthly_gross=1)
