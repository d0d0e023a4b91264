from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from pension_backend.domain.annuity import (
    annuity_divisor,
    calculate_real_value,
    calculate_replacement_rate,
)
from pension_backend.domain.capital import accumulate_capital, final_capital
from pension_backend.domain.deferral import calculate_deferral_scenarios
from pension_backend.domain.programs import calculate_program_boost
from pension_backend.domain.tables import ReferenceTables
from pension_backend.domain.timeline import (
    YearSalary,
    apply_timeline_adjustments,
    last_contract_type,
    last_known_salary,
    salaries_from_periods,
    salaries_from_wage_index,
    sick_leave_coefficient,
)
from pension_backend.domain.years_needed import calculate_years_needed
from pension_backend.models import SimulationInputs
from pension_backend.schemas.simulation import (
    CapitalEntry,
    PensionBreakdown,
    SalaryPathEntry,
    SimulationResults,
)

logger = logging.getLogger(__name__)


def base_salaries(inputs: SimulationInputs, tables: ReferenceTables, current_year: int) -> List[YearSalary]:
    """Declared periods when there are any, otherwise today's salary indexed by wage growth.

    Either way the path covers exactly work_start_year..work_end_year.
    """
    if inputs.employment_periods:
        return salaries_from_periods(
            inputs.employment_periods,
            inputs.contract_type,
            first_year=inputs.work_start_year,
            last_year=inputs.work_end_year,
        )
    return salaries_from_wage_index(
        current_salary=inputs.monthly_gross,
        current_year=current_year,
        work_start_year=inputs.work_start_year,
        work_end_year=inputs.work_end_year,
        wage_growth=tables.wage_growth,
        contract_type=inputs.contract_type,
    )


def _salary_path(
    inputs: SimulationInputs,
    salaries: List[YearSalary],
    current_year: int,
    *,
    with_events: bool,
    coefficient: float,
) -> List[SalaryPathEntry]:
    return apply_timeline_adjustments(
        salaries,
        current_age=inputs.age,
        current_year=current_year,
        gaps=inputs.gap_periods,
        sick_leave_events=inputs.sick_leave_events if with_events else (),
        statistical_coefficient=coefficient,
        custom_salaries=inputs.custom_salaries,
    )


def _capital_path(
    inputs: SimulationInputs, tables: ReferenceTables, path: List[SalaryPathEntry]
) -> List[CapitalEntry]:
    return accumulate_capital(
        path,
        tables.valorization,
        initial_main_account=inputs.account_balance,
        initial_sub_account=inputs.sub_account_balance,
    )


def run_simulation(
    inputs: SimulationInputs,
    tables: ReferenceTables,
    expected_pension: Optional[float] = None,
    current_year: Optional[int] = None,
) -> SimulationResults:
    """
    Full projection for one person.

    Order of stages:
      1) Normalize the career into a per-year salary path.
      2) Accumulate and valorize capital.
      3) Annuitize into a nominal pension and deflate it to today's money.
      4) Add the optional program boosts.
      5) Sweep the deferral offsets and solve for the years needed.

    The breakdown without sick leave keeps gaps but drops every sick-leave
    reduction; the one with sick leave applies discrete events and the
    statistical coefficient. The headline figures apply the discrete events
    always and the coefficient only when ``include_sick_leave`` is set.
    """
    current_year = current_year or datetime.now().year

    salaries = base_salaries(inputs, tables, current_year)
    statistical = sick_leave_coefficient(inputs.sex, True, tables.sick_leave)

    salary_path = _salary_path(
        inputs,
        salaries,
        current_year,
        with_events=True,
        coefficient=statistical if inputs.include_sick_leave else 1.0,
    )
    path_without_sick_leave = _salary_path(
        inputs, salaries, current_year, with_events=False, coefficient=1.0
    )
    path_with_sick_leave = _salary_path(
        inputs, salaries, current_year, with_events=True, coefficient=statistical
    )

    capital_path = _capital_path(inputs, tables, salary_path)
    base_capital = final_capital(
        capital_path, inputs.account_balance, inputs.sub_account_balance
    ).total
    capital_without = final_capital(
        _capital_path(inputs, tables, path_without_sick_leave),
        inputs.account_balance,
        inputs.sub_account_balance,
    ).total
    capital_with = final_capital(
        _capital_path(inputs, tables, path_with_sick_leave),
        inputs.account_balance,
        inputs.sub_account_balance,
    ).total

    retirement_year = inputs.work_end_year
    retirement_age = inputs.age + (retirement_year - current_year)
    divisor = annuity_divisor(retirement_age, inputs.sex, tables.annuity_divisors)

    def breakdown(capital: float) -> PensionBreakdown:
        nominal = capital / divisor
        return PensionBreakdown(
            nominal_pension=nominal,
            real_pension=calculate_real_value(nominal, retirement_year, current_year, tables.cpi),
            total_capital=capital,
        )

    headline = breakdown(base_capital)
    without_sick_leave = breakdown(capital_without)
    with_sick_leave = breakdown(capital_with)

    last_salary = last_known_salary(salary_path)
    contract_type = last_contract_type(salary_path, inputs.contract_type)

    avg_pension = tables.average_pension.get(retirement_year)

    programs = calculate_program_boost(base_capital, inputs.retirement_programs)
    total_nominal = headline.nominal_pension + programs.total_monthly_pension

    deferrals = calculate_deferral_scenarios(
        base_capital=base_capital,
        base_retirement_age=retirement_age,
        base_retirement_year=retirement_year,
        base_real_pension=headline.real_pension,
        last_salary=last_salary,
        contract_type=contract_type,
        sex=inputs.sex,
        divisors=tables.annuity_divisors,
        cpi=tables.cpi,
        current_year=current_year,
    )

    years_needed = None
    if expected_pension is not None:
        years_needed = calculate_years_needed(
            expected_pension,
            headline.real_pension,
            base_capital,
            retirement_age,
            last_salary,
            contract_type,
            inputs.sex,
            divisors=tables.annuity_divisors,
            cpi=tables.cpi,
            base_retirement_year=retirement_year,
            current_year=current_year,
        )

    logger.debug(
        "Simulated retirement at %s (age %s): capital %.2f, nominal %.2f, real %.2f",
        retirement_year,
        retirement_age,
        base_capital,
        headline.nominal_pension,
        headline.real_pension,
    )

    return SimulationResults(
        nominal_pension=headline.nominal_pension,
        real_pension=headline.real_pension,
        replacement_rate=calculate_replacement_rate(headline.nominal_pension, last_salary),
        retirement_age=retirement_age,
        retirement_year=retirement_year,
        total_capital=base_capital,
        total_capital_with_programs=base_capital + programs.total_capital,
        annuity_divisor=divisor,
        avg_pension_in_retirement_year=avg_pension,
        difference_vs_average=(
            headline.nominal_pension - avg_pension if avg_pension is not None else None
        ),
        difference_vs_expected=(
            headline.real_pension - expected_pension if expected_pension is not None else None
        ),
        without_sick_leave=without_sick_leave,
        with_sick_leave=with_sick_leave,
        sick_leave_difference=without_sick_leave.real_pension - with_sick_leave.real_pension,
        programs=programs,
        total_nominal_pension_with_programs=total_nominal,
        total_real_pension_with_programs=calculate_real_value(
            total_nominal, retirement_year, current_year, tables.cpi
        ),
        deferrals=deferrals,
        years_needed=years_needed,
        capital_path=capital_path,
        salary_path=salary_path,
    )
