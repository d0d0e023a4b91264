"""Year-by-year pension capital with valorization of the main account and sub-account."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from pension_backend.config import CONTRACT_RATES, MAIN_ACCOUNT_SPLIT, SUB_ACCOUNT_SPLIT
from pension_backend.domain.tables import YearTable, require_rate
from pension_backend.models import ContractType
from pension_backend.schemas.simulation import CapitalEntry, SalaryPathEntry


@dataclass
class FinalCapital:
    main_account: float
    sub_account: float

    @property
    def total(self) -> float:
        return self.main_account + self.sub_account


def contribution_rate(contract_type: ContractType) -> float:
    return CONTRACT_RATES[ContractType(contract_type).value]


def accumulate_capital(
    salary_path: Sequence[SalaryPathEntry],
    valorization: YearTable,
    initial_main_account: float = 0.0,
    initial_sub_account: float = 0.0,
) -> List[CapitalEntry]:
    """
    Walk the salary path in ascending year order.

    Per year:
      1) Valorize both balances by that year's rate (missing rate raises).
      2) Contribute effective salary x 12 x the year's contract rate
         (effective salary equals the nominal one when nothing reduced it).
      3) Split the contribution 76.16% main / 23.84% sub-account.
    """
    main_account = float(initial_main_account)
    sub_account = float(initial_sub_account)
    capital_path: List[CapitalEntry] = []

    for entry in sorted(salary_path, key=lambda item: item.year):
        main_before = main_account
        sub_before = sub_account

        rate = require_rate(valorization, entry.year, "valorization")
        main_account *= rate
        sub_account *= rate
        gain = (main_account - main_before) + (sub_account - sub_before)

        base = entry.effective_salary * 12
        year_rate = contribution_rate(entry.contract_type)
        contributions = base * year_rate

        main_account += contributions * MAIN_ACCOUNT_SPLIT
        sub_account += contributions * SUB_ACCOUNT_SPLIT

        capital_path.append(
            CapitalEntry(
                year=entry.year,
                age=entry.age,
                salary=entry.monthly_gross,
                contribution_rate=year_rate,
                contributions=contributions,
                valorization_rate=rate,
                valorization=gain,
                main_account_before=main_before,
                main_account_after=main_account,
                sub_account_before=sub_before,
                sub_account_after=sub_account,
                total_capital=main_account + sub_account,
            )
        )

    return capital_path


def final_capital(
    capital_path: Sequence[CapitalEntry],
    initial_main_account: float = 0.0,
    initial_sub_account: float = 0.0,
) -> FinalCapital:
    """Closing balances of the last year, or the opening balances for an empty path."""
    if not capital_path:
        return FinalCapital(float(initial_main_account), float(initial_sub_account))
    last = capital_path[-1]
    return FinalCapital(last.main_account_after, last.sub_account_after)
