"""Reference tables the engine reads, and the errors raised when they fall short."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from pension_backend.config import SICK_LEAVE_STATS

YearTable = Mapping[int, float]
# sex -> age -> month within the year of age (0..11) -> remaining months of life
DivisorTable = Mapping[str, Mapping[int, Mapping[int, float]]]


class PensionEngineError(ValueError):
    pass


class MissingTableEntryError(PensionEngineError):
    def __init__(self, table: str, key: object, detail: Optional[str] = None):
        message = f"{table} has no entry for {key!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.table = table
        self.key = key


class PrognosisFormatError(PensionEngineError):
    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


@dataclass(frozen=True)
class ReferenceTables:
    """Fully resolved lookup data injected into every engine call.

    ``wage_growth`` doubles as the valorization table: the annual indexation
    of pension capital follows wage growth. ``annuity_divisors`` may be None
    when no life-expectancy data is available, in which case the linear
    fallback divisor is used.
    """

    wage_growth: YearTable
    cpi: YearTable
    annuity_divisors: Optional[DivisorTable]
    average_pension: YearTable = field(default_factory=dict)
    sick_leave: Mapping[str, Mapping[str, float]] = field(
        default_factory=lambda: SICK_LEAVE_STATS
    )
    variant: str = "custom"

    @property
    def valorization(self) -> YearTable:
        return self.wage_growth

    def coverage(self) -> Dict[str, object]:
        """Summary of which years/ages each table covers."""
        ages = sorted(
            {age for by_age in (self.annuity_divisors or {}).values() for age in by_age}
        )
        return {
            "variant": self.variant,
            "wage_growth_years": _span(self.wage_growth),
            "cpi_years": _span(self.cpi),
            "average_pension_years": _span(self.average_pension),
            "divisor_ages": [ages[0], ages[-1]] if ages else None,
        }


def _span(table: YearTable) -> Optional[List[int]]:
    if not table:
        return None
    years = sorted(table)
    return [years[0], years[-1]]


def require_rate(table: YearTable, year: int, table_name: str) -> float:
    rate = table.get(year)
    if rate is None:
        raise MissingTableEntryError(table_name, year)
    return rate
