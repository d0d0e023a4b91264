from __future__ import annotations

from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Sex(str, Enum):
    MALE = "M"
    FEMALE = "F"


class ContractType(str, Enum):
    UOP = "UOP"  # employment contract
    UOZ = "UOZ"  # contract of mandate
    B2B = "B2B"  # self-employment


class GapKind(str, Enum):
    PARENTAL_LEAVE = "PARENTAL_LEAVE"
    UNPAID_LEAVE = "UNPAID_LEAVE"
    UNEMPLOYMENT = "UNEMPLOYMENT"


def month_index(year: int, month: int) -> int:
    """Absolute month number, so spans across years compare as integers."""
    return year * 12 + (month - 1)


class EmploymentPeriod(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    item_type: Literal["employment"] = "employment"
    start_year: int = Field(ge=1950, le=2100)
    start_month: int = Field(default=1, ge=1, le=12)
    end_year: int = Field(ge=1950, le=2100)
    end_month: int = Field(default=12, ge=1, le=12)
    monthly_gross: float = Field(ge=0)
    contract_type: ContractType = ContractType.UOP
    annual_raise_pct: Optional[float] = Field(default=None, ge=-50, le=100)
    description: Optional[str] = None

    @model_validator(mode="after")
    def ensure_ordered(self) -> "EmploymentPeriod":
        if self.first_month > self.last_month:
            raise ValueError("employment period must not end before it starts")
        return self

    @property
    def first_month(self) -> int:
        return month_index(self.start_year, self.start_month)

    @property
    def last_month(self) -> int:
        return month_index(self.end_year, self.end_month)

    def salary_in(self, year: int) -> float:
        """Monthly gross for ``year``, grown by the annual raise if one is set."""
        if not self.annual_raise_pct:
            return self.monthly_gross
        years_since_start = max(0, year - self.start_year)
        return self.monthly_gross * (1 + self.annual_raise_pct / 100) ** years_since_start


class EmploymentGapPeriod(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    item_type: Literal["gap"] = "gap"
    kind: GapKind
    start_year: int = Field(ge=1950, le=2100)
    start_month: int = Field(default=1, ge=1, le=12)
    duration_months: int = Field(ge=1, le=600)
    description: Optional[str] = None

    @property
    def first_month(self) -> int:
        return month_index(self.start_year, self.start_month)

    @property
    def last_month(self) -> int:
        return self.first_month + self.duration_months - 1

    @property
    def end_year(self) -> int:
        return self.last_month // 12

    @property
    def end_month(self) -> int:
        return self.last_month % 12 + 1


class SickLeaveEvent(BaseModel):
    """Long sick leave starting at ``year``/``month`` and lasting ``duration_years``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    item_type: Literal["sick_leave"] = "sick_leave"
    year: int = Field(ge=1950, le=2100)
    month: int = Field(default=1, ge=1, le=12)
    duration_years: float = Field(gt=0, le=3)
    description: Optional[str] = None

    @property
    def duration_months(self) -> int:
        return max(1, round(self.duration_years * 12))

    @property
    def first_month(self) -> int:
        return month_index(self.year, self.month)

    @property
    def last_month(self) -> int:
        return self.first_month + self.duration_months - 1


TimelineItem = Annotated[
    Union[EmploymentPeriod, EmploymentGapPeriod, SickLeaveEvent],
    Field(discriminator="item_type"),
]


class ProgramToggle(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    enabled: bool = False
    # share of base capital the program adds; None means the default rate
    rate: Optional[float] = Field(default=None, ge=0, le=1)


class RetirementPrograms(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    ppk: ProgramToggle = Field(default_factory=ProgramToggle)
    ikze: ProgramToggle = Field(default_factory=ProgramToggle)


class SimulationInputs(BaseModel):
    """Snapshot of everything the engine needs about one person."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    age: int = Field(ge=16, le=80)
    sex: Sex
    monthly_gross: float = Field(ge=0)
    work_start_year: int = Field(ge=1950, le=2100)
    work_end_year: int = Field(ge=1950, le=2100)
    account_balance: float = Field(default=0.0, ge=0)
    sub_account_balance: float = Field(default=0.0, ge=0)
    include_sick_leave: bool = False
    contract_type: ContractType = ContractType.UOP
    retirement_programs: RetirementPrograms = Field(default_factory=RetirementPrograms)
    timeline: List[TimelineItem] = Field(default_factory=list)
    custom_salaries: Dict[int, float] = Field(default_factory=dict)

    @model_validator(mode="after")
    def ensure_validity(self) -> "SimulationInputs":
        if self.work_end_year <= self.work_start_year:
            raise ValueError("work_end_year must be greater than work_start_year")
        if any(value < 0 for value in self.custom_salaries.values()):
            raise ValueError("custom_salaries must not contain negative amounts")
        return self

    @property
    def employment_periods(self) -> List[EmploymentPeriod]:
        return [item for item in self.timeline if isinstance(item, EmploymentPeriod)]

    @property
    def gap_periods(self) -> List[EmploymentGapPeriod]:
        return [item for item in self.timeline if isinstance(item, EmploymentGapPeriod)]

    @property
    def sick_leave_events(self) -> List[SickLeaveEvent]:
        return [item for item in self.timeline if isinstance(item, SickLeaveEvent)]
