"""Data contracts for pension simulations."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from pension_backend.config import DEFAULT_PROGNOSIS_VARIANT
from pension_backend.models import ContractType, SimulationInputs


class SalaryPathEntry(BaseModel):
    """One calendar year of the normalized career."""

    model_config = ConfigDict(frozen=True)

    year: int
    age: int
    monthly_gross: float = Field(..., ge=0)
    annual_gross: float = Field(..., ge=0)
    effective_salary: float = Field(..., ge=0, description="Monthly gross after gap and sick-leave reductions.")
    reduction_multiplier: float = Field(1.0, ge=0, le=1)
    contract_type: ContractType = ContractType.UOP
    is_historical: bool = False
    is_current_year: bool = False
    is_future: bool = False


class CapitalEntry(BaseModel):
    """Account balances for one year, before and after valorization and contributions."""

    model_config = ConfigDict(frozen=True)

    year: int
    age: int
    salary: float
    contribution_rate: float
    contributions: float
    valorization_rate: float
    valorization: float
    main_account_before: float
    main_account_after: float
    sub_account_before: float
    sub_account_after: float
    total_capital: float


class DeferralScenario(BaseModel):
    model_config = ConfigDict(frozen=True)

    additional_years: int = Field(..., ge=1)
    retirement_year: int
    retirement_age: int
    extra_capital: float
    total_capital: float
    annuity_divisor: float
    nominal_pension: float
    real_pension: float
    increase_vs_base: float
    percent_increase: Optional[float] = Field(
        None, description="None when the base pension is zero."
    )


class PensionBreakdown(BaseModel):
    nominal_pension: float
    real_pension: float
    total_capital: float


class ProgramsResult(BaseModel):
    ppk_capital: float = 0.0
    ikze_capital: float = 0.0
    ppk_monthly_pension: float = 0.0
    ikze_monthly_pension: float = 0.0
    total_capital: float = 0.0
    total_monthly_pension: float = 0.0


class SimulationResults(BaseModel):
    nominal_pension: float
    real_pension: float
    replacement_rate: Optional[float] = None
    retirement_age: int
    retirement_year: int
    total_capital: float
    total_capital_with_programs: float
    annuity_divisor: float

    avg_pension_in_retirement_year: Optional[float] = None
    difference_vs_average: Optional[float] = None
    difference_vs_expected: Optional[float] = None

    without_sick_leave: PensionBreakdown
    with_sick_leave: PensionBreakdown
    sick_leave_difference: float

    programs: ProgramsResult
    total_nominal_pension_with_programs: float
    total_real_pension_with_programs: float

    deferrals: List[DeferralScenario] = Field(default_factory=list)
    years_needed: Optional[int] = None

    capital_path: List[CapitalEntry] = Field(default_factory=list)
    salary_path: List[SalaryPathEntry] = Field(default_factory=list)


class SimulationRequest(BaseModel):
    """Body of ``POST /api/calc/pension``."""

    model_config = ConfigDict(extra="forbid")

    inputs: SimulationInputs
    expected_pension: Optional[float] = Field(None, ge=0)
    prognosis_variant: str = Field(
        DEFAULT_PROGNOSIS_VARIANT, pattern="^(moderate|pessimistic|optimistic)$"
    )
    current_year: Optional[int] = Field(None, ge=1950, le=2100)


class YearsNeededResponse(BaseModel):
    years_needed: Optional[int] = None
    real_pension: float
    expected_pension: Optional[float] = None


class HealthResponse(BaseModel):
    status: str
    prognosis_variant: str
    coverage: dict
