"""Supplementary capital from the optional retirement savings programs (PPK, IKZE)."""

from __future__ import annotations

from pension_backend.config import PROGRAM_PAYOUT_MONTHS, PROGRAM_RATES
from pension_backend.models import ProgramToggle, RetirementPrograms
from pension_backend.schemas.simulation import ProgramsResult


def capital_to_monthly_pension(capital: float, payout_months: int = PROGRAM_PAYOUT_MONTHS) -> float:
    """Program capital paid out evenly over a fixed window (20 years by default)."""
    return capital / payout_months


def program_capital(base_capital: float, toggle: ProgramToggle, program: str) -> float:
    if not toggle.enabled:
        return 0.0
    rate = toggle.rate if toggle.rate is not None else PROGRAM_RATES[program]
    return base_capital * rate


def calculate_program_boost(base_capital: float, programs: RetirementPrograms) -> ProgramsResult:
    """Each enabled program adds a flat share of the base capital (10% unless overridden)."""
    ppk_capital = program_capital(base_capital, programs.ppk, "ppk")
    ikze_capital = program_capital(base_capital, programs.ikze, "ikze")

    ppk_monthly = capital_to_monthly_pension(ppk_capital)
    ikze_monthly = capital_to_monthly_pension(ikze_capital)

    return ProgramsResult(
        ppk_capital=ppk_capital,
        ikze_capital=ikze_capital,
        ppk_monthly_pension=ppk_monthly,
        ikze_monthly_pension=ikze_monthly,
        total_capital=ppk_capital + ikze_capital,
        total_monthly_pension=ppk_monthly + ikze_monthly,
    )


def boosted_capital(base_capital: float, programs: RetirementPrograms) -> float:
    return base_capital + calculate_program_boost(base_capital, programs).total_capital
