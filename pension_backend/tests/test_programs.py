from math import isclose

from pension_backend.domain.programs import boosted_capital, calculate_program_boost
from pension_backend.models import ProgramToggle, RetirementPrograms


def programs(ppk: bool, ikze: bool) -> RetirementPrograms:
    return RetirementPrograms(ppk=ProgramToggle(enabled=ppk), ikze=ProgramToggle(enabled=ikze))


def test_both_programs_add_twenty_percent():
    result = calculate_program_boost(100_000, programs(True, True))

    assert isclose(result.ppk_capital, 10_000)
    assert isclose(result.ikze_capital, 10_000)
    assert isclose(result.total_capital, 20_000)
    assert isclose(result.ppk_monthly_pension, 10_000 / 240)
    assert isclose(result.total_monthly_pension, 20_000 / 240)
    assert isclose(boosted_capital(100_000, programs(True, True)), 120_000)


def test_disabled_programs_add_nothing():
    result = calculate_program_boost(100_000, RetirementPrograms())

    assert result.total_capital == 0
    assert result.total_monthly_pension == 0
    assert boosted_capital(100_000, RetirementPrograms()) == 100_000


def test_single_program():
    result = calculate_program_boost(50_000, programs(False, True))

    assert result.ppk_capital == 0
    assert isclose(result.ikze_capital, 5_000)
    assert isclose(result.total_monthly_pension, 5_000 / 240)


def test_program_rate_can_be_overridden():
    custom = RetirementPrograms(
        ppk=ProgramToggle(enabled=True, rate=0.05),
        ikze=ProgramToggle(enabled=False, rate=0.5),
    )

    result = calculate_program_boost(100_000, custom)

    assert isclose(result.ppk_capital, 5_000)
    assert result.ikze_capital == 0
    assert isclose(boosted_capital(100_000, custom), 105_000)
