"""Loads the bundled reference data into ReferenceTables."""

from __future__ import annotations

import logging
from functools import lru_cache
from importlib import resources
from typing import Dict, Tuple

import pandas as pd

from pension_backend.config import (
    AVERAGE_PENSION_BASE,
    AVERAGE_PENSION_BASE_YEAR,
    PROGNOSIS_VARIANTS,
    SICK_LEAVE_STATS,
)
from pension_backend.domain.prognosis import (
    cpi_by_year,
    numeric_columns,
    parse_life_duration_csv,
    parse_prognosis_csv,
    project_average_pension,
    read_semicolon_table,
    wage_growth_by_year,
)
from pension_backend.domain.tables import ReferenceTables

logger = logging.getLogger(__name__)

DATA_PACKAGE = "pension_backend.data"


def read_data_file(name: str) -> str:
    return resources.files(DATA_PACKAGE).joinpath(name).read_text(encoding="utf-8")


def parse_historical_csv(text: str) -> Tuple[Dict[int, float], Dict[int, float]]:
    """Return (wage growth, CPI) multipliers from ``year;wage_growth;inflation`` rows.

    Either index may be blank for a year; blank cells are left out.
    """
    numbers = numeric_columns(
        read_semicolon_table(text), ("year", "wage_growth", "inflation"), required=("year",)
    )

    wage_growth: Dict[int, float] = {}
    cpi: Dict[int, float] = {}
    for record in numbers.to_dict("records"):
        year = int(record["year"])
        if not pd.isna(record["wage_growth"]):
            wage_growth[year] = float(record["wage_growth"]) / 100
        if not pd.isna(record["inflation"]):
            cpi[year] = float(record["inflation"]) / 100
    return wage_growth, cpi


@lru_cache(maxsize=None)
def load_reference_tables(variant: str = "moderate") -> ReferenceTables:
    """Build the tables for one prognosis variant from the bundled files.

    Historical series sit underneath the forecast; forecast years win where
    both define a value.
    """
    if variant not in PROGNOSIS_VARIANTS:
        raise ValueError(
            f"unknown prognosis variant {variant!r}, expected one of {', '.join(PROGNOSIS_VARIANTS)}"
        )

    rows = parse_prognosis_csv(read_data_file(f"prognosis_{variant}.csv"))
    historical_wages, historical_cpi = parse_historical_csv(read_data_file("historical.csv"))

    wage_growth = {**historical_wages, **wage_growth_by_year(rows)}
    cpi = {**historical_cpi, **cpi_by_year(rows)}

    life_duration = parse_life_duration_csv(read_data_file("life_duration.csv"))
    # Life-duration data is unisex; both sexes share it.
    divisors = {sex: life_duration for sex in ("M", "F")}

    average_pension = project_average_pension(
        rows,
        base_year=AVERAGE_PENSION_BASE_YEAR,
        base_pension=AVERAGE_PENSION_BASE,
        first_year=rows[0].year if rows else AVERAGE_PENSION_BASE_YEAR,
    )

    logger.info(
        "Loaded %s prognosis: wage growth %s-%s, %d divisor ages",
        variant,
        min(wage_growth),
        max(wage_growth),
        len(life_duration),
    )

    return ReferenceTables(
        wage_growth=wage_growth,
        cpi=cpi,
        annuity_divisors=divisors,
        average_pension=average_pension,
        sick_leave=SICK_LEAVE_STATS,
        variant=variant,
    )
