"""Parsing of the semicolon-delimited macroeconomic prognosis and life-duration data."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

import pandas as pd

from pension_backend.domain.tables import PrognosisFormatError

PROGNOSIS_COLUMNS = (
    "year",
    "unemployment",
    "inflation",
    "pensioners_inflation",
    "wage_growth",
    "gdp_growth",
    "contribution_collection",
)


@dataclass(frozen=True)
class PrognosisRow:
    """One forecast year. Index columns are multipliers (1.034 = +3.4%)."""

    year: int
    unemployment: float
    inflation: float
    pensioners_inflation: float
    wage_growth: float
    gdp_growth: float
    contribution_collection: float


def read_semicolon_table(text: str) -> pd.DataFrame:
    """Read ``;``-separated data with decimal commas and ``#`` comment lines."""
    try:
        frame = pd.read_csv(
            io.StringIO(text),
            sep=";",
            decimal=",",
            comment="#",
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError as exc:
        raise PrognosisFormatError(["no header line found"]) from exc
    except pd.errors.ParserError as exc:
        raise PrognosisFormatError([str(exc)]) from exc
    frame.columns = [str(column).strip() for column in frame.columns]
    return frame


def _numeric(column: pd.Series) -> pd.Series:
    # a single bad cell leaves the whole column as text
    if not pd.api.types.is_numeric_dtype(column):
        column = column.map(
            lambda value: value.strip().replace(",", ".") if isinstance(value, str) else value
        )
    return pd.to_numeric(column, errors="coerce")


def numeric_columns(
    frame: pd.DataFrame,
    columns: Sequence[str],
    *,
    required: Sequence[str] = (),
) -> pd.DataFrame:
    """Convert ``columns`` to numbers, reporting every row with a bad value.

    Empty cells are allowed except in ``required`` columns.
    """
    missing = [column for column in columns if column not in frame.columns]
    if missing:
        raise PrognosisFormatError([f"missing column(s): {', '.join(missing)}"])

    raw = frame[list(columns)]
    numbers = raw.apply(_numeric)

    not_a_number = numbers.isna() & raw.notna()
    empty_required = raw[list(required)].isna() if required else None

    errors: List[str] = []
    for position, index in enumerate(numbers.index, start=1):
        bad = [column for column in columns if not_a_number.at[index, column]]
        if empty_required is not None:
            bad += [column for column in required if empty_required.at[index, column]]
        if bad:
            errors.append(f"row {position}: missing or non-numeric {', '.join(sorted(set(bad)))}")

    if errors:
        raise PrognosisFormatError(errors)
    return numbers


def parse_prognosis_csv(text: str) -> List[PrognosisRow]:
    """Parse prognosis text; every value column is a percentage divided by 100."""
    numbers = numeric_columns(
        read_semicolon_table(text), PROGNOSIS_COLUMNS, required=PROGNOSIS_COLUMNS
    )

    rows = [
        PrognosisRow(
            int(record["year"]),
            *(float(record[column]) / 100 for column in PROGNOSIS_COLUMNS[1:]),
        )
        for record in numbers.to_dict("records")
    ]
    return sorted(rows, key=lambda row: row.year)


def parse_life_duration_csv(text: str) -> Dict[int, Dict[int, float]]:
    """Parse ``age;0;1;...;11`` rows of remaining life in months."""
    frame = read_semicolon_table(text)
    month_columns = [column for column in frame.columns if column != "age"][:12]
    numbers = numeric_columns(frame, ["age", *month_columns], required=["age"])

    table: Dict[int, Dict[int, float]] = {}
    for record in numbers.to_dict("records"):
        by_month = {
            int(column): float(record[column])
            for column in month_columns
            if not pd.isna(record[column])
        }
        if by_month:
            table[int(record["age"])] = by_month
    return table


def wage_growth_by_year(rows: Iterable[PrognosisRow]) -> Dict[int, float]:
    return {row.year: row.wage_growth for row in rows}


def cpi_by_year(rows: Iterable[PrognosisRow]) -> Dict[int, float]:
    return {row.year: row.inflation for row in rows}


def project_average_pension(
    rows: Iterable[PrognosisRow],
    base_year: int,
    base_pension: float,
    first_year: int,
) -> Dict[int, float]:
    """Average pension per forecast year, scaled from ``base_year`` by wage growth.

    Years before the base are scaled backwards. A year missing from the
    forecast reuses the last known growth.
    """
    rows = sorted(rows, key=lambda row: row.year)
    growth = {row.year: row.wage_growth for row in rows}
    if not rows:
        return {}

    result: Dict[int, float] = {}
    last_year = rows[-1].year

    value = base_pension
    last_growth = 1.0
    for year in range(base_year + 1, last_year + 1):
        last_growth = growth.get(year, last_growth)
        value *= last_growth
        result[year] = round(value, 2)

    result[base_year] = round(base_pension, 2)

    value = base_pension
    for year in range(base_year, first_year, -1):
        value /= growth.get(year, 1.0)
        result[year - 1] = round(value, 2)

    return {
        year: amount
        for year, amount in sorted(result.items())
        if first_year <= year <= last_year
    }
