from __future__ import annotations

from typing import Callable

import pytest
from flask.testing import FlaskClient

from pension_backend.app import create_app
from pension_backend.domain.tables import ReferenceTables


def linear_divisors(first_age: int = 40, last_age: int = 80) -> dict:
    """300 months at 65, 12 fewer per year of age."""
    by_age = {age: {0: 600.0 - 12 * (age - first_age)} for age in range(first_age, last_age + 1)}
    return {"M": by_age, "F": by_age}


@pytest.fixture()
def divisors() -> dict:
    return linear_divisors()


@pytest.fixture()
def make_tables() -> Callable[..., ReferenceTables]:
    def _make(
        valorization: float = 1.0,
        inflation: float = 1.0,
        first_year: int = 1990,
        last_year: int = 2150,
        average_pension: dict | None = None,
    ) -> ReferenceTables:
        years = range(first_year, last_year + 1)
        return ReferenceTables(
            wage_growth={year: valorization for year in years},
            cpi={year: inflation for year in years},
            annuity_divisors=linear_divisors(),
            average_pension=average_pension or {},
        )

    return _make


@pytest.fixture()
def flat_tables(make_tables) -> ReferenceTables:
    return make_tables()


@pytest.fixture()
def client() -> FlaskClient:
    app = create_app({"TESTING": True})
    with app.test_client() as test_client:
        yield test_client
