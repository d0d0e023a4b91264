"""End-to-end checks of the HTTP API against the bundled prognosis."""

from copy import deepcopy
from http import HTTPStatus

import pytest

PAYLOAD = {
    "inputs": {
        "age": 30,
        "sex": "F",
        "monthly_gross": 7000,
        "work_start_year": 2015,
        "work_end_year": 2060,
        "timeline": [
            {"item_type": "employment", "start_year": 2015, "end_year": 2060, "monthly_gross": 7000},
            {"item_type": "gap", "kind": "PARENTAL_LEAVE", "start_year": 2028, "duration_months": 12},
        ],
    },
    "current_year": 2025,
}


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == HTTPStatus.OK
    body = response.get_json()
    assert body["status"] == "ok"
    assert body["prognosis_variant"] == "moderate"
    assert body["coverage"]["divisor_ages"] == [30, 90]


def test_pension_projection(client):
    response = client.post("/api/calc/pension", json=PAYLOAD)

    assert response.status_code == HTTPStatus.OK
    body = response.get_json()
    assert body["retirement_year"] == 2060
    assert body["retirement_age"] == 65
    assert body["nominal_pension"] > body["real_pension"] > 0
    assert len(body["deferrals"]) == 15
    assert len(body["salary_path"]) == 46
    assert body["years_needed"] is None


@pytest.mark.parametrize("variant", ["pessimistic", "optimistic"])
def test_prognosis_variant_changes_the_result(client, variant):
    baseline = client.post("/api/calc/pension", json=PAYLOAD).get_json()
    payload = deepcopy(PAYLOAD)
    payload["prognosis_variant"] = variant

    response = client.post("/api/calc/pension", json=payload)

    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["nominal_pension"] != baseline["nominal_pension"]


def test_invalid_payload_is_rejected(client):
    payload = deepcopy(PAYLOAD)
    payload["inputs"]["sex"] = "X"

    response = client.post("/api/calc/pension", json=payload)

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert "detail" in response.get_json()


def test_end_year_must_follow_start_year(client):
    payload = deepcopy(PAYLOAD)
    payload["inputs"]["work_end_year"] = 2015

    response = client.post("/api/calc/pension", json=payload)

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_unknown_fields_are_rejected(client):
    payload = deepcopy(PAYLOAD)
    payload["unexpected"] = True

    response = client.post("/api/calc/pension", json=payload)

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_projection_beyond_the_prognosis_reports_the_missing_entry(client):
    payload = deepcopy(PAYLOAD)
    payload["inputs"]["timeline"] = []
    payload["inputs"]["work_end_year"] = 2090

    response = client.post("/api/calc/pension", json=payload)

    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    body = response.get_json()
    assert body["table"] == "wage growth"
    assert body["key"] == "2081"


def test_years_needed_endpoint(client):
    payload = deepcopy(PAYLOAD)
    payload["expected_pension"] = 1

    response = client.post("/api/calc/years-needed", json=payload)

    assert response.status_code == HTTPStatus.OK
    body = response.get_json()
    assert body["years_needed"] == 0
    assert body["expected_pension"] == 1
    assert body["real_pension"] > 0


def test_unreachable_expected_pension(client):
    payload = deepcopy(PAYLOAD)
    payload["expected_pension"] = 1_000_000

    response = client.post("/api/calc/years-needed", json=payload)

    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["years_needed"] is None
