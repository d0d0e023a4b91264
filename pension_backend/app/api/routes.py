"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from pension_backend.core.health import get_health_status
from pension_backend.core.simulation import run_simulation
from pension_backend.domain.reference_data import load_reference_tables
from pension_backend.domain.tables import MissingTableEntryError
from pension_backend.schemas.simulation import (
    SimulationRequest,
    SimulationResults,
    YearsNeededResponse,
)

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    errors = exc.errors(include_url=False, include_context=False)
    return jsonify({"detail": errors}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(MissingTableEntryError)
def _handle_missing_table_entry(exc: MissingTableEntryError):
    """The projection cannot run without the data it needs; say which entry is missing."""
    logger.warning("Projection aborted: %s", exc)
    return (
        jsonify({"error": str(exc), "table": exc.table, "key": str(exc.key)}),
        HTTPStatus.UNPROCESSABLE_ENTITY,
    )


def _simulate(raw_payload: Any) -> tuple[SimulationRequest, SimulationResults]:
    if isinstance(raw_payload, dict):
        raw_payload.setdefault("prognosis_variant", current_app.config["PROGNOSIS_VARIANT"])
    payload = SimulationRequest.model_validate(raw_payload)
    tables = load_reference_tables(payload.prognosis_variant)
    results = run_simulation(
        payload.inputs,
        tables,
        expected_pension=payload.expected_pension,
        current_year=payload.current_year,
    )
    return payload, results


@api_bp.get("/health")
def health() -> Any:
    """Health-check endpoint."""
    tables = load_reference_tables(current_app.config["PROGNOSIS_VARIANT"])
    return jsonify(get_health_status(tables).model_dump(mode="json"))


@api_bp.post("/calc/pension")
def pension() -> Any:
    """Full projection: pension, breakdowns, deferral scenarios and paths."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    _, results = _simulate(raw_payload)
    return jsonify(results.model_dump(mode="json"))


@api_bp.post("/calc/years-needed")
def years_needed() -> Any:
    """Only the extra working years needed to reach the expected pension."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload, results = _simulate(raw_payload)
    response = YearsNeededResponse(
        years_needed=results.years_needed,
        real_pension=results.real_pension,
        expected_pension=payload.expected_pension,
    )
    return jsonify(response.model_dump(mode="json"))
