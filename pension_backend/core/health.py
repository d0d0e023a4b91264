"""Health-check payload for the API."""

from pension_backend.domain.tables import ReferenceTables
from pension_backend.schemas.simulation import HealthResponse


def get_health_status(tables: ReferenceTables) -> HealthResponse:
    """Report which prognosis is loaded and what the tables cover."""
    return HealthResponse(
        status="ok",
        prognosis_variant=tables.variant,
        coverage=tables.coverage(),
    )
