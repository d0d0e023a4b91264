"""Static rate tables, engine constants and Flask settings."""

from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

# Pension contribution rate per contract type (share of gross pay that lands
# on the pension account). UOP matches the statutory 19.52%.
CONTRACT_RATES: Dict[str, float] = {
    "UOP": 0.1952,
    "UOZ": 0.155,
    "B2B": 0.08,
}

# Share of a gap's months that is lost for contributions.
GAP_PENALTIES: Dict[str, float] = {
    "PARENTAL_LEAVE": 0.3,
    "UNPAID_LEAVE": 1.0,
    "UNEMPLOYMENT": 1.0,
}

# Sick pay is 70% of salary, so the covered months lose 30%.
SICK_LEAVE_PENALTY = 0.3

MAIN_ACCOUNT_SPLIT = 0.7616
SUB_ACCOUNT_SPLIT = 0.2384

# Statistical short sick leave, applied uniformly when requested.
SICK_LEAVE_STATS: Dict[str, Dict[str, float]] = {
    "M": {"avg_days_per_year": 14, "reduction_coefficient": 0.985},
    "F": {"avg_days_per_year": 18, "reduction_coefficient": 0.978},
}

PROGRAM_RATES: Dict[str, float] = {
    "ppk": 0.10,
    "ikze": 0.10,
}
PROGRAM_PAYOUT_MONTHS = 20 * 12

DEFAULT_INFLATION = 1.025
MIN_DIVISOR_MONTHS = 12
MONTHS_PER_YEAR_OF_AGE = 12

# Used only when no divisor table is available at all.
FALLBACK_DIVISORS: Dict[str, Dict[str, int]] = {
    "F": {"age": 60, "months": 277},
    "M": {"age": 65, "months": 217},
}

MAX_ADDITIONAL_YEARS = 15
DEFERRAL_YEARS = tuple(range(1, MAX_ADDITIONAL_YEARS + 1))

AVERAGE_PENSION_BASE_YEAR = 2024
AVERAGE_PENSION_BASE = 3855.23

PROGNOSIS_VARIANTS = ("moderate", "pessimistic", "optimistic")
DEFAULT_PROGNOSIS_VARIANT = "moderate"

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Read Flask settings from the environment."""
    env = os.environ if environ is None else environ

    origins = env.get("PENSION_CORS_ORIGINS")
    variant = env.get("PENSION_PROGNOSIS_VARIANT", DEFAULT_PROGNOSIS_VARIANT)
    if variant not in PROGNOSIS_VARIANTS:
        raise ValueError(
            f"PENSION_PROGNOSIS_VARIANT must be one of {', '.join(PROGNOSIS_VARIANTS)}"
        )

    return {
        "CORS_ORIGINS": (
            [origin.strip() for origin in origins.split(",") if origin.strip()]
            if origins
            else list(DEFAULT_CORS_ORIGINS)
        ),
        "PROGNOSIS_VARIANT": variant,
        "LOG_LEVEL": env.get("PENSION_LOG_LEVEL", "INFO").upper(),
    }
