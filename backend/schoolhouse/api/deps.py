"""Environment configuration for the API."""

from __future__ import annotations

import logging
import os

from pydantic import ValidationError

from schoolhouse.models.year import TuitionPolicy

logger = logging.getLogger(__name__)

_POLICY_ENV_VARS: dict[str, str] = {
    "part_time_factor": "SCHOOLHOUSE_PART_TIME_FACTOR",
    "sibling_factor": "SCHOOLHOUSE_SIBLING_FACTOR",
    "max_year_over_year_change": "SCHOOLHOUSE_MAX_YEAR_OVER_YEAR_CHANGE",
    "inflation_increase": "SCHOOLHOUSE_INFLATION_INCREASE",
    "steepness": "SCHOOLHOUSE_STEEPNESS",
}

DEFAULT_CORS_ORIGINS = ["http://localhost:3000"]


def load_policy() -> TuitionPolicy:
    """Build the TuitionPolicy from SCHOOLHOUSE_* environment variables.

    Unset variables keep the policy defaults. Raises ValueError naming the
    variable when a value is not a number or is out of range.
    """
    overrides: dict[str, float] = {}
    for field_name, env_var in _POLICY_ENV_VARS.items():
        raw = os.environ.get(env_var, "").strip()
        if not raw:
            continue
        try:
            overrides[field_name] = float(raw)
        except ValueError as exc:
            msg = f"{env_var} must be a number, got {raw!r}"
            raise ValueError(msg) from exc

    try:
        policy = TuitionPolicy(**overrides)
    except ValidationError as exc:
        names = ", ".join(_POLICY_ENV_VARS[str(e["loc"][0])] for e in exc.errors())
        msg = f"Invalid tuition policy setting in {names}"
        raise ValueError(msg) from exc

    if overrides:
        logger.info("Tuition policy overrides from environment: %s", overrides)
    return policy


def cors_origins() -> list[str]:
    """Allowed CORS origins from SCHOOLHOUSE_CORS_ORIGINS (comma-separated)."""
    raw = os.environ.get("SCHOOLHOUSE_CORS_ORIGINS", "")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or list(DEFAULT_CORS_ORIGINS)
