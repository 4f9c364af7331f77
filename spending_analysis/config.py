"""Environment-driven settings for entrypoints.

Library code never reads the environment; only the CLI calls
:func:`load_settings` (after loading ``.env`` via ``python-dotenv``) and passes
the resolved values down explicitly.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

_DEFAULT_PATTERN_MONTHS = 6
_DEFAULT_TREND_MONTHS = 12
_DEFAULT_FORECAST_MONTHS = 3


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str | None = None
    log_level: str | None = None
    pattern_months: int = _DEFAULT_PATTERN_MONTHS
    trend_months: int = _DEFAULT_TREND_MONTHS
    forecast_months: int = _DEFAULT_FORECAST_MONTHS


def _positive_int(raw: str | None, default: int) -> int:
    """Parse a positive integer, falling back to ``default`` on anything else."""

    try:
        value = int(raw) if raw else None
    except ValueError:
        value = None
    return value if value is not None and value > 0 else default


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        database_url=env.get("DATABASE_URL") or None,
        log_level=env.get("SPENDING_ANALYSIS_LOG_LEVEL") or None,
        pattern_months=_positive_int(
            env.get("SPENDING_ANALYSIS_PATTERN_MONTHS"), _DEFAULT_PATTERN_MONTHS
        ),
        trend_months=_positive_int(
            env.get("SPENDING_ANALYSIS_TREND_MONTHS"), _DEFAULT_TREND_MONTHS
        ),
        forecast_months=_positive_int(
            env.get("SPENDING_ANALYSIS_FORECAST_MONTHS"), _DEFAULT_FORECAST_MONTHS
        ),
    )


__all__ = ["Settings", "load_settings"]
