"""Pytest configuration for test isolation.

Every analytics component reads "today" through an injected clock, so tests
pin it to ``tests.helpers.records.TODAY`` and never depend on the wall clock. Settings are read
from the environment by the CLI; the autouse fixture below clears the
relevant variables so a developer's local ``.env`` or shell cannot leak in.
"""

from __future__ import annotations

from pathlib import Path

import pytest

_ENV_VARS = (
    "DATABASE_URL",
    "SPENDING_ANALYSIS_LOG_LEVEL",
    "SPENDING_ANALYSIS_PATTERN_MONTHS",
    "SPENDING_ANALYSIS_TREND_MONTHS",
    "SPENDING_ANALYSIS_FORECAST_MONTHS",
)


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run each test from its own directory with no analytics settings in the env.

    The CLI loads ``.env`` from the current working directory, so switching to
    ``tmp_path`` keeps a repository-level ``.env`` out of the picture.
    """

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

