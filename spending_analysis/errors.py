"""Exception types raised by the analytics core.

Insufficient history is never an error: it shows up as empty collections,
``irregular`` periodicity or floor-level confidence in the returned values.
"""

from __future__ import annotations

from datetime import MAXYEAR


class AnalyticsError(Exception):
    """Base class for errors raised by ``spending_analysis``."""


class DataUnavailableError(AnalyticsError, RuntimeError):
    """A collaborator (transaction source or category directory) failed.

    The original exception is chained as ``__cause__``. Calls are never
    retried and partial results are never returned.
    """


class InvalidRangeError(AnalyticsError, ValueError):
    """Arguments describe an empty or inverted range (rejected before any fetch)."""


def require_positive(name: str, value: int) -> int:
    """Return ``value`` when it is a positive ``int``; raise otherwise."""

    # Booleans are ints; disallow them explicitly.
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidRangeError(f"{name} must be a positive integer, got {value!r}")
    return value


def require_year(value: int) -> int:
    """Return ``value`` when it is a calendar year ``datetime.date`` can represent."""

    require_positive("year", value)
    if value > MAXYEAR:
        raise InvalidRangeError(f"year must be in 1..{MAXYEAR}, got {value!r}")
    return value


__all__ = [
    "AnalyticsError",
    "DataUnavailableError",
    "InvalidRangeError",
    "require_positive",
    "require_year",
]
