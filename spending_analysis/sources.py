"""Collaborator contracts and in-memory implementations.

The analytics core reads transactions and categories through two narrow,
read-only interfaces. Components receive them explicitly at construction
time; there is no module-level repository instance.

``fetch_transactions`` / ``fetch_category_names`` are the only places the core
touches a collaborator. Any exception raised there is re-raised as
:class:`~spending_analysis.errors.DataUnavailableError` so callers see a single
failure type, and nothing is retried.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import Protocol, runtime_checkable

from .errors import DataUnavailableError
from .logging_setup import get_logger
from .models import CategoryRecord, DateRange, TransactionRecord

_logger = get_logger("spending_analysis.sources")


@runtime_checkable
class TransactionSource(Protocol):
    def get_by_date_range(self, start: date, end: date) -> list[TransactionRecord]:
        """Return transactions dated within ``[start, end]`` (inclusive, any order).

        Must return an empty list, not raise, when nothing matches.
        """
        ...


@runtime_checkable
class CategoryDirectory(Protocol):
    def get_all(self) -> list[CategoryRecord]: ...


class InMemoryTransactionSource:
    """Transaction source over a fixed, immutable snapshot of records."""

    def __init__(self, records: Iterable[TransactionRecord] = ()) -> None:
        self._records: tuple[TransactionRecord, ...] = tuple(records)

    def __len__(self) -> int:
        return len(self._records)

    def get_by_date_range(self, start: date, end: date) -> list[TransactionRecord]:
        return [r for r in self._records if start <= r.date <= end]


class InMemoryCategoryDirectory:
    def __init__(self, categories: Iterable[CategoryRecord] = ()) -> None:
        self._categories: tuple[CategoryRecord, ...] = tuple(categories)

    def get_all(self) -> list[CategoryRecord]:
        return list(self._categories)


def fetch_transactions(source: TransactionSource, span: DateRange) -> list[TransactionRecord]:
    """Read one snapshot of ``span`` from ``source``."""

    try:
        return list(source.get_by_date_range(span.start, span.end))
    except DataUnavailableError:
        raise
    except Exception as e:
        _logger.error(
            "fetch_transactions:failed start=%s end=%s error=%s",
            span.start.isoformat(),
            span.end.isoformat(),
            e.__class__.__name__,
        )
        raise DataUnavailableError(
            f"transaction source failed for {span.start.isoformat()}..{span.end.isoformat()}: {e}"
        ) from e


def fetch_categories(directory: CategoryDirectory) -> list[CategoryRecord]:
    try:
        return list(directory.get_all())
    except DataUnavailableError:
        raise
    except Exception as e:
        _logger.error("fetch_categories:failed error=%s", e.__class__.__name__)
        raise DataUnavailableError(f"category directory failed: {e}") from e


def fetch_category_names(directory: CategoryDirectory) -> dict[int, str]:
    """Return an ``id -> name`` lookup built from one ``get_all()`` call."""

    return {c.id: c.name for c in fetch_categories(directory)}


__all__ = [
    "CategoryDirectory",
    "InMemoryCategoryDirectory",
    "InMemoryTransactionSource",
    "TransactionSource",
    "fetch_categories",
    "fetch_category_names",
    "fetch_transactions",
]
