"""CSV ingestion into immutable in-memory collaborators.

Transactions CSV header (exact keys expected; extra columns are ignored):
``id, date, amount, type, category_id, description``

- ``date``: ISO ``YYYY-MM-DD``
- ``amount``: plain decimal, signed or magnitude
- ``type``: a :class:`~spending_analysis.models.TransactionType` value,
  case-insensitive (``income``, ``Fixed Expense`` and ``FIXED_EXPENSE`` all work)
- ``category_id`` / ``description``: optional; blank means missing

Categories CSV header: ``id, name``.
"""

from __future__ import annotations

import csv
import datetime as dt
from collections.abc import Iterable, Iterator, Mapping
from os import PathLike
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import CategoryRecord, TransactionRecord, TransactionType
from .sources import InMemoryCategoryDirectory, InMemoryTransactionSource

TRANSACTION_HEADERS: frozenset[str] = frozenset({"id", "date", "amount", "type"})
CATEGORY_HEADERS: frozenset[str] = frozenset({"id", "name"})


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class TransactionRow(BaseModel):
    """Validated shape of one transactions CSV row."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    id: str
    date: dt.date
    amount: float
    transaction_type: TransactionType = Field(alias="type")
    category_id: int | None = None
    description: str | None = None

    @field_validator("id")
    @classmethod
    def _id_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("id must be non-empty")
        return v

    @field_validator("transaction_type", mode="before")
    @classmethod
    def _normalize_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return "_".join(v.strip().upper().replace("-", " ").split())
        return v

    @field_validator("category_id", "description", mode="before")
    @classmethod
    def _optional(cls, v: Any) -> Any:
        return _blank_to_none(v)

    def to_record(self) -> TransactionRecord:
        return TransactionRecord(
            id=int(self.id) if self.id.isdigit() else self.id,
            date=self.date,
            amount=self.amount,
            transaction_type=self.transaction_type,
            category_id=self.category_id,
            description=self.description,
        )


class CategoryRow(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    id: int
    name: str = Field(min_length=1)

    def to_record(self) -> CategoryRecord:
        return CategoryRecord(id=self.id, name=self.name)


def _check_headers(fieldnames: Iterable[str] | None, required: frozenset[str], path: str) -> None:
    if fieldnames is None:
        raise csv.Error(f"CSV appears to have no header row: {path}")
    missing = sorted(required - {h.strip() for h in fieldnames})
    if missing:
        raise csv.Error(f"CSV header mismatch in {path}. Missing columns: " + ", ".join(missing))


def _strip_keys(row: Mapping[str | None, Any]) -> dict[str, Any]:
    return {k.strip(): v for k, v in row.items() if k is not None}


def parse_transaction_rows(
    rows: Iterable[Mapping[str | None, Any]], *, origin: str = "<rows>"
) -> Iterator[TransactionRecord]:
    """Validate CSV-like rows, raising ``ValueError`` with the data line number on failure."""

    # Line 1 is the header.
    for line_no, row in enumerate(rows, start=2):
        try:
            yield TransactionRow.model_validate(_strip_keys(row)).to_record()
        except ValidationError as e:
            raise ValueError(f"{origin}:{line_no}: invalid transaction row: {e}") from e


def load_transactions_csv(csv_path: str | PathLike[str]) -> list[TransactionRecord]:
    p = Path(csv_path)
    with p.open(encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        _check_headers(reader.fieldnames, TRANSACTION_HEADERS, str(p))
        return list(parse_transaction_rows(reader, origin=str(p)))


def load_categories_csv(csv_path: str | PathLike[str]) -> list[CategoryRecord]:
    p = Path(csv_path)
    with p.open(encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        _check_headers(reader.fieldnames, CATEGORY_HEADERS, str(p))
        out: list[CategoryRecord] = []
        for line_no, row in enumerate(reader, start=2):
            try:
                out.append(CategoryRow.model_validate(_strip_keys(row)).to_record())
            except ValidationError as e:
                raise ValueError(f"{p}:{line_no}: invalid category row: {e}") from e
        return out


def load_csv_sources(
    transactions_csv: str | PathLike[str],
    categories_csv: str | PathLike[str] | None = None,
) -> tuple[InMemoryTransactionSource, InMemoryCategoryDirectory]:
    """Load both CSVs into in-memory collaborators (categories optional)."""

    categories = load_categories_csv(categories_csv) if categories_csv else []
    return (
        InMemoryTransactionSource(load_transactions_csv(transactions_csv)),
        InMemoryCategoryDirectory(categories),
    )


__all__ = [
    "CategoryRow",
    "TransactionRow",
    "load_categories_csv",
    "load_csv_sources",
    "load_transactions_csv",
    "parse_transaction_rows",
]
