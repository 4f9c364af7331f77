"""Read-only SQL implementations of the collaborator contracts."""

from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from ..models import CategoryRecord, TransactionRecord, TransactionType
from .client import session_scope
from .models import SaCategory, SaTransaction


def _to_record(row: SaTransaction) -> TransactionRecord:
    return TransactionRecord(
        id=row.id,
        date=row.date,
        amount=float(row.amount),
        transaction_type=TransactionType(row.transaction_type),
        category_id=row.category_id,
        description=row.description,
    )


class SqlTransactionSource:
    """Transactions from ``sa_transactions``, soft-deleted rows excluded."""

    def __init__(self, factory: sessionmaker[Session]) -> None:
        self._factory = factory

    def get_by_date_range(self, start: date, end: date) -> list[TransactionRecord]:
        stmt = (
            select(SaTransaction)
            .where(SaTransaction.date.between(start, end))
            .where(SaTransaction.is_deleted.is_(False))
            .order_by(SaTransaction.date, SaTransaction.id)
        )
        with session_scope(self._factory) as session:
            return [_to_record(row) for row in session.scalars(stmt)]


class SqlCategoryDirectory:
    def __init__(self, factory: sessionmaker[Session]) -> None:
        self._factory = factory

    def get_all(self) -> list[CategoryRecord]:
        stmt = select(SaCategory).order_by(SaCategory.id)
        with session_scope(self._factory) as session:
            return [CategoryRecord(id=row.id, name=row.name) for row in session.scalars(stmt)]


__all__ = ["SqlCategoryDirectory", "SqlTransactionSource"]
