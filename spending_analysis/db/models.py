"""SQLAlchemy ORM tables read by the SQL-backed collaborators.

The analytics core never writes these tables; they are owned by whatever
application records transactions. Only the columns the core reads are mapped.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..models import TransactionType


class Base(DeclarativeBase):
    pass


# ---------------------------
# Reference: sa_categories
# ---------------------------


class SaCategory(Base):
    __tablename__ = "sa_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)


# ---------------------------
# Core: sa_transactions
# ---------------------------

_TYPE_VALUES = ",".join(f"'{t.value}'" for t in TransactionType)


class SaTransaction(Base):
    __tablename__ = "sa_transactions"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    transaction_type: Mapped[str] = mapped_column(String, nullable=False)
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sa_categories.id"), nullable=True
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))

    __table_args__ = (
        CheckConstraint(
            f"transaction_type in ({_TYPE_VALUES})",
            name="ck_sa_tx_transaction_type",
        ),
    )


__all__ = ["Base", "SaCategory", "SaTransaction"]
