"""Small aggregation primitives shared by every analytics component.

Every division in the package goes through :func:`safe_ratio` or
:func:`percent_change`, which substitute ``0.0`` for a zero (or negative)
denominator instead of producing ``nan``/``inf``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .models import (
    CategoryKey,
    CategoryShare,
    Direction,
    TransactionRecord,
    TransactionType,
    category_display_name,
    category_key,
)

# Trend-point direction threshold, in percent.
DIRECTION_THRESHOLD_PCT: float = 5.0


def safe_ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def percent_change(current: float, previous: float) -> float:
    """``(current - previous) / previous * 100``, or ``0.0`` when ``previous <= 0``."""

    return safe_ratio(current - previous, previous) * 100.0


def classify_direction(pct: float) -> Direction:
    if pct > DIRECTION_THRESHOLD_PCT:
        return Direction.UP
    if pct < -DIRECTION_THRESHOLD_PCT:
        return Direction.DOWN
    return Direction.STABLE


def total_magnitude(transactions: Iterable[TransactionRecord]) -> float:
    return sum((t.magnitude for t in transactions), 0.0)


def total_by_type(transactions: Iterable[TransactionRecord], kind: TransactionType) -> float:
    return sum((t.magnitude for t in transactions if t.transaction_type == kind), 0.0)


def total_expenses(transactions: Iterable[TransactionRecord]) -> float:
    """Fixed plus variable expenses, as magnitudes."""

    return sum((t.magnitude for t in transactions if t.is_expense), 0.0)


def expenses_only(transactions: Iterable[TransactionRecord]) -> list[TransactionRecord]:
    return [t for t in transactions if t.is_expense]


def group_by_category(
    transactions: Iterable[TransactionRecord],
) -> dict[CategoryKey, list[TransactionRecord]]:
    """Group by category key, preserving first-appearance order of the keys."""

    groups: dict[CategoryKey, list[TransactionRecord]] = {}
    for tx in transactions:
        groups.setdefault(category_key(tx.category_id), []).append(tx)
    return groups


def category_shares(
    transactions: Iterable[TransactionRecord],
    names: Mapping[int, str],
    *,
    denominator: float,
    limit: int | None = None,
) -> tuple[CategoryShare, ...]:
    """Per-category totals sorted by amount (desc) with ``amount / denominator`` percentages.

    Ties are broken by category name so the ordering is reproducible.
    """

    rows = [
        (key, category_display_name(key, names), total_magnitude(txs))
        for key, txs in group_by_category(transactions).items()
    ]
    rows.sort(key=lambda r: (-r[2], r[1]))
    if limit is not None:
        rows = rows[:limit]
    return tuple(
        CategoryShare(
            category_id=key,
            category_name=name,
            amount=amount,
            percentage=safe_ratio(amount, denominator) * 100.0,
        )
        for key, name, amount in rows
    )


__all__ = [
    "DIRECTION_THRESHOLD_PCT",
    "category_shares",
    "classify_direction",
    "expenses_only",
    "group_by_category",
    "percent_change",
    "safe_ratio",
    "total_by_type",
    "total_expenses",
    "total_magnitude",
]
