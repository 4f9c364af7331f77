"""Trend Engine: month-over-month expense movement."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable
from datetime import date

from .aggregate import classify_direction, percent_change
from .errors import require_positive
from .logging_setup import get_logger
from .models import TransactionRecord, TrendPoint
from .periods import month_key, shift_month, trailing_window
from .sources import TransactionSource, fetch_transactions

_logger = get_logger("spending_analysis.trends")


def monthly_expense_totals(
    transactions: Iterable[TransactionRecord],
) -> dict[tuple[int, int], float]:
    """Fixed + variable expense magnitude per ``(year, month)``."""

    totals: dict[tuple[int, int], float] = defaultdict(float)
    for tx in transactions:
        if tx.is_expense:
            totals[(tx.date.year, tx.date.month)] += tx.magnitude
    return totals


def build_trend_point(label: str, current: float, previous: float) -> TrendPoint:
    pct = percent_change(current, previous)
    return TrendPoint(
        period_label=label,
        current_value=current,
        previous_value=previous,
        percent_change=pct,
        direction=classify_direction(pct),
    )


class TrendEngine:
    def __init__(
        self,
        transactions: TransactionSource,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._transactions = transactions
        self._today = today

    def analyze_trends(self, months_back: int = 12) -> list[TrendPoint]:
        """Return ``months_back`` points ending at the current month, oldest first.

        Each point compares a month's expense total with the month before it.
        A month whose predecessor had no expenses reports ``percent_change=0``.
        """

        require_positive("months_back", months_back)
        today = self._today()
        # One snapshot covering every month plus the predecessor of the oldest.
        window = trailing_window(today, months_back)
        totals = monthly_expense_totals(fetch_transactions(self._transactions, window))

        points: list[TrendPoint] = []
        for offset in range(months_back - 1, -1, -1):
            current = shift_month(today.year, today.month, -offset)
            previous = shift_month(today.year, today.month, -offset - 1)
            points.append(
                build_trend_point(
                    month_key(*current),
                    totals.get(current, 0.0),
                    totals.get(previous, 0.0),
                )
            )

        _logger.info("analyze_trends:done months=%d points=%d", months_back, len(points))
        return points


__all__ = ["TrendEngine", "build_trend_point", "monthly_expense_totals"]
