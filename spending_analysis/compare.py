"""Period Comparator: income/expense/savings and per-category deltas between two ranges."""

from __future__ import annotations

from collections.abc import Sequence

from .aggregate import (
    group_by_category,
    percent_change,
    total_by_type,
    total_expenses,
    total_magnitude,
)
from .logging_setup import get_logger
from .models import (
    CategoryDelta,
    DateRange,
    LabeledPeriod,
    MetricComparison,
    PeriodComparison,
    TransactionType,
    category_display_name,
)
from .sources import CategoryDirectory, TransactionSource, fetch_category_names, fetch_transactions

DEFAULT_LABELS: tuple[str, str] = ("Period 1", "Period 2")

_logger = get_logger("spending_analysis.compare")


def compare_values(first: float, second: float) -> MetricComparison:
    return MetricComparison(
        period1=first,
        period2=second,
        change=second - first,
        percent_change=percent_change(second, first),
    )


class PeriodComparator:
    def __init__(self, transactions: TransactionSource, categories: CategoryDirectory) -> None:
        self._transactions = transactions
        self._categories = categories

    def compare_periods(
        self,
        period1: DateRange,
        period2: DateRange,
        labels: Sequence[str] = DEFAULT_LABELS,
    ) -> PeriodComparison:
        """Compare ``period2`` against ``period1`` (the baseline).

        Category deltas cover the union of categories seen in either period,
        across all transaction types, largest absolute change first.
        """

        if len(labels) != 2:
            raise ValueError(f"labels must hold exactly two entries, got {len(labels)}")

        txs1 = fetch_transactions(self._transactions, period1)
        txs2 = fetch_transactions(self._transactions, period2)
        names = fetch_category_names(self._categories)

        groups1 = group_by_category(txs1)
        groups2 = group_by_category(txs2)
        keys = list(groups1) + [k for k in groups2 if k not in groups1]

        deltas: list[CategoryDelta] = []
        for key in keys:
            amount1 = total_magnitude(groups1.get(key, ()))
            amount2 = total_magnitude(groups2.get(key, ()))
            metric = compare_values(amount1, amount2)
            deltas.append(
                CategoryDelta(
                    category_id=key,
                    category_name=category_display_name(key, names),
                    period1=metric.period1,
                    period2=metric.period2,
                    change=metric.change,
                    percent_change=metric.percent_change,
                )
            )
        deltas.sort(key=lambda d: (-abs(d.change), d.category_name))

        _logger.info(
            "compare_periods:done p1=%s..%s p2=%s..%s categories=%d",
            period1.start.isoformat(),
            period1.end.isoformat(),
            period2.start.isoformat(),
            period2.end.isoformat(),
            len(deltas),
        )
        return PeriodComparison(
            period1=LabeledPeriod(period1.start, period1.end, labels[0]),
            period2=LabeledPeriod(period2.start, period2.end, labels[1]),
            income=compare_values(
                total_by_type(txs1, TransactionType.INCOME),
                total_by_type(txs2, TransactionType.INCOME),
            ),
            expenses=compare_values(total_expenses(txs1), total_expenses(txs2)),
            savings=compare_values(
                total_by_type(txs1, TransactionType.SAVINGS),
                total_by_type(txs2, TransactionType.SAVINGS),
            ),
            by_category=tuple(deltas),
        )


__all__ = ["DEFAULT_LABELS", "PeriodComparator", "compare_values"]
