"""Pattern Analyzer: per-category recurring-spend detection.

For a trailing window of months, expense transactions are grouped by category
and each group is summarised with its totals, frequency, periodicity class and
a first-half vs second-half trend.

Thresholds below are hand-tuned constants carried over for behavioural parity.
Their calibration rationale is unknown; change them only with product input.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from datetime import date
from itertools import pairwise

from .aggregate import expenses_only, group_by_category, percent_change, safe_ratio, total_magnitude
from .errors import require_positive
from .logging_setup import get_logger
from .models import (
    DateRange,
    PatternTrend,
    Periodicity,
    SpendingPattern,
    TransactionRecord,
    category_display_name,
)
from .periods import midpoint_ordinal, trailing_window
from .sources import CategoryDirectory, TransactionSource, fetch_category_names, fetch_transactions

# ---- Tunables ----------------------------------------------------------------

# Relative std-dev tolerance for weekly/biweekly/monthly classification.
_INTERVAL_TOLERANCE: float = 0.3
_DAILY_MAX_MEAN: float = 2.0
_DAILY_MAX_STD: float = 1.0
# Inclusive mean-interval bands, in days.
_INTERVAL_BANDS: tuple[tuple[Periodicity, float, float], ...] = (
    (Periodicity.WEEKLY, 5.0, 9.0),
    (Periodicity.BIWEEKLY, 12.0, 16.0),
    (Periodicity.MONTHLY, 25.0, 35.0),
)
_RECURRING_MIN_FREQUENCY: float = 0.8
_TREND_THRESHOLD_PCT: float = 10.0


_logger = get_logger("spending_analysis.patterns")


def classify_periodicity(dates: Sequence[date]) -> Periodicity:
    """Classify the regularity of a series of transaction dates.

    Dates are sorted, consecutive day gaps are taken, and the gaps' mean (μ)
    and population standard deviation (σ) decide the class:

    - daily: μ ≤ 2 and σ < 1
    - weekly: 5 ≤ μ ≤ 9 and σ < 0.3μ
    - biweekly: 12 ≤ μ ≤ 16 and σ < 0.3μ
    - monthly: 25 ≤ μ ≤ 35 and σ < 0.3μ
    - otherwise irregular (always irregular with fewer than two dates)
    """

    if len(dates) < 2:
        return Periodicity.IRREGULAR

    ordered = sorted(dates)
    intervals = [(b - a).days for a, b in pairwise(ordered)]
    mean = sum(intervals) / len(intervals)
    variance = sum((i - mean) ** 2 for i in intervals) / len(intervals)
    std = math.sqrt(variance)

    if mean <= _DAILY_MAX_MEAN and std < _DAILY_MAX_STD:
        return Periodicity.DAILY
    tolerance = mean * _INTERVAL_TOLERANCE
    for label, low, high in _INTERVAL_BANDS:
        if low <= mean <= high and std < tolerance:
            return label
    return Periodicity.IRREGULAR


def classify_pattern_trend(first_half_total: float, second_half_total: float) -> PatternTrend:
    """Compare half-window totals; a zero first half is always ``stable``."""

    change = percent_change(second_half_total, first_half_total)
    if change > _TREND_THRESHOLD_PCT:
        return PatternTrend.INCREASING
    if change < -_TREND_THRESHOLD_PCT:
        return PatternTrend.DECREASING
    return PatternTrend.STABLE


def _split_halves(
    transactions: Sequence[TransactionRecord], window: DateRange
) -> tuple[float, float]:
    midpoint = midpoint_ordinal(window)
    first = total_magnitude(t for t in transactions if t.date.toordinal() < midpoint)
    second = total_magnitude(t for t in transactions if t.date.toordinal() >= midpoint)
    return first, second


class PatternAnalyzer:
    """Summarise expense behaviour per category over a trailing window."""

    def __init__(
        self,
        transactions: TransactionSource,
        categories: CategoryDirectory,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._transactions = transactions
        self._categories = categories
        self._today = today

    def analyze_patterns(self, months_to_analyze: int = 6) -> list[SpendingPattern]:
        """Return one :class:`SpendingPattern` per expense category, largest total first.

        Categories without transactions in the window are simply absent, so an
        empty history yields an empty list.
        """

        require_positive("months_to_analyze", months_to_analyze)
        window = trailing_window(self._today(), months_to_analyze)
        expenses = expenses_only(fetch_transactions(self._transactions, window))
        names = fetch_category_names(self._categories)

        patterns: list[SpendingPattern] = []
        for key, txs in group_by_category(expenses).items():
            total = total_magnitude(txs)
            count = len(txs)
            frequency = safe_ratio(count, months_to_analyze)
            periodicity = classify_periodicity([t.date for t in txs])
            first, second = _split_halves(txs, window)
            patterns.append(
                SpendingPattern(
                    category_id=key,
                    category_name=category_display_name(key, names),
                    avg_amount=safe_ratio(total, count),
                    frequency_per_month=frequency,
                    is_recurring=(
                        periodicity is not Periodicity.IRREGULAR
                        and frequency >= _RECURRING_MIN_FREQUENCY
                    ),
                    periodicity=periodicity,
                    total_amount=total,
                    transaction_count=count,
                    trend=classify_pattern_trend(first, second),
                )
            )

        patterns.sort(key=lambda p: (-p.total_amount, p.category_name, repr(p.category_id)))

        _logger.info(
            "analyze_patterns:done months=%d window=%s..%s patterns=%d",
            months_to_analyze,
            window.start.isoformat(),
            window.end.isoformat(),
            len(patterns),
        )
        return patterns


__all__ = ["PatternAnalyzer", "classify_pattern_trend", "classify_periodicity"]
