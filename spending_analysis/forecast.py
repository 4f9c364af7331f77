"""Forecaster: trend-adjusted per-category and per-type spending projections.

Confidence scores produced here are heuristic weightings describing how much
history supports a number. They are not calibrated probabilities and should
not be presented as such.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

from .aggregate import total_by_type
from .errors import require_positive
from .logging_setup import get_logger
from .models import (
    CategoryPrediction,
    PatternTrend,
    SpendingPattern,
    SpendingPrediction,
    TransactionType,
    TypePrediction,
)
from .patterns import PatternAnalyzer
from .periods import month_key, shift_month, trailing_window
from .sources import TransactionSource, fetch_transactions

# ---- Tunables ----------------------------------------------------------------

LOOKBACK_MONTHS: int = 6
# Per-month multiplicative drift applied to trending categories.
_MONTHLY_DRIFT: float = 0.05

_BASE_CONFIDENCE: float = 0.5
_HIGH_FREQUENCY: float = 4.0
_MEDIUM_FREQUENCY: float = 2.0

# Per-type projections: enough observations lift confidence from the floor.
_TYPE_MIN_OBSERVATIONS: int = 5
_TYPE_CONFIDENCE_HIGH: float = 0.7
_TYPE_CONFIDENCE_LOW: float = 0.4

PROJECTED_TYPES: tuple[TransactionType, ...] = (
    TransactionType.INCOME,
    TransactionType.FIXED_EXPENSE,
    TransactionType.VARIABLE_EXPENSE,
    TransactionType.SAVINGS,
)

_logger = get_logger("spending_analysis.forecast")


def project_category_amount(pattern: SpendingPattern, months_ahead: int) -> float:
    """``avg × frequency`` drifted by ±5% per month for trending categories, floored at 0."""

    prediction = pattern.avg_amount * pattern.frequency_per_month
    if pattern.trend is PatternTrend.INCREASING:
        prediction *= 1 + _MONTHLY_DRIFT * months_ahead
    elif pattern.trend is PatternTrend.DECREASING:
        prediction *= 1 - _MONTHLY_DRIFT * months_ahead
    return max(0.0, prediction)


def pattern_confidence(pattern: SpendingPattern) -> float:
    """Heuristic confidence in ``[0, 1]`` for a category projection.

    Base 0.5; +0.2 for ≥4 transactions/month (else +0.1 for ≥2); +0.2 when
    recurring; +0.1 when the trend is stable; capped at 1.0.
    """

    confidence = _BASE_CONFIDENCE
    if pattern.frequency_per_month >= _HIGH_FREQUENCY:
        confidence += 0.2
    elif pattern.frequency_per_month >= _MEDIUM_FREQUENCY:
        confidence += 0.1
    if pattern.is_recurring:
        confidence += 0.2
    if pattern.trend is PatternTrend.STABLE:
        confidence += 0.1
    return min(1.0, confidence)


class Forecaster:
    def __init__(
        self,
        patterns: PatternAnalyzer,
        transactions: TransactionSource,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._patterns = patterns
        self._transactions = transactions
        self._today = today

    def _predict_by_type(self, today: date) -> tuple[TypePrediction, ...]:
        window = trailing_window(today, LOOKBACK_MONTHS)
        history = fetch_transactions(self._transactions, window)
        out: list[TypePrediction] = []
        for kind in PROJECTED_TYPES:
            observed = sum(1 for t in history if t.transaction_type == kind)
            out.append(
                TypePrediction(
                    transaction_type=kind,
                    predicted_amount=total_by_type(history, kind) / LOOKBACK_MONTHS,
                    confidence=(
                        _TYPE_CONFIDENCE_HIGH
                        if observed >= _TYPE_MIN_OBSERVATIONS
                        else _TYPE_CONFIDENCE_LOW
                    ),
                )
            )
        return tuple(out)

    def predict_spending(self, months_ahead: int = 3) -> list[SpendingPrediction]:
        """Project the next ``months_ahead`` calendar months from a 6-month lookback.

        Per-type projections are a flat historical monthly average and are the
        same for every projected month. With no history, every amount is 0.
        """

        require_positive("months_ahead", months_ahead)
        today = self._today()
        patterns = self._patterns.analyze_patterns(LOOKBACK_MONTHS)
        by_type = self._predict_by_type(today)

        predictions: list[SpendingPrediction] = []
        for k in range(1, months_ahead + 1):
            by_category = tuple(
                CategoryPrediction(
                    category_id=p.category_id,
                    category_name=p.category_name,
                    predicted_amount=project_category_amount(p, k),
                    confidence=pattern_confidence(p),
                )
                for p in patterns
            )
            predictions.append(
                SpendingPrediction(
                    month=month_key(*shift_month(today.year, today.month, k)),
                    predicted_total=sum((c.predicted_amount for c in by_category), 0.0),
                    by_category=by_category,
                    by_type=by_type,
                )
            )

        _logger.info(
            "predict_spending:done months_ahead=%d categories=%d",
            months_ahead,
            len(patterns),
        )
        return predictions


__all__ = [
    "Forecaster",
    "LOOKBACK_MONTHS",
    "PROJECTED_TYPES",
    "pattern_confidence",
    "project_category_amount",
]
