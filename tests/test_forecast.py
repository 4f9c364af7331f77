from __future__ import annotations

from datetime import date

import pytest

from spending_analysis import (
    DataUnavailableError,
    Forecaster,
    InvalidRangeError,
    PatternAnalyzer,
    PatternTrend,
    Periodicity,
    SpendingPattern,
    TransactionType,
)
from spending_analysis.forecast import pattern_confidence, project_category_amount
from spending_analysis.sources import InMemoryCategoryDirectory
from tests.helpers.records import (
    DINING,
    RENT,
    SALARY,
    TODAY,
    FailingSource,
    every,
    make_service,
    rent_history,
    tx,
)


def _pattern(
    *,
    avg: float = 100.0,
    frequency: float = 1.0,
    recurring: bool = False,
    trend: PatternTrend = PatternTrend.STABLE,
) -> SpendingPattern:
    return SpendingPattern(
        category_id=DINING,
        category_name="Dining",
        avg_amount=avg,
        frequency_per_month=frequency,
        is_recurring=recurring,
        periodicity=Periodicity.MONTHLY if recurring else Periodicity.IRREGULAR,
        total_amount=avg * frequency * 6,
        transaction_count=int(frequency * 6),
        trend=trend,
    )


def _history() -> list:
    return [
        *rent_history(),
        tx(date(2025, 1, 10), 100.0, category_id=DINING),
        tx(date(2025, 5, 10), 200.0, category_id=DINING),
        *(
            tx(d, 5000.0, TransactionType.INCOME, SALARY)
            for d in every(date(2025, 1, 1), 30, 6)
        ),
    ]


# ---- Pure helpers ---------------------------------------------------------------


def test_projection_drifts_with_trend() -> None:
    assert project_category_amount(_pattern(), 3) == pytest.approx(100.0)
    assert project_category_amount(_pattern(trend=PatternTrend.INCREASING), 2) == pytest.approx(
        110.0
    )
    assert project_category_amount(_pattern(trend=PatternTrend.DECREASING), 2) == pytest.approx(
        90.0
    )


def test_projection_never_negative() -> None:
    pattern = _pattern(trend=PatternTrend.DECREASING)
    assert project_category_amount(pattern, 25) == 0.0


@pytest.mark.parametrize(
    ("frequency", "recurring", "trend", "expected"),
    [
        (0.5, False, PatternTrend.INCREASING, 0.5),
        (0.5, False, PatternTrend.STABLE, 0.6),
        (2.0, False, PatternTrend.DECREASING, 0.6),
        (1.0, True, PatternTrend.STABLE, 0.8),
        (4.0, False, PatternTrend.INCREASING, 0.7),
        (4.5, True, PatternTrend.STABLE, 1.0),
    ],
)
def test_confidence_components(
    frequency: float, recurring: bool, trend: PatternTrend, expected: float
) -> None:
    confidence = pattern_confidence(_pattern(frequency=frequency, recurring=recurring, trend=trend))
    assert confidence == pytest.approx(expected)
    assert 0.0 <= confidence <= 1.0


# ---- predict_spending -----------------------------------------------------------


def test_predictions_per_category() -> None:
    predictions = make_service(_history()).predict_spending(3)

    assert [p.month for p in predictions] == ["2025-07", "2025-08", "2025-09"]

    first = predictions[0]
    by_name = {c.category_name: c for c in first.by_category}
    assert by_name["Rent"].category_id == RENT
    assert by_name["Rent"].predicted_amount == pytest.approx(1000.0)
    assert by_name["Rent"].confidence == pytest.approx(0.8)
    # Dining: avg 150 at 1/3 per month, increasing.
    assert by_name["Dining"].predicted_amount == pytest.approx(52.5)
    assert by_name["Dining"].confidence == pytest.approx(0.5)
    assert first.predicted_total == pytest.approx(1052.5)

    third = {c.category_name: c for c in predictions[2].by_category}
    assert third["Dining"].predicted_amount == pytest.approx(57.5)
    assert third["Rent"].predicted_amount == pytest.approx(1000.0)


def test_total_equals_sum_of_categories() -> None:
    for prediction in make_service(_history()).predict_spending(3):
        assert prediction.predicted_total == pytest.approx(
            sum(c.predicted_amount for c in prediction.by_category)
        )


def test_predictions_per_type() -> None:
    (prediction,) = make_service(_history()).predict_spending(1)

    by_type = {t.transaction_type: t for t in prediction.by_type}
    assert list(by_type) == [
        TransactionType.INCOME,
        TransactionType.FIXED_EXPENSE,
        TransactionType.VARIABLE_EXPENSE,
        TransactionType.SAVINGS,
    ]
    assert by_type[TransactionType.INCOME].predicted_amount == pytest.approx(5000.0)
    assert by_type[TransactionType.INCOME].confidence == pytest.approx(0.7)
    assert by_type[TransactionType.FIXED_EXPENSE].predicted_amount == pytest.approx(1000.0)
    assert by_type[TransactionType.VARIABLE_EXPENSE].predicted_amount == pytest.approx(50.0)
    assert by_type[TransactionType.VARIABLE_EXPENSE].confidence == pytest.approx(0.4)
    assert by_type[TransactionType.SAVINGS].predicted_amount == 0.0
    assert by_type[TransactionType.SAVINGS].confidence == pytest.approx(0.4)


def test_five_observations_lift_type_confidence() -> None:
    records = [tx(d, 100.0, TransactionType.SAVINGS) for d in every(date(2025, 1, 15), 30, 5)]

    (prediction,) = make_service(records).predict_spending(1)

    savings = next(
        t for t in prediction.by_type if t.transaction_type is TransactionType.SAVINGS
    )
    assert savings.confidence == pytest.approx(0.7)
    assert savings.predicted_amount == pytest.approx(500.0 / 6)


def test_months_roll_over_the_year() -> None:
    predictions = make_service(today=date(2025, 11, 15)).predict_spending(3)
    assert [p.month for p in predictions] == ["2025-12", "2026-01", "2026-02"]


def test_empty_history_predicts_zero() -> None:
    predictions = make_service().predict_spending()

    assert len(predictions) == 3
    for p in predictions:
        assert p.by_category == ()
        assert p.predicted_total == 0.0
        assert all(t.predicted_amount == 0.0 for t in p.by_type)
        assert all(t.confidence == pytest.approx(0.4) for t in p.by_type)


def test_invalid_months_ahead() -> None:
    with pytest.raises(InvalidRangeError):
        make_service().predict_spending(0)


def test_source_failure_is_wrapped() -> None:
    source = FailingSource()
    analyzer = PatternAnalyzer(source, InMemoryCategoryDirectory(), today=lambda: TODAY)
    forecaster = Forecaster(analyzer, source, today=lambda: TODAY)

    with pytest.raises(DataUnavailableError):
        forecaster.predict_spending(2)
