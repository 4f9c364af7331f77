from __future__ import annotations

from datetime import date

import pytest

from spending_analysis import (
    UNCATEGORIZED,
    CategoryRecord,
    DataUnavailableError,
    DateRange,
    InMemoryCategoryDirectory,
    InMemoryTransactionSource,
    InvalidRangeError,
    TransactionRecord,
    TransactionType,
)
from spending_analysis.aggregate import category_shares, percent_change, safe_ratio
from spending_analysis.errors import AnalyticsError, require_positive
from spending_analysis.models import category_display_name, category_key
from spending_analysis.periods import (
    iter_months,
    month_range,
    shift_month,
    trailing_window,
)
from spending_analysis.sources import fetch_category_names, fetch_transactions
from tests.helpers.records import GROCERIES, RENT, FailingDirectory, FailingSource, tx

# ---- Models ---------------------------------------------------------------------


def test_transaction_magnitude_and_expense_flag() -> None:
    refund = tx(date(2025, 1, 1), -42.0, TransactionType.VARIABLE_EXPENSE)
    pay = tx(date(2025, 1, 1), 100.0, TransactionType.INCOME)

    assert refund.magnitude == 42.0
    assert refund.is_expense is True
    assert pay.is_expense is False


def test_records_are_immutable() -> None:
    record = tx(date(2025, 1, 1), 1.0)
    with pytest.raises(AttributeError):
        record.amount = 2.0  # type: ignore[misc]


def test_date_range_bounds() -> None:
    span = DateRange(date(2025, 1, 1), date(2025, 1, 31))

    assert date(2025, 1, 1) in span
    assert date(2025, 1, 31) in span
    assert date(2025, 2, 1) not in span
    assert DateRange(date(2025, 1, 1), date(2025, 1, 1)).start == date(2025, 1, 1)


def test_inverted_range_is_an_analytics_error() -> None:
    with pytest.raises(InvalidRangeError) as excinfo:
        DateRange(date(2025, 1, 2), date(2025, 1, 1))
    assert isinstance(excinfo.value, AnalyticsError)
    assert isinstance(excinfo.value, ValueError)


def test_category_keys() -> None:
    assert category_key(None) is UNCATEGORIZED
    assert category_key(3) == 3
    assert category_display_name(UNCATEGORIZED, {}) == "Uncategorized"
    assert category_display_name(3, {3: "Dining"}) == "Dining"
    assert category_display_name(4, {3: "Dining"}) == "Unknown"


def test_to_dict_uses_primitives() -> None:
    record = TransactionRecord(
        id=9,
        date=date(2025, 3, 4),
        amount=12.0,
        transaction_type=TransactionType.SAVINGS,
    )

    assert record.to_dict() == {
        "id": 9,
        "date": "2025-03-04",
        "amount": 12.0,
        "transaction_type": "SAVINGS",
        "category_id": None,
        "description": None,
    }


@pytest.mark.parametrize("value", [0, -1, True, 2.0])
def test_require_positive_rejects(value: object) -> None:
    with pytest.raises(InvalidRangeError):
        require_positive("n", value)  # type: ignore[arg-type]


# ---- Aggregation ------------------------------------------------------------------


def test_zero_denominators_yield_zero() -> None:
    assert safe_ratio(5.0, 0.0) == 0.0
    assert percent_change(100.0, 0.0) == 0.0
    assert percent_change(150.0, 100.0) == pytest.approx(50.0)


def test_category_shares_sorted_and_limited() -> None:
    txs = [
        tx(date(2025, 1, 1), 10.0, category_id=GROCERIES),
        tx(date(2025, 1, 2), 30.0, category_id=RENT),
        tx(date(2025, 1, 3), 10.0),
    ]

    names = {RENT: "Rent", GROCERIES: "Groceries"}
    shares = category_shares(txs, names, denominator=50.0, limit=2)

    assert [(s.category_name, s.percentage) for s in shares] == [
        ("Rent", pytest.approx(60.0)),
        ("Groceries", pytest.approx(20.0)),
    ]


# ---- Periods ----------------------------------------------------------------------


@pytest.mark.parametrize(
    ("start", "delta", "expected"),
    [
        ((2025, 1), -1, (2024, 12)),
        ((2025, 12), 1, (2026, 1)),
        ((2025, 6), -18, (2023, 12)),
        ((2025, 6), 0, (2025, 6)),
    ],
)
def test_shift_month(start: tuple[int, int], delta: int, expected: tuple[int, int]) -> None:
    assert shift_month(*start, delta) == expected


def test_month_range_handles_leap_years() -> None:
    assert month_range(2024, 2).end == date(2024, 2, 29)
    assert month_range(2025, 2).end == date(2025, 2, 28)


def test_trailing_window_includes_current_month() -> None:
    window = trailing_window(date(2025, 6, 15), 6)
    assert window == DateRange(date(2024, 12, 1), date(2025, 6, 30))


def test_iter_months_spans_partial_months() -> None:
    span = DateRange(date(2024, 11, 20), date(2025, 2, 3))
    assert list(iter_months(span)) == [(2024, 11), (2024, 12), (2025, 1), (2025, 2)]


# ---- Collaborator access ----------------------------------------------------------


def test_in_memory_source_is_inclusive() -> None:
    source = InMemoryTransactionSource(
        [tx(date(2025, 1, 1), 1.0), tx(date(2025, 1, 31), 1.0), tx(date(2025, 2, 1), 1.0)]
    )
    assert len(source.get_by_date_range(date(2025, 1, 1), date(2025, 1, 31))) == 2


def test_fetch_wraps_source_errors() -> None:
    span = DateRange(date(2025, 1, 1), date(2025, 1, 31))

    with pytest.raises(DataUnavailableError, match="2025-01-01..2025-01-31") as excinfo:
        fetch_transactions(FailingSource(), span)

    assert isinstance(excinfo.value.__cause__, OSError)
    assert isinstance(excinfo.value, RuntimeError)


def test_fetch_wraps_directory_errors() -> None:
    with pytest.raises(DataUnavailableError, match="category directory failed"):
        fetch_category_names(FailingDirectory())


def test_fetch_category_names() -> None:
    directory = InMemoryCategoryDirectory(
        [CategoryRecord(RENT, "Rent"), CategoryRecord(7, "Gifts")]
    )
    assert fetch_category_names(directory) == {RENT: "Rent", 7: "Gifts"}
