"""Data models for ``spending_analysis``.

Input records (:class:`TransactionRecord`, :class:`CategoryRecord`) are
immutable snapshots handed over by the collaborators in
:mod:`spending_analysis.sources`. Every other type here is a computed value
created fresh per call; none has identity or persistence beyond that call.

All amounts are plain floats in a single accounting unit. Expense aggregation
always uses ``abs(amount)`` regardless of the sign convention of the source.
"""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, ClassVar, TypeAlias

from .errors import InvalidRangeError

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TransactionType(enum.StrEnum):
    INCOME = "INCOME"
    FIXED_EXPENSE = "FIXED_EXPENSE"
    VARIABLE_EXPENSE = "VARIABLE_EXPENSE"
    TRANSFER = "TRANSFER"
    SAVINGS = "SAVINGS"
    PAYMENT = "PAYMENT"
    INVESTMENT = "INVESTMENT"
    LOAN = "LOAN"


EXPENSE_TYPES: frozenset[TransactionType] = frozenset(
    {TransactionType.FIXED_EXPENSE, TransactionType.VARIABLE_EXPENSE}
)


class Periodicity(enum.StrEnum):
    """Interval regularity of a category's transactions."""

    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    IRREGULAR = "irregular"


class PatternTrend(enum.StrEnum):
    """First-half vs second-half movement within a pattern window."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class Direction(enum.StrEnum):
    """Movement of a single trend point against its baseline."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


# ---------------------------------------------------------------------------
# Category keys
# ---------------------------------------------------------------------------


class _Uncategorized:
    __slots__ = ()

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return "UNCATEGORIZED"


# Grouping key for transactions without a category id. Never ``None``.
UNCATEGORIZED: Any = _Uncategorized()

CategoryKey: TypeAlias = int | _Uncategorized

UNCATEGORIZED_NAME = "Uncategorized"
UNKNOWN_CATEGORY_NAME = "Unknown"


def category_key(category_id: int | None) -> CategoryKey:
    """Map a nullable category id to its grouping key."""

    return UNCATEGORIZED if category_id is None else category_id


def category_display_name(key: CategoryKey, names: Mapping[int, str]) -> str:
    """Resolve a grouping key to the label shown in reports.

    Ids missing from the directory resolve to ``"Unknown"``.
    """

    if key is UNCATEGORIZED:
        return UNCATEGORIZED_NAME
    return names.get(key, UNKNOWN_CATEGORY_NAME)


# ---------------------------------------------------------------------------
# Serialization helper shared by every computed record
# ---------------------------------------------------------------------------


def _to_primitive(value: Any) -> Any:
    if isinstance(value, _Record):
        return value.to_dict()
    if value is UNCATEGORIZED:
        return None
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, tuple | list):
        return [_to_primitive(v) for v in value]
    return value


class _Record:
    """Mixin giving frozen dataclasses a JSON-ready ``to_dict``.

    Fields listed in ``_OMIT_IF_NONE`` are left out of the dict entirely when
    unset, so optional report sections never appear as placeholders.
    """

    __slots__ = ()
    _OMIT_IF_NONE: ClassVar[frozenset[str]] = frozenset()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in dataclasses.fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if value is None and f.name in self._OMIT_IF_NONE:
                continue
            out[f.name] = _to_primitive(value)
        return out


# ---------------------------------------------------------------------------
# Input records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TransactionRecord(_Record):
    """A single dated, typed transaction.

    ``amount`` may be signed or a magnitude depending on the source; the core
    only ever aggregates ``abs(amount)``.
    """

    id: int | str
    date: date
    amount: float
    transaction_type: TransactionType
    category_id: int | None = None
    description: str | None = None

    @property
    def magnitude(self) -> float:
        return abs(self.amount)

    @property
    def is_expense(self) -> bool:
        return self.transaction_type in EXPENSE_TYPES


@dataclass(frozen=True, slots=True)
class CategoryRecord(_Record):
    id: int
    name: str


# ---------------------------------------------------------------------------
# Date ranges
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DateRange(_Record):
    """An inclusive ``[start, end]`` calendar range.

    Raises :class:`~spending_analysis.errors.InvalidRangeError` when ``end``
    precedes ``start``.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise InvalidRangeError(
                f"end date {self.end.isoformat()} is before start date {self.start.isoformat()}"
            )

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day <= self.end


@dataclass(frozen=True, slots=True)
class LabeledPeriod(_Record):
    start: date
    end: date
    label: str


# ---------------------------------------------------------------------------
# Pattern / trend / forecast results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SpendingPattern(_Record):
    """Aggregated expense behaviour of one category over a lookback window."""

    category_id: CategoryKey
    category_name: str
    avg_amount: float
    frequency_per_month: float
    is_recurring: bool
    periodicity: Periodicity
    total_amount: float
    transaction_count: int
    trend: PatternTrend


@dataclass(frozen=True, slots=True)
class TrendPoint(_Record):
    period_label: str
    current_value: float
    previous_value: float
    percent_change: float
    direction: Direction


@dataclass(frozen=True, slots=True)
class CategoryPrediction(_Record):
    """Projected spend for one category.

    ``confidence`` is a heuristic weighting in ``[0, 1]`` describing how much
    history backs the number. It is not a calibrated probability.
    """

    category_id: CategoryKey
    category_name: str
    predicted_amount: float
    confidence: float


@dataclass(frozen=True, slots=True)
class TypePrediction(_Record):
    transaction_type: TransactionType
    predicted_amount: float
    confidence: float


@dataclass(frozen=True, slots=True)
class SpendingPrediction(_Record):
    month: str
    predicted_total: float
    by_category: tuple[CategoryPrediction, ...]
    by_type: tuple[TypePrediction, ...]


# ---------------------------------------------------------------------------
# Period comparison
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MetricComparison(_Record):
    period1: float
    period2: float
    change: float
    percent_change: float


@dataclass(frozen=True, slots=True)
class CategoryDelta(_Record):
    category_id: CategoryKey
    category_name: str
    period1: float
    period2: float
    change: float
    percent_change: float


@dataclass(frozen=True, slots=True)
class PeriodComparison(_Record):
    period1: LabeledPeriod
    period2: LabeledPeriod
    income: MetricComparison
    expenses: MetricComparison
    savings: MetricComparison
    by_category: tuple[CategoryDelta, ...]


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CategoryShare(_Record):
    """A category's amount and its percentage of a report-specific total."""

    category_id: CategoryKey
    category_name: str
    amount: float
    percentage: float


@dataclass(frozen=True, slots=True)
class MonthBreakdown(_Record):
    month: str
    income: float
    expenses: float
    savings: float


@dataclass(frozen=True, slots=True)
class MonthlyCashFlow(_Record):
    month: str
    net_cash_flow: float


@dataclass(frozen=True, slots=True)
class Overview(_Record):
    total_income: float
    total_expenses: float
    total_savings: float
    net_cash_flow: float
    savings_rate: float


@dataclass(frozen=True, slots=True)
class MonthlyReport(_Record):
    month: str
    year: int
    income: float
    fixed_expenses: float
    variable_expenses: float
    savings: float
    net_cash_flow: float
    top_expense_categories: tuple[CategoryShare, ...]
    transaction_count: int
    average_transaction_amount: float
    trends: tuple[TrendPoint, ...]


@dataclass(frozen=True, slots=True)
class AnnualReport(_Record):
    """Year-level aggregates.

    ``year_over_year`` is ``None`` (and omitted from :meth:`to_dict`) when the
    prior year has no transactions at all.
    """

    _OMIT_IF_NONE: ClassVar[frozenset[str]] = frozenset({"year_over_year"})

    year: int
    total_income: float
    total_expenses: float
    total_savings: float
    net_cash_flow: float
    monthly_breakdown: tuple[MonthBreakdown, ...]
    category_breakdown: tuple[CategoryShare, ...]
    year_over_year: TrendPoint | None = None


@dataclass(frozen=True, slots=True)
class ExecutiveSummary(_Record):
    period: DateRange
    overview: Overview
    highlights: tuple[str, ...]
    concerns: tuple[str, ...]
    top_expenses: tuple[CategoryShare, ...]
    monthly_trend: tuple[MonthlyCashFlow, ...]
    predictions: SpendingPrediction | None
    recommendations: tuple[str, ...]


__all__ = [
    "AnnualReport",
    "CategoryDelta",
    "CategoryKey",
    "CategoryPrediction",
    "CategoryRecord",
    "CategoryShare",
    "DateRange",
    "Direction",
    "EXPENSE_TYPES",
    "ExecutiveSummary",
    "LabeledPeriod",
    "MetricComparison",
    "MonthBreakdown",
    "MonthlyCashFlow",
    "MonthlyReport",
    "Overview",
    "PatternTrend",
    "PeriodComparison",
    "Periodicity",
    "SpendingPattern",
    "SpendingPrediction",
    "TransactionRecord",
    "TransactionType",
    "TrendPoint",
    "TypePrediction",
    "UNCATEGORIZED",
    "UNCATEGORIZED_NAME",
    "UNKNOWN_CATEGORY_NAME",
    "category_display_name",
    "category_key",
]
