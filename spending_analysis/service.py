"""Facade wiring the analytics components around two injected collaborators.

Typical use::

    service = SpendingAnalysisService(source, directory)
    patterns = service.analyze_patterns(6)
    summary = service.generate_executive_summary(date(2025, 1, 1), date(2025, 12, 31))

The service holds no mutable state. Every call reads a fresh snapshot from the
collaborators and returns newly built values, so concurrent calls cannot
interfere with each other.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date

from .compare import DEFAULT_LABELS, PeriodComparator
from .forecast import Forecaster
from .models import (
    AnnualReport,
    CategoryRecord,
    DateRange,
    ExecutiveSummary,
    MonthlyReport,
    PeriodComparison,
    SpendingPattern,
    SpendingPrediction,
    TrendPoint,
)
from .patterns import PatternAnalyzer
from .reports import ReportBuilder
from .sources import CategoryDirectory, TransactionSource
from .suggest import CategorySuggester
from .trends import TrendEngine


class SpendingAnalysisService:
    def __init__(
        self,
        transactions: TransactionSource,
        categories: CategoryDirectory,
        *,
        today: Callable[[], date] | None = None,
    ) -> None:
        clock = today or date.today
        self.patterns = PatternAnalyzer(transactions, categories, today=clock)
        self.trends = TrendEngine(transactions, today=clock)
        self.forecaster = Forecaster(self.patterns, transactions, today=clock)
        self.comparator = PeriodComparator(transactions, categories)
        self.reports = ReportBuilder(
            transactions,
            categories,
            patterns=self.patterns,
            trends=self.trends,
            forecaster=self.forecaster,
        )
        self.suggester = CategorySuggester(transactions, categories)

    def analyze_patterns(self, months_to_analyze: int = 6) -> list[SpendingPattern]:
        return self.patterns.analyze_patterns(months_to_analyze)

    def predict_spending(self, months_ahead: int = 3) -> list[SpendingPrediction]:
        return self.forecaster.predict_spending(months_ahead)

    def analyze_trends(self, months_back: int = 12) -> list[TrendPoint]:
        return self.trends.analyze_trends(months_back)

    def compare_periods(
        self,
        period1: DateRange,
        period2: DateRange,
        labels: Sequence[str] = DEFAULT_LABELS,
    ) -> PeriodComparison:
        return self.comparator.compare_periods(period1, period2, labels)

    def generate_monthly_report(self, year: int, month: int) -> MonthlyReport:
        return self.reports.generate_monthly_report(year, month)

    def generate_annual_report(self, year: int) -> AnnualReport:
        return self.reports.generate_annual_report(year)

    def generate_executive_summary(self, start: date, end: date) -> ExecutiveSummary:
        return self.reports.generate_executive_summary(start, end)

    def suggest_category(self, description: str, amount: float) -> CategoryRecord | None:
        return self.suggester.suggest_category(description, amount)


__all__ = ["SpendingAnalysisService"]
