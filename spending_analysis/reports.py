"""Report Builder: monthly, annual and executive-summary report shapes.

Reports are assembled from a single snapshot of the requested range plus the
Pattern Analyzer, Trend Engine and Forecaster. Highlights, concerns and
recommendations come from the fixed rules in :func:`summarize_findings`; the
same inputs always produce the same strings in the same order.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from .aggregate import (
    category_shares,
    expenses_only,
    safe_ratio,
    total_by_type,
    total_expenses,
    total_magnitude,
)
from .errors import InvalidRangeError, require_year
from .forecast import Forecaster
from .logging_setup import get_logger
from .models import (
    AnnualReport,
    CategoryShare,
    DateRange,
    ExecutiveSummary,
    MonthBreakdown,
    MonthlyCashFlow,
    MonthlyReport,
    Overview,
    PatternTrend,
    SpendingPattern,
    SpendingPrediction,
    TransactionType,
)
from .patterns import PatternAnalyzer
from .periods import iter_months, month_abbr, month_name, month_range, year_range
from .sources import CategoryDirectory, TransactionSource, fetch_category_names, fetch_transactions
from .trends import TrendEngine, build_trend_point

# ---- Rule thresholds ---------------------------------------------------------

TOP_CATEGORY_LIMIT: int = 5
MONTHLY_TREND_MONTHS: int = 3
SUMMARY_PATTERN_MONTHS: int = 3
STRONG_SAVINGS_RATE: float = 20.0
LOW_SAVINGS_RATE: float = 10.0
CONCENTRATION_PCT: float = 30.0

_logger = get_logger("spending_analysis.reports")


def _money(value: float) -> str:
    return f"${value:,.2f}"


def summarize_findings(
    overview: Overview,
    top_expenses: Sequence[CategoryShare],
    patterns: Sequence[SpendingPattern],
) -> tuple[tuple[str, ...], tuple[str, ...], tuple[str, ...]]:
    """Return ``(highlights, concerns, recommendations)`` for an executive summary.

    Rules
    -----
    - Net cash flow > 0 is a highlight; < 0 is a concern.
    - Savings rate ≥ 20% is a highlight; < 10% is a concern.
    - Any category with an increasing trend is a concern.
    - Recommend more savings below 20%, a review of the top category when it
      exceeds 30% of expenses, and monitoring of the first increasing category.
    """

    highlights: list[str] = []
    concerns: list[str] = []
    recommendations: list[str] = []

    net = overview.net_cash_flow
    if net > 0:
        highlights.append(f"Positive cash flow of {_money(net)}")
    elif net < 0:
        concerns.append(f"Negative cash flow of {_money(abs(net))}")

    rate = overview.savings_rate
    if rate >= STRONG_SAVINGS_RATE:
        highlights.append(f"Strong savings rate of {rate:.1f}%")
    elif rate < LOW_SAVINGS_RATE:
        concerns.append(f"Low savings rate of {rate:.1f}%")

    increasing = [p for p in patterns if p.trend is PatternTrend.INCREASING]
    if increasing:
        concerns.append(f"{len(increasing)} expense categories showing increasing trend")

    if rate < STRONG_SAVINGS_RATE:
        recommendations.append("Consider increasing savings to reach 20% of income")
    if top_expenses and top_expenses[0].percentage > CONCENTRATION_PCT:
        top = top_expenses[0]
        recommendations.append(
            f"Review spending on {top.category_name} - it accounts for "
            f"{top.percentage:.1f}% of expenses"
        )
    if increasing:
        recommendations.append(
            f"Monitor {increasing[0].category_name} expenses - showing upward trend"
        )

    return tuple(highlights), tuple(concerns), tuple(recommendations)


class ReportBuilder:
    def __init__(
        self,
        transactions: TransactionSource,
        categories: CategoryDirectory,
        *,
        patterns: PatternAnalyzer,
        trends: TrendEngine,
        forecaster: Forecaster,
    ) -> None:
        self._transactions = transactions
        self._categories = categories
        self._patterns = patterns
        self._trends = trends
        self._forecaster = forecaster

    # ---- Monthly ----------------------------------------------------------

    def generate_monthly_report(self, year: int, month: int) -> MonthlyReport:
        require_year(year)
        if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
            raise InvalidRangeError(f"month must be an integer in 1..12, got {month!r}")

        txs = fetch_transactions(self._transactions, month_range(year, month))
        names = fetch_category_names(self._categories)

        income = total_by_type(txs, TransactionType.INCOME)
        fixed = total_by_type(txs, TransactionType.FIXED_EXPENSE)
        variable = total_by_type(txs, TransactionType.VARIABLE_EXPENSE)
        savings = total_by_type(txs, TransactionType.SAVINGS)
        expenses = fixed + variable

        report = MonthlyReport(
            month=month_name(month),
            year=year,
            income=income,
            fixed_expenses=fixed,
            variable_expenses=variable,
            savings=savings,
            net_cash_flow=income - expenses,
            top_expense_categories=category_shares(
                expenses_only(txs), names, denominator=expenses, limit=TOP_CATEGORY_LIMIT
            ),
            transaction_count=len(txs),
            # Mean magnitude over every transaction in the month, not just expenses.
            average_transaction_amount=safe_ratio(total_magnitude(txs), len(txs)),
            trends=tuple(self._trends.analyze_trends(MONTHLY_TREND_MONTHS)),
        )
        _logger.info(
            "generate_monthly_report:done year=%d month=%d transactions=%d",
            year,
            month,
            len(txs),
        )
        return report

    # ---- Annual -----------------------------------------------------------

    def generate_annual_report(self, year: int) -> AnnualReport:
        require_year(year)
        txs = fetch_transactions(self._transactions, year_range(year))
        names = fetch_category_names(self._categories)

        total_income = total_by_type(txs, TransactionType.INCOME)
        total_savings = total_by_type(txs, TransactionType.SAVINGS)
        expenses = total_expenses(txs)

        breakdown: list[MonthBreakdown] = []
        for m in range(1, 13):
            month_txs = [t for t in txs if t.date.month == m]
            breakdown.append(
                MonthBreakdown(
                    month=month_abbr(m),
                    income=total_by_type(month_txs, TransactionType.INCOME),
                    expenses=total_expenses(month_txs),
                    savings=total_by_type(month_txs, TransactionType.SAVINGS),
                )
            )

        year_over_year = None
        if year > 1:
            prior = fetch_transactions(self._transactions, year_range(year - 1))
            if prior:
                year_over_year = build_trend_point(
                    f"{year} vs {year - 1}", expenses, total_expenses(prior)
                )

        report = AnnualReport(
            year=year,
            total_income=total_income,
            total_expenses=expenses,
            total_savings=total_savings,
            net_cash_flow=total_income - expenses,
            monthly_breakdown=tuple(breakdown),
            # Share of everything transacted in the year, not of expenses only.
            category_breakdown=category_shares(txs, names, denominator=total_magnitude(txs)),
            year_over_year=year_over_year,
        )
        _logger.info(
            "generate_annual_report:done year=%d transactions=%d yoy=%s",
            year,
            len(txs),
            year_over_year is not None,
        )
        return report

    # ---- Executive summary -----------------------------------------------

    def _next_month_forecast(self) -> SpendingPrediction | None:
        try:
            predictions = self._forecaster.predict_spending(1)
        except Exception as e:  # noqa: BLE001
            # A failed forecast only blanks the predictions field.
            _logger.warning(
                "generate_executive_summary:forecast_unavailable error=%s detail=%s",
                e.__class__.__name__,
                e,
            )
            return None
        return predictions[0] if predictions else None

    def generate_executive_summary(self, start: date, end: date) -> ExecutiveSummary:
        span = DateRange(start, end)
        txs = fetch_transactions(self._transactions, span)
        names = fetch_category_names(self._categories)

        total_income = total_by_type(txs, TransactionType.INCOME)
        total_savings = total_by_type(txs, TransactionType.SAVINGS)
        expenses = total_expenses(txs)
        overview = Overview(
            total_income=total_income,
            total_expenses=expenses,
            total_savings=total_savings,
            net_cash_flow=total_income - expenses,
            savings_rate=safe_ratio(total_savings, total_income) * 100.0,
        )

        top_expenses = category_shares(
            expenses_only(txs), names, denominator=expenses, limit=TOP_CATEGORY_LIMIT
        )

        monthly_trend: list[MonthlyCashFlow] = []
        for y, m in iter_months(span):
            month_txs = [t for t in txs if t.date.year == y and t.date.month == m]
            monthly_trend.append(
                MonthlyCashFlow(
                    month=f"{month_abbr(m)} {y}",
                    net_cash_flow=(
                        total_by_type(month_txs, TransactionType.INCOME)
                        - total_expenses(month_txs)
                    ),
                )
            )

        patterns = self._patterns.analyze_patterns(SUMMARY_PATTERN_MONTHS)
        highlights, concerns, recommendations = summarize_findings(
            overview, top_expenses, patterns
        )

        summary = ExecutiveSummary(
            period=span,
            overview=overview,
            highlights=highlights,
            concerns=concerns,
            top_expenses=top_expenses,
            monthly_trend=tuple(monthly_trend),
            predictions=self._next_month_forecast(),
            recommendations=recommendations,
        )
        _logger.info(
            "generate_executive_summary:done start=%s end=%s transactions=%d",
            start.isoformat(),
            end.isoformat(),
            len(txs),
        )
        return summary


__all__ = [
    "CONCENTRATION_PCT",
    "LOW_SAVINGS_RATE",
    "ReportBuilder",
    "STRONG_SAVINGS_RATE",
    "summarize_findings",
]
