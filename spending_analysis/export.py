"""Plain-text exports of computed reports (CSV sections and JSON).

CSV layout mirrors a spreadsheet download: a title line, a blank line, a
``Metric,Value`` block, then optional titled sections separated by blank lines.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Sequence
from typing import Any

from .models import AnnualReport, ExecutiveSummary, MonthlyReport, _Record


def _fmt(value: float) -> str:
    return f"{value:.2f}"


def _write(rows: Sequence[Sequence[Any]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerows(rows)
    return buf.getvalue()


def executive_summary_to_csv(summary: ExecutiveSummary, *, title: str | None = None) -> str:
    o = summary.overview
    rows: list[list[Any]] = [
        [title or f"Executive Summary {summary.period.start} - {summary.period.end}"],
        [],
        ["Metric", "Value"],
        ["Total Income", _fmt(o.total_income)],
        ["Total Expenses", _fmt(o.total_expenses)],
        ["Total Savings", _fmt(o.total_savings)],
        ["Net Cash Flow", _fmt(o.net_cash_flow)],
        ["Savings Rate", f"{o.savings_rate:.1f}%"],
        [],
        ["Top Expenses"],
        ["Category", "Amount", "Percentage"],
    ]
    rows.extend(
        [e.category_name, _fmt(e.amount), f"{e.percentage:.1f}%"] for e in summary.top_expenses
    )
    return _write(rows)


def monthly_report_to_csv(report: MonthlyReport) -> str:
    rows: list[list[Any]] = [
        [f"Monthly Report {report.month} {report.year}"],
        [],
        ["Metric", "Value"],
        ["Income", _fmt(report.income)],
        ["Fixed Expenses", _fmt(report.fixed_expenses)],
        ["Variable Expenses", _fmt(report.variable_expenses)],
        ["Savings", _fmt(report.savings)],
        ["Net Cash Flow", _fmt(report.net_cash_flow)],
        ["Transaction Count", report.transaction_count],
        [],
        ["Top Expense Categories"],
        ["Category", "Amount", "Percentage"],
    ]
    rows.extend(
        [c.category_name, _fmt(c.amount), f"{c.percentage:.1f}%"]
        for c in report.top_expense_categories
    )
    return _write(rows)


def annual_report_to_csv(report: AnnualReport) -> str:
    rows: list[list[Any]] = [
        [f"Annual Report {report.year}"],
        [],
        ["Metric", "Value"],
        ["Total Income", _fmt(report.total_income)],
        ["Total Expenses", _fmt(report.total_expenses)],
        ["Total Savings", _fmt(report.total_savings)],
        ["Net Cash Flow", _fmt(report.net_cash_flow)],
        [],
        ["Monthly Breakdown"],
        ["Month", "Income", "Expenses", "Savings"],
    ]
    rows.extend(
        [m.month, _fmt(m.income), _fmt(m.expenses), _fmt(m.savings)]
        for m in report.monthly_breakdown
    )
    return _write(rows)


def report_to_csv(report: MonthlyReport | AnnualReport | ExecutiveSummary) -> str:
    if isinstance(report, MonthlyReport):
        return monthly_report_to_csv(report)
    if isinstance(report, AnnualReport):
        return annual_report_to_csv(report)
    if isinstance(report, ExecutiveSummary):
        return executive_summary_to_csv(report)
    raise TypeError(f"unsupported report type: {type(report).__name__}")


def to_json(value: _Record | Sequence[_Record] | None, *, indent: int | None = 2) -> str:
    """Serialize a computed record (or a list of them) via ``to_dict``."""

    if value is None:
        payload: Any = None
    elif isinstance(value, _Record):
        payload = value.to_dict()
    else:
        payload = [item.to_dict() for item in value]
    return json.dumps(payload, indent=indent)


__all__ = [
    "annual_report_to_csv",
    "executive_summary_to_csv",
    "monthly_report_to_csv",
    "report_to_csv",
    "to_json",
]
