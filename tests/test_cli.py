from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from spending_analysis import logging_setup
from spending_analysis.cli import app
from tests.helpers.db import bootstrap_sqlite_db, seed_rows
from tests.helpers.records import CATEGORIES, rent_history

runner = CliRunner()

_TRANSACTIONS = """id,date,amount,type,category_id,description
1,2025-01-05,1000,FIXED_EXPENSE,1,Monthly rent
2,2025-02-04,1000,FIXED_EXPENSE,1,Monthly rent
3,2025-03-06,1000,FIXED_EXPENSE,1,Monthly rent
4,2025-04-05,1000,FIXED_EXPENSE,1,Monthly rent
5,2025-05-05,1000,FIXED_EXPENSE,1,Monthly rent
6,2025-06-04,1000,FIXED_EXPENSE,1,Monthly rent
7,2025-05-01,5000,INCOME,5,Payroll
8,2025-05-09,300,VARIABLE_EXPENSE,2,Whole Foods Market
9,2025-05-15,500,SAVINGS,,
"""

_CATEGORIES = """id,name
1,Rent
2,Groceries
5,Salary
"""


@pytest.fixture
def csv_args(tmp_path: Path) -> list[str]:
    tx_csv = tmp_path / "transactions.csv"
    cat_csv = tmp_path / "categories.csv"
    tx_csv.write_text(_TRANSACTIONS, encoding="utf-8")
    cat_csv.write_text(_CATEGORIES, encoding="utf-8")
    return [
        "--transactions-csv",
        str(tx_csv),
        "--categories-csv",
        str(cat_csv),
        "--today",
        "2025-06-15",
    ]


def _invoke_json(args: list[str]):
    result = runner.invoke(app, args)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_patterns_command(csv_args: list[str]) -> None:
    payload = _invoke_json([*csv_args, "patterns"])

    assert payload[0]["category_name"] == "Rent"
    assert payload[0]["periodicity"] == "monthly"
    assert payload[0]["is_recurring"] is True
    assert [p["category_name"] for p in payload] == ["Rent", "Groceries"]


def test_trends_command(csv_args: list[str]) -> None:
    payload = _invoke_json([*csv_args, "trends", "--months", "2"])

    assert [p["period_label"] for p in payload] == ["2025-05", "2025-06"]
    assert payload[0]["current_value"] == pytest.approx(1300.0)


def test_forecast_command(csv_args: list[str]) -> None:
    payload = _invoke_json([*csv_args, "forecast", "--months", "2"])

    assert [p["month"] for p in payload] == ["2025-07", "2025-08"]


def test_forecast_months_from_environment(
    csv_args: list[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("SPENDING_ANALYSIS_FORECAST_MONTHS", "1")

    payload = _invoke_json([*csv_args, "forecast"])

    assert len(payload) == 1


def test_settings_loaded_from_dotenv(csv_args: list[str], tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("SPENDING_ANALYSIS_TREND_MONTHS=4\n", encoding="utf-8")

    try:
        payload = _invoke_json([*csv_args, "trends"])
    finally:
        # load_dotenv writes straight into os.environ.
        os.environ.pop("SPENDING_ANALYSIS_TREND_MONTHS", None)

    assert len(payload) == 4


def test_compare_command(csv_args: list[str]) -> None:
    payload = _invoke_json(
        [
            *csv_args,
            "compare",
            "--p1-start",
            "2025-04-01",
            "--p1-end",
            "2025-04-30",
            "--p2-start",
            "2025-05-01",
            "--p2-end",
            "2025-05-31",
            "--label1",
            "April",
            "--label2",
            "May",
        ]
    )

    assert payload["period1"]["label"] == "April"
    assert payload["income"]["change"] == pytest.approx(5000.0)
    assert payload["expenses"]["percent_change"] == pytest.approx(30.0)


def test_compare_rejects_inverted_range(csv_args: list[str]) -> None:
    result = runner.invoke(
        app,
        [
            *csv_args,
            "compare",
            "--p1-start",
            "2025-04-30",
            "--p1-end",
            "2025-04-01",
            "--p2-start",
            "2025-05-01",
            "--p2-end",
            "2025-05-31",
        ],
    )

    assert result.exit_code == 1
    assert "before start date" in result.output


def test_monthly_report_csv(csv_args: list[str]) -> None:
    result = runner.invoke(
        app, [*csv_args, "monthly-report", "--year", "2025", "--month", "5", "--format", "csv"]
    )

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[0] == "Monthly Report May 2025"
    assert "Income,5000.00" in lines
    assert "Net Cash Flow,3700.00" in lines


def test_monthly_report_rejects_bad_month(csv_args: list[str]) -> None:
    result = runner.invoke(app, [*csv_args, "monthly-report", "--year", "2025", "--month", "13"])

    assert result.exit_code == 1
    assert "month must be an integer in 1..12" in result.output


def test_annual_report_json_without_prior_year(csv_args: list[str]) -> None:
    payload = _invoke_json([*csv_args, "annual-report", "--year", "2025"])

    assert payload["year"] == 2025
    assert "year_over_year" not in payload
    assert len(payload["monthly_breakdown"]) == 12


def test_summary_command(csv_args: list[str]) -> None:
    payload = _invoke_json(
        [*csv_args, "summary", "--start", "2025-05-01", "--end", "2025-05-31"]
    )

    assert payload["overview"]["savings_rate"] == pytest.approx(10.0)
    assert payload["highlights"] == ["Positive cash flow of $3,700.00"]
    assert payload["predictions"]["month"] == "2025-07"


def test_suggest_command(csv_args: list[str]) -> None:
    assert _invoke_json([*csv_args, "suggest", "--description", "rent june"]) == {
        "id": 1,
        "name": "Rent",
    }
    assert _invoke_json([*csv_args, "suggest", "--description", "zzz"]) is None


def test_missing_csv_file(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["--transactions-csv", str(tmp_path / "nope.csv"), "patterns"]
    )

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_malformed_csv(tmp_path: Path) -> None:
    bad = tmp_path / "bad.csv"
    bad.write_text("id,date,amount,type\n1,not-a-date,10,income\n", encoding="utf-8")

    result = runner.invoke(app, ["--transactions-csv", str(bad), "patterns"])

    assert result.exit_code == 1
    assert "Failed to parse CSV" in result.output


def test_requires_a_data_source() -> None:
    result = runner.invoke(app, ["patterns"])

    assert result.exit_code == 1
    assert "--transactions-csv or --database-url" in result.output


def test_invalid_today_is_a_usage_error(csv_args: list[str]) -> None:
    args = [*csv_args[:-1], "June 15th", "patterns"]

    result = runner.invoke(app, args)

    assert result.exit_code == 2


def test_database_source(tmp_path: Path) -> None:
    url = bootstrap_sqlite_db(tmp_path / "cli.sqlite")
    seed_rows(url, categories=CATEGORIES, transactions=rent_history())

    payload = _invoke_json(["--database-url", url, "--today", "2025-06-15", "patterns"])

    assert [p["category_name"] for p in payload] == ["Rent"]


def test_invalid_database_url() -> None:
    result = runner.invoke(app, ["--database-url", "not a url", "patterns"])

    assert result.exit_code == 1
    assert "Invalid database URL" in result.output


def test_invalid_log_level_in_environment(
    csv_args: list[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    logger = logging.getLogger("spending_analysis")
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    for attr in ("level", "propagate"):
        monkeypatch.setattr(logger, attr, getattr(logger, attr))
    monkeypatch.setattr(logger, "handlers", [])
    monkeypatch.setenv("SPENDING_ANALYSIS_LOG_LEVEL", "bogus")

    payload = _invoke_json([*csv_args, "forecast", "--months", "1"])

    assert len(payload) == 1
    assert logger.level == logging.INFO


def test_monthly_report_rejects_year_past_the_calendar(csv_args: list[str]) -> None:
    result = runner.invoke(
        app, [*csv_args, "monthly-report", "--year", "10000", "--month", "1"]
    )

    assert result.exit_code == 1
    assert "year must be in 1..9999" in result.output


def test_compare_bad_date_is_a_usage_error(csv_args: list[str]) -> None:
    result = runner.invoke(
        app,
        [
            *csv_args,
            "compare",
            "--p1-start",
            "April 1st",
            "--p1-end",
            "2025-04-30",
            "--p2-start",
            "2025-05-01",
            "--p2-end",
            "2025-05-31",
        ],
    )

    assert result.exit_code == 2
    assert "--p1-start must be an ISO date" in result.output


@pytest.mark.parametrize(
    ("command", "title", "row"),
    [
        (["annual-report", "--year", "2025"], "Annual Report 2025", "Total Expenses,6300.00"),
        (
            ["summary", "--start", "2025-05-01", "--end", "2025-05-31"],
            "Executive Summary 2025-05-01 - 2025-05-31",
            "Net Cash Flow,3700.00",
        ),
    ],
)
def test_report_commands_csv(csv_args: list[str], command: list[str], title: str, row: str) -> None:
    result = runner.invoke(app, [*csv_args, *command, "--format", "csv"])

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[0] == title
    assert row in lines
