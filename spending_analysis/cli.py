"""CLI for the ``spending_analysis`` package.

A Typer-based console interface over
:class:`~spending_analysis.service.SpendingAnalysisService`. Environment
variables (``DATABASE_URL``, ``SPENDING_ANALYSIS_*``) are loaded from a local
``.env`` using ``python-dotenv`` before any command runs. Transactions come
either from CSV files (``--transactions-csv``/``--categories-csv``) or from a
database (``--database-url``). Results are written to stdout as JSON; report
commands also accept ``--format csv``. Errors go to stderr with exit code 1;
malformed option values (dates included) are Click usage errors with exit code 2.
"""

from __future__ import annotations

import csv
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from dotenv import load_dotenv

from .config import Settings, load_settings
from .errors import AnalyticsError
from .export import report_to_csv, to_json
from .logging_setup import configure_logging
from .models import AnnualReport, DateRange, ExecutiveSummary, MonthlyReport, _Record
from .service import SpendingAnalysisService

T = TypeVar("T")


class OutputFormat(StrEnum):
    JSON = "json"
    CSV = "csv"


@dataclass(frozen=True, slots=True)
class _CliContext:
    settings: Settings
    transactions_csv: Path | None
    categories_csv: Path | None
    database_url: str | None
    today: date | None


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Spending analytics and forecasting over a transaction history. "
        "Loads DATABASE_URL and SPENDING_ANALYSIS_* settings from a local .env."
    ),
)


# ---- Small module-level helpers ----------------------------------------------


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(code=1)


def _parse_date(value: str, name: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(f"{name} must be an ISO date (YYYY-MM-DD), got {value!r}") from e


def _build_service(ctx: typer.Context) -> SpendingAnalysisService:
    opts: _CliContext = ctx.obj
    clock = (lambda: opts.today) if opts.today is not None else None

    if opts.transactions_csv is not None:
        from .ingest import load_csv_sources

        try:
            transactions, categories = load_csv_sources(opts.transactions_csv, opts.categories_csv)
        except FileNotFoundError as e:
            raise _fail(f"File not found: {e.filename}") from e
        except PermissionError as e:
            raise _fail(f"Permission denied: {e.filename}") from e
        except (csv.Error, ValueError) as e:
            raise _fail(f"Failed to parse CSV: {e}") from e
        return SpendingAnalysisService(transactions, categories, today=clock)

    url = opts.database_url or opts.settings.database_url
    if not url:
        raise _fail("provide --transactions-csv or --database-url (or set DATABASE_URL)")

    # Deferred import keeps SQLAlchemy off the CSV-only path.
    from sqlalchemy.exc import ArgumentError

    from .db import SqlCategoryDirectory, SqlTransactionSource, create_session_factory

    try:
        factory = create_session_factory(url)
    except ArgumentError as e:
        raise _fail(f"Invalid database URL: {e}") from e
    return SpendingAnalysisService(
        SqlTransactionSource(factory), SqlCategoryDirectory(factory), today=clock
    )


def _run(ctx: typer.Context, operation: Callable[[SpendingAnalysisService], T]) -> T:
    service = _build_service(ctx)
    try:
        return operation(service)
    except AnalyticsError as e:
        raise _fail(str(e)) from e


def _emit(
    result: _Record | Sequence[_Record] | None, fmt: OutputFormat = OutputFormat.JSON
) -> None:
    if fmt is OutputFormat.CSV:
        # Only the report commands expose --format.
        assert isinstance(result, MonthlyReport | AnnualReport | ExecutiveSummary)
        typer.echo(report_to_csv(result), nl=False)
    else:
        typer.echo(to_json(result))


# ---- Commands -------------------------------------------------------------------

MonthsOption = Annotated[
    int | None, typer.Option("--months", min=1, help="Number of months (defaults from settings).")
]
FormatOption = Annotated[OutputFormat, typer.Option("--format", help="Output format.")]


@app.command("patterns")
def patterns_cmd(ctx: typer.Context, months: MonthsOption = None) -> None:
    """Recurring spending patterns per expense category."""

    n = months or ctx.obj.settings.pattern_months
    _emit(_run(ctx, lambda s: s.analyze_patterns(n)))


@app.command("trends")
def trends_cmd(ctx: typer.Context, months: MonthsOption = None) -> None:
    """Month-over-month expense trend points, oldest first."""

    n = months or ctx.obj.settings.trend_months
    _emit(_run(ctx, lambda s: s.analyze_trends(n)))


@app.command("forecast")
def forecast_cmd(ctx: typer.Context, months: MonthsOption = None) -> None:
    """Projected spending for the coming months."""

    n = months or ctx.obj.settings.forecast_months
    _emit(_run(ctx, lambda s: s.predict_spending(n)))


@app.command("compare")
def compare_cmd(
    ctx: typer.Context,
    *,
    p1_start: Annotated[str, typer.Option("--p1-start", help="First period start (YYYY-MM-DD).")],
    p1_end: Annotated[str, typer.Option("--p1-end", help="First period end (YYYY-MM-DD).")],
    p2_start: Annotated[str, typer.Option("--p2-start", help="Second period start (YYYY-MM-DD).")],
    p2_end: Annotated[str, typer.Option("--p2-end", help="Second period end (YYYY-MM-DD).")],
    label1: Annotated[str, typer.Option(help="Label for the first period.")] = "Period 1",
    label2: Annotated[str, typer.Option(help="Label for the second period.")] = "Period 2",
) -> None:
    """Compare two date ranges overall and per category."""

    try:
        period1 = DateRange(_parse_date(p1_start, "--p1-start"), _parse_date(p1_end, "--p1-end"))
        period2 = DateRange(_parse_date(p2_start, "--p2-start"), _parse_date(p2_end, "--p2-end"))
    except AnalyticsError as e:
        raise _fail(str(e)) from e
    _emit(_run(ctx, lambda s: s.compare_periods(period1, period2, (label1, label2))))


@app.command("monthly-report")
def monthly_report_cmd(
    ctx: typer.Context,
    *,
    year: Annotated[int, typer.Option(help="Calendar year.")],
    month: Annotated[int, typer.Option(help="Calendar month (1-12).")],
    fmt: FormatOption = OutputFormat.JSON,
) -> None:
    """Income, expenses and top categories for one calendar month."""

    _emit(_run(ctx, lambda s: s.generate_monthly_report(year, month)), fmt)


@app.command("annual-report")
def annual_report_cmd(
    ctx: typer.Context,
    *,
    year: Annotated[int, typer.Option(help="Calendar year.")],
    fmt: FormatOption = OutputFormat.JSON,
) -> None:
    """Year totals, monthly breakdown and year-over-year comparison."""

    _emit(_run(ctx, lambda s: s.generate_annual_report(year)), fmt)


@app.command("summary")
def summary_cmd(
    ctx: typer.Context,
    *,
    start: Annotated[str, typer.Option(help="Range start (YYYY-MM-DD).")],
    end: Annotated[str, typer.Option(help="Range end (YYYY-MM-DD).")],
    fmt: FormatOption = OutputFormat.JSON,
) -> None:
    """Executive summary with highlights, concerns and recommendations."""

    start_d = _parse_date(start, "--start")
    end_d = _parse_date(end, "--end")
    _emit(_run(ctx, lambda s: s.generate_executive_summary(start_d, end_d)), fmt)


@app.command("suggest")
def suggest_cmd(
    ctx: typer.Context,
    *,
    description: Annotated[str, typer.Option(help="Description of the new transaction.")],
    amount: Annotated[float, typer.Option(help="Amount (currently not used for scoring).")] = 0.0,
) -> None:
    """Suggest a category for a transaction description."""

    _emit(_run(ctx, lambda s: s.suggest_category(description, amount)))


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    *,
    transactions_csv: Annotated[
        Path | None,
        typer.Option(dir_okay=False, help="Transactions CSV (id,date,amount,type,...)."),
    ] = None,
    categories_csv: Annotated[
        Path | None, typer.Option(dir_okay=False, help="Categories CSV (id,name).")
    ] = None,
    database_url: Annotated[
        str | None, typer.Option(help="Override DATABASE_URL (falls back to env var).")
    ] = None,
    today: Annotated[
        str | None, typer.Option(help="Treat this ISO date as today (defaults to the system date).")
    ] = None,
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables), configures logging and records the
    data-source options for the subcommand.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    settings = load_settings()
    configure_logging(settings.log_level)

    ctx.obj = _CliContext(
        settings=settings,
        transactions_csv=transactions_csv,
        categories_csv=categories_csv,
        database_url=database_url,
        today=_parse_date(today, "--today") if today else None,
    )

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


def main() -> None:  # pragma: no cover - console script shim
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
