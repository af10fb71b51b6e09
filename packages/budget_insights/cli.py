# ruff: noqa: I001
"""CLI for the ``budget_insights`` package.

A Typer-based console interface over the import pipeline and the analytics
context. Environment variables are loaded from a local ``.env`` using
``python-dotenv`` before any command runs. Business logic lives in the
library modules; this file only reads files and renders results with
``rich``.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from typer.models import OptionInfo

from .api import AnalyticsContext
from .categorize import category_label
from .ingest.importer import import_statement, validate_file
from .logging_setup import configure_logging, get_logger
from .models import DailyBudget, ImportResult, IncomePattern, Insight, SpendingPattern, Transaction

_logger = get_logger("budget_insights.cli")

console = Console()
err_console = Console(stderr=True)


# ---- Small module-level helpers used by CLI commands -------------------------


def _read_text(csv_path: Path) -> str | None:
    """Read ``csv_path`` as UTF-8, printing a friendly error on failure."""

    try:
        return csv_path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        err_console.print(f"Error: File not found: {csv_path}")
    except PermissionError:
        err_console.print(f"Error: Permission denied: {csv_path}")
    except (OSError, UnicodeDecodeError) as e:
        err_console.print(f"Error: Unexpected failure reading '{csv_path}': {e}")
    return None


def _parse_today(value: str | None) -> datetime:
    if not value:
        return datetime.now()
    try:
        day = datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise typer.BadParameter("expected YYYY-MM-DD", param_hint="--today") from None
    # End of the given day so that same-day transactions are in range.
    return day.replace(hour=23, minute=59, second=59)


def _print_errors(result: ImportResult, limit: int = 20) -> None:
    if not result.errors:
        return
    err_console.print(f"[yellow]{len(result.errors)} row(s) skipped:[/yellow]")
    for msg in result.errors[:limit]:
        err_console.print(f"  {msg}")
    if len(result.errors) > limit:
        err_console.print(f"  … {len(result.errors) - limit} more")


def _transactions_table(transactions: list[Transaction] | tuple[Transaction, ...]) -> Table:
    table = Table(title="Transactions")
    table.add_column("Date")
    table.add_column("Description")
    table.add_column("Merchant")
    table.add_column("Category")
    table.add_column("Type")
    table.add_column("Amount", justify="right")
    for t in transactions:
        table.add_row(
            t.date.strftime("%Y-%m-%d"),
            t.description,
            t.merchant_name or "",
            category_label(t.category),
            t.type.value,
            f"{t.amount:,.2f}",
        )
    return table


def _spending_table(patterns: list[SpendingPattern]) -> Table:
    table = Table(title="Spending (last 30 days)")
    table.add_column("Category")
    table.add_column("Total", justify="right")
    table.add_column("Trend")
    table.add_column("Unusual")
    table.add_column("Recurring", justify="right")
    for p in patterns:
        table.add_row(
            category_label(p.category),
            f"{p.average_monthly:,.2f}",
            p.trend.value,
            "yes" if p.unusual_activity else "",
            str(len(p.recurring_expenses)),
        )
    return table


def _income_table(patterns: list[IncomePattern]) -> Table:
    table = Table(title="Income (monthly average, last 90 days)")
    table.add_column("Source")
    table.add_column("Monthly", justify="right")
    table.add_column("Frequency")
    for p in patterns:
        table.add_row(p.source, f"{p.average_monthly:,.2f}", p.frequency.value)
    return table


_PRIORITY_STYLE = {"high": "bold red", "medium": "yellow", "low": "dim"}


def _insights_table(insights: list[Insight]) -> Table:
    table = Table(title="Insights")
    table.add_column("Priority")
    table.add_column("Type")
    table.add_column("Title")
    table.add_column("Details")
    table.add_column("Savings", justify="right")
    for i in insights:
        table.add_row(
            f"[{_PRIORITY_STYLE[i.priority.value]}]{i.priority.value}[/]",
            i.type.value,
            i.title,
            i.description,
            f"{i.potential_savings:,.2f}" if i.potential_savings is not None else "",
        )
    return table


def _budget_table(budget: DailyBudget) -> Table:
    table = Table(title=f"Daily budget for {budget.date:%Y-%m-%d}")
    table.add_column("Available", justify="right")
    table.add_column("Spent", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Used", justify="right")
    table.add_row(
        f"{budget.available_to_spend:,.2f}",
        f"{budget.spent:,.2f}",
        f"{budget.remaining:,.2f}",
        f"{budget.display_percentage:.0f}%",
    )
    return table


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Import bank statement CSV exports and report spending insights.",
)


# Module-level option objects keep calls out of parameter defaults.
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--csv-path",
    help="Path to a bank statement CSV export",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)

_BANK_HELP = (
    "Bank name (e.g. chase, 'Bank of America'). Auto-detected from the header when omitted."
)


@app.command("validate")
def validate_cmd(csv_path: Annotated[Path, CSV_PATH_OPTION]) -> None:
    """Check that a file looks like an importable CSV export."""

    content = _read_text(csv_path)
    if content is None:
        raise typer.Exit(1)
    check = validate_file(content)
    if not check.valid:
        err_console.print(f"Error: {check.error}")
        raise typer.Exit(1)
    console.print("OK")


@app.command("import")
def import_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    bank: Annotated[str | None, typer.Option("--bank", help=_BANK_HELP)] = None,
) -> None:
    """Import a CSV export and print the canonical transactions."""

    content = _read_text(csv_path)
    if content is None:
        raise typer.Exit(1)

    result = import_statement(content, bank)
    if result.account_info is None:
        err_console.print(f"Error: {result.errors[0] if result.errors else 'import failed'}")
        raise typer.Exit(1)

    console.print(f"Detected format: {result.account_info.bank_name}")
    console.print(_transactions_table(result.transactions))
    _print_errors(result)


@app.command("report")
def report_cmd(
    csv_path: Annotated[list[Path], CSV_PATH_OPTION],
    bank: Annotated[str | None, typer.Option("--bank", help=_BANK_HELP)] = None,
    today: Annotated[
        str | None,
        typer.Option("--today", help="Evaluate as of this date (YYYY-MM-DD). Defaults to now."),
    ] = None,
) -> None:
    """Import one or more CSV exports and print patterns, insights and the daily budget."""

    now = _parse_today(today)
    ctx = AnalyticsContext()
    for path in csv_path:
        content = _read_text(path)
        if content is None:
            raise typer.Exit(1)
        result = ctx.import_file(content, bank, account_id=path.stem)
        if result.account_info is None:
            reason = result.errors[0] if result.errors else "import failed"
            err_console.print(f"Error: {path}: {reason}")
            raise typer.Exit(1)
        _print_errors(result)

    ctx.refresh(now=now)
    _logger.debug("report generated for %d file(s)", len(csv_path))

    console.print(_spending_table(ctx.spending_patterns))
    console.print(_income_table(ctx.income_patterns))
    console.print(_insights_table(ctx.insights))
    if ctx.daily_budget is not None:
        console.print(_budget_table(ctx.daily_budget))


@app.callback()
def _root(
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level (default: BUDGET_INSIGHTS_LOG_LEVEL)."),
    ] = None,
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding
    already-set variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m budget_insights.cli`
    app()
