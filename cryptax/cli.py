"""Typer CLI interface for Cryptax."""

import logging
from datetime import date, datetime
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from cryptax.config import get_settings
from cryptax.engines.pipeline import CryptaxEngine, EngineResult
from cryptax.exceptions import CryptaxError
from cryptax.ingestion.base import LedgerImportResult
from cryptax.ingestion.ledger_csv import LedgerCsvAdapter
from cryptax.numeric import to_plain
from cryptax.reports.csv_writer import CsvReportWriter, account_prefix, income_column_groups
from cryptax.reports.run_summary import RunSummaryGenerator

app = typer.Typer(
    name="cryptax",
    help="Cryptax: FIFO crypto tax lots, yearly income and mining economics.",
)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """Cryptax: FIFO crypto tax lots, yearly income and mining economics."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        typer.echo(f"Error: Invalid settings: {exc}", err=True)
        raise typer.Exit(1)
    _configure_logging(settings.log_level)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _parse_now(now: str | None) -> date:
    if not now:
        return date.today()
    try:
        return datetime.strptime(now, "%Y-%m-%d").date()
    except ValueError:
        typer.echo(f"Error: Invalid --now date '{now}'. Use YYYY-MM-DD.", err=True)
        raise typer.Exit(1)


def _run(input_file: Path, now: date, method: str | None) -> tuple[LedgerImportResult, EngineResult]:
    adapter = LedgerCsvAdapter()
    imported = adapter.parse(input_file)
    for problem in adapter.validate(imported):
        typer.echo(f"Warning: {problem}", err=True)
    result = CryptaxEngine().run(
        imported.transactions,
        now,
        method or get_settings().cost_basis_method,
    )
    return imported, result


@app.command()
def process(
    input_file: Path = typer.Argument(..., help="Transaction ledger CSV"),
    now: str | None = typer.Option(
        None, "--now", help="Date used to age open lots (YYYY-MM-DD, default today)"
    ),
    method: str | None = typer.Option(None, "--method", help="Cost basis method (only FIFO)"),
    output_dir: Path | None = typer.Option(
        None, "--output-dir", help="Directory for output files (default: next to the input)"
    ),
) -> None:
    """Process a ledger and write gains, cost basis, income and mining CSVs."""
    as_of = _parse_now(now)
    settings = get_settings()
    target_dir = output_dir or input_file.parent
    if not target_dir.is_dir():
        typer.echo(f"Error: Output directory not found: {target_dir}", err=True)
        raise typer.Exit(1)

    try:
        imported, result = _run(input_file, as_of, method)
        writer = CsvReportWriter(
            target_dir,
            input_file.stem,
            stablecoin_accounts=settings.stablecoin_accounts,
        )
        written = writer.write_all(result)
    except (CryptaxError, FileNotFoundError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(RunSummaryGenerator().render(result, imported, written))


@app.command()
def summary(
    input_file: Path = typer.Argument(..., help="Transaction ledger CSV"),
    now: str | None = typer.Option(
        None, "--now", help="Date used to age open lots (YYYY-MM-DD, default today)"
    ),
    method: str | None = typer.Option(None, "--method", help="Cost basis method (only FIFO)"),
) -> None:
    """Print yearly income and unrealized cost basis without writing files."""
    as_of = _parse_now(now)
    try:
        imported, result = _run(input_file, as_of, method)
    except (CryptaxError, FileNotFoundError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    console = Console()
    groups = income_column_groups(result.income)
    tbl = Table(title="Income by Tax Year", show_header=True)
    tbl.add_column("Tax Year")
    for account, group in groups:
        for column in group:
            tbl.add_column(account_prefix(account) + column.value, justify="right")
    for entry in result.income:
        tbl.add_row(
            str(entry.tax_year),
            *(to_plain(entry.value(column, account)) for account, group in groups for column in group),
        )
    console.print(tbl)

    stablecoins = get_settings().stablecoin_accounts
    tbl = Table(title=f"Unrealized Cost Basis as of {as_of.isoformat()}", show_header=True)
    tbl.add_column("Account")
    tbl.add_column("Short-Term", justify="right")
    tbl.add_column("Long-Term", justify="right")
    tbl.add_column("Average", justify="right")
    basis = result.cost_basis
    for account in basis.accounts:
        if account in stablecoins:
            continue
        tbl.add_row(
            account or "(default)",
            to_plain(basis.short_term_for(account)),
            to_plain(basis.long_term_for(account)),
            to_plain(basis.average_for(account)),
        )
    console.print(tbl)

    mining_days = sum(len(days) for days in result.mining.values())
    console.print(
        f"[dim]{imported.transaction_count} transactions, "
        f"{len(imported.invalid_records)} invalid, {mining_days} mining days[/dim]"
    )


if __name__ == "__main__":
    app()
