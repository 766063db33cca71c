"""Typer CLI interface for paycore."""

import json
import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from paycore.engines.forward import compute_net
from paycore.engines.inverse import solve_gross_from_net
from paycore.engines.rounding import format_amount
from paycore.engines.tables import LATEST_YEAR, get_default_config
from paycore.exceptions import NumericalError, PayrollError
from paycore.models.config import SalaryConfig, load_config
from paycore.models.results import SalaryBreakdown

logger = logging.getLogger(__name__)

DEFAULT_DB = Path.home() / ".paycore" / "paycore.db"

app = typer.Typer(
    name="paycore",
    help="Gross/net salary computation for payroll.",
)
config_app = typer.Typer(help="Inspect and store tax configurations.")
record_app = typer.Typer(help="Store salary records pinned to a configuration version.")
app.add_typer(config_app, name="config")
app.add_typer(record_app, name="record")

console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log solver progress"),
) -> None:
    """Gross/net salary computation for payroll."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(exc: PayrollError) -> NoReturn:
    if isinstance(exc, NumericalError):
        logger.error("Solver invariant violated: %s", exc)
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(1)


def _pct(rate: Decimal) -> str:
    return f"{(rate * 100).normalize():f}%"


def _resolve_config(year: int, config_file: Path | None) -> SalaryConfig:
    if config_file is not None:
        return load_config(config_file)
    return get_default_config(year)


def _print_breakdown(result: SalaryBreakdown, title: str) -> None:
    tbl = Table(title=title, show_header=False, padding=(0, 1))
    tbl.add_column("", style="cyan", min_width=24)
    tbl.add_column("", justify="right", style="green")
    tbl.add_row("Gross salary", format_amount(result.gross))
    tbl.add_row("Contribution (CNSS)", format_amount(result.contribution))
    tbl.add_row("Family deduction", format_amount(result.deduction))
    tbl.add_row("Taxable base", format_amount(result.taxable_base))
    tbl.add_row("Income tax (IRPP)", format_amount(result.tax))
    tbl.add_row("Solidarity (CSS)", format_amount(result.solidarity))
    tbl.add_row("Net salary", format_amount(result.net))
    console.print(tbl)


@app.command()
def net(
    gross: str = typer.Argument(..., help="Gross monthly salary"),
    head: bool = typer.Option(False, "--head", help="Employee is head of household"),
    dependents: int = typer.Option(0, "--dependents", "-d", help="Number of dependent children"),
    year: int = typer.Option(LATEST_YEAR, "--year", "-y", help="Built-in configuration year"),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="JSON configuration file (overrides --year)"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Compute the net salary breakdown for a gross salary."""
    try:
        config = _resolve_config(year, config_file)
        result = compute_net(gross, head, dependents, config)
    except PayrollError as exc:
        _fail(exc)

    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return
    _print_breakdown(result, f"Salary breakdown ({config.label or 'custom'})")


@app.command()
def gross(
    net_target: str = typer.Argument(..., help="Desired net monthly salary"),
    head: bool = typer.Option(False, "--head", help="Employee is head of household"),
    dependents: int = typer.Option(0, "--dependents", "-d", help="Number of dependent children"),
    year: int = typer.Option(LATEST_YEAR, "--year", "-y", help="Built-in configuration year"),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="JSON configuration file (overrides --year)"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Compute the gross salary that yields a desired net salary."""
    try:
        config = _resolve_config(year, config_file)
        solution = solve_gross_from_net(net_target, head, dependents, config)
    except PayrollError as exc:
        _fail(exc)

    if as_json:
        typer.echo(json.dumps(solution.model_dump(mode="json"), indent=2))
        return
    typer.echo(f"Gross salary: {format_amount(solution.gross)}")
    _print_breakdown(solution.breakdown, f"Verification ({config.label or 'custom'})")


@app.command()
def payslip(
    gross_salary: str = typer.Argument(..., help="Gross monthly salary"),
    employee: str | None = typer.Option(None, "--employee", "-e", help="Employee name"),
    period: str | None = typer.Option(None, "--period", "-p", help="Pay period, e.g. 2025-03"),
    head: bool = typer.Option(False, "--head", help="Employee is head of household"),
    dependents: int = typer.Option(0, "--dependents", "-d", help="Number of dependent children"),
    year: int = typer.Option(LATEST_YEAR, "--year", "-y", help="Built-in configuration year"),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="JSON configuration file (overrides --year)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the payslip to a file"),
) -> None:
    """Render a plain-text payslip for a gross salary."""
    from paycore.reports.payslip import PayslipGenerator

    try:
        config = _resolve_config(year, config_file)
        result = compute_net(gross_salary, head, dependents, config)
    except PayrollError as exc:
        _fail(exc)

    text = PayslipGenerator().render(result, employee_name=employee, period=period)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text)
        typer.echo(f"Payslip written to {output}")
    else:
        typer.echo(text)


@config_app.command("show")
def config_show(
    year: int = typer.Option(LATEST_YEAR, "--year", "-y", help="Built-in configuration year"),
    config_file: Path | None = typer.Option(None, "--config", "-c", help="JSON configuration file (overrides --year)"),
) -> None:
    """Display a tax configuration."""
    try:
        config = _resolve_config(year, config_file)
    except PayrollError as exc:
        _fail(exc)

    ded = config.family_deduction
    typer.echo(f"Configuration: {config.label or 'custom'}")
    typer.echo(f"Contribution rate: {_pct(config.contribution_rate)}")
    if config.contribution_ceiling is not None:
        typer.echo(f"Contribution ceiling: {format_amount(config.contribution_ceiling)}")
    typer.echo(f"Solidarity rate: {_pct(config.solidarity_rate)}")
    typer.echo(
        f"Deductions: head of household {format_amount(ded.head_of_household)}, "
        f"per dependent {format_amount(ded.per_dependent)}"
        + (f" (max {ded.max_dependents})" if ded.max_dependents is not None else "")
    )

    tbl = Table(title="Tax brackets", show_header=True)
    tbl.add_column("From", justify="right")
    tbl.add_column("To", justify="right")
    tbl.add_column("Rate", justify="right", style="green")
    prev = Decimal("0")
    for bracket in config.brackets:
        upper = "∞" if bracket.is_unbounded else f"{bracket.upper_bound:.3f}"
        tbl.add_row(f"{prev:.3f}", upper, _pct(bracket.rate))
        if not bracket.is_unbounded:
            prev = bracket.upper_bound
    console.print(tbl)


@config_app.command("import")
def config_import(
    config_file: Path = typer.Argument(..., help="JSON configuration file"),
    effective_from: str = typer.Option(..., "--effective-from", help="First day the configuration applies (YYYY-MM-DD)"),
    db: Path = typer.Option(DEFAULT_DB, "--db", help="Path to the SQLite database file"),
) -> None:
    """Store a configuration as a new version in the database."""
    from paycore.db.repository import PayrollRepository
    from paycore.db.schema import create_schema

    try:
        day = date.fromisoformat(effective_from)
    except ValueError:
        typer.echo(f"Error: Invalid date '{effective_from}'. Use YYYY-MM-DD.", err=True)
        raise typer.Exit(1)

    try:
        config = load_config(config_file)
    except PayrollError as exc:
        _fail(exc)

    db.parent.mkdir(parents=True, exist_ok=True)
    conn = create_schema(db)
    try:
        version_id = PayrollRepository(conn).save_config_version(config, day)
    finally:
        conn.close()
    typer.echo(f"Stored configuration version {version_id} effective from {day.isoformat()}")


@record_app.command("add")
def record_add(
    employee_id: str = typer.Argument(..., help="Employee identifier"),
    net_target: str = typer.Option(..., "--net", help="Desired net monthly salary"),
    effective_date: str = typer.Option(..., "--effective-date", help="Date the salary takes effect (YYYY-MM-DD)"),
    head: bool = typer.Option(False, "--head", help="Employee is head of household"),
    dependents: int = typer.Option(0, "--dependents", "-d", help="Number of dependent children"),
    db: Path = typer.Option(DEFAULT_DB, "--db", help="Path to the SQLite database file"),
) -> None:
    """Solve the gross for a net salary and store it against the configuration in effect."""
    from paycore.db.repository import PayrollRepository
    from paycore.db.schema import create_schema

    try:
        day = date.fromisoformat(effective_date)
    except ValueError:
        typer.echo(f"Error: Invalid date '{effective_date}'. Use YYYY-MM-DD.", err=True)
        raise typer.Exit(1)

    if not db.exists():
        typer.echo("Error: No database found. Import a configuration first with `paycore config import`.", err=True)
        raise typer.Exit(1)

    conn = create_schema(db)
    try:
        repo = PayrollRepository(conn)
        version_id, config = repo.get_config_for_date(day)
        solution = solve_gross_from_net(net_target, head, dependents, config)
        record_id = repo.save_salary_record(
            employee_id,
            day,
            solution.gross,
            solution.breakdown.net,
            head,
            dependents,
            version_id,
        )
    except PayrollError as exc:
        _fail(exc)
    finally:
        conn.close()

    typer.echo(
        f"Stored salary record {record_id}: gross {format_amount(solution.gross)}, "
        f"net {format_amount(solution.breakdown.net)} (config {version_id})"
    )


if __name__ == "__main__":
    app()
