"""CLI for Receipt Split using Typer."""

import logging
import sys
from decimal import Decimal
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import load_settings
from .db import Database
from .exceptions import StorageError, ValidationError
from .receipts import list_receipts
from .report import format_money
from .service import ExpenseLedger
from .ui import confirm, select_participants_interactive, select_user_interactive

app = typer.Typer(
    name="receipt-split",
    help="Track shared expenses with receipts and settle who owes whom",
)

console = Console()


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def colored_money(amount: Decimal, symbol: str, color: str = "green") -> str:
    """Format money for the console."""
    return f"[{color}]{format_money(amount, symbol)}[/{color}]"


def _fail(error: Exception, verbose: bool):
    console.print(f"\n[bold red]Error:[/bold red] {error}")
    if verbose:
        raise error
    sys.exit(1)


@app.command()
def users(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """List the fixed roster of users."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        table = Table(title="Roster", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan")
        for user in settings.get_roster():
            table.add_row(user.id, user.name)
        console.print(table)

    except Exception as e:
        _fail(e, verbose)


@app.command()
def add(
    description: str = typer.Option(
        ..., "--description", "-d", prompt=True, help="What the money was spent on"
    ),
    amount: str = typer.Option(..., "--amount", "-a", prompt=True, help="Amount paid"),
    paid_by: str | None = typer.Option(
        None, "--paid-by", help="Payer id or name (asked interactively if omitted)"
    ),
    participant: list[str] | None = typer.Option(
        None,
        "--participant",
        "-p",
        help="Participant id or name; repeat for each (asked if omitted)",
    ),
    receipt: Path = typer.Option(
        ..., "--receipt", "-r", prompt="Receipt photo", help="Receipt photo (required)"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Record a new shared expense.

    Every expense needs a receipt photo. The amount is split evenly among
    the participants.
    """
    setup_logging(verbose)

    try:
        settings = load_settings()
        db = Database(settings.database_path)
        ledger = ExpenseLedger(settings, db)

        if paid_by is None:
            console.print("\n[bold]Who paid?[/bold] [dim](Tab to complete)[/dim]")
            paid_by = select_user_interactive(ledger.roster, "Paid by")
            if paid_by is None:
                console.print("[yellow]No payer selected.[/yellow]")
                return

        participants = list(participant or [])
        if not participants:
            console.print("\n[bold]Who took part?[/bold]")
            participants = select_participants_interactive(ledger.roster)

        if not yes:
            names = ", ".join(ledger.roster.resolve(p).name for p in participants)
            console.print(
                f"\n[bold]{description}[/bold]: {amount} paid by "
                f"{ledger.roster.resolve(paid_by).name}, split among {names or '-'}"
            )
            if not confirm("Save this expense?"):
                console.print("[yellow]Cancelled.[/yellow]")
                return

        expense = ledger.record_expense(
            description=description,
            amount=amount,
            paid_by=paid_by,
            participants=participants,
            receipt_path=receipt,
        )

        console.print(
            f"\n[bold green]✓ Expense recorded:[/bold green] {expense.description} "
            f"{colored_money(expense.amount, settings.currency_symbol)}"
        )

    except StorageError as e:
        # The expense stays in memory for this run but is not on disk
        console.print(f"\n[bold yellow]⚠️  {e}[/bold yellow]\n")
        if verbose:
            raise
        sys.exit(1)
    except ValidationError as e:
        console.print(f"\n[bold yellow]⚠️  {e}[/bold yellow]\n")
        if verbose:
            raise
        sys.exit(1)
    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


@app.command("list")
def list_expenses(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show all recorded expenses, oldest first."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        db = Database(settings.database_path)
        ledger = ExpenseLedger(settings, db)
        symbol = settings.currency_symbol

        expenses = ledger.expenses
        if not expenses:
            console.print("[yellow]No expenses recorded yet.[/yellow]")
            return

        table = Table(title="Expenses", show_header=True, header_style="bold magenta")
        table.add_column("Date", style="dim", width=10)
        table.add_column("Description", style="cyan", width=30)
        table.add_column("Paid by")
        table.add_column("Participants")
        table.add_column("Amount", justify="right")

        for expense in expenses:
            desc = expense.description
            table.add_row(
                expense.date.strftime("%Y-%m-%d"),
                desc[:30] + "..." if len(desc) > 30 else desc,
                ledger.roster.get_user_name(expense.paid_by),
                ", ".join(ledger.roster.get_user_name(p) for p in expense.participants),
                colored_money(expense.amount, symbol),
            )

        console.print(table)

        summary = ledger.summary()
        noun = "expense" if summary.expense_count == 1 else "expenses"
        console.print(
            f"\n[bold]Total spent:[/bold] {colored_money(summary.total, symbol)} "
            f"in {summary.expense_count} {noun}"
        )

    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


@app.command()
def balance(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show totals per person and who owes whom."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        db = Database(settings.database_path)
        ledger = ExpenseLedger(settings, db)
        symbol = settings.currency_symbol

        if not ledger.expenses:
            console.print("[yellow]No expenses to calculate.[/yellow]")
            return

        summary = ledger.summary()

        console.print(
            f"\n[bold]Total spent:[/bold] {colored_money(summary.total, symbol)}"
        )
        console.print(
            f"[dim]Average per person: {format_money(summary.average, symbol)}[/dim]\n"
        )

        totals = Table(title="Total Paid by Person", header_style="bold magenta")
        totals.add_column("Name", style="cyan")
        totals.add_column("Paid", justify="right")
        for name, total in summary.totals_by_person.items():
            totals.add_row(name, colored_money(total, symbol))
        console.print(totals)

        console.print("\n[bold]Who owes whom:[/bold]")
        if not summary.balances:
            console.print(
                "  [green]✓ All settled! Everyone paid their fair share.[/green]"
            )
        for transfer in summary.balances:
            console.print(
                f"  [bold]{transfer.from_}[/bold] owes [bold]{transfer.to}[/bold] "
                f"{colored_money(transfer.amount, symbol, color='red')}"
            )

    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


@app.command()
def report(
    output: Path | None = typer.Option(
        None, "--output", "-o", help="PDF path (defaults to the reports directory)"
    ),
    open_file: bool = typer.Option(
        False, "--open", help="Open the report with the system viewer to share it"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Export the shared expenses report as a PDF."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        db = Database(settings.database_path)
        ledger = ExpenseLedger(settings, db)

        if not ledger.expenses:
            console.print("[yellow]No expenses to report.[/yellow]")
            return

        console.print("\n[bold blue]Generating PDF report...[/bold blue]")
        path = ledger.generate_report(output)
        console.print(f"[bold green]✓ Report written to[/bold green] {path}")

        if open_file:
            typer.launch(str(path))

    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


@app.command()
def gallery(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show the receipt photo attached to each expense."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        db = Database(settings.database_path)
        ledger = ExpenseLedger(settings, db)

        entries = list_receipts(ledger.expenses)
        if not entries:
            console.print("[yellow]No receipts yet.[/yellow]")
            return

        table = Table(title="Receipts", show_header=True, header_style="bold magenta")
        table.add_column("Description", style="cyan")
        table.add_column("Amount", justify="right")
        table.add_column("Receipt")

        for entry in entries:
            location = (
                str(entry.path) if entry.exists else f"⚠️  missing: {entry.path}"
            )
            table.add_row(
                entry.expense.description,
                colored_money(entry.expense.amount, settings.currency_symbol),
                location,
            )

        console.print(table)

    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Delete every recorded expense."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        db = Database(settings.database_path)
        ledger = ExpenseLedger(settings, db)

        if not yes and not confirm(
            f"Delete all {len(ledger.expenses)} recorded expenses?"
        ):
            console.print("[yellow]Cancelled.[/yellow]")
            return

        ledger.clear()
        console.print("[bold green]✓ All expenses deleted.[/bold green]")

    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


if __name__ == "__main__":
    app()
