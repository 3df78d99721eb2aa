"""CLI for tabsettle using Typer."""

import logging
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import Settings, load_settings
from .exceptions import TabSettleError, UnknownAccountError
from .loader import load_document
from .models import AccountId, GroupSummary, Transaction
from .money import from_minor_units
from .planner import SettlementStrategy
from .service import SettlementService

app = typer.Typer(
    name="tabsettle",
    help="Compute group balances and the transfers that settle them",
)

console = Console()


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def format_money(amount: int, use_color: bool = True) -> str:
    """
    Format minor units in accounting style with alignment.

    Negative amounts use parentheses: (85.02)
    Positive amounts have spaces:      85.02
    The spaces ensure decimal points align in tables.
    """
    abs_amount = from_minor_units(abs(amount))
    if amount < 0:
        if use_color:
            formatted = f"([red]{abs_amount:,.2f}[/red])"
        else:
            formatted = f"({abs_amount:,.2f})"
    else:
        if use_color:
            formatted = f" [green]{abs_amount:,.2f}[/green] "
        else:
            formatted = f" {abs_amount:,.2f} "
    return formatted


def resolve_account(account: str, accounts: Iterable[AccountId]) -> AccountId:
    """
    Match a command-line account name to an id from the expense history.

    Ids loaded from JSON may be integers, so the match is on their text.

    Raises:
        UnknownAccountError: If no account has that name
    """
    for candidate in accounts:
        if str(candidate) == account:
            return candidate
    raise UnknownAccountError(f"Account {account} not found in expense history")


def _build_service(strategy: SettlementStrategy | None) -> SettlementService:
    overrides = {}
    if strategy is not None:
        overrides["settlement_strategy"] = strategy
    return SettlementService(load_settings(**overrides))


def display_transactions(
    transactions: list[Transaction], settings: Settings, title: str = "Settle Up"
):
    """Display transactions in a table."""
    if not transactions:
        console.print("[green]✓ Everyone is settled up[/green]")
        return

    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("From", style="cyan")
    table.add_column("To", style="cyan")
    table.add_column(f"Amount ({settings.currency_code})", justify="right", width=14)

    for transaction in transactions:
        table.add_row(
            str(transaction.from_account),
            str(transaction.to_account),
            format_money(transaction.amount, use_color=False),
        )

    console.print(table)


def display_group_summary(summary: GroupSummary, settings: Settings):
    """Display balances and the settlement plan."""
    table = Table(title="Balances", show_header=True, header_style="bold magenta")
    table.add_column("Account", style="cyan")
    table.add_column(f"Balance ({settings.currency_code})", justify="right", width=16)
    table.add_column("Owes", justify="right", width=12)
    table.add_column("Is Owed", justify="right", width=12)

    for entry in summary.balances:
        table.add_row(
            str(entry.account),
            format_money(entry.balance),
            format_money(entry.owes, use_color=False),
            format_money(entry.owed, use_color=False),
        )

    console.print(table)
    console.print()
    console.print("[bold]Summary:[/bold]")
    if summary.total_expenses is not None:
        console.print(f"  Total expenses: {format_money(summary.total_expenses)}")
    console.print(f"  Total credited: {format_money(summary.total_credited)}")
    console.print(f"  Transactions needed: {summary.total_transactions}")

    net = sum(entry.balance for entry in summary.balances)
    if net == 0:
        console.print("  [green]✓ Balances sum to zero[/green]")
    else:
        console.print(f"  [red]✗ Balances sum to {net} minor units[/red]")


@app.command()
def balances(
    file: Path = typer.Argument(..., help="JSON expense document"),
    strategy: Optional[SettlementStrategy] = typer.Option(
        None, "--strategy", "-s", help="Settlement strategy"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show each account's balance and the transfers that settle the group."""
    setup_logging(verbose)

    try:
        service = _build_service(strategy)
        expenses, payments = load_document(file)
        summary = service.summarize_group(expenses, payments)

        display_group_summary(summary, service.settings)
        console.print()
        display_transactions(summary.transactions, service.settings)

    except TabSettleError as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def plan(
    file: Path = typer.Argument(..., help="JSON expense document"),
    strategy: Optional[SettlementStrategy] = typer.Option(
        None, "--strategy", "-s", help="Settlement strategy"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show only the transfers that settle the group."""
    setup_logging(verbose)

    try:
        service = _build_service(strategy)
        expenses, payments = load_document(file)
        transactions = service.plan(expenses, payments)

        display_transactions(transactions, service.settings)

    except TabSettleError as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            raise
        sys.exit(1)


@app.command()
def user(
    file: Path = typer.Argument(..., help="JSON expense document"),
    account: str = typer.Argument(..., help="Account to summarize"),
    strategy: Optional[SettlementStrategy] = typer.Option(
        None, "--strategy", "-s", help="Settlement strategy"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show what one account pays and receives."""
    setup_logging(verbose)

    try:
        service = _build_service(strategy)
        expenses, payments = load_document(file)
        balances = service.compute_balances(expenses, payments)
        resolved = resolve_account(account, balances)
        summary = service.summarize_user(expenses, resolved, payments)

        console.print(f"\n[bold]{escape(account)}[/bold]")
        console.print(f"  Balance: {format_money(summary.balance)}")
        console.print(f"  Pays:     {format_money(summary.total_owes, use_color=False)}")
        console.print(
            f"  Receives: {format_money(summary.total_owed_by, use_color=False)}"
        )
        console.print()
        display_transactions(
            summary.owes + summary.owed_by, service.settings, title=f"{account}"
        )

    except TabSettleError as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        if verbose:
            raise
        sys.exit(1)


if __name__ == "__main__":
    app()
