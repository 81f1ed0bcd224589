# cli/commands/loan.py
import click
from typing import Optional

from lending.context import LendingContext
from ..utils import handle_lending_errors, print_loan


@click.group()
def loan():
    """Borrow and return commands"""
    pass


@loan.command()
@click.argument('title_id', type=int)
@click.option('--borrower', required=True, type=int, help='ID of the borrower')
@click.pass_obj
@handle_lending_errors
def borrow(ctx: LendingContext, title_id: int, borrower: int):
    """Lend one copy of a title"""
    print_loan(ctx.lending.borrow(title_id, borrower))


@loan.command(name='return')
@click.argument('title_id', type=int)
@click.option('--borrower', required=True, type=int, help='ID of the borrower')
@click.pass_obj
@handle_lending_errors
def return_(ctx: LendingContext, title_id: int, borrower: int):
    """Return a borrowed copy"""
    print_loan(ctx.lending.return_title(title_id, borrower))


@loan.command()
@click.option('--open-only', is_flag=True, default=False, help='Only show loans not yet returned')
@click.option('--borrower', default=None, type=int, help='Restrict open loans to one borrower')
@click.pass_obj
def history(ctx: LendingContext, open_only: bool, borrower: Optional[int]):
    """Show the lending history, newest first"""
    if open_only or borrower is not None:
        loans = ctx.catalog.list_open_loans(borrower)
    else:
        loans = ctx.catalog.list_loan_history()

    if not loans:
        click.echo(click.style("No loans found", fg='yellow'))
        return
    for entry in loans:
        print_loan(entry)
