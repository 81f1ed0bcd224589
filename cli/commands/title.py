# cli/commands/title.py
import click
from pathlib import Path
from typing import Optional

from lending.context import LendingContext
from lending.services import CoverUpload
from ..utils import handle_lending_errors, print_title


@click.group()
def title():
    """Catalog commands"""
    pass


@title.command()
@click.option('--isbn', required=True, help='ISBN of the book')
@click.option('--title', 'title_', required=True, help='Book title')
@click.option('--author', required=True, help='Author name')
@click.option('--year', required=True, type=int, help='Publication year')
@click.option('--copies', required=True, type=int, help='Number of physical copies')
@click.option('--cover', type=click.Path(exists=True, dir_okay=False, path_type=Path), help='PNG or JPEG cover image')
@click.pass_obj
@handle_lending_errors
def add(ctx: LendingContext, isbn: str, title_: str, author: str, year: int, copies: int, cover: Optional[Path]):
    """Add a title to the catalog

    Example:
        lending title add --isbn 978-0451524935 --title 1984 --author "George Orwell" --year 1949 --copies 3
    """
    upload = CoverUpload(data=cover.read_bytes(), filename=cover.name) if cover else None
    entry = ctx.inventory.create_title(
        isbn=isbn,
        author=author,
        title=title_,
        publication_year=year,
        total_copies=copies,
        cover=upload
    )
    click.echo(click.style("Created:", fg='green'))
    print_title(entry)


@title.command(name='list')
@click.option('--title', 'title_', default=None, help='Filter by title substring')
@click.option('--author', default=None, help='Filter by author substring')
@click.option('--page', default=1, type=int, help='Page number')
@click.option('--limit', default=10, type=int, help='Items per page')
@click.pass_obj
@handle_lending_errors
def list_titles(ctx: LendingContext, title_: Optional[str], author: Optional[str], page: int, limit: int):
    """List catalog titles"""
    result = ctx.catalog.list_titles(title=title_, author=author, page=page, limit=limit)
    for entry in result.items:
        print_title(entry)
    click.echo(click.style(f"\nPage {result.page} of {result.total_pages} ({result.total} titles)", fg='blue'))


@title.command()
@click.argument('title_id', type=int)
@click.pass_obj
@handle_lending_errors
def show(ctx: LendingContext, title_id: int):
    """Show one title"""
    print_title(ctx.catalog.get_title(title_id))


@title.command(name='set-quantity')
@click.argument('title_id', type=int)
@click.argument('quantity', type=int)
@click.pass_obj
@handle_lending_errors
def set_quantity(ctx: LendingContext, title_id: int, quantity: int):
    """Change the number of copies owned; lent copies stay lent"""
    entry = ctx.inventory.update_quantity(title_id, quantity)
    click.echo(click.style("Updated:", fg='green'))
    print_title(entry)
