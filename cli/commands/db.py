# cli/commands/db.py
import click

from lending.context import LendingContext
from lending.exceptions import ConflictError
from ..utils import ProgressTracker

# Sample catalogue for a fresh database
SEED_TITLES = [
    {"title": "The Lord of the Rings", "author": "J.R.R. Tolkien", "isbn": "978-0618640157", "publication_year": 1954, "total_copies": 5},
    {"title": "To Kill a Mockingbird", "author": "Harper Lee", "isbn": "978-0446310789", "publication_year": 1960, "total_copies": 3},
    {"title": "1984", "author": "George Orwell", "isbn": "978-0451524935", "publication_year": 1949, "total_copies": 7},
    {"title": "Pride and Prejudice", "author": "Jane Austen", "isbn": "978-0141439518", "publication_year": 1813, "total_copies": 4},
    {"title": "The Great Gatsby", "author": "F. Scott Fitzgerald", "isbn": "978-0743273565", "publication_year": 1925, "total_copies": 2},
]


@click.group()
def db():
    """Database management commands"""
    pass


@db.command()
@click.pass_obj
def init(ctx: LendingContext):
    """Create the title and loan tables"""
    ctx.database.init_db()
    click.echo(click.style("Database initialized", fg='green'))


@db.command()
@click.option('--verbose/--no-verbose', default=False, help='Show skipped titles')
@click.pass_obj
def seed(ctx: LendingContext, verbose: bool):
    """Insert the sample catalogue, skipping ISBNs already present

    Example:
        lending db seed --verbose
    """
    ctx.database.init_db()
    tracker = ProgressTracker(verbose)

    for entry in SEED_TITLES:
        tracker.increment_processed()
        try:
            ctx.inventory.create_title(**entry)
            tracker.increment_created()
        except ConflictError:
            tracker.add_skipped(entry["title"], entry["isbn"], "already exists")

    tracker.print_results('titles')


@db.command()
@click.pass_obj
def check(ctx: LendingContext):
    """Verify every title's counters against its open loans"""
    broken = ctx.catalog.find_inconsistent_titles()
    if not broken:
        click.echo(click.style("All titles consistent", fg='green'))
        return

    for entry, open_count in broken:
        click.echo(click.style(
            f"[{entry.id}] {entry.title}: {entry.available_copies}/{entry.total_copies} available "
            f"but {open_count} open loans", fg='red'))
    raise SystemExit(1)
