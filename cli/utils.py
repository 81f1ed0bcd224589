import functools
import click
from typing import List, Dict, Callable

from lending.exceptions import LendingError
from lending.sa.models import Title, Loan


class ProgressTracker:
    """Tracks created and skipped items during a bulk operation"""

    def __init__(self, verbose: bool = False):
        self.processed = 0
        self.created = 0
        self.skipped: List[Dict[str, str]] = []
        self.verbose = verbose

    def add_skipped(self, name: str, id: str, reason: str, color: str = 'yellow'):
        """Add a skipped item to the tracking"""
        self.skipped.append({
            'name': name,
            'id': id,
            'reason': reason,
            'color': color
        })

    def increment_processed(self):
        self.processed += 1

    def increment_created(self):
        self.created += 1

    def print_results(self, item_type: str = 'items'):
        """Print the results of the operation"""
        click.echo("\n" + click.style("Results:", fg='blue'))
        click.echo(click.style("Processed: ", fg='blue') +
                   click.style(str(self.processed), fg='cyan') +
                   click.style(f" {item_type}", fg='blue'))
        click.echo(click.style("Created: ", fg='blue') +
                   click.style(str(self.created), fg='green') +
                   click.style(f" {item_type}", fg='blue'))

        if self.skipped and self.verbose:
            click.echo("\n" + click.style("Skipped items:", fg='yellow'))
            for skip_info in self.skipped:
                click.echo(click.style(f"{skip_info['name']} ({skip_info['id']}): {skip_info['reason']}", fg=skip_info['color']))
        elif self.skipped:
            click.echo(click.style(f"\nSkipped {len(self.skipped)} items. ", fg='yellow') +
                       click.style("Use --verbose to see details.", fg='blue'))


def handle_lending_errors(func: Callable) -> Callable:
    """Turn service failures into a red message and exit status 1"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except LendingError as e:
            click.echo(click.style(f"Error: {e.message}", fg='red'), err=True)
            raise SystemExit(1)
    return wrapper


def print_title(title: Title) -> None:
    click.echo(click.style(f"[{title.id}] ", fg='cyan') +
               click.style(title.title, fg='green') +
               f" by {title.author} ({title.publication_year})")
    click.echo(f"    ISBN: {title.isbn}  Available: {title.available_copies}/{title.total_copies}")


def print_loan(loan: Loan) -> None:
    state = click.style("open", fg='yellow') if loan.is_open else click.style(f"returned {loan.returned_at:%Y-%m-%d %H:%M}", fg='green')
    name = loan.title.title if loan.title is not None else f"title {loan.title_id}"
    click.echo(click.style(f"[{loan.id}] ", fg='cyan') +
               f"{name} - borrower {loan.borrower_id} - borrowed {loan.borrowed_at:%Y-%m-%d %H:%M} - " + state)
