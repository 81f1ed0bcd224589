# cli/main.py
import click

from lending.config import get_settings
from lending.context import LendingContext
from lending.sa.database import Database
from lending.utils.log import configure_logging
from .commands.db import db
from .commands.title import title
from .commands.loan import loan


@click.group()
@click.option('--database-url', envvar='DATABASE_URL', default=None, help='Database connection string')
@click.option('--log-level', default=None, help='Logging level (default: LOG_LEVEL or INFO)')
@click.pass_context
def cli(ctx, database_url, log_level):
    """Book lending tracker CLI"""
    settings = get_settings()
    if database_url:
        settings.database_url = database_url
    configure_logging(log_level or settings.log_level)
    if ctx.obj is None:
        ctx.obj = LendingContext.from_settings(settings, Database(settings=settings))


cli.add_command(db)
cli.add_command(title)
cli.add_command(loan)


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
