"""Main CLI entry point."""

import logging

import click

from salarizare.database.factories import create_sqlite_database
from salarizare.logging_config import configure_logging

# Import and register all commands at module level
from salarizare.cli.commands import (
    employee,
    settings,
    working_days,
    payroll,
    deduction,
    tac,
    transaction,
    import_cmd,
)

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SALARIZARE_DB_PATH environment variable)",
    envvar="SALARIZARE_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (overrides SALARIZARE_LOG_LEVEL, default WARNING)",
    envvar="SALARIZARE_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Salarizare - payroll and bookkeeping templates.

    Keep employees, legal settings and the working days calendar, compute the
    monthly payroll table, and post transactions to account files through
    TAC templates.
    """
    ctx.ensure_object(dict)
    configure_logging(level=log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
employee.register_commands(cli)
settings.register_commands(cli)
working_days.register_commands(cli)
payroll.register_commands(cli)
deduction.register_commands(cli)
tac.register_commands(cli)
transaction.register_commands(cli)
import_cmd.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
