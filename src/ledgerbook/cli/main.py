"""Main CLI entry point."""

import logging

import click
from ledgerbook.database.factories import create_sqlite_database

# Import and register all commands at module level
from ledgerbook.cli.commands import (
    account,
    init_accounts,
    entry,
    report,
    user,
    cash_count,
)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(verbose: bool) -> None:
    """Send ledgerbook logs to stderr, DEBUG when verbose else WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
    # SQLAlchemy echoes every statement at INFO
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    envvar="LEDGERBOOK_DB_PATH",
)
@click.option(
    "--user",
    "username",
    help="Username recorded as author of entries and cash counts",
    envvar="LEDGERBOOK_USER",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, username: str | None, verbose: bool):
    """Ledgerbook - double-entry bookkeeping.

    Record balanced journal entries against a chart of accounts and derive
    the general ledger, trial balance, balance sheet and income statement.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)
    ctx.obj["username"] = username

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
init_accounts.register_commands(cli)
entry.register_commands(cli)
report.register_commands(cli)
user.register_commands(cli)
cash_count.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
