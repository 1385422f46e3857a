"""Main CLI entry point."""

import click

from ledgerkit.cli.error_handling import handle_store_error
from ledgerkit.database.factories import create_database
from ledgerkit.domain.errors import StoreUnavailableError
from ledgerkit.logging_config import configure_logging

# Import and register all commands at module level
from ledgerkit.cli.commands import account, transaction


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides LEDGERKIT_DB_PATH environment variable)",
    envvar="LEDGERKIT_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL, takes precedence over --db-path",
    envvar="LEDGERKIT_DATABASE_URL",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="LEDGERKIT_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, log_level: str):
    """Ledgerkit - double-entry ledger.

    Record deposits, withdrawals and transfers as balanced debit/credit
    entries and derive account balances from the ledger.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_url=database_url, database_path=db_path)
        ctx.call_on_close(db.disconnect)
        try:
            db.connect()
            db.initialize_schema()
        except StoreUnavailableError as e:
            handle_store_error(ctx, e)
        ctx.obj["db"] = db


@cli.command("health")
@click.pass_context
def health(ctx):
    """Check that the ledger store is reachable."""
    db = ctx.obj["db"]
    try:
        with db.unit_of_work() as uow:
            uow.list_accounts()
    except StoreUnavailableError as e:
        handle_store_error(ctx, e)
    else:
        click.echo("status: ok")


# Register all commands
account.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
