"""Main CLI entry point."""

import logging

import click

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.user import UserService

# Import and register all commands at module level
from ledgerbook.cli.commands import (
    account,
    assign,
    entity,
    import_cmd,
    reconcile,
    report,
    transaction,
    user,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    envvar="LEDGERBOOK_DB_PATH",
)
@click.option(
    "--user",
    "user_email",
    default="local@localhost",
    show_default=True,
    envvar="LEDGERBOOK_USER",
    help="Email of the acting user; created on first use",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="LEDGERBOOK_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, user_email: str, log_level: str):
    """Ledgerbook - Double-entry bookkeeping.

    Keep accounts and double-entry transactions, reconcile accounts against
    bank balances, import bank statements and resolve their missing legs.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["user"] = UserService(db).get_or_create(user_email)


# Register all commands
user.register_commands(cli)
account.register_commands(cli)
entity.register_commands(cli)
transaction.register_commands(cli)
reconcile.register_commands(cli)
import_cmd.register_commands(cli)
assign.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
