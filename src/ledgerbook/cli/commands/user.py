"""User commands."""

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.user import UserService


@click.group()
def user_group():
    """Manage users."""
    pass


@user_group.command("create")
@click.argument("email")
@click.option("--name", help="Display name")
@click.pass_context
def create_user(ctx, email: str, name: str | None):
    """Create a user.

    Examples:
        ledgerbook user create ana@example.com --name "Ana"
    """
    service = UserService(ctx.obj["db"])
    try:
        user_id = service.create_user(email=email, name=name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created user '{email.strip().lower()}' (ID: {user_id})")


@user_group.command("whoami")
@click.pass_context
def whoami(ctx):
    """Show the acting user (set with --user or LEDGERBOOK_USER)."""
    current = ctx.obj["user"]
    click.echo(f"ID: {current.id} | {current.email}" + (f" | {current.name}" if current.name else ""))


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
