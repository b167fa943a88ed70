"""Entity (company or person) commands."""

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.entity import EntityService
from ledgerbook.domain.errors import DomainError


@click.group()
def entity_group():
    """Manage entities that group accounts and transactions."""
    pass


@entity_group.command("create")
@click.argument("code")
@click.argument("name")
@click.option("--email", help="Contact email")
@click.pass_context
def create_entity(ctx, code: str, name: str, email: str | None):
    """Create an entity.

    Examples:
        ledgerbook entity create ACME "Acme Ltd" --email books@acme.test
    """
    service = EntityService(ctx.obj["db"])
    try:
        entity_id = service.create_entity(code, name, ctx.obj["user"].id, email=email)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created entity '{name}' (ID: {entity_id})")


@entity_group.command("list")
@click.pass_context
def list_entities(ctx):
    """List your entities with account totals."""
    service = EntityService(ctx.obj["db"])
    entities = service.list_entities(ctx.obj["user"].id)
    if not entities:
        click.echo("No entities found.")
        return

    click.echo("\nEntities:")
    click.echo("-" * 80)
    for stats in entities:
        ent = stats.entity
        click.echo(
            f"ID: {ent.id:3d} | {ent.code:8s} | {ent.name:20s} | accounts: {stats.total_accounts} | "
            f"balance: {stats.total_balance:,.2f} | incomplete: {stats.incomplete_transactions_count}"
        )


@entity_group.command("recompute")
@click.argument("entity_id", type=int)
@click.pass_context
def recompute_balances(ctx, entity_id: int):
    """Rebuild stored balances of an entity's accounts from complete transactions."""
    service = EntityService(ctx.obj["db"])
    try:
        updated = service.recompute_balances(entity_id, ctx.obj["user"].id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recomputed {updated} account balance{'s' if updated != 1 else ''}")


def register_commands(cli):
    """Register entity commands with main CLI."""
    cli.add_command(entity_group, name="entity")
