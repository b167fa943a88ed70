"""Account management commands."""

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import AccountType
from ledgerbook.domain.errors import DomainError
from ledgerbook.utils.amount_parser import parse_amount

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("code")
@click.argument("alias")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="Account type")
@click.option("--category", help="Reporting category")
@click.option("--currency", default="USD", show_default=True, help="ISO currency code")
@click.option("--balance", default="0", help="Opening balance")
@click.option("--entity", "entity_id", type=int, help="Entity ID the account belongs to")
@click.pass_context
def create_account(
    ctx,
    code: str,
    alias: str,
    account_type: str | None,
    category: str | None,
    currency: str,
    balance: str,
    entity_id: int | None,
):
    """Create a new account.

    Examples:
        ledgerbook account create 1001 "Checking" --type asset
        ledgerbook account create 4000 "Sales" --type income --category Revenue
    """
    service = AccountService(ctx.obj["db"])
    try:
        account_id = service.create_account(
            code=code,
            alias=alias,
            user_id=ctx.obj["user"].id,
            account_type=AccountType(account_type) if account_type else None,
            category=category,
            currency=currency,
            balance=parse_amount(balance),
            entity_id=entity_id,
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{alias}' (ID: {account_id}, code: {code})")


@account_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include deactivated accounts")
@click.pass_context
def list_accounts(ctx, include_inactive: bool):
    """List your accounts."""
    service = AccountService(ctx.obj["db"])
    listings = service.list_accounts(ctx.obj["user"].id, include_inactive=include_inactive)
    if not listings:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for listing in listings:
        acc = listing.account
        kind = acc.account_type.value if acc.account_type else "-"
        flag = "" if acc.active else " (inactive)"
        click.echo(
            f"ID: {acc.id:3d} | {acc.code:8s} | {acc.alias:20s} | {kind:9s} | "
            f"{acc.balance:>12,.2f} {acc.currency} | incomplete: {listing.incomplete_transactions_count}{flag}"
        )


@account_group.command("update")
@click.argument("account_id", type=int)
@click.option("--alias", help="New alias")
@click.option("--category", help="New category")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="New account type")
@click.option("--currency", help="New currency code")
@click.option("--entity", "entity_id", type=int, help="New entity ID")
@click.pass_context
def update_account(
    ctx,
    account_id: int,
    alias: str | None,
    category: str | None,
    account_type: str | None,
    currency: str | None,
    entity_id: int | None,
):
    """Update an account."""
    service = AccountService(ctx.obj["db"])
    try:
        service.update_account(
            account_id,
            ctx.obj["user"].id,
            alias=alias,
            category=category,
            account_type=AccountType(account_type) if account_type else None,
            currency=currency,
            entity_id=entity_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated account {account_id}")


@account_group.command("deactivate")
@click.argument("account_id", type=int)
@click.pass_context
def deactivate_account(ctx, account_id: int):
    """Deactivate an account. Its transactions are kept."""
    service = AccountService(ctx.obj["db"])
    try:
        service.deactivate_account(account_id, ctx.obj["user"].id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated account {account_id}")


@account_group.command("set-category")
@click.argument("account_ids", type=int, nargs=-1, required=True)
@click.option("--category", required=True, help="Category to set")
@click.pass_context
def set_category(ctx, account_ids: tuple[int, ...], category: str):
    """Set the category of several accounts."""
    service = AccountService(ctx.obj["db"])
    try:
        updated = service.bulk_update_category(list(account_ids), category, ctx.obj["user"].id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated {updated} account{'s' if updated != 1 else ''}")


@account_group.command("balance")
@click.argument("account_id", type=int)
@click.pass_context
def show_balance(ctx, account_id: int):
    """Show the stored balance of an account."""
    service = AccountService(ctx.obj["db"])
    try:
        balance, currency = service.get_balance(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"{balance:,.2f} {currency}")


@account_group.command("recompute")
@click.argument("account_id", type=int)
@click.pass_context
def recompute_balance(ctx, account_id: int):
    """Rebuild the stored balance of an account from complete transactions."""
    service = AccountService(ctx.obj["db"])
    try:
        previous, new = service.recompute_balance(account_id, ctx.obj["user"].id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Account balance updated from {previous:,.2f} to {new:,.2f}")


@account_group.command("candidates")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="Only this type")
@click.pass_context
def assignment_candidates(ctx, account_type: str | None):
    """List active accounts that can fill an unassigned leg."""
    service = AccountService(ctx.obj["db"])
    accounts = service.accounts_for_assignment(AccountType(account_type) if account_type else None)
    if not accounts:
        click.echo("No active accounts found.")
        return
    for acc in accounts:
        kind = acc.account_type.value if acc.account_type else "-"
        click.echo(f"{acc.code:8s} | {acc.alias:20s} | {kind}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
