"""Transaction commands."""

from datetime import date

import click

from ledgerbook.cli.error_handling import handle_result
from ledgerbook.domain.entities import Classification
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date


def format_leg(code: str | None) -> str:
    return code if code is not None else "(unassigned)"


@click.group()
def transaction_group():
    """Post and manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--amount", required=True, help="Amount carried by both legs")
@click.option("--debit", "debit_account", required=True, help="Code of the account debited")
@click.option("--credit", "credit_account", required=True, help="Code of the account credited")
@click.option("--name", required=True, help="Short name")
@click.option("--date", "date_str", help="Transaction date (defaults to today)")
@click.option("--description", help="Description")
@click.option("--category", help="Category label")
@click.option("--entity", "entity_id", type=int, help="Entity ID")
@click.pass_context
def add_transaction(
    ctx,
    amount: str,
    debit_account: str,
    credit_account: str,
    name: str,
    date_str: str | None,
    description: str | None,
    category: str | None,
    entity_id: int | None,
):
    """Post a balanced transaction.

    Examples:
        ledgerbook transaction add --amount 45.10 --debit 6100 --credit 1001 --name "Groceries"
    """
    try:
        value = parse_amount(amount)
        when = parse_date(date_str) if date_str else date.today()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    service = TransactionService(ctx.obj["db"])
    txn = handle_result(
        ctx,
        service.post_transaction(
            user_id=ctx.obj["user"].id,
            txn_date=when,
            amount=value,
            debit_account=debit_account,
            credit_account=credit_account,
            name=name,
            description=description,
            category=category,
            entity_id=entity_id,
        ),
    )
    click.echo(f"Posted transaction {txn.id}: {txn.debit:,.2f} {debit_account} / {credit_account}")


@transaction_group.command("list")
@click.argument("account_code")
@click.option("--limit", type=int, default=100, show_default=True, help="Rows per page (max 500)")
@click.option("--offset", type=int, default=0, help="Rows to skip")
@click.pass_context
def list_transactions(ctx, account_code: str, limit: int, offset: int):
    """List transactions of an account, newest first."""
    service = TransactionService(ctx.obj["db"])
    rows = service.list_account_transactions(account_code, limit=limit, offset=offset)
    if not rows:
        click.echo("No transactions found.")
        return

    for row in rows:
        txn = row.transaction
        other = row.other_account_alias or format_leg(row.other_account_code)
        click.echo(
            f"ID: {txn.id:4d} | {txn.date} | {txn.name[:30]:30s} | {row.side.value:6s} | "
            f"{row.amount:>12,.2f} | {other:20s} | {row.classification.value}"
        )


@transaction_group.command("tag-entity")
@click.argument("transaction_ids", type=int, nargs=-1, required=True)
@click.option("--entity", "entity_id", type=int, required=True, help="Entity ID")
@click.pass_context
def tag_entity(ctx, transaction_ids: tuple[int, ...], entity_id: int):
    """Tag transactions with an entity."""
    service = TransactionService(ctx.obj["db"])
    user_id = ctx.obj["user"].id
    if len(transaction_ids) == 1:
        result = service.assign_entity(transaction_ids[0], entity_id, user_id)
    else:
        result = service.bulk_assign_entity(list(transaction_ids), entity_id, user_id)
    updated = handle_result(ctx, result)
    click.echo(f"Tagged {updated} transaction{'s' if updated != 1 else ''}")


@transaction_group.command("classify")
@click.argument("transaction_ids", type=int, nargs=-1, required=True)
@click.option(
    "--as",
    "classification",
    type=click.Choice([c.value for c in Classification]),
    required=True,
    help="Classification tag",
)
@click.pass_context
def classify_transactions(ctx, transaction_ids: tuple[int, ...], classification: str):
    """Tag transactions with a classification."""
    service = TransactionService(ctx.obj["db"])
    updated = handle_result(
        ctx,
        service.bulk_update_classification(
            list(transaction_ids), Classification(classification), ctx.obj["user"].id
        ),
    )
    click.echo(f"Classified {updated} transaction{'s' if updated != 1 else ''} as {classification}")


@transaction_group.command("delete")
@click.argument("transaction_ids", type=int, nargs=-1, required=True)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_transactions(ctx, transaction_ids: tuple[int, ...], yes: bool):
    """Delete transactions. Account balances are not rewound."""
    if not yes and not click.confirm(f"Delete {len(transaction_ids)} transaction(s)?"):
        click.echo("Deletion cancelled.")
        return

    service = TransactionService(ctx.obj["db"])
    deleted = handle_result(ctx, service.bulk_delete(list(transaction_ids), ctx.obj["user"].id))
    click.echo(f"Deleted {deleted} transaction{'s' if deleted != 1 else ''}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
