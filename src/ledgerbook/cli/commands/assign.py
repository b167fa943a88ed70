"""Commands for resolving incomplete transactions."""

import click

from ledgerbook.cli.commands.transaction import format_leg
from ledgerbook.cli.error_handling import handle_result
from ledgerbook.domain.assignment import AssignmentService


@click.group()
def assign_group():
    """Assign accounts to the missing leg of incomplete transactions."""
    pass


@assign_group.command("list")
@click.argument("account_code")
@click.option("--limit", type=int, default=100, show_default=True, help="Rows per page (max 500)")
@click.option("--offset", type=int, default=0, help="Rows to skip")
@click.pass_context
def list_incomplete(ctx, account_code: str, limit: int, offset: int):
    """List incomplete transactions of an account."""
    service = AssignmentService(ctx.obj["db"])
    rows = service.list_incomplete(account_code, limit=limit, offset=offset)
    total = service.count_incomplete(account_code)
    if not rows:
        click.echo("No incomplete transactions.")
        return

    click.echo(f"\n{total} incomplete transaction{'s' if total != 1 else ''}:")
    click.echo("-" * 80)
    for row in rows:
        txn = row.transaction
        click.echo(
            f"ID: {txn.id:4d} | {txn.date} | {txn.name[:30]:30s} | "
            f"debit: {format_leg(txn.debit_account):12s} | credit: {format_leg(txn.credit_account):12s} | "
            f"{row.amount:>12,.2f}"
        )


@assign_group.command("leg")
@click.argument("transaction_id", type=int)
@click.argument("account_code")
@click.option("--debit/--credit", "is_debit_leg", default=None, required=True, help="Leg to fill")
@click.pass_context
def assign_leg(ctx, transaction_id: int, account_code: str, is_debit_leg: bool):
    """Fill one leg of a transaction with ACCOUNT_CODE.

    Examples:
        ledgerbook assign leg 42 6100 --debit
    """
    service = AssignmentService(ctx.obj["db"])
    handle_result(ctx, service.assign_account(transaction_id, account_code, is_debit_leg))
    leg = "debit" if is_debit_leg else "credit"
    click.echo(f"Assigned {account_code} to the {leg} leg of transaction {transaction_id}")


@assign_group.command("bulk")
@click.argument("transaction_ids", type=int, nargs=-1, required=True)
@click.option("--account", "account_code", required=True, help="Account code to assign")
@click.option(
    "--debit/--credit",
    "is_debit_leg",
    default=None,
    help="Leg to fill; omit to fill whichever single leg is empty",
)
@click.pass_context
def bulk_assign(ctx, transaction_ids: tuple[int, ...], account_code: str, is_debit_leg: bool | None):
    """Assign an account to several transactions.

    Examples:
        ledgerbook assign bulk 41 42 43 --account 6100 --debit
        ledgerbook assign bulk 41 42 43 --account 6100
    """
    service = AssignmentService(ctx.obj["db"])
    user_id = ctx.obj["user"].id
    if is_debit_leg is None:
        result = service.bulk_assign_smart(user_id, list(transaction_ids), account_code)
    else:
        result = service.bulk_assign(user_id, list(transaction_ids), account_code, is_debit_leg)
    outcome = handle_result(ctx, result)
    click.echo(f"Updated {outcome.updated_count}, skipped {outcome.skipped_count}")


def register_commands(cli):
    """Register assignment commands with main CLI."""
    cli.add_command(assign_group, name="assign")
