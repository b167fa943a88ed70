"""Reconcile command."""

from datetime import date

import click

from ledgerbook.cli.error_handling import handle_result
from ledgerbook.domain.reconciliation import ReconciliationService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date


@click.command()
@click.argument("account_id", type=int)
@click.argument("bank_balance")
@click.option("--date", "date_str", help="Adjustment date (defaults to today)")
@click.option("--description", help="Adjustment description")
@click.pass_context
def reconcile(ctx, account_id: int, bank_balance: str, date_str: str | None, description: str | None):
    """Reconcile an account to the balance reported by the bank.

    Posts one adjustment for the difference (if any) and sets the stored
    balance to BANK_BALANCE. The adjustment's other leg is left unassigned;
    resolve it with 'ledgerbook assign'.

    Examples:
        ledgerbook reconcile 1 1523.40
        ledgerbook reconcile 1 "1,523.40" --date 2024-03-31
    """
    try:
        balance = parse_amount(bank_balance)
        when = parse_date(date_str) if date_str else date.today()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    service = ReconciliationService(ctx.obj["db"])
    outcome = handle_result(ctx, service.reconcile(account_id, balance, when, description))

    if outcome.transaction is None:
        click.echo(outcome.message)
        return
    click.echo(
        f"Reconciled: {outcome.previous_balance:,.2f} -> {outcome.new_balance:,.2f} "
        f"(difference {outcome.difference:+,.2f}, transaction {outcome.transaction.id})"
    )


def register_commands(cli):
    """Register reconcile command with main CLI."""
    cli.add_command(reconcile)
