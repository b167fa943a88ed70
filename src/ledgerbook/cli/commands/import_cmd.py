"""Bank statement import command."""

import json
from pathlib import Path
from typing import Any

import click

from ledgerbook.cli.error_handling import handle_result
from ledgerbook.domain.entities import BankStatement, LegSide, StatementLine
from ledgerbook.domain.statement_import import StatementImportService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date


def load_statement(data: dict[str, Any], account_id: int | None = None) -> BankStatement:
    """Build a BankStatement from its JSON form.

    Expected keys: ``account_id`` (unless given separately), ``statement_date``,
    ``opening_balance``, ``closing_balance`` and ``transactions``, a list of
    objects with ``date``, ``description``, ``amount`` and optionally
    ``type`` (debit or credit) and ``category``.

    Raises:
        ValueError: If a key is missing or a value cannot be parsed
    """
    try:
        account = account_id if account_id is not None else int(data["account_id"])
        lines = []
        for number, row in enumerate(data.get("transactions") or [], start=1):
            try:
                side = row.get("type") or row.get("side")
                lines.append(
                    StatementLine(
                        date=parse_date(str(row["date"])),
                        description=str(row.get("description") or ""),
                        amount=parse_amount(row["amount"]),
                        side=LegSide(side.lower()) if side else None,
                        category=row.get("category"),
                    )
                )
            except (KeyError, ValueError) as e:
                raise ValueError(f"Transaction {number}: {e}") from e
        return BankStatement(
            account_id=account,
            statement_date=parse_date(str(data["statement_date"])),
            opening_balance=parse_amount(data["opening_balance"]),
            closing_balance=parse_amount(data["closing_balance"]),
            lines=tuple(lines),
        )
    except KeyError as e:
        raise ValueError(f"Missing field {e}") from e


@click.command("import")
@click.argument("statement_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--account", "account_id", type=int, help="Account ID (overrides the file)")
@click.pass_context
def import_statement(ctx, statement_file: Path, account_id: int | None):
    """Import a bank statement from a JSON file.

    The statement must balance: opening balance plus the signed amounts must
    equal the closing balance. Imported transactions have their other leg
    unassigned; resolve them with 'ledgerbook assign'.

    Importing the same file twice posts its transactions twice.

    Examples:
        ledgerbook import march.json
        ledgerbook import march.json --account 3
    """
    try:
        statement = load_statement(json.loads(statement_file.read_text()), account_id)
    except (ValueError, TypeError, AttributeError) as e:
        click.echo(f"Error: Invalid statement file: {e}", err=True)
        ctx.exit(1)

    service = StatementImportService(ctx.obj["db"])
    outcome = handle_result(ctx, service.import_statement(statement))

    if outcome.opening_adjustment is not None:
        click.echo(
            f"Posted opening balance adjustment (transaction {outcome.opening_adjustment.id})"
        )
    click.echo(f"Imported {len(outcome.transactions)} transactions")
    click.echo(f"Account balance set to {statement.closing_balance:,.2f}")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_statement)
