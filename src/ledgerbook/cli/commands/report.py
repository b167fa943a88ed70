"""Report commands."""

from datetime import date

import click

from ledgerbook.cli.date_filters import period_options, resolve_cli_date_range
from ledgerbook.cli.error_handling import handle_result
from ledgerbook.domain.reports import ReportService


def _echo_rows(title: str, rows, total) -> None:
    click.echo(f"\n{title}")
    click.echo("-" * 60)
    for row in rows:
        click.echo(f"  {row.code:8s} {row.alias:30s} {row.balance:>14,.2f}")
    click.echo(f"  {'Total ' + title:39s} {total:>14,.2f}")


def _period_label(start: date | None, end: date | None) -> str:
    if start is None and end is None:
        return "all time"
    return f"{start or 'beginning'} to {end or 'today'}"


@click.group()
def report_group():
    """Financial reports."""
    pass


@report_group.command("pnl")
@period_options
@click.option("--entity", "entity_id", type=int, help="Only transactions of this entity")
@click.option("--currency", help="Only accounts in this currency")
@click.pass_context
def profit_loss(ctx, period, start_date, end_date, entity_id, currency):
    """Profit and loss statement (defaults to this month)."""
    today = date.today()
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period=period,
        default_range=(today.replace(day=1), today),
    )
    start = start or date(1900, 1, 1)
    end = end or today

    service = ReportService(ctx.obj["db"])
    report = handle_result(
        ctx, service.profit_loss(ctx.obj["user"].id, start, end, entity_id, currency)
    )

    click.echo(f"Profit & Loss: {_period_label(start, end)}")
    _echo_rows("Income", report.income_accounts, report.total_income)
    _echo_rows("Expenses", report.expense_accounts, report.total_expenses)
    click.echo(f"\nNet profit: {report.net_profit:,.2f}")


@report_group.command("balance-sheet")
@period_options
@click.option("--entity", "entity_id", type=int, help="Only transactions of this entity")
@click.option("--currency", help="Only accounts in this currency")
@click.pass_context
def balance_sheet(ctx, period, start_date, end_date, entity_id, currency):
    """Balance sheet over complete transactions."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    service = ReportService(ctx.obj["db"])
    report = handle_result(
        ctx, service.balance_sheet(ctx.obj["user"].id, start, end, entity_id, currency)
    )

    click.echo(f"Balance Sheet: {_period_label(start, end)}")
    _echo_rows("Assets", report.assets, report.total_assets)
    _echo_rows("Liabilities", report.liabilities, report.total_liabilities)
    _echo_rows("Equity", report.equity, report.total_equity)
    click.echo(f"\nNet income: {report.net_income:,.2f}")


@report_group.command("trial-balance")
@period_options
@click.option("--entity", "entity_id", type=int, help="Only transactions of this entity")
@click.option("--currency", help="Only accounts in this currency")
@click.pass_context
def trial_balance(ctx, period, start_date, end_date, entity_id, currency):
    """Trial balance over complete transactions."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    service = ReportService(ctx.obj["db"])
    report = handle_result(
        ctx, service.trial_balance(ctx.obj["user"].id, start, end, entity_id, currency)
    )

    click.echo(f"Trial Balance: {_period_label(start, end)}")
    click.echo(f"  {'Code':8s} {'Account':30s} {'Debit':>14s} {'Credit':>14s}")
    click.echo("-" * 70)
    for row in report.rows:
        click.echo(
            f"  {row.code:8s} {row.alias:30s} {row.debit_balance:>14,.2f} {row.credit_balance:>14,.2f}"
        )
    click.echo("-" * 70)
    click.echo(
        f"  {'Total':39s} {report.total_debit_balance:>14,.2f} {report.total_credit_balance:>14,.2f}"
    )
    click.echo("Balanced" if report.is_balanced else "NOT balanced")


@report_group.command("summary")
@click.argument("account_code")
@period_options
@click.pass_context
def financial_summary(ctx, account_code, period, start_date, end_date):
    """Income and expense totals of one account."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    service = ReportService(ctx.obj["db"])
    summary = handle_result(ctx, service.financial_summary(account_code, start, end))

    click.echo(f"Summary for {account_code}: {_period_label(start, end)}")
    click.echo(f"  Income:    {summary.total_income:>14,.2f} ({summary.income_transactions} transactions)")
    click.echo(f"  Expenses:  {summary.total_expenses:>14,.2f} ({summary.expense_transactions} transactions)")
    click.echo(f"  Transfers: {summary.transfer_transactions} transactions")
    click.echo(f"  Net:       {summary.net_income:>14,.2f}")


@report_group.command("expenses")
@click.argument("account_code")
@period_options
@click.pass_context
def expenses_by_counter_account(ctx, account_code, period, start_date, end_date):
    """Expenses of an account grouped by counter-account."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    service = ReportService(ctx.obj["db"])
    rows = handle_result(ctx, service.expenses_by_counter_account(account_code, start, end))
    if not rows:
        click.echo("No expenses found.")
        return
    for row in rows:
        click.echo(
            f"  {row.other_account_alias:30s} {row.total_amount:>14,.2f} ({row.transaction_count})"
        )


@report_group.command("daily")
@click.option("--days", type=int, default=30, show_default=True, help="Number of days")
@click.option("--account", "account_id", type=int, help="Only this account")
@click.option("--entity", "entity_id", type=int, help="Only transactions of this entity")
@click.pass_context
def daily_activity(ctx, days, account_id, entity_id):
    """Per-day transaction counts and amounts."""
    service = ReportService(ctx.obj["db"])
    rows = handle_result(
        ctx,
        service.daily_activity(
            ctx.obj["user"].id, days=days, account_id=account_id, entity_id=entity_id
        ),
    )
    if not rows:
        click.echo("No activity.")
        return
    for row in rows:
        click.echo(f"  {row.date}  {row.count:4d}  {row.total_amount:>14,.2f}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
