"""Aggregate reports over posted transactions."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Sequence

from ledgerbook.domain.entities import (
    Account,
    AccountBalanceRow,
    AccountType,
    BalanceSheetReport,
    Classification,
    CounterAccountTotal,
    DailyActivity,
    FinancialSummary,
    ProfitLossReport,
    Transaction,
    TrialBalanceReport,
    TrialBalanceRow,
)
from ledgerbook.domain.errors import (
    NotFoundError,
    ValidationError,
    account_code_not_found,
    account_not_found,
)
from ledgerbook.domain.results import OperationResult, run_operation
from ledgerbook.domain.rules import net_balance, signed_leg_amount
from ledgerbook.domain.transaction import views_from_account

if TYPE_CHECKING:
    from ledgerbook.database.base import Database

ZERO = Decimal("0")


def _check_period(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date and end_date and start_date > end_date:
        raise ValidationError("Start date must be on or before end date")


def _touching(account: Account, transactions: Sequence[Transaction]) -> list[Transaction]:
    return [txn for txn in transactions if txn.side_of(account.code) is not None]


def _balance_row(account: Account, transactions: Sequence[Transaction]) -> AccountBalanceRow:
    touching = _touching(account, transactions)
    return AccountBalanceRow(
        code=account.code,
        alias=account.alias,
        account_type=account.account_type,
        category=account.category,
        currency=account.currency,
        balance=net_balance(account, touching),
        transaction_count=len(touching),
    )


def _total(rows: Sequence[AccountBalanceRow]) -> Decimal:
    return sum((row.balance for row in rows), ZERO)


class ReportService:
    """Service for profit and loss, balance sheet and other aggregate reports.

    Entity and currency filters narrow the transactions that are counted,
    never the set of accounts: an account in another currency simply shows no
    activity.
    """

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def profit_loss(
        self,
        user_id: int,
        start_date: date,
        end_date: date,
        entity_id: Optional[int] = None,
        currency: Optional[str] = None,
    ) -> OperationResult[ProfitLossReport]:
        """Profit and loss over a period.

        Every leg dated in the period counts, including legs of incomplete
        transactions. Accounts with no net activity are left out.

        Args:
            user_id: Owner of the accounts
            start_date: First day of the period
            end_date: Last day of the period
            entity_id: Only count transactions tagged with this entity
            currency: Only count activity of accounts in this currency

        Returns:
            OperationResult with a ProfitLossReport
        """

        def report() -> ProfitLossReport:
            _check_period(start_date, end_date)
            with self.db.unit_of_work():
                accounts = [
                    a
                    for a in self.db.list_accounts(user_id=user_id, active_only=True)
                    if a.account_type in (AccountType.INCOME, AccountType.EXPENSE)
                ]
                rows = self._period_rows(
                    accounts, start_date, end_date, entity_id, currency, complete_only=False
                )

            income = tuple(
                r for r in rows if r.account_type is AccountType.INCOME and r.balance != 0
            )
            expenses = tuple(
                r for r in rows if r.account_type is AccountType.EXPENSE and r.balance != 0
            )
            total_income = _total(income)
            total_expenses = _total(expenses)
            return ProfitLossReport(
                income_accounts=income,
                expense_accounts=expenses,
                total_income=total_income,
                total_expenses=total_expenses,
                net_profit=total_income - total_expenses,
                period_start=start_date,
                period_end=end_date,
            )

        return run_operation("profit_loss", report)

    def balance_sheet(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        entity_id: Optional[int] = None,
        currency: Optional[str] = None,
    ) -> OperationResult[BalanceSheetReport]:
        """Balance sheet over complete transactions.

        All active accounts are listed, with or without activity. Income and
        expense accounts are folded into ``net_income`` so that assets equal
        liabilities plus equity plus net income.
        """

        def report() -> BalanceSheetReport:
            _check_period(start_date, end_date)
            with self.db.unit_of_work():
                accounts = self.db.list_accounts(user_id=user_id, active_only=True)
                rows = self._period_rows(
                    accounts, start_date, end_date, entity_id, currency, complete_only=True
                )

            grouped: dict[Optional[AccountType], list[AccountBalanceRow]] = defaultdict(list)
            for row in rows:
                grouped[row.account_type].append(row)

            assets = tuple(grouped[AccountType.ASSET])
            liabilities = tuple(grouped[AccountType.LIABILITY])
            equity = tuple(grouped[AccountType.EQUITY])
            return BalanceSheetReport(
                assets=assets,
                liabilities=liabilities,
                equity=equity,
                unclassified=tuple(grouped[None]),
                total_assets=_total(assets),
                total_liabilities=_total(liabilities),
                total_equity=_total(equity),
                net_income=_total(grouped[AccountType.INCOME]) - _total(grouped[AccountType.EXPENSE]),
                period_start=start_date,
                period_end=end_date,
            )

        return run_operation("balance_sheet", report)

    def trial_balance(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        entity_id: Optional[int] = None,
        currency: Optional[str] = None,
    ) -> OperationResult[TrialBalanceReport]:
        """Trial balance over complete transactions, one row per active account."""

        def report() -> TrialBalanceReport:
            _check_period(start_date, end_date)
            with self.db.unit_of_work():
                accounts = self.db.list_accounts(user_id=user_id, active_only=True)
                transactions = self._period_transactions(
                    accounts, start_date, end_date, entity_id, complete_only=True
                )

            rows = []
            for account in accounts:
                debits = credits = ZERO
                if currency is None or account.currency == currency.upper():
                    for txn in _touching(account, transactions):
                        if txn.debit_account == account.code:
                            debits += txn.debit
                        if txn.credit_account == account.code:
                            credits += txn.credit
                net = debits - credits
                rows.append(
                    TrialBalanceRow(
                        code=account.code,
                        alias=account.alias,
                        account_type=account.account_type,
                        total_debits=debits,
                        total_credits=credits,
                        debit_balance=net if net > 0 else ZERO,
                        credit_balance=-net if net < 0 else ZERO,
                    )
                )
            return TrialBalanceReport(
                rows=tuple(rows),
                total_debit_balance=sum((r.debit_balance for r in rows), ZERO),
                total_credit_balance=sum((r.credit_balance for r in rows), ZERO),
                period_start=start_date,
                period_end=end_date,
            )

        return run_operation("trial_balance", report)

    def financial_summary(
        self,
        account_code: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> OperationResult[FinancialSummary]:
        """Income, expense and transfer totals from one account's point of view."""

        def report() -> FinancialSummary:
            _check_period(start_date, end_date)
            with self.db.unit_of_work():
                views = self._account_views(account_code, start_date, end_date)

            totals = defaultdict(lambda: ZERO)
            counts = defaultdict(int)
            for view in views:
                totals[view.classification] += view.amount
                counts[view.classification] += 1
            income = totals[Classification.INCOME]
            expenses = totals[Classification.EXPENSE]
            return FinancialSummary(
                total_income=income,
                total_expenses=expenses,
                net_income=income - expenses,
                income_transactions=counts[Classification.INCOME],
                expense_transactions=counts[Classification.EXPENSE],
                transfer_transactions=counts[Classification.TRANSFER],
            )

        return run_operation("financial_summary", report)

    def expenses_by_counter_account(
        self,
        account_code: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> OperationResult[list[CounterAccountTotal]]:
        """Expenses of an account grouped by the account on the other leg, largest first."""

        def report() -> list[CounterAccountTotal]:
            _check_period(start_date, end_date)
            with self.db.unit_of_work():
                views = self._account_views(account_code, start_date, end_date)

            totals: dict[Optional[str], list] = {}
            for view in views:
                if view.classification is not Classification.EXPENSE:
                    continue
                entry = totals.setdefault(
                    view.other_account_code,
                    [view.other_account_alias or "Unassigned", ZERO, 0],
                )
                entry[1] += view.amount
                entry[2] += 1

            result = [
                CounterAccountTotal(
                    other_account_code=code,
                    other_account_alias=alias,
                    total_amount=total,
                    transaction_count=count,
                )
                for code, (alias, total, count) in totals.items()
            ]
            return sorted(result, key=lambda row: row.total_amount, reverse=True)

        return run_operation("expenses_by_counter_account", report)

    def daily_activity(
        self,
        user_id: int,
        days: int = 30,
        account_id: Optional[int] = None,
        entity_id: Optional[int] = None,
        today: Optional[date] = None,
    ) -> OperationResult[list[DailyActivity]]:
        """Per-day transaction count and amount over the last ``days`` days.

        With an account the amounts are signed by their effect on that
        account; otherwise they are plain transaction amounts.
        """

        def report() -> list[DailyActivity]:
            if days < 1:
                raise ValidationError("Days must be at least 1")
            end_date = today or date.today()
            start_date = end_date - timedelta(days=days - 1)

            with self.db.unit_of_work():
                account = None
                if account_id is not None:
                    account = self.db.get_account(account_id)
                    if account is None or account.user_id != user_id:
                        raise NotFoundError(f"{account_not_found(account_id)} or access denied")
                    accounts = [account]
                else:
                    accounts = self.db.list_accounts(user_id=user_id)
                transactions = self._period_transactions(
                    accounts, start_date, end_date, entity_id, complete_only=False
                )

            counts: dict[date, int] = defaultdict(int)
            amounts: dict[date, Decimal] = defaultdict(lambda: ZERO)
            for txn in transactions:
                counts[txn.date] += 1
                amounts[txn.date] += self._activity_amount(txn, account)
            return [
                DailyActivity(date=day, count=counts[day], total_amount=amounts[day])
                for day in sorted(counts)
            ]

        return run_operation("daily_activity", report)

    def _period_transactions(
        self,
        accounts: Sequence[Account],
        start_date: Optional[date],
        end_date: Optional[date],
        entity_id: Optional[int],
        complete_only: bool,
    ) -> list[Transaction]:
        return self.db.list_transactions(
            account_codes=[a.code for a in accounts],
            start_date=start_date,
            end_date=end_date,
            entity_id=entity_id,
            complete_only=complete_only,
        )

    def _period_rows(
        self,
        accounts: Sequence[Account],
        start_date: Optional[date],
        end_date: Optional[date],
        entity_id: Optional[int],
        currency: Optional[str],
        complete_only: bool,
    ) -> list[AccountBalanceRow]:
        transactions = self._period_transactions(
            accounts, start_date, end_date, entity_id, complete_only
        )
        rows = []
        for account in accounts:
            counted = transactions
            if currency is not None and account.currency != currency.upper():
                counted = []
            rows.append(_balance_row(account, counted))
        return rows

    def _account_views(
        self, account_code: str, start_date: Optional[date], end_date: Optional[date]
    ):
        if self.db.get_account_by_code(account_code) is None:
            raise NotFoundError(account_code_not_found(account_code))
        transactions = self.db.list_transactions(
            account_codes=[account_code], start_date=start_date, end_date=end_date
        )
        return views_from_account(self.db, transactions, account_code)

    @staticmethod
    def _activity_amount(txn: Transaction, account: Optional[Account]) -> Decimal:
        if account is None or account.account_type is None:
            return txn.debit
        side = txn.side_of(account.code)
        return signed_leg_amount(account.account_type, side, txn.amount_for(side))
