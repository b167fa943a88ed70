"""Tests for profit and loss, balance sheet and other reports."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerbook.domain.entities import AccountType, Classification

JAN_START, JAN_END = date(2024, 1, 1), date(2024, 1, 31)


@pytest.fixture
def books(make_account, transaction_service, insert_transaction, user):
    """A month of postings across every account type."""
    accounts = {
        "checking": make_account("1001", "Checking", AccountType.ASSET),
        "cash": make_account("1003", "Cash", AccountType.ASSET),
        "card": make_account("2100", "Card", AccountType.LIABILITY),
        "owner": make_account("3000", "Owner", AccountType.EQUITY),
        "salary": make_account("4000", "Salary", AccountType.INCOME),
        "groceries": make_account("6100", "Groceries", AccountType.EXPENSE),
        "rent": make_account("6200", "Rent", AccountType.EXPENSE),
    }

    def post(day, amount, debit, credit, name):
        result = transaction_service.post_transaction(
            user_id=user.id,
            txn_date=day,
            amount=Decimal(amount),
            debit_account=accounts[debit].code,
            credit_account=accounts[credit].code,
            name=name,
        )
        assert result.success, result.error

    post(date(2024, 1, 5), "2000", "checking", "salary", "Payroll")
    post(date(2024, 1, 10), "150", "groceries", "checking", "Market")
    post(date(2024, 1, 12), "50", "groceries", "card", "Bakery")
    post(date(2024, 1, 20), "500", "checking", "owner", "Capital")
    post(date(2024, 2, 3), "999", "groceries", "checking", "Next month")
    insert_transaction(debit_account=accounts["groceries"].code, amount="30", when=date(2024, 1, 15))
    return accounts


class TestProfitLoss:
    def test_totals(self, report_service, user, books):
        result = report_service.profit_loss(user.id, JAN_START, JAN_END)

        assert result.success
        report = result.data
        assert report.total_income == Decimal("2000")
        # the incomplete 30 counts toward profit and loss
        assert report.total_expenses == Decimal("230")
        assert report.net_profit == Decimal("1770")

    def test_zero_activity_accounts_dropped(self, report_service, user, books):
        report = report_service.profit_loss(user.id, JAN_START, JAN_END).data

        assert [r.code for r in report.expense_accounts] == ["6100"]

    def test_currency_filter_restricts_activity(self, report_service, user, books):
        report = report_service.profit_loss(user.id, JAN_START, JAN_END, currency="EUR").data

        assert report.income_accounts == ()
        assert report.net_profit == Decimal("0")

    def test_reversed_period_is_rejected(self, report_service, user):
        result = report_service.profit_loss(user.id, JAN_END, JAN_START)

        assert result.error_kind == "validation"


class TestBalanceSheet:
    def test_equation_holds(self, report_service, user, books):
        report = report_service.balance_sheet(user.id, JAN_START, JAN_END).data

        assert report.total_assets == Decimal("2350")
        assert report.total_liabilities == Decimal("50")
        assert report.total_equity == Decimal("500")
        assert report.net_income == Decimal("1800")
        assert report.total_assets == (
            report.total_liabilities + report.total_equity + report.net_income
        )

    def test_lists_accounts_without_activity(self, report_service, user, books):
        report = report_service.balance_sheet(user.id, JAN_START, JAN_END).data

        cash = next(r for r in report.assets if r.code == "1003")
        assert cash.balance == Decimal("0")


class TestTrialBalance:
    def test_is_balanced(self, report_service, user, books):
        report = report_service.trial_balance(user.id, JAN_START, JAN_END).data

        assert report.is_balanced
        assert report.total_debit_balance == Decimal("2550")
        rows = {r.code: r for r in report.rows}
        assert rows["1001"].total_debits == Decimal("2500")
        assert rows["1001"].total_credits == Decimal("150")
        assert rows["1001"].debit_balance == Decimal("2350")
        assert rows["4000"].credit_balance == Decimal("2000")
        assert rows["6200"].debit_balance == rows["6200"].credit_balance == Decimal("0")


class TestAccountReports:
    def test_financial_summary_follows_classification(self, report_service, books):
        summary = report_service.financial_summary("6100", JAN_START, JAN_END).data

        # groceries is debited against checking and card: transfers from its side
        assert summary.transfer_transactions == 3
        assert summary.total_income == Decimal("0")

    def test_financial_summary_of_checking(self, report_service, books):
        summary = report_service.financial_summary("1001", JAN_START, JAN_END).data

        # checking is debited against salary (expense side of the table) and
        # credited against groceries (income side of the table)
        assert summary.expense_transactions == 1
        assert summary.total_expenses == Decimal("2000")
        assert summary.income_transactions == 1
        assert summary.total_income == Decimal("150")
        assert summary.transfer_transactions == 1
        assert summary.net_income == Decimal("-1850")

    def test_expenses_by_counter_account(self, report_service, books):
        rows = report_service.expenses_by_counter_account("1001", JAN_START, date(2024, 2, 28)).data

        assert [(r.other_account_code, r.total_amount) for r in rows] == [("4000", Decimal("2000"))]

    def test_unknown_account(self, report_service):
        result = report_service.financial_summary("missing")

        assert result.error_kind == "not_found"


class TestDailyActivity:
    def test_signed_by_account(self, report_service, user, books):
        rows = report_service.daily_activity(
            user.id, days=31, account_id=books["checking"].id, today=JAN_END
        ).data

        by_day = {r.date: r for r in rows}
        assert by_day[date(2024, 1, 5)].total_amount == Decimal("2000")
        assert by_day[date(2024, 1, 10)].total_amount == Decimal("-150")
        assert date(2024, 2, 3) not in by_day

    def test_all_accounts(self, report_service, user, books):
        rows = report_service.daily_activity(user.id, days=31, today=JAN_END).data

        assert [r.date for r in rows] == sorted(r.date for r in rows)
        assert sum(r.count for r in rows) == 5

    def test_other_users_account(self, report_service, other_user, books):
        result = report_service.daily_activity(other_user.id, account_id=books["checking"].id)

        assert result.error_kind == "not_found"


def test_classification_enum_values():
    assert {c.value for c in Classification} == {"income", "expense", "transfer"}
