"""Tests for the double-entry classification and direction rules."""

from decimal import Decimal

import pytest

from ledgerbook.domain.entities import AccountType, Classification, LegSide
from ledgerbook.domain.rules import (
    classify,
    debit_increases_balance,
    increasing_side,
    side_for_change,
    signed_leg_amount,
    statement_balances,
    within_tolerance,
)

CREDIT, DEBIT = LegSide.CREDIT, LegSide.DEBIT
INCOME, EXPENSE, TRANSFER = Classification.INCOME, Classification.EXPENSE, Classification.TRANSFER


@pytest.mark.parametrize(
    "side, other_type, expected",
    [
        (CREDIT, AccountType.INCOME, INCOME),
        (CREDIT, AccountType.EXPENSE, INCOME),
        (CREDIT, AccountType.ASSET, TRANSFER),
        (CREDIT, AccountType.LIABILITY, TRANSFER),
        (CREDIT, AccountType.EQUITY, TRANSFER),
        (CREDIT, None, TRANSFER),
        (DEBIT, AccountType.EXPENSE, EXPENSE),
        (DEBIT, AccountType.INCOME, EXPENSE),
        (DEBIT, AccountType.ASSET, TRANSFER),
        (DEBIT, AccountType.LIABILITY, TRANSFER),
        (DEBIT, AccountType.EQUITY, TRANSFER),
        (DEBIT, None, TRANSFER),
    ],
)
def test_classify_table(side, other_type, expected):
    assert classify(side, other_type) is expected


@pytest.mark.parametrize("account_type", list(AccountType))
def test_debit_increases_balance(account_type):
    expected = account_type in (AccountType.ASSET, AccountType.EXPENSE)
    assert debit_increases_balance(account_type) is expected
    assert (increasing_side(account_type) is DEBIT) is expected


class TestSignedLegAmount:
    def test_asset_debit_increases(self):
        assert signed_leg_amount(AccountType.ASSET, DEBIT, Decimal("5")) == Decimal("5")
        assert signed_leg_amount(AccountType.ASSET, CREDIT, Decimal("5")) == Decimal("-5")

    def test_liability_credit_increases(self):
        assert signed_leg_amount(AccountType.LIABILITY, CREDIT, Decimal("5")) == Decimal("5")
        assert signed_leg_amount(AccountType.LIABILITY, DEBIT, Decimal("5")) == Decimal("-5")


class TestSideForChange:
    def test_increase_uses_increasing_side(self):
        assert side_for_change(AccountType.ASSET, Decimal("10")) is DEBIT
        assert side_for_change(AccountType.INCOME, Decimal("10")) is CREDIT

    def test_decrease_uses_opposite_side(self):
        assert side_for_change(AccountType.ASSET, Decimal("-10")) is CREDIT
        assert side_for_change(AccountType.LIABILITY, Decimal("-10")) is DEBIT

    @pytest.mark.parametrize("account_type", list(AccountType))
    @pytest.mark.parametrize("change", [Decimal("12.34"), Decimal("-12.34")])
    def test_posting_on_chosen_side_moves_balance_by_change(self, account_type, change):
        side = side_for_change(account_type, change)
        assert signed_leg_amount(account_type, side, abs(change)) == change


def test_within_tolerance():
    assert within_tolerance(Decimal("100.00"), Decimal("100.009"))
    assert not within_tolerance(Decimal("100.00"), Decimal("100.01"))


def test_statement_balances_accepts_a_cent():
    assert statement_balances(Decimal("1500.01"), Decimal("1500.00"))
    assert statement_balances(Decimal("1500.00"), Decimal("1500.01"))
    assert not statement_balances(Decimal("1500.02"), Decimal("1500.00"))
