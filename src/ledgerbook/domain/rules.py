"""Double-entry rules shared by posting, reconciliation and reporting.

Every place that needs to know which side of a posting grows an account, or
how a transaction reads from one account's point of view, goes through these
functions so that imports, reconciliations and reports never disagree.
"""

from decimal import Decimal
from typing import Iterable, Optional

from ledgerbook.domain.entities import (
    Account,
    AccountType,
    Classification,
    LegSide,
    Transaction,
)

# Differences below one cent are treated as zero.
BALANCE_TOLERANCE = Decimal("0.01")

_DEBIT_NORMAL_TYPES = frozenset({AccountType.ASSET, AccountType.EXPENSE})


def classify(side: LegSide, other_account_type: Optional[AccountType]) -> Classification:
    """Classify a transaction from the primary account's perspective.

    Args:
        side: Side the primary account plays in the transaction. A credit
            means money arriving, a debit means money leaving.
        other_account_type: Type of the account on the opposite leg, or None
            when the leg is unassigned or the account has no type.

    Returns:
        Income, expense or transfer. A credit against an expense account is a
        refund and counts as income; a debit against an income account is a
        reversal and counts as expense.
    """
    if other_account_type is None:
        return Classification.TRANSFER

    if side is LegSide.CREDIT:
        if other_account_type in (AccountType.INCOME, AccountType.EXPENSE):
            return Classification.INCOME
        return Classification.TRANSFER

    if other_account_type in (AccountType.EXPENSE, AccountType.INCOME):
        return Classification.EXPENSE
    return Classification.TRANSFER


def debit_increases_balance(account_type: AccountType) -> bool:
    """Return True if a debit leg increases an account of this type."""
    return account_type in _DEBIT_NORMAL_TYPES


def increasing_side(account_type: AccountType) -> LegSide:
    """Return the side whose postings increase an account of this type."""
    return LegSide.DEBIT if debit_increases_balance(account_type) else LegSide.CREDIT


def signed_leg_amount(account_type: AccountType, side: LegSide, amount: Decimal) -> Decimal:
    """Return the effect of a leg of ``amount`` on an account's balance."""
    if side is increasing_side(account_type):
        return amount
    return -amount


def side_for_change(account_type: AccountType, change: Decimal) -> LegSide:
    """Return the side to post on so that the balance moves by ``change``."""
    side = increasing_side(account_type)
    return side if change > 0 else side.opposite


def within_tolerance(left: Decimal, right: Decimal) -> bool:
    return abs(left - right) < BALANCE_TOLERANCE


def statement_balances(expected: Decimal, calculated: Decimal) -> bool:
    """Return True unless a statement misses its closing balance by more than a cent."""
    return abs(calculated - expected) <= BALANCE_TOLERANCE


def net_balance(account: Account, transactions: Iterable[Transaction]) -> Decimal:
    """Net effect of the legs ``account`` holds in ``transactions``.

    Accounts without a type have no direction and always net to zero.
    """
    balance = Decimal("0")
    if account.account_type is None:
        return balance
    for txn in transactions:
        side = txn.side_of(account.code)
        if side is not None:
            balance += signed_leg_amount(account.account_type, side, txn.amount_for(side))
    return balance
