"""Domain model entities for ledgerbook.

These are pure data classes representing bookkeeping concepts, independent of
the database schema. Services and reports only ever see these types; the
SQLAlchemy models stay behind the mappers.
"""

import enum
from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from typing import Optional


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSE = "expense"


class LegSide(str, enum.Enum):
    """Side of a double-entry posting."""

    DEBIT = "debit"
    CREDIT = "credit"

    @property
    def opposite(self) -> "LegSide":
        return LegSide.CREDIT if self is LegSide.DEBIT else LegSide.DEBIT


class Classification(str, enum.Enum):
    """Classification of a transaction from one account's point of view."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class User:
    """Owner of accounts and entities."""

    id: int
    email: str
    name: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Ledger account domain entity."""

    id: int
    code: str
    alias: str
    account_type: Optional[AccountType]
    category: Optional[str]
    balance: Decimal
    currency: str
    active: bool
    user_id: int
    entity_id: Optional[int]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Entity:
    """Company or person that accounts and transactions are grouped under."""

    id: int
    code: str
    name: str
    email: Optional[str]
    user_id: int
    created_at: datetime


@dataclass(frozen=True)
class EntityStats:
    """Entity with aggregates derived from its accounts and transactions."""

    entity: Entity
    total_accounts: int
    total_balance: Decimal
    incomplete_transactions_count: int


@dataclass(frozen=True)
class Transaction:
    """Double-entry transaction.

    ``debit_account`` and ``credit_account`` hold account codes. ``None`` marks
    a leg that has not been assigned yet; such a transaction is incomplete.
    """

    id: int
    name: str
    description: Optional[str]
    category: Optional[str]
    debit_account: Optional[str]
    credit_account: Optional[str]
    debit: Decimal
    credit: Decimal
    balance_debit: Optional[Decimal]
    balance_credit: Optional[Decimal]
    date: date
    status: Optional[str]
    accounting_date: datetime
    conciled: bool
    entity_id: Optional[int]
    classification: Optional[Classification]

    @property
    def is_incomplete(self) -> bool:
        return self.debit_account is None or self.credit_account is None

    def leg(self, side: LegSide) -> Optional[str]:
        """Return the account code on the given side."""
        return self.debit_account if side is LegSide.DEBIT else self.credit_account

    def side_of(self, account_code: str) -> Optional[LegSide]:
        """Return the side the account plays in this transaction, if any."""
        if self.debit_account == account_code:
            return LegSide.DEBIT
        if self.credit_account == account_code:
            return LegSide.CREDIT
        return None

    def amount_for(self, side: LegSide) -> Decimal:
        return self.debit if side is LegSide.DEBIT else self.credit


@dataclass(frozen=True)
class NewTransaction:
    """Field set for inserting a transaction into the store."""

    name: str
    date: date
    debit: Decimal
    credit: Decimal
    debit_account: Optional[str] = None
    credit_account: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    balance_debit: Optional[Decimal] = None
    balance_credit: Optional[Decimal] = None
    status: Optional[str] = None
    conciled: bool = False
    entity_id: Optional[int] = None


@dataclass(frozen=True)
class AccountTransaction:
    """A transaction seen from one account, with its counter-account."""

    transaction: Transaction
    side: LegSide
    other_account_code: Optional[str]
    other_account_alias: Optional[str]
    other_account_type: Optional[AccountType]
    classification: Classification

    @property
    def amount(self) -> Decimal:
        return self.transaction.amount_for(self.side)


@dataclass(frozen=True)
class StatementLine:
    """One line of a bank statement.

    ``amount`` is signed: positive increases the account, negative decreases
    it. When ``side`` is omitted it is derived from the sign.
    """

    date: date
    description: str
    amount: Decimal
    side: Optional[LegSide] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class BankStatement:
    """Bank statement to import into an account."""

    account_id: int
    statement_date: date
    opening_balance: Decimal
    closing_balance: Decimal
    lines: tuple[StatementLine, ...]


@dataclass(frozen=True)
class ReconciliationOutcome:
    """Result data of a reconciliation."""

    previous_balance: Decimal
    new_balance: Decimal
    difference: Decimal
    transaction: Optional[Transaction]
    message: str


@dataclass(frozen=True)
class ImportOutcome:
    """Result data of a statement import."""

    transactions: tuple[Transaction, ...]
    opening_adjustment: Optional[Transaction]


@dataclass(frozen=True)
class BulkAssignOutcome:
    """Result data of a bulk leg assignment."""

    updated_count: int
    skipped_count: int


@dataclass(frozen=True)
class AccountBalanceRow:
    """Account with its balance over a reporting period."""

    code: str
    alias: str
    account_type: Optional[AccountType]
    category: Optional[str]
    currency: str
    balance: Decimal
    transaction_count: int = 0


@dataclass(frozen=True)
class ProfitLossReport:
    income_accounts: tuple[AccountBalanceRow, ...]
    expense_accounts: tuple[AccountBalanceRow, ...]
    total_income: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    period_start: date
    period_end: date


@dataclass(frozen=True)
class BalanceSheetReport:
    assets: tuple[AccountBalanceRow, ...]
    liabilities: tuple[AccountBalanceRow, ...]
    equity: tuple[AccountBalanceRow, ...]
    unclassified: tuple[AccountBalanceRow, ...]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    net_income: Decimal
    period_start: Optional[date] = None
    period_end: Optional[date] = None


@dataclass(frozen=True)
class TrialBalanceRow:
    code: str
    alias: str
    account_type: Optional[AccountType]
    total_debits: Decimal
    total_credits: Decimal
    debit_balance: Decimal
    credit_balance: Decimal


@dataclass(frozen=True)
class TrialBalanceReport:
    rows: tuple[TrialBalanceRow, ...]
    total_debit_balance: Decimal
    total_credit_balance: Decimal
    period_start: Optional[date] = None
    period_end: Optional[date] = None

    @property
    def is_balanced(self) -> bool:
        return self.total_debit_balance == self.total_credit_balance


@dataclass(frozen=True)
class FinancialSummary:
    """Income and expense totals for one account."""

    total_income: Decimal
    total_expenses: Decimal
    net_income: Decimal
    income_transactions: int
    expense_transactions: int
    transfer_transactions: int


@dataclass(frozen=True)
class CounterAccountTotal:
    other_account_code: Optional[str]
    other_account_alias: str
    total_amount: Decimal
    transaction_count: int


@dataclass(frozen=True)
class DailyActivity:
    date: date
    count: int
    total_amount: Decimal


@dataclass(frozen=True)
class AccountListing:
    """Account with the number of incomplete transactions touching it."""

    account: Account
    incomplete_transactions_count: int = 0
