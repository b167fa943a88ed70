"""Transaction domain service."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from ledgerbook.domain.entities import (
    Account,
    AccountTransaction,
    Classification,
    LegSide,
    NewTransaction,
    Transaction,
)
from ledgerbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_code_not_found,
    entity_not_found,
    transaction_not_found,
)
from ledgerbook.domain.results import OperationResult, run_operation
from ledgerbook.domain.rules import classify, signed_leg_amount

if TYPE_CHECKING:
    from ledgerbook.database.base import Database

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 500


def clamp_page(limit: int, offset: int) -> tuple[int, int]:
    """Clamp a page request to 1..500 rows and a non-negative offset."""
    return max(1, min(MAX_PAGE_SIZE, int(limit))), max(0, int(offset))


def view_from_account(
    txn: Transaction, account_code: str, accounts_by_code: dict[str, Account]
) -> AccountTransaction:
    """Describe a transaction from the point of view of one of its accounts."""
    side = txn.side_of(account_code) or LegSide.DEBIT
    other_code = txn.leg(side.opposite)
    other = accounts_by_code.get(other_code) if other_code is not None else None
    other_type = other.account_type if other is not None else None
    return AccountTransaction(
        transaction=txn,
        side=side,
        other_account_code=other_code,
        other_account_alias=other.alias if other is not None else None,
        other_account_type=other_type,
        classification=classify(side, other_type),
    )


def views_from_account(
    db: Database, transactions: Sequence[Transaction], account_code: str
) -> list[AccountTransaction]:
    codes = {code for txn in transactions for code in (txn.debit_account, txn.credit_account)}
    accounts_by_code = db.get_accounts_by_codes([c for c in codes if c is not None])
    return [view_from_account(txn, account_code, accounts_by_code) for txn in transactions]


def visible_transactions(
    db: Database, transaction_ids: Sequence[int], user_id: int
) -> list[Transaction]:
    """Transactions among ``transaction_ids`` with a leg on one of the user's accounts."""
    owned = {account.code for account in db.list_accounts(user_id=user_id)}
    return [
        txn
        for txn in db.get_transactions(list(transaction_ids))
        if txn.debit_account in owned or txn.credit_account in owned
    ]


def _require_ids(transaction_ids: Iterable[int]) -> list[int]:
    ids = list(transaction_ids)
    if not ids:
        raise ValidationError("Transaction IDs are required")
    return ids


class TransactionService:
    """Service for posting and managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def post_transaction(
        self,
        user_id: int,
        txn_date: date,
        amount: Decimal,
        debit_account: str,
        credit_account: str,
        name: str,
        description: Optional[str] = None,
        category: Optional[str] = None,
        entity_id: Optional[int] = None,
    ) -> OperationResult[Transaction]:
        """Post a balanced transaction with both legs assigned.

        Both accounts' stored balances move according to their types, and the
        resulting balances are stamped on the transaction.

        Args:
            user_id: Caller; must own at least one of the two accounts
            txn_date: Transaction date
            amount: Positive amount carried by both legs
            debit_account: Code of the account debited
            credit_account: Code of the account credited
            name: Short name
            description: Optional description
            category: Optional category label
            entity_id: Optional entity tag

        Returns:
            OperationResult with the posted transaction
        """

        def post() -> Transaction:
            if amount <= 0:
                raise ValidationError("Amount must be positive")
            if not name or not name.strip():
                raise ValidationError("Transaction name is required")
            if debit_account == credit_account:
                raise ValidationError("Debit and credit accounts must differ")
            if entity_id is not None:
                self._require_entity(entity_id, user_id)

            with self.db.unit_of_work():
                debit_acc, credit_acc = self._lock_pair(debit_account, credit_account)
                if user_id not in (debit_acc.user_id, credit_acc.user_id):
                    raise NotFoundError("Accounts not found or access denied")

                debit_balance = self._apply(debit_acc, LegSide.DEBIT, amount)
                credit_balance = self._apply(credit_acc, LegSide.CREDIT, amount)
                txn_id = self.db.insert_transaction(
                    NewTransaction(
                        name=name.strip(),
                        date=txn_date,
                        debit=amount,
                        credit=amount,
                        debit_account=debit_acc.code,
                        credit_account=credit_acc.code,
                        description=description,
                        category=category,
                        balance_debit=debit_balance,
                        balance_credit=credit_balance,
                        status="Completed",
                        entity_id=entity_id,
                    )
                )
            logger.info(
                "Posted transaction %s: %s debit %s / credit %s", txn_id, amount, debit_account, credit_account
            )
            return self.db.get_transaction(txn_id)

        return run_operation("post_transaction", post)

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        return self.db.get_transaction(transaction_id)

    def list_account_transactions(
        self, account_code: str, limit: int = 100, offset: int = 0
    ) -> list[AccountTransaction]:
        """List transactions touching an account, newest first, with classification.

        Args:
            account_code: Account code
            limit: Page size, clamped to 1..500
            offset: Rows to skip

        Returns:
            Transactions as seen from the account
        """
        limit, offset = clamp_page(limit, offset)
        transactions = self.db.list_account_transactions(account_code, limit=limit, offset=offset)
        return views_from_account(self.db, transactions, account_code)

    def assign_entity(
        self, transaction_id: int, entity_id: int, user_id: int
    ) -> OperationResult[int]:
        """Tag one transaction with an entity."""

        def assign() -> int:
            if not visible_transactions(self.db, [transaction_id], user_id):
                raise NotFoundError(f"{transaction_not_found(transaction_id)} or access denied")
            self._require_entity(entity_id, user_id)
            return self.db.update_transactions_entity([transaction_id], entity_id)

        return run_operation("assign_entity", assign)

    def bulk_assign_entity(
        self, transaction_ids: Sequence[int], entity_id: int, user_id: int
    ) -> OperationResult[int]:
        """Tag several transactions with an entity. Returns the updated count."""

        def assign() -> int:
            ids = _require_ids(transaction_ids)
            self._require_entity(entity_id, user_id)
            visible = visible_transactions(self.db, ids, user_id)
            if not visible:
                raise NotFoundError("No transactions found or access denied")
            with self.db.unit_of_work():
                return self.db.update_transactions_entity([t.id for t in visible], entity_id)

        return run_operation("bulk_assign_entity", assign)

    def bulk_update_classification(
        self, transaction_ids: Sequence[int], classification: Classification, user_id: int
    ) -> OperationResult[int]:
        """Tag several transactions with a classification. Returns the updated count."""

        def update() -> int:
            ids = _require_ids(transaction_ids)
            visible = visible_transactions(self.db, ids, user_id)
            if not visible:
                raise NotFoundError("No transactions found or access denied")
            with self.db.unit_of_work():
                return self.db.update_transactions_classification(
                    [t.id for t in visible], classification
                )

        return run_operation("bulk_update_classification", update)

    def bulk_delete(self, transaction_ids: Sequence[int], user_id: int) -> OperationResult[int]:
        """Delete the user's transactions among ``transaction_ids``.

        Stored account balances are not rewound; use entity balance
        recomputation or reconciliation to realign them.

        Returns:
            OperationResult with the deleted count
        """

        def delete() -> int:
            ids = _require_ids(transaction_ids)
            visible = visible_transactions(self.db, ids, user_id)
            with self.db.unit_of_work():
                deleted = self.db.delete_transactions([t.id for t in visible])
            logger.info("Deleted %d of %d requested transactions", deleted, len(ids))
            return deleted

        return run_operation("bulk_delete", delete)

    def _lock_pair(self, debit_code: str, credit_code: str) -> tuple[Account, Account]:
        """Lock the debit and credit accounts, lower id first, and return them in that role order."""
        found = {}
        for code in (debit_code, credit_code):
            account = self.db.get_account_by_code(code)
            if account is None:
                raise NotFoundError(account_code_not_found(code))
            found[code] = account

        locked = {}
        for account in sorted(found.values(), key=lambda a: a.id):
            locked[account.code] = self.db.lock_account(account.id)

        for code in (debit_code, credit_code):
            if not locked[code].active:
                raise ConflictError(f"Account '{code}' is inactive")
        return locked[debit_code], locked[credit_code]

    def _apply(self, account: Account, side: LegSide, amount: Decimal) -> Decimal:
        """Move an account's stored balance by one leg and return the new balance."""
        if account.account_type is None:
            return account.balance
        new_balance = account.balance + signed_leg_amount(account.account_type, side, amount)
        self.db.update_account_balance(account.id, new_balance)
        return new_balance

    def _require_entity(self, entity_id: int, user_id: int) -> None:
        entity = self.db.get_entity(entity_id)
        if entity is None or entity.user_id != user_id:
            raise NotFoundError(f"{entity_not_found(entity_id)} or access denied")
