"""Resolution of incomplete transactions by assigning accounts to empty legs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from ledgerbook.domain.entities import (
    Account,
    AccountTransaction,
    BulkAssignOutcome,
    LegSide,
    Transaction,
)
from ledgerbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_code_not_found,
    leg_already_assigned,
    transaction_not_found,
)
from ledgerbook.domain.results import OperationResult, run_operation
from ledgerbook.domain.transaction import clamp_page, views_from_account, visible_transactions

if TYPE_CHECKING:
    from ledgerbook.database.base import Database

logger = logging.getLogger(__name__)


class AssignmentService:
    """Service for filling the unassigned leg of incomplete transactions."""

    def __init__(self, db: Database):
        self.db = db

    def list_incomplete(
        self, account_code: str, limit: int = 100, offset: int = 0
    ) -> list[AccountTransaction]:
        """List incomplete transactions touching an account, newest first.

        Args:
            account_code: Account code
            limit: Page size, clamped to 1..500
            offset: Rows to skip

        Returns:
            Transactions as seen from the account
        """
        limit, offset = clamp_page(limit, offset)
        transactions = self.db.list_incomplete_transactions(account_code, limit=limit, offset=offset)
        return views_from_account(self.db, transactions, account_code)

    def count_incomplete(self, account_code: str) -> int:
        return self.db.count_incomplete_transactions([account_code])

    def assign_account(
        self, transaction_id: int, account_code: str, is_debit_leg: bool
    ) -> OperationResult[None]:
        """Assign an account to one leg of a transaction.

        Args:
            transaction_id: Transaction to update
            account_code: Code of an active account
            is_debit_leg: True to fill the debit leg, False for the credit leg

        Returns:
            OperationResult; fails if the leg is already assigned or the
            account is missing or inactive
        """
        side = LegSide.DEBIT if is_debit_leg else LegSide.CREDIT

        def assign() -> None:
            with self.db.unit_of_work():
                txn = self.db.get_transaction(transaction_id)
                if txn is None:
                    raise NotFoundError(transaction_not_found(transaction_id))
                if txn.leg(side) is not None:
                    raise ConflictError(leg_already_assigned(is_debit_leg))
                self._active_account(account_code)
                self.db.update_transaction_leg(transaction_id, side, account_code)
            logger.info(
                "Assigned %s to %s leg of transaction %s", account_code, side.value, transaction_id
            )

        return run_operation("assign_account", assign)

    def bulk_assign(
        self,
        user_id: int,
        transaction_ids: Sequence[int],
        account_code: str,
        is_debit_leg: bool,
    ) -> OperationResult[BulkAssignOutcome]:
        """Assign an account to the same leg of several transactions.

        Transactions whose target leg is already filled are skipped rather
        than failing the batch. Transactions the user cannot see are ignored,
        and the batch fails when none of them are visible.
        """
        side = LegSide.DEBIT if is_debit_leg else LegSide.CREDIT

        def assign() -> BulkAssignOutcome:
            if not transaction_ids:
                raise ValidationError("Transaction IDs are required")
            updated = skipped = 0
            with self.db.unit_of_work():
                self._owned_active_account(account_code, user_id)
                for txn in self._visible_or_fail(transaction_ids, user_id):
                    if txn.leg(side) is not None:
                        skipped += 1
                        continue
                    self.db.update_transaction_leg(txn.id, side, account_code)
                    updated += 1
            logger.info(
                "Bulk assigned %s to %d transactions (%d skipped)", account_code, updated, skipped
            )
            return BulkAssignOutcome(updated_count=updated, skipped_count=skipped)

        return run_operation("bulk_assign", assign)

    def bulk_assign_smart(
        self, user_id: int, transaction_ids: Sequence[int], account_code: str
    ) -> OperationResult[BulkAssignOutcome]:
        """Fill whichever single leg is empty on each transaction.

        Complete transactions are skipped. A transaction with both legs empty
        has no account the user owns, so like any other invisible transaction
        it is ignored.
        """

        def assign() -> BulkAssignOutcome:
            if not transaction_ids:
                raise ValidationError("Transaction IDs are required")
            updated = skipped = 0
            with self.db.unit_of_work():
                self._owned_active_account(account_code, user_id)
                for txn in self._visible_or_fail(transaction_ids, user_id):
                    empty = [s for s in (LegSide.DEBIT, LegSide.CREDIT) if txn.leg(s) is None]
                    if not empty:
                        skipped += 1
                        continue
                    self.db.update_transaction_leg(txn.id, empty[0], account_code)
                    updated += 1
            logger.info(
                "Smart assigned %s to %d transactions (%d skipped)", account_code, updated, skipped
            )
            return BulkAssignOutcome(updated_count=updated, skipped_count=skipped)

        return run_operation("bulk_assign_smart", assign)

    def _active_account(self, account_code: str) -> Account:
        account = self.db.get_account_by_code(account_code)
        if account is None:
            raise NotFoundError(account_code_not_found(account_code))
        if not account.active:
            raise ConflictError(f"Account '{account_code}' is inactive")
        return account

    def _owned_active_account(self, account_code: str, user_id: int) -> Account:
        account = self._active_account(account_code)
        if account.user_id != user_id:
            raise NotFoundError(f"Account '{account_code}' not found or access denied")
        return account

    def _visible_or_fail(self, transaction_ids: Sequence[int], user_id: int) -> list[Transaction]:
        transactions = visible_transactions(self.db, transaction_ids, user_id)
        if not transactions:
            raise NotFoundError("No transactions found or access denied")
        return transactions
