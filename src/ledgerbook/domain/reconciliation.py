"""Reconciliation of an account against a bank-reported balance."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from ledgerbook.domain.entities import LegSide, NewTransaction, ReconciliationOutcome
from ledgerbook.domain.errors import NotFoundError, account_not_found
from ledgerbook.domain.results import OperationResult, run_operation
from ledgerbook.domain.rules import side_for_change, within_tolerance

if TYPE_CHECKING:
    from ledgerbook.database.base import Database

logger = logging.getLogger(__name__)

RECONCILIATION_NAME = "Bank Reconciliation"
RECONCILIATION_CATEGORY = "Reconciliation"


class ReconciliationService:
    """Forces an account's stored balance to match its bank statement."""

    def __init__(self, db: Database):
        self.db = db

    def reconcile(
        self,
        account_id: int,
        bank_balance: Decimal,
        reconciliation_date: date,
        description: Optional[str] = None,
    ) -> OperationResult[ReconciliationOutcome]:
        """Reconcile an account to ``bank_balance``.

        When the stored balance is more than a cent away from the bank balance,
        one adjustment transaction is posted with the account on the side that
        moves its balance toward the bank figure. An account without a type
        goes on the debit leg for a decrease and on the credit leg for an
        increase. The other leg stays unassigned so the adjustment shows up
        among incomplete transactions.
        The stored balance is then overwritten with ``bank_balance``.

        Args:
            account_id: Account to reconcile
            bank_balance: Balance reported by the bank
            reconciliation_date: Date stamped on the adjustment
            description: Optional description for the adjustment

        Returns:
            OperationResult with a ReconciliationOutcome
        """

        def reconcile() -> ReconciliationOutcome:
            with self.db.unit_of_work():
                account = self.db.lock_account(account_id)
                if account is None:
                    raise NotFoundError(account_not_found(account_id))

                difference = bank_balance - account.balance
                if within_tolerance(bank_balance, account.balance):
                    return ReconciliationOutcome(
                        previous_balance=account.balance,
                        new_balance=account.balance,
                        difference=difference,
                        transaction=None,
                        message="Account is already reconciled",
                    )

                if account.account_type is None:
                    side = LegSide.DEBIT if difference < 0 else LegSide.CREDIT
                else:
                    side = side_for_change(account.account_type, difference)
                amount = abs(difference)
                txn_id = self.db.insert_transaction(
                    NewTransaction(
                        name=RECONCILIATION_NAME,
                        date=reconciliation_date,
                        debit=amount,
                        credit=amount,
                        debit_account=account.code if side is LegSide.DEBIT else None,
                        credit_account=account.code if side is LegSide.CREDIT else None,
                        description=description
                        or f"Reconciliation adjustment for {account.alias}",
                        category=RECONCILIATION_CATEGORY,
                        balance_debit=bank_balance if side is LegSide.DEBIT else None,
                        balance_credit=bank_balance if side is LegSide.CREDIT else None,
                        status="Completed",
                        conciled=True,
                        entity_id=account.entity_id,
                    )
                )
                self.db.update_account_balance(account.id, bank_balance)

            logger.info(
                "Reconciled account %s from %s to %s (transaction %s)",
                account.code,
                account.balance,
                bank_balance,
                txn_id,
            )
            return ReconciliationOutcome(
                previous_balance=account.balance,
                new_balance=bank_balance,
                difference=difference,
                transaction=self.db.get_transaction(txn_id),
                message=f"Posted adjustment of {difference:.2f}",
            )

        return run_operation("reconcile", reconcile)
