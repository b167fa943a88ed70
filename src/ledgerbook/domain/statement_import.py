"""Bank statement import with opening/closing balance verification."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from ledgerbook.domain.entities import (
    Account,
    AccountType,
    BankStatement,
    ImportOutcome,
    LegSide,
    NewTransaction,
    StatementLine,
    Transaction,
)
from ledgerbook.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    account_type_missing,
    statement_does_not_balance,
)
from ledgerbook.domain.results import OperationResult, run_operation
from ledgerbook.domain.rules import (
    increasing_side,
    side_for_change,
    signed_leg_amount,
    statement_balances,
    within_tolerance,
)

if TYPE_CHECKING:
    from ledgerbook.database.base import Database

logger = logging.getLogger(__name__)

IMPORT_STATUS = "Statement Import"
DEFAULT_LINE_CATEGORY = "Bank Transaction"


def line_side(account_type: AccountType, line: StatementLine) -> LegSide:
    """Side the account takes for a statement line.

    An explicit side wins. Otherwise a positive amount goes on the side that
    increases the account and a negative one on the other side.
    """
    if line.side is not None:
        return LegSide(line.side)
    side = increasing_side(account_type)
    return side if line.amount > 0 else side.opposite


def _validate_lines(statement: BankStatement, account_type: AccountType) -> list[LegSide]:
    if not statement.lines:
        raise ValidationError("Statement has no transactions")

    sides = []
    for number, line in enumerate(statement.lines, start=1):
        if line.date is None:
            raise ValidationError(f"Line {number}: date is required")
        if not line.description or not line.description.strip():
            raise ValidationError(f"Line {number}: description is required")
        if line.amount == 0:
            raise ValidationError(f"Line {number}: amount must not be zero")
        try:
            side = line_side(account_type, line)
        except ValueError:
            raise ValidationError(f"Line {number}: side must be debit or credit") from None
        if (signed_leg_amount(account_type, side, abs(line.amount)) > 0) != (line.amount > 0):
            raise ValidationError(
                f"Line {number}: {side.value} side does not match the sign of {line.amount}"
            )
        sides.append(side)
    return sides


class StatementImportService:
    """Posts bank statements into the ledger."""

    def __init__(self, db: Database):
        """Initialize statement import service.

        Args:
            db: Database instance
        """
        self.db = db

    def import_statement(self, statement: BankStatement) -> OperationResult[ImportOutcome]:
        """Import a bank statement into an account.

        The statement must balance: the opening balance plus the signed line
        amounts may miss the closing balance by at most a cent. Nothing is
        written when validation fails.

        If the account's stored balance differs from the opening balance, an
        opening adjustment is posted first. Each line then becomes a
        transaction with the account on one leg and the other leg unassigned,
        stamped with the running balance. Finally the stored balance is set to
        the closing balance.

        Importing the same statement twice posts its lines twice.

        Args:
            statement: Parsed bank statement

        Returns:
            OperationResult with an ImportOutcome
        """

        def import_() -> ImportOutcome:
            with self.db.unit_of_work():
                account = self.db.lock_account(statement.account_id)
                if account is None:
                    raise NotFoundError(account_not_found(statement.account_id))
                if account.account_type is None:
                    raise ValidationError(account_type_missing())

                sides = _validate_lines(statement, account.account_type)
                calculated = statement.opening_balance + sum(
                    (line.amount for line in statement.lines), Decimal("0")
                )
                if not statement_balances(statement.closing_balance, calculated):
                    raise ValidationError(
                        statement_does_not_balance(statement.closing_balance, calculated)
                    )

                adjustment = self._post_opening_adjustment(account, statement)
                posted = []
                running = statement.opening_balance
                for line, side in zip(statement.lines, sides):
                    amount = abs(line.amount)
                    running += signed_leg_amount(account.account_type, side, amount)
                    posted.append(self._post_line(account, line, side, amount, running))

                self.db.update_account_balance(account.id, statement.closing_balance)

            logger.info(
                "Imported %d statement transactions into account %s (closing %s)",
                len(posted),
                account.code,
                statement.closing_balance,
            )
            return ImportOutcome(transactions=tuple(posted), opening_adjustment=adjustment)

        return run_operation("import_statement", import_)

    def _post_opening_adjustment(
        self, account: Account, statement: BankStatement
    ) -> Optional[Transaction]:
        change = statement.opening_balance - account.balance
        if within_tolerance(statement.opening_balance, account.balance):
            return None

        side = side_for_change(account.account_type, change)
        amount = abs(change)
        txn_id = self.db.insert_transaction(
            NewTransaction(
                name="Opening Balance Adjustment",
                date=statement.statement_date,
                debit=amount,
                credit=amount,
                debit_account=account.code if side is LegSide.DEBIT else None,
                credit_account=account.code if side is LegSide.CREDIT else None,
                description=(
                    f"Adjustment to match statement opening balance of "
                    f"{statement.opening_balance:.2f}"
                ),
                category="Statement Import",
                balance_debit=statement.opening_balance if side is LegSide.DEBIT else None,
                balance_credit=statement.opening_balance if side is LegSide.CREDIT else None,
                status=IMPORT_STATUS,
                conciled=True,
                entity_id=account.entity_id,
            )
        )
        logger.debug("Posted opening adjustment of %s on account %s", change, account.code)
        return self.db.get_transaction(txn_id)

    def _post_line(
        self,
        account: Account,
        line: StatementLine,
        side: LegSide,
        amount: Decimal,
        running_balance: Decimal,
    ) -> Transaction:
        txn_id = self.db.insert_transaction(
            NewTransaction(
                name=line.description.strip(),
                date=line.date,
                debit=amount,
                credit=amount,
                debit_account=account.code if side is LegSide.DEBIT else None,
                credit_account=account.code if side is LegSide.CREDIT else None,
                description=f"Bank statement transaction - {line.description.strip()}",
                category=line.category or DEFAULT_LINE_CATEGORY,
                balance_debit=running_balance if side is LegSide.DEBIT else None,
                balance_credit=running_balance if side is LegSide.CREDIT else None,
                status=IMPORT_STATUS,
                conciled=True,
                entity_id=account.entity_id,
            )
        )
        return self.db.get_transaction(txn_id)
