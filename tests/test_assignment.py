"""Tests for resolving incomplete transactions."""

from datetime import date

from ledgerbook.domain.entities import AccountType, Classification, LegSide


class TestListIncomplete:
    def test_lists_only_incomplete_newest_first(
        self, assignment_service, checking, groceries, insert_transaction
    ):
        older = insert_transaction(credit_account=checking.code, when=date(2024, 1, 1))
        newer = insert_transaction(credit_account=checking.code, when=date(2024, 2, 1))
        insert_transaction(debit_account=groceries.code, credit_account=checking.code)

        rows = assignment_service.list_incomplete(checking.code)

        assert [r.transaction.id for r in rows] == [newer.id, older.id]
        assert all(r.side is LegSide.CREDIT for r in rows)
        assert all(r.other_account_code is None for r in rows)
        assert all(r.classification is Classification.TRANSFER for r in rows)
        assert assignment_service.count_incomplete(checking.code) == 2

    def test_limit_is_clamped(self, assignment_service, checking, insert_transaction):
        for _ in range(3):
            insert_transaction(debit_account=checking.code)

        assert len(assignment_service.list_incomplete(checking.code, limit=0)) == 1
        assert len(assignment_service.list_incomplete(checking.code, limit=10_000)) == 3
        assert len(assignment_service.list_incomplete(checking.code, offset=-5)) == 3


class TestAssignAccount:
    def test_fills_empty_leg_only(self, assignment_service, checking, groceries, insert_transaction, temp_db):
        txn = insert_transaction(credit_account=checking.code)

        result = assignment_service.assign_account(txn.id, groceries.code, is_debit_leg=True)

        assert result.success
        updated = temp_db.get_transaction(txn.id)
        assert updated.debit_account == groceries.code
        assert updated.credit_account == checking.code
        assert not updated.is_incomplete

    def test_rejects_filled_leg(self, assignment_service, checking, groceries, insert_transaction, temp_db):
        txn = insert_transaction(credit_account=checking.code)

        result = assignment_service.assign_account(txn.id, groceries.code, is_debit_leg=False)

        assert not result.success
        assert result.error_kind == "conflict"
        assert result.error == "Credit account is already assigned"
        assert temp_db.get_transaction(txn.id).credit_account == checking.code

    def test_rejects_inactive_account(
        self, assignment_service, account_service, user, checking, groceries, insert_transaction
    ):
        txn = insert_transaction(credit_account=checking.code)
        account_service.deactivate_account(groceries.id, user.id)

        result = assignment_service.assign_account(txn.id, groceries.code, is_debit_leg=True)

        assert result.error_kind == "conflict"

    def test_rejects_unknown_account(self, assignment_service, checking, insert_transaction):
        txn = insert_transaction(credit_account=checking.code)

        result = assignment_service.assign_account(txn.id, "nope", is_debit_leg=True)

        assert result.error_kind == "not_found"
        assert result.error == "Account 'nope' not found"

    def test_missing_transaction(self, assignment_service, groceries):
        result = assignment_service.assign_account(12345, groceries.code, is_debit_leg=True)

        assert result.error_kind == "not_found"

    def test_code_zero_is_an_ordinary_account(
        self, assignment_service, make_account, checking, insert_transaction, temp_db
    ):
        zero = make_account("0", "Suspense", AccountType.EQUITY)
        txn = insert_transaction(credit_account=checking.code)

        assert assignment_service.count_incomplete(zero.code) == 0
        assert assignment_service.assign_account(txn.id, "0", is_debit_leg=True).success
        assert temp_db.get_transaction(txn.id).debit_account == "0"


class TestBulkAssign:
    def test_skips_filled_legs(
        self, assignment_service, user, checking, groceries, salary, insert_transaction, temp_db
    ):
        open_one = insert_transaction(credit_account=checking.code)
        filled = insert_transaction(debit_account=salary.code, credit_account=checking.code)

        result = assignment_service.bulk_assign(
            user.id, [open_one.id, filled.id], groceries.code, is_debit_leg=True
        )

        assert result.success
        assert result.data.updated_count == 1
        assert result.data.skipped_count == 1
        assert temp_db.get_transaction(filled.id).debit_account == salary.code

    def test_ignores_transactions_of_other_users(
        self,
        assignment_service,
        user,
        other_user,
        make_account,
        checking,
        groceries,
        insert_transaction,
        temp_db,
    ):
        foreign = make_account("7777", "Foreign", user_id=other_user.id)
        theirs = insert_transaction(credit_account=foreign.code)
        mine = insert_transaction(credit_account=checking.code)

        result = assignment_service.bulk_assign(
            user.id, [theirs.id, mine.id], groceries.code, is_debit_leg=True
        )

        assert result.data.updated_count == 1
        assert result.data.skipped_count == 0
        assert temp_db.get_transaction(theirs.id).debit_account is None

    def test_fails_when_no_transaction_is_visible(
        self, assignment_service, user, other_user, make_account, groceries, insert_transaction, temp_db
    ):
        foreign = make_account("7777", "Foreign", user_id=other_user.id)
        txn = insert_transaction(credit_account=foreign.code)

        result = assignment_service.bulk_assign(user.id, [txn.id], groceries.code, is_debit_leg=True)

        assert not result.success
        assert result.error_kind == "not_found"
        assert result.error == "No transactions found or access denied"
        assert temp_db.get_transaction(txn.id).debit_account is None

    def test_account_must_belong_to_user(
        self, assignment_service, other_user, checking, groceries, insert_transaction
    ):
        txn = insert_transaction(credit_account=checking.code)

        result = assignment_service.bulk_assign(other_user.id, [txn.id], groceries.code, True)

        assert result.error_kind == "not_found"


class TestBulkAssignSmart:
    def test_fills_whichever_leg_is_empty(
        self, assignment_service, user, checking, groceries, insert_transaction, temp_db
    ):
        needs_debit = insert_transaction(credit_account=checking.code)
        needs_credit = insert_transaction(debit_account=checking.code)

        result = assignment_service.bulk_assign_smart(
            user.id, [needs_debit.id, needs_credit.id], groceries.code
        )

        assert result.data.updated_count == 2
        assert temp_db.get_transaction(needs_debit.id).debit_account == groceries.code
        assert temp_db.get_transaction(needs_credit.id).credit_account == groceries.code

    def test_complete_transaction_is_skipped(
        self, assignment_service, user, checking, groceries, salary, insert_transaction, temp_db
    ):
        complete = insert_transaction(debit_account=checking.code, credit_account=salary.code)

        result = assignment_service.bulk_assign_smart(user.id, [complete.id], groceries.code)

        assert result.success
        assert result.data.updated_count == 0
        assert result.data.skipped_count == 1
        unchanged = temp_db.get_transaction(complete.id)
        assert unchanged.debit_account == checking.code
        assert unchanged.credit_account == salary.code

    def test_doubly_incomplete_transaction_is_ignored(
        self, assignment_service, user, checking, groceries, insert_transaction, temp_db
    ):
        orphan = insert_transaction()
        needs_debit = insert_transaction(credit_account=checking.code)

        result = assignment_service.bulk_assign_smart(
            user.id, [orphan.id, needs_debit.id], groceries.code
        )

        assert result.data.updated_count == 1
        assert result.data.skipped_count == 0
        orphan_after = temp_db.get_transaction(orphan.id)
        assert orphan_after.debit_account is None
        assert orphan_after.credit_account is None

    def test_fails_when_no_transaction_is_visible(
        self, assignment_service, user, other_user, make_account, groceries, insert_transaction
    ):
        foreign = make_account("7777", "Foreign", user_id=other_user.id)
        theirs = insert_transaction(credit_account=foreign.code)
        orphan = insert_transaction()

        result = assignment_service.bulk_assign_smart(
            user.id, [theirs.id, orphan.id, 99999], groceries.code
        )

        assert not result.success
        assert result.error_kind == "not_found"
        assert result.error == "No transactions found or access denied"
