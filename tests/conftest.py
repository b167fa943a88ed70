"""Shared pytest fixtures for ledgerbook tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.assignment import AssignmentService
from ledgerbook.domain.entities import AccountType, NewTransaction
from ledgerbook.domain.entity import EntityService
from ledgerbook.domain.reconciliation import ReconciliationService
from ledgerbook.domain.reports import ReportService
from ledgerbook.domain.statement_import import StatementImportService
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.domain.user import UserService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user(temp_db):
    """The acting user, matching the CLI default."""
    return UserService(temp_db).get_or_create("local@localhost")


@pytest.fixture
def other_user(temp_db):
    return UserService(temp_db).get_or_create("someone@else.test")


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def entity_service(temp_db):
    return EntityService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    return ReconciliationService(temp_db)


@pytest.fixture
def import_service(temp_db):
    return StatementImportService(temp_db)


@pytest.fixture
def assignment_service(temp_db):
    return AssignmentService(temp_db)


@pytest.fixture
def report_service(temp_db):
    return ReportService(temp_db)


@pytest.fixture
def make_account(account_service, user):
    """Factory creating accounts owned by the acting user."""

    def _make(code, alias=None, account_type=AccountType.ASSET, balance="0", **kwargs):
        kwargs.setdefault("user_id", user.id)
        account_id = account_service.create_account(
            code=code,
            alias=alias or f"Account {code}",
            account_type=account_type,
            balance=Decimal(balance),
            **kwargs,
        )
        return account_service.get_account(account_id)

    return _make


@pytest.fixture
def checking(make_account):
    """An asset account with a stored balance of 1000."""
    return make_account("1001", "Checking", AccountType.ASSET, balance="1000")


@pytest.fixture
def groceries(make_account):
    return make_account("6100", "Groceries", AccountType.EXPENSE)


@pytest.fixture
def salary(make_account):
    return make_account("4000", "Salary", AccountType.INCOME)


@pytest.fixture
def insert_transaction(temp_db):
    """Insert a raw transaction row and return it as a domain object."""

    def _insert(debit_account=None, credit_account=None, amount="10", when=None, **kwargs):
        value = Decimal(amount)
        txn_id = temp_db.insert_transaction(
            NewTransaction(
                name=kwargs.pop("name", "Raw transaction"),
                date=when or date(2024, 1, 15),
                debit=value,
                credit=value,
                debit_account=debit_account,
                credit_account=credit_account,
                **kwargs,
            )
        )
        return temp_db.get_transaction(txn_id)

    return _insert


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
