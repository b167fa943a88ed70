"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerbook.domain.entities import (
    Account,
    AccountType,
    Classification,
    Entity,
    LegSide,
    NewTransaction,
    Transaction,
    User,
)


class Database(ABC):
    """Abstract database interface for ledgerbook."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Return a context manager making the enclosed writes atomic.

        Writes inside the block are committed together when it exits and
        rolled back if it raises. Nested blocks join the outermost one.
        """
        pass

    @abstractmethod
    def lock_account(self, account_id: int) -> Optional[Account]:
        """Load an account and lock its row until the unit of work ends."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, email: str, name: Optional[str] = None) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        pass

    # Entity operations
    @abstractmethod
    def create_entity(
        self, code: str, name: str, user_id: int, email: Optional[str] = None
    ) -> int:
        """Create an entity. Returns entity ID."""
        pass

    @abstractmethod
    def get_entity(self, entity_id: int) -> Optional[Entity]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def list_entities(self, user_id: int) -> list[Entity]:
        """List entities owned by a user, ordered by name."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        code: str,
        alias: str,
        user_id: int,
        account_type: Optional[AccountType] = None,
        category: Optional[str] = None,
        currency: str = "USD",
        balance: Decimal = Decimal("0"),
        entity_id: Optional[int] = None,
    ) -> int:
        """Create an account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Get account by its ledger code."""
        pass

    @abstractmethod
    def get_accounts_by_codes(self, codes: Sequence[str]) -> dict[str, Account]:
        """Get accounts keyed by code. Unknown codes are left out."""
        pass

    @abstractmethod
    def list_accounts(
        self,
        user_id: Optional[int] = None,
        entity_id: Optional[int] = None,
        account_type: Optional[AccountType] = None,
        active_only: bool = False,
    ) -> list[Account]:
        """List accounts with optional filters, ordered by alias."""
        pass

    @abstractmethod
    def list_active_accounts(self, account_type: Optional[AccountType] = None) -> list[Account]:
        """List active accounts ordered by type then alias."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        alias: Optional[str] = None,
        category: Optional[str] = None,
        account_type: Optional[AccountType] = None,
        currency: Optional[str] = None,
        active: Optional[bool] = None,
        entity_id: Optional[int] = None,
    ) -> None:
        """Update the given account fields; None leaves a field unchanged."""
        pass

    @abstractmethod
    def update_account_balance(self, account_id: int, new_balance: Decimal) -> None:
        """Overwrite the stored balance of an account."""
        pass

    @abstractmethod
    def update_accounts_category(
        self, account_ids: Sequence[int], category: str, user_id: int
    ) -> int:
        """Set the category of the user's accounts among ``account_ids``. Returns count."""
        pass

    # Transaction operations
    @abstractmethod
    def insert_transaction(self, fields: NewTransaction) -> int:
        """Insert a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def get_transactions(self, transaction_ids: Sequence[int]) -> list[Transaction]:
        """Get the existing transactions among ``transaction_ids``, ordered by ID."""
        pass

    @abstractmethod
    def update_transaction_leg(self, transaction_id: int, side: LegSide, account_code: str) -> None:
        """Set the account code of one leg."""
        pass

    @abstractmethod
    def update_transactions_entity(
        self, transaction_ids: Sequence[int], entity_id: Optional[int]
    ) -> int:
        """Tag transactions with an entity. Returns count."""
        pass

    @abstractmethod
    def update_transactions_classification(
        self, transaction_ids: Sequence[int], classification: Classification
    ) -> int:
        """Tag transactions with a classification. Returns count."""
        pass

    @abstractmethod
    def delete_transactions(self, transaction_ids: Sequence[int]) -> int:
        """Delete transactions. Returns count."""
        pass

    @abstractmethod
    def list_account_transactions(
        self, account_code: str, limit: int = 100, offset: int = 0
    ) -> list[Transaction]:
        """List transactions touching an account, newest first."""
        pass

    @abstractmethod
    def list_incomplete_transactions(
        self, account_code: str, limit: int = 100, offset: int = 0
    ) -> list[Transaction]:
        """List transactions touching an account with an unassigned leg, newest first."""
        pass

    @abstractmethod
    def count_incomplete_transactions(self, account_codes: Sequence[str]) -> int:
        """Count incomplete transactions touching any of the given accounts."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        account_codes: Optional[Sequence[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        entity_id: Optional[int] = None,
        complete_only: bool = False,
    ) -> list[Transaction]:
        """List transactions with optional filters, oldest first.

        Args:
            account_codes: Only transactions with a leg on one of these accounts
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            entity_id: Optional entity filter
            complete_only: If True, skip transactions with an unassigned leg
        """
        pass
