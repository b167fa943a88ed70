"""Account domain service."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Sequence

from ledgerbook.domain.entities import Account, AccountListing, AccountType
from ledgerbook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    entity_not_found,
)
from ledgerbook.domain.rules import net_balance

if TYPE_CHECKING:
    from ledgerbook.database.base import Database

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing ledger accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

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
        """Create a new account.

        Args:
            code: Unique ledger code
            alias: Human readable name
            user_id: Owner
            account_type: Optional account type; required later for imports
            category: Optional reporting category label
            currency: ISO currency code
            balance: Opening stored balance
            entity_id: Optional entity the account belongs to

        Returns:
            Account ID

        Raises:
            ValidationError: If code, alias or currency is invalid
            ConflictError: If the code is already used
            NotFoundError: If the entity doesn't exist or isn't owned by the user
        """
        code = code.strip()
        alias = alias.strip()
        if not code:
            raise ValidationError("Account code is required")
        if not alias:
            raise ValidationError("Account alias is required")
        currency = _normalize_currency(currency)

        if self.db.get_account_by_code(code) is not None:
            raise ConflictError(f"Account with code '{code}' already exists")

        if entity_id is not None:
            self._require_entity(entity_id, user_id)

        account_id = self.db.create_account(
            code=code,
            alias=alias,
            user_id=user_id,
            account_type=account_type,
            category=category,
            currency=currency,
            balance=balance,
            entity_id=entity_id,
        )
        logger.info("Created account %s (%s) for user %s", code, account_id, user_id)
        return account_id

    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        return self.db.get_account(account_id)

    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Get account by ledger code."""
        return self.db.get_account_by_code(code)

    def get_owned_account(self, account_id: int, user_id: int) -> Account:
        """Get an account owned by the user.

        Raises:
            NotFoundError: If the account doesn't exist or belongs to someone else
        """
        account = self.db.get_account(account_id)
        if account is None or account.user_id != user_id:
            raise NotFoundError(f"{account_not_found(account_id)} or access denied")
        return account

    def list_accounts(self, user_id: int, include_inactive: bool = False) -> list[AccountListing]:
        """List a user's accounts with their incomplete transaction counts.

        Args:
            user_id: Owner
            include_inactive: If True, include deactivated accounts

        Returns:
            List of account listings ordered by alias
        """
        accounts = self.db.list_accounts(user_id=user_id, active_only=not include_inactive)
        return [
            AccountListing(
                account=account,
                incomplete_transactions_count=self.db.count_incomplete_transactions([account.code]),
            )
            for account in accounts
        ]

    def update_account(
        self,
        account_id: int,
        user_id: int,
        alias: Optional[str] = None,
        category: Optional[str] = None,
        account_type: Optional[AccountType] = None,
        currency: Optional[str] = None,
        active: Optional[bool] = None,
        entity_id: Optional[int] = None,
    ) -> None:
        """Update account fields.

        Raises:
            NotFoundError: If the account doesn't exist or isn't owned by the user
            ValidationError: If no field is given or a value is invalid
        """
        self.get_owned_account(account_id, user_id)

        if all(
            value is None for value in (alias, category, account_type, currency, active, entity_id)
        ):
            raise ValidationError("No fields to update")
        if alias is not None and not alias.strip():
            raise ValidationError("Account alias cannot be empty")
        if currency is not None:
            currency = _normalize_currency(currency)
        if entity_id is not None:
            self._require_entity(entity_id, user_id)

        self.db.update_account(
            account_id,
            alias=alias.strip() if alias is not None else None,
            category=category,
            account_type=account_type,
            currency=currency,
            active=active,
            entity_id=entity_id,
        )

    def deactivate_account(self, account_id: int, user_id: int) -> None:
        """Soft-delete an account. Its transactions are kept."""
        self.get_owned_account(account_id, user_id)
        self.db.update_account(account_id, active=False)
        logger.info("Deactivated account %s", account_id)

    def bulk_update_category(
        self, account_ids: Sequence[int], category: str, user_id: int
    ) -> int:
        """Set the category of several accounts owned by the user.

        Returns:
            Number of accounts updated
        """
        if not account_ids:
            raise ValidationError("Account IDs are required")
        if not category or not category.strip():
            raise ValidationError("Category is required")
        return self.db.update_accounts_category(account_ids, category.strip(), user_id)

    def get_balance(self, account_id: int) -> tuple[Decimal, str]:
        """Return the stored balance and currency of an account."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account.balance, account.currency

    def recompute_balance(self, account_id: int, user_id: int) -> tuple[Decimal, Decimal]:
        """Rebuild an account's stored balance from its complete transactions.

        Returns:
            Tuple of (previous balance, new balance)

        Raises:
            NotFoundError: If the account doesn't exist or isn't owned by the user
            ValidationError: If the account has no type
        """
        with self.db.unit_of_work():
            account = self.db.lock_account(account_id)
            if account is None or account.user_id != user_id:
                raise NotFoundError(f"{account_not_found(account_id)} or access denied")
            if account.account_type is None:
                raise ValidationError("Account type is not set. Please set the account type first.")
            transactions = self.db.list_transactions(
                account_codes=[account.code], complete_only=True
            )
            new_balance = net_balance(account, transactions)
            self.db.update_account_balance(account.id, new_balance)
        logger.info(
            "Recomputed balance of account %s from %s to %s", account.code, account.balance, new_balance
        )
        return account.balance, new_balance

    def accounts_for_assignment(self, account_type: Optional[AccountType] = None) -> list[Account]:
        """Active accounts that can be assigned to an unassigned leg."""
        return self.db.list_active_accounts(account_type)

    def _require_entity(self, entity_id: int, user_id: int) -> None:
        entity = self.db.get_entity(entity_id)
        if entity is None or entity.user_id != user_id:
            raise NotFoundError(f"{entity_not_found(entity_id)} or access denied")


def _normalize_currency(currency: str) -> str:
    currency = (currency or "").strip().upper()
    if len(currency) != 3 or not currency.isalpha():
        raise ValidationError(f"Invalid currency code '{currency}'")
    return currency
