"""Entity (company or person) domain service."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from ledgerbook.domain.entities import EntityStats
from ledgerbook.domain.errors import NotFoundError, ValidationError, entity_not_found
from ledgerbook.domain.rules import net_balance

if TYPE_CHECKING:
    from ledgerbook.database.base import Database

logger = logging.getLogger(__name__)


class EntityService:
    """Service for managing entities and their derived statistics."""

    def __init__(self, db: Database):
        self.db = db

    def create_entity(
        self, code: str, name: str, user_id: int, email: Optional[str] = None
    ) -> int:
        """Create an entity.

        Raises:
            ValidationError: If code or name is empty
        """
        if not code or not code.strip():
            raise ValidationError("Entity code is required")
        if not name or not name.strip():
            raise ValidationError("Entity name is required")
        return self.db.create_entity(code=code.strip(), name=name.strip(), user_id=user_id, email=email)

    def get_entity(self, entity_id: int, user_id: int) -> EntityStats:
        """Get an entity owned by the user, with its statistics.

        Raises:
            NotFoundError: If the entity doesn't exist or isn't owned by the user
        """
        entity = self.db.get_entity(entity_id)
        if entity is None or entity.user_id != user_id:
            raise NotFoundError(f"{entity_not_found(entity_id)} or access denied")
        return self._with_stats(entity)

    def list_entities(self, user_id: int) -> list[EntityStats]:
        """List a user's entities with their statistics, ordered by name."""
        return [self._with_stats(entity) for entity in self.db.list_entities(user_id)]

    def recompute_balances(self, entity_id: int, user_id: int) -> int:
        """Recompute the stored balances of an entity's accounts from their legs.

        Only transactions with both legs assigned are counted. Accounts without
        a type are left alone.

        Returns:
            Number of accounts whose balance was rewritten
        """
        self.get_entity(entity_id, user_id)
        accounts = [
            account
            for account in self.db.list_accounts(entity_id=entity_id, active_only=True)
            if account.account_type is not None
        ]
        updated = 0
        with self.db.unit_of_work():
            for account in accounts:
                transactions = self.db.list_transactions(
                    account_codes=[account.code], complete_only=True
                )
                self.db.update_account_balance(account.id, net_balance(account, transactions))
                updated += 1
        logger.info("Recomputed %d account balances for entity %s", updated, entity_id)
        return updated

    def _with_stats(self, entity) -> EntityStats:
        accounts = self.db.list_accounts(entity_id=entity.id, active_only=True)
        return EntityStats(
            entity=entity,
            total_accounts=len(accounts),
            total_balance=sum((a.balance for a in accounts), Decimal("0")),
            incomplete_transactions_count=self.db.count_incomplete_transactions(
                [a.code for a in accounts]
            ),
        )
