"""Tests for EntityService."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerbook.domain.entities import AccountType
from ledgerbook.domain.errors import NotFoundError, ValidationError


def test_create_requires_name(entity_service, user):
    with pytest.raises(ValidationError):
        entity_service.create_entity("ACME", " ", user.id)


def test_stats_are_derived(entity_service, make_account, user, insert_transaction):
    entity_id = entity_service.create_entity("ACME", "Acme", user.id)
    bank = make_account("1001", "Bank", AccountType.ASSET, balance="100", entity_id=entity_id)
    make_account("2001", "Loan", AccountType.LIABILITY, balance="40", entity_id=entity_id)
    make_account("1002", "Personal", AccountType.ASSET, balance="999")
    insert_transaction(debit_account=bank.code)

    stats = entity_service.get_entity(entity_id, user.id)

    assert stats.entity.name == "Acme"
    assert stats.total_accounts == 2
    assert stats.total_balance == Decimal("140")
    assert stats.incomplete_transactions_count == 1
    assert [s.entity.id for s in entity_service.list_entities(user.id)] == [entity_id]


def test_other_user_cannot_see_entity(entity_service, user, other_user):
    entity_id = entity_service.create_entity("ACME", "Acme", user.id)

    with pytest.raises(NotFoundError):
        entity_service.get_entity(entity_id, other_user.id)


def test_recompute_balances_from_complete_legs(
    entity_service, make_account, user, insert_transaction, temp_db
):
    entity_id = entity_service.create_entity("ACME", "Acme", user.id)
    bank = make_account("1001", "Bank", AccountType.ASSET, balance="5000", entity_id=entity_id)
    sales = make_account("4001", "Sales", AccountType.INCOME, entity_id=entity_id)
    insert_transaction(debit_account=bank.code, credit_account=sales.code, amount="300")
    insert_transaction(debit_account=bank.code, amount="70", when=date(2024, 1, 16))

    assert entity_service.recompute_balances(entity_id, user.id) == 2

    assert temp_db.get_account(bank.id).balance == Decimal("300")
    assert temp_db.get_account(sales.id).balance == Decimal("300")
