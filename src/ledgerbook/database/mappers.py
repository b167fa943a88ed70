"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain never sees ORM
instances and the schema can change without touching the services.
"""

from decimal import Decimal
from typing import Optional

from ledgerbook.domain import entities as domain
from ledgerbook.database.models import (
    Account as ORMAccount,
    Entity as ORMEntity,
    Transaction as ORMTransaction,
    User as ORMUser,
)


def _money(value) -> Decimal:
    return Decimal(value) if value is not None else Decimal("0")


def _optional_money(value) -> Optional[Decimal]:
    return Decimal(value) if value is not None else None


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        email=orm_user.email,
        name=orm_user.name,
        created_at=orm_user.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        alias=orm_account.alias,
        account_type=orm_account.account_type,
        category=orm_account.category,
        balance=_money(orm_account.balance),
        currency=orm_account.currency,
        active=bool(orm_account.active),
        user_id=orm_account.user_id,
        entity_id=orm_account.entity_id,
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def entity_to_domain(orm_entity: ORMEntity) -> domain.Entity:
    """Convert SQLAlchemy Entity model to domain Entity."""
    return domain.Entity(
        id=orm_entity.id,
        code=orm_entity.code,
        name=orm_entity.name,
        email=orm_entity.email,
        user_id=orm_entity.user_id,
        created_at=orm_entity.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        name=orm_transaction.name,
        description=orm_transaction.description,
        category=orm_transaction.category,
        debit_account=orm_transaction.debit_account,
        credit_account=orm_transaction.credit_account,
        debit=_money(orm_transaction.debit),
        credit=_money(orm_transaction.credit),
        balance_debit=_optional_money(orm_transaction.balance_debit),
        balance_credit=_optional_money(orm_transaction.balance_credit),
        date=orm_transaction.date,
        status=orm_transaction.status,
        accounting_date=orm_transaction.accounting_date,
        conciled=bool(orm_transaction.conciled),
        entity_id=orm_transaction.entity_id,
        classification=orm_transaction.classification,
    )


def new_transaction_to_orm(fields: domain.NewTransaction) -> ORMTransaction:
    """Build an SQLAlchemy Transaction from a domain field set."""
    return ORMTransaction(
        name=fields.name,
        description=fields.description,
        category=fields.category,
        debit_account=fields.debit_account,
        credit_account=fields.credit_account,
        debit=fields.debit,
        credit=fields.credit,
        balance_debit=fields.balance_debit,
        balance_credit=fields.balance_credit,
        date=fields.date,
        status=fields.status,
        conciled=fields.conciled,
        entity_id=fields.entity_id,
    )
