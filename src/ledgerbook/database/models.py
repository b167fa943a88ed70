"""SQLAlchemy models for ledgerbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Enum,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from ledgerbook.domain.entities import AccountType, Classification

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _enum_values(enum_class):
    return [member.value for member in enum_class]


class User(Base):
    """Account owner model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    accounts = relationship("Account", back_populates="user")
    entities = relationship("Entity", back_populates="user")


class Entity(Base):
    """Company or person grouping accounts and transactions."""

    __tablename__ = "entities"

    id = Column(Integer, primary_key=True)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="entities")
    accounts = relationship("Account", back_populates="entity")


class Account(Base):
    """Ledger account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    alias = Column(String, nullable=False)
    account_type = Column(
        Enum(AccountType, values_callable=_enum_values, name="account_type"),
        nullable=True,
    )
    category = Column(String, nullable=True)
    balance = Column(Numeric(14, 2), default=0, nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    entity_id = Column(Integer, ForeignKey("entities.id"), nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="accounts")
    entity = relationship("Entity", back_populates="accounts")


class Transaction(Base):
    """Double-entry transaction model.

    A NULL ``debit_account`` or ``credit_account`` is an unassigned leg.
    """

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    category = Column(String, nullable=True)
    debit_account = Column(String, nullable=True)
    credit_account = Column(String, nullable=True)
    debit = Column(Numeric(14, 2), nullable=False)
    credit = Column(Numeric(14, 2), nullable=False)
    balance_debit = Column(Numeric(14, 2), nullable=True)
    balance_credit = Column(Numeric(14, 2), nullable=True)
    date = Column(Date, nullable=False)
    status = Column(String, nullable=True)
    accounting_date = Column(DateTime, default=_utcnow, nullable=False)
    conciled = Column(Boolean, default=False, nullable=False)
    entity_id = Column(Integer, ForeignKey("entities.id"), nullable=True)
    classification = Column(
        Enum(Classification, values_callable=_enum_values, name="classification"),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_transactions_debit_account", "debit_account"),
        Index("ix_transactions_credit_account", "credit_account"),
        Index("ix_transactions_date", "date"),
    )

    # Relationships
    entity = relationship("Entity")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
