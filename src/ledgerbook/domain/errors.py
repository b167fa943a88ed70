"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """

    kind = "error"


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    kind = "validation"


class NotFoundError(DomainError):
    """Requested domain entity does not exist or is not visible to the caller."""

    kind = "not_found"


class ConflictError(DomainError):
    """Domain conflict, such as an already assigned leg or an inactive account."""

    kind = "conflict"


class PersistenceError(DomainError):
    """The store failed to read or write."""

    kind = "persistence"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_code_not_found(code: str) -> str:
    """Return message for missing account by code."""
    return f"Account '{code}' not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def entity_not_found(entity_id: int) -> str:
    """Return message for missing entity."""
    return f"Entity {entity_id} not found"


def account_type_missing() -> str:
    return "Account type is not set. Please set the account type before importing statements."


def leg_already_assigned(is_debit_leg: bool) -> str:
    """Return message when the targeted leg already holds an account."""
    side = "Debit" if is_debit_leg else "Credit"
    return f"{side} account is already assigned"


def statement_does_not_balance(expected: Decimal, calculated: Decimal) -> str:
    """Return message for a statement whose lines do not reach its closing balance."""
    return (
        f"Statement doesn't balance. Expected: {expected:.2f}, "
        f"Calculated: {calculated:.2f}, Difference: {calculated - expected:.2f}"
    )
