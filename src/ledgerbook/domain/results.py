"""Result values returned by ledger operations to their callers."""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from ledgerbook.domain.errors import DomainError, PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a ledger operation.

    Ledger operations never raise domain errors at their callers; a failure is
    reported through ``error`` (a human-readable reason) and ``error_kind``
    (validation, not_found, conflict or persistence).
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "OperationResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: DomainError) -> "OperationResult[T]":
        return cls(success=False, error=str(error), error_kind=error.kind)


def run_operation(name: str, operation: Callable[[], T]) -> OperationResult[T]:
    """Run ``operation`` and turn domain errors into a failed result.

    Args:
        name: Operation name used in log records
        operation: Zero-argument callable performing the work

    Returns:
        OperationResult wrapping the callable's return value or the error
    """
    try:
        data = operation()
    except PersistenceError as e:
        logger.exception("%s failed in the store", name)
        return OperationResult(
            success=False, error="Database operation failed", error_kind=e.kind
        )
    except DomainError as e:
        logger.warning("%s rejected: %s", name, e)
        return OperationResult.failure(e)
    return OperationResult.ok(data)

