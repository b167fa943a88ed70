"""Domain layer for ledgerbook application."""

from ledgerbook.domain.account import AccountService
from ledgerbook.domain.assignment import AssignmentService
from ledgerbook.domain.entity import EntityService
from ledgerbook.domain.reconciliation import ReconciliationService
from ledgerbook.domain.reports import ReportService
from ledgerbook.domain.statement_import import StatementImportService
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.domain.user import UserService

__all__ = [
    "AccountService",
    "AssignmentService",
    "EntityService",
    "ReconciliationService",
    "ReportService",
    "StatementImportService",
    "TransactionService",
    "UserService",
]
