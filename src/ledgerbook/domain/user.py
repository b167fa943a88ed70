"""User domain service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ledgerbook.domain.entities import User
from ledgerbook.domain.errors import ConflictError, ValidationError

if TYPE_CHECKING:
    from ledgerbook.database.base import Database


class UserService:
    """Service for looking up the owners of accounts."""

    def __init__(self, db: Database):
        self.db = db

    def create_user(self, email: str, name: Optional[str] = None) -> int:
        """Create a user.

        Raises:
            ValidationError: If email is empty
            ConflictError: If a user with the email already exists
        """
        email = email.strip().lower()
        if not email:
            raise ValidationError("Email is required")
        if self.db.get_user_by_email(email) is not None:
            raise ConflictError(f"User '{email}' already exists")
        return self.db.create_user(email=email, name=name)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.get_user_by_email(email.strip().lower())

    def get_or_create(self, email: str) -> User:
        """Return the user with this email, creating it on first use."""
        user = self.get_user_by_email(email)
        if user is None:
            user_id = self.create_user(email)
            user = self.db.get_user(user_id)
        return user
