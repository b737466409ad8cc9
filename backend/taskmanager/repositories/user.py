"""User repository for persistence and credential lookups."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select
from werkzeug.security import check_password_hash, generate_password_hash

from taskmanager.models.user import User, normalize_email
from taskmanager.repositories.base import BaseRepository

# Checked against when the email is unknown so both paths cost one hash.
_DUMMY_HASH = generate_password_hash("taskmanager-dummy-password")


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It never issues tokens or touches sessions.
    """

    model = User

    def _sortable_fields(self):
        return {
            "id": User.id,
            "name": User.name,
            "email": User.email,
            "created_at": User.created_at,
        }

    def _filterable_fields(self):
        return {"email": User.email}

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by normalized email.

        :param email: Raw email; trimmed and lower-cased before lookup.
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == normalize_email(email))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        return self.exists(email=normalize_email(email))

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when ``password`` matches, else ``None``."""
        user = self.get_by_email(email)
        if user is None:
            check_password_hash(_DUMMY_HASH, password)
            return None
        if not user.verify_password(password):
            return None
        return user
