"""
core/users.py -- User usecases: registration, login, self-service profile.

Pattern: Usecase over a Repository interface. UserUsecases holds a
UserRepository (core/repositories.py) and a PasswordHasher; it never touches
SQL. Every operation returns the entity/collection or raises exactly one
core.errors taxonomy error. Nothing here logs -- plaintext passwords in
particular never reach a log line or the repository.

Known race [registration]: the email check is read-then-insert with no lock in
between. Two concurrent registrations for one address can both pass the check;
store/users.py enforces UNIQUE(email) and reports the loser as Conflict.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Optional, Protocol
from uuid import UUID

from core.errors import Conflict, InvalidData, NotFound, Unauthorized
from core.models import User
from core.repositories import UserRepository


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PasswordHasher(Protocol):
    """What UserUsecases needs from a credential manager (auth/passwords.py)."""

    def hash(self, password: str) -> str: ...

    def verify(self, password: str, hashed: str) -> bool: ...


class UserUsecases:
    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], UUID] = uuid.uuid4,
    ) -> None:
        self.repository = repository
        self.hasher = hasher
        self._clock = clock
        self._new_id = id_factory

    def register_user(self, username: str, email: str, password: str) -> User:
        """Create an account. Email must not already be registered."""
        if not username or not email or not password:
            raise InvalidData("Fields cannot be empty")

        if self.repository.get_by_email(email) is not None:
            raise Conflict("Email already in use")

        user = User(
            id=self._new_id(),
            username=username,
            email=email,
            password_hash=self.hasher.hash(password),
            created_at=self._clock(),
            updated_at=None,
        )
        self.repository.create(user)
        return user

    def login_user(self, email: str, password: str) -> User:
        """Check credentials and return the matching user.

        An unknown email is NotFound while a wrong password is Unauthorized,
        which tells a caller whether an address is registered.
        """
        user = self.repository.get_by_email(email)
        if user is None:
            raise NotFound("User not found")
        if not self.hasher.verify(password, user.password_hash):
            raise Unauthorized("Invalid credentials")
        return user

    def get_user(self, user_id: UUID) -> User:
        user = self.repository.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def update_user(
        self,
        user_id: UUID,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        """Partial update. None or "" leaves a field unchanged; email is fixed.

        updated_at advances even when nothing else changed.
        """
        user = self.get_user(user_id)
        if username:
            user.username = username
        if password:
            user.password_hash = self.hasher.hash(password)
        user.updated_at = self._clock()
        self.repository.update(user)
        return user

    def delete_user(self, user_id: UUID) -> None:
        # No NotFound: deleting an unknown id is a silent no-op.
        self.repository.delete(user_id)

    def list_users(self) -> list[User]:
        return self.repository.list_all()
