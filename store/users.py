"""
store/users.py -- SQL implementation of core.repositories.UserRepository.

Pattern: Repository + Data Mapper. UserStore is the repository;
_row_to_user is the mapper.

Email uniqueness is enforced twice: UserUsecases checks first, and the
UNIQUE(email) constraint catches the concurrent-registration race. An
IntegrityError on insert is reported as Conflict, the same outcome the
usecase check would have produced.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from core.errors import Conflict
from core.models import User
from store.schema import from_iso, storage_errors, to_iso, users


class UserStore:
    """Usage:
    store = UserStore(engine)
    store.create(user)
    user = store.get_by_email("dev@example.com")
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def create(self, user: User) -> None:
        with storage_errors("user"):
            try:
                with self.engine.begin() as conn:
                    conn.execute(
                        users.insert().values(
                            id=str(user.id),
                            username=user.username,
                            email=user.email,
                            password_hash=user.password_hash,
                            created_at=to_iso(user.created_at),
                            updated_at=to_iso(user.updated_at),
                        )
                    )
            except IntegrityError as exc:
                raise Conflict("Email already in use") from exc

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        with storage_errors("user"), self.engine.connect() as conn:
            row = conn.execute(users.select().where(users.c.id == str(user_id))).fetchone()
        return _row_to_user(row) if row is not None else None

    def get_by_email(self, email: str) -> Optional[User]:
        """Exact, case-sensitive match."""
        with storage_errors("user"), self.engine.connect() as conn:
            row = conn.execute(users.select().where(users.c.email == email)).fetchone()
        return _row_to_user(row) if row is not None else None

    def update(self, user: User) -> None:
        """Write username, password_hash and updated_at. Email and created_at are fixed."""
        with storage_errors("user"), self.engine.begin() as conn:
            conn.execute(
                users.update()
                .where(users.c.id == str(user.id))
                .values(
                    username=user.username,
                    password_hash=user.password_hash,
                    updated_at=to_iso(user.updated_at),
                )
            )

    def delete(self, user_id: UUID) -> None:
        with storage_errors("user"), self.engine.begin() as conn:
            conn.execute(users.delete().where(users.c.id == str(user_id)))

    def list_all(self) -> list[User]:
        """Return every user, newest first."""
        with storage_errors("user"), self.engine.connect() as conn:
            rows = conn.execute(users.select().order_by(users.c.created_at.desc())).fetchall()
        return [_row_to_user(r) for r in rows]


def _row_to_user(row) -> User:
    return User(
        id=UUID(row.id),
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        created_at=from_iso(row.created_at),
        updated_at=from_iso(row.updated_at),
    )
