"""
core/repositories.py -- Persistence interfaces consumed by the usecases.

Pattern: Repository (interface side). Each usecase class holds one of these
Protocols, never concrete storage code. store/ provides the SQLAlchemy
implementations; tests/conftest.py provides in-memory fakes.

Contract shared by every implementation:
  - get_by_id returns None when no row matches (the usecase raises NotFound).
  - delete does not report whether a row existed.
  - list_all and the by-parent lookups return newest first (created_at DESC).
  - Any storage failure is raised as core.errors.Infra.
"""

from __future__ import annotations

from typing import Optional, Protocol
from uuid import UUID

from core.models import Issue, IssueStatus, Project, User


class UserRepository(Protocol):
    def create(self, user: User) -> None: ...

    def get_by_id(self, user_id: UUID) -> Optional[User]: ...

    def get_by_email(self, email: str) -> Optional[User]: ...

    def update(self, user: User) -> None: ...

    def delete(self, user_id: UUID) -> None: ...

    def list_all(self) -> list[User]: ...


class ProjectRepository(Protocol):
    def create(self, project: Project) -> None: ...

    def get_by_id(self, project_id: UUID) -> Optional[Project]: ...

    def get_by_owner(self, owner_id: UUID) -> list[Project]: ...

    def update(self, project: Project) -> None: ...

    def delete(self, project_id: UUID) -> None: ...

    def list_all(self) -> list[Project]: ...


class IssueRepository(Protocol):
    def create(self, issue: Issue) -> None: ...

    def get_by_id(self, issue_id: UUID) -> Optional[Issue]: ...

    def get_by_project(self, project_id: UUID) -> list[Issue]: ...

    def update(self, issue: Issue) -> None: ...

    def update_status(self, issue_id: UUID, status: IssueStatus) -> None: ...

    def delete(self, issue_id: UUID) -> None: ...

    def list_all(self) -> list[Issue]: ...
