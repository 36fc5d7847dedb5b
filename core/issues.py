"""
core/issues.py -- Issue usecases.

Two write paths exist on purpose:
  update_issue()        -- read-then-merge partial update, stamps updated_at.
  update_issue_status() -- writes the status straight through the repository.
                           No existence check, no merge, no updated_at, and
                           no transition rules: any status may follow any
                           other (Approved -> Open included).

bounty_value is stored as given; negative values are accepted.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from core.errors import InvalidData, NotFound
from core.models import Issue, IssueStatus
from core.repositories import IssueRepository


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IssueUsecases:
    def __init__(
        self,
        repository: IssueRepository,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], UUID] = uuid.uuid4,
    ) -> None:
        self.repository = repository
        self._clock = clock
        self._new_id = id_factory

    def create_issue(
        self,
        project_id: UUID,
        title: str,
        description: Optional[str] = None,
        bounty_value: float = 0.0,
    ) -> Issue:
        """Open a new issue. Status always starts as Open."""
        if not title:
            raise InvalidData("Issue title cannot be empty")

        issue = Issue(
            id=self._new_id(),
            project_id=project_id,
            title=title,
            description=description,
            bounty_value=float(bounty_value),
            status=IssueStatus.OPEN,
            created_at=self._clock(),
            updated_at=None,
        )
        self.repository.create(issue)
        return issue

    def get_issue(self, issue_id: UUID) -> Issue:
        issue = self.repository.get_by_id(issue_id)
        if issue is None:
            raise NotFound("Issue not found")
        return issue

    def get_issues_by_project(self, project_id: UUID) -> list[Issue]:
        return self.repository.get_by_project(project_id)

    def update_issue(
        self,
        issue_id: UUID,
        title: Optional[str] = None,
        description: Optional[str] = None,
        bounty_value: Optional[float] = None,
        status: Optional[IssueStatus] = None,
    ) -> Issue:
        issue = self.get_issue(issue_id)
        if title:
            issue.title = title
        if description is not None:
            issue.description = description
        if bounty_value is not None:
            issue.bounty_value = float(bounty_value)
        if status is not None:
            issue.status = status
        issue.updated_at = self._clock()
        self.repository.update(issue)
        return issue

    def update_issue_status(self, issue_id: UUID, status: IssueStatus) -> None:
        self.repository.update_status(issue_id, status)

    def delete_issue(self, issue_id: UUID) -> None:
        self.repository.delete(issue_id)

    def list_issues(self) -> list[Issue]:
        return self.repository.list_all()
