"""
core/projects.py -- Project usecases.

Same shape as core/users.py: a usecase class over a ProjectRepository.
owner_id is taken as given; this layer neither checks that the user exists
nor that the caller owns the project being changed.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from core.errors import InvalidData, NotFound
from core.models import Project
from core.repositories import ProjectRepository


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProjectUsecases:
    def __init__(
        self,
        repository: ProjectRepository,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], UUID] = uuid.uuid4,
    ) -> None:
        self.repository = repository
        self._clock = clock
        self._new_id = id_factory

    def create_project(
        self,
        owner_id: UUID,
        name: str,
        description: Optional[str] = None,
        github_link: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> Project:
        if not name:
            raise InvalidData("Project name cannot be empty")

        project = Project(
            id=self._new_id(),
            owner_id=owner_id,
            name=name,
            description=description,
            github_link=github_link,
            tags=list(tags) if tags else [],
            created_at=self._clock(),
            updated_at=None,
        )
        self.repository.create(project)
        return project

    def get_project(self, project_id: UUID) -> Project:
        project = self.repository.get_by_id(project_id)
        if project is None:
            raise NotFound("Project not found")
        return project

    def get_projects_by_owner(self, owner_id: UUID) -> list[Project]:
        return self.repository.get_by_owner(owner_id)

    def update_project(
        self,
        project_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
        github_link: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> Project:
        """Partial update: only fields that are not None are applied.

        An empty name is ignored. Optional fields accept "" as a real value,
        and tags=[] clears the tag list.
        """
        project = self.get_project(project_id)
        if name:
            project.name = name
        if description is not None:
            project.description = description
        if github_link is not None:
            project.github_link = github_link
        if tags is not None:
            project.tags = list(tags)
        project.updated_at = self._clock()
        self.repository.update(project)
        return project

    def delete_project(self, project_id: UUID) -> None:
        self.repository.delete(project_id)

    def list_projects(self) -> list[Project]:
        return self.repository.list_all()
