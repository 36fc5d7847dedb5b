"""
store/projects.py -- SQL implementation of core.repositories.ProjectRepository.

tags round-trip through a JSON text column so their order and any duplicates
survive storage unchanged.
"""

from __future__ import annotations

import json
from typing import Optional
from uuid import UUID

from sqlalchemy.engine import Engine

from core.models import Project
from store.schema import from_iso, projects, storage_errors, to_iso


class ProjectStore:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def create(self, project: Project) -> None:
        with storage_errors("project"), self.engine.begin() as conn:
            conn.execute(
                projects.insert().values(
                    id=str(project.id),
                    owner_id=str(project.owner_id),
                    name=project.name,
                    description=project.description,
                    github_link=project.github_link,
                    tags=json.dumps(project.tags),
                    created_at=to_iso(project.created_at),
                    updated_at=to_iso(project.updated_at),
                )
            )

    def get_by_id(self, project_id: UUID) -> Optional[Project]:
        with storage_errors("project"), self.engine.connect() as conn:
            row = conn.execute(projects.select().where(projects.c.id == str(project_id))).fetchone()
        return _row_to_project(row) if row is not None else None

    def get_by_owner(self, owner_id: UUID) -> list[Project]:
        """Return the owner's projects, newest first."""
        with storage_errors("project"), self.engine.connect() as conn:
            rows = conn.execute(
                projects.select()
                .where(projects.c.owner_id == str(owner_id))
                .order_by(projects.c.created_at.desc())
            ).fetchall()
        return [_row_to_project(r) for r in rows]

    def update(self, project: Project) -> None:
        with storage_errors("project"), self.engine.begin() as conn:
            conn.execute(
                projects.update()
                .where(projects.c.id == str(project.id))
                .values(
                    name=project.name,
                    description=project.description,
                    github_link=project.github_link,
                    tags=json.dumps(project.tags),
                    updated_at=to_iso(project.updated_at),
                )
            )

    def delete(self, project_id: UUID) -> None:
        with storage_errors("project"), self.engine.begin() as conn:
            conn.execute(projects.delete().where(projects.c.id == str(project_id)))

    def list_all(self) -> list[Project]:
        with storage_errors("project"), self.engine.connect() as conn:
            rows = conn.execute(projects.select().order_by(projects.c.created_at.desc())).fetchall()
        return [_row_to_project(r) for r in rows]


def _row_to_project(row) -> Project:
    return Project(
        id=UUID(row.id),
        owner_id=UUID(row.owner_id),
        name=row.name,
        description=row.description,
        github_link=row.github_link,
        tags=json.loads(row.tags) if row.tags else [],
        created_at=from_iso(row.created_at),
        updated_at=from_iso(row.updated_at),
    )
