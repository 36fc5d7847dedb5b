"""
store/issues.py -- SQL implementation of core.repositories.IssueRepository.

Status storage:
  IssueStatus is stored through the explicit table below, never through the
  enum's name or value. Renaming an enum member therefore cannot silently
  change what is written to (or expected from) existing rows. Adding a status
  means adding a row here, and _STATUS_FROM_DB is derived from the same table
  so the two directions cannot drift apart.

update_status() writes only the status column. It does not touch updated_at
and does not check that the issue exists.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.engine import Engine

from core.errors import Infra
from core.models import Issue, IssueStatus
from store.schema import from_iso, issues, storage_errors, to_iso

_STATUS_TO_DB: dict[IssueStatus, str] = {
    IssueStatus.OPEN: "open",
    IssueStatus.IN_REVIEW: "in_review",
    IssueStatus.APPROVED: "approved",
    IssueStatus.DISPUTED: "disputed",
}

_STATUS_FROM_DB: dict[str, IssueStatus] = {v: k for k, v in _STATUS_TO_DB.items()}


def status_to_db(status: IssueStatus) -> str:
    return _STATUS_TO_DB[status]


def status_from_db(value: str) -> IssueStatus:
    """Map a stored status string back to the enum. Unknown values are Infra."""
    try:
        return _STATUS_FROM_DB[value]
    except KeyError:
        raise Infra(f"Unknown issue status in storage: {value!r}") from None


class IssueStore:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def create(self, issue: Issue) -> None:
        with storage_errors("issue"), self.engine.begin() as conn:
            conn.execute(
                issues.insert().values(
                    id=str(issue.id),
                    project_id=str(issue.project_id),
                    title=issue.title,
                    description=issue.description,
                    bounty_value=issue.bounty_value,
                    status=status_to_db(issue.status),
                    created_at=to_iso(issue.created_at),
                    updated_at=to_iso(issue.updated_at),
                )
            )

    def get_by_id(self, issue_id: UUID) -> Optional[Issue]:
        with storage_errors("issue"), self.engine.connect() as conn:
            row = conn.execute(issues.select().where(issues.c.id == str(issue_id))).fetchone()
        return _row_to_issue(row) if row is not None else None

    def get_by_project(self, project_id: UUID) -> list[Issue]:
        with storage_errors("issue"), self.engine.connect() as conn:
            rows = conn.execute(
                issues.select()
                .where(issues.c.project_id == str(project_id))
                .order_by(issues.c.created_at.desc())
            ).fetchall()
        return [_row_to_issue(r) for r in rows]

    def update(self, issue: Issue) -> None:
        with storage_errors("issue"), self.engine.begin() as conn:
            conn.execute(
                issues.update()
                .where(issues.c.id == str(issue.id))
                .values(
                    title=issue.title,
                    description=issue.description,
                    bounty_value=issue.bounty_value,
                    status=status_to_db(issue.status),
                    updated_at=to_iso(issue.updated_at),
                )
            )

    def update_status(self, issue_id: UUID, status: IssueStatus) -> None:
        with storage_errors("issue"), self.engine.begin() as conn:
            conn.execute(issues.update().where(issues.c.id == str(issue_id)).values(status=status_to_db(status)))

    def delete(self, issue_id: UUID) -> None:
        with storage_errors("issue"), self.engine.begin() as conn:
            conn.execute(issues.delete().where(issues.c.id == str(issue_id)))

    def list_all(self) -> list[Issue]:
        with storage_errors("issue"), self.engine.connect() as conn:
            rows = conn.execute(issues.select().order_by(issues.c.created_at.desc())).fetchall()
        return [_row_to_issue(r) for r in rows]


def _row_to_issue(row) -> Issue:
    return Issue(
        id=UUID(row.id),
        project_id=UUID(row.project_id),
        title=row.title,
        description=row.description,
        bounty_value=float(row.bounty_value),
        status=status_from_db(row.status),
        created_at=from_iso(row.created_at),
        updated_at=from_iso(row.updated_at),
    )
