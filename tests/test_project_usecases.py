"""Unit tests for core/projects.py.

Covers:
- create: InvalidData on empty name, tags keep order and duplicates
- get: NotFound for unknown id
- update: partial merge, empty name ignored, tags replaced
- by-owner and list ordering (newest first); idempotent delete
"""

from __future__ import annotations

import uuid

import pytest

from core.errors import InvalidData, NotFound
from core.projects import ProjectUsecases

OWNER = uuid.UUID("00000000-0000-4000-8000-000000000001")


class TestCreate:
    def test_create_project(self, project_usecases: ProjectUsecases) -> None:
        project = project_usecases.create_project(OWNER, "repo", tags=["rust", "cli"])
        assert project.owner_id == OWNER
        assert project.name == "repo"
        assert project.tags == ["rust", "cli"]
        assert project.description is None
        assert project.updated_at is None

    def test_tags_keep_order_and_duplicates(self, project_usecases: ProjectUsecases) -> None:
        project = project_usecases.create_project(OWNER, "repo", tags=["b", "a", "b"])
        assert project_usecases.get_project(project.id).tags == ["b", "a", "b"]

    def test_empty_name_is_invalid(self, project_usecases: ProjectUsecases, project_repo) -> None:
        with pytest.raises(InvalidData):
            project_usecases.create_project(OWNER, "")
        assert project_repo.writes == 0

    def test_owner_need_not_exist(self, project_usecases: ProjectUsecases) -> None:
        ghost = uuid.uuid4()
        assert project_usecases.create_project(ghost, "orphan").owner_id == ghost


class TestGetAndUpdate:
    def test_get_missing(self, project_usecases: ProjectUsecases) -> None:
        with pytest.raises(NotFound):
            project_usecases.get_project(uuid.uuid4())

    def test_partial_update(self, project_usecases: ProjectUsecases) -> None:
        project = project_usecases.create_project(
            OWNER, "repo", description="old", github_link="https://github.com/o/repo", tags=["x"]
        )
        updated = project_usecases.update_project(project.id, description="new")
        assert updated.name == "repo"
        assert updated.description == "new"
        assert updated.github_link == "https://github.com/o/repo"
        assert updated.tags == ["x"]
        assert updated.updated_at is not None

    def test_empty_name_is_ignored(self, project_usecases: ProjectUsecases) -> None:
        project = project_usecases.create_project(OWNER, "repo")
        assert project_usecases.update_project(project.id, name="").name == "repo"

    def test_tags_replaced(self, project_usecases: ProjectUsecases) -> None:
        project = project_usecases.create_project(OWNER, "repo", tags=["a"])
        assert project_usecases.update_project(project.id, tags=["c", "c"]).tags == ["c", "c"]

    def test_update_missing(self, project_usecases: ProjectUsecases) -> None:
        with pytest.raises(NotFound):
            project_usecases.update_project(uuid.uuid4(), name="x")


class TestListing:
    def test_list_newest_first(self, project_usecases: ProjectUsecases) -> None:
        p1 = project_usecases.create_project(OWNER, "one")
        p2 = project_usecases.create_project(OWNER, "two")
        p3 = project_usecases.create_project(OWNER, "three")
        assert [p.id for p in project_usecases.list_projects()] == [p3.id, p2.id, p1.id]

    def test_by_owner(self, project_usecases: ProjectUsecases) -> None:
        mine = project_usecases.create_project(OWNER, "mine")
        project_usecases.create_project(uuid.uuid4(), "theirs")
        assert [p.id for p in project_usecases.get_projects_by_owner(OWNER)] == [mine.id]

    def test_delete_is_idempotent(self, project_usecases: ProjectUsecases) -> None:
        project = project_usecases.create_project(OWNER, "repo")
        project_usecases.delete_project(project.id)
        project_usecases.delete_project(project.id)
        with pytest.raises(NotFound):
            project_usecases.get_project(project.id)

    def test_listed_tags_are_copies(self, project_usecases: ProjectUsecases) -> None:
        project = project_usecases.create_project(OWNER, "repo", tags=["a", "b"])
        project_usecases.list_projects()[0].tags.append("leak")
        project_usecases.get_projects_by_owner(OWNER)[0].tags.clear()
        assert project_usecases.get_project(project.id).tags == ["a", "b"]
