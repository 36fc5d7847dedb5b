"""
tests/conftest.py -- Shared test fixtures for BountyBoard.

This module provides:
  - In-memory fake repositories that satisfy core/repositories.py, so usecase
    tests run without a database.
  - FakeClock: a deterministic, strictly increasing clock for usecases.
  - _make_test_engine() / _patch_lifespan(): wire an isolated database into
    the real FastAPI app, bypassing real startup.
  - api_client: TestClient plus a registered user and that user's token.

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.

JWT_SECRET must be set before any api import so get_settings() does not warn
about the insecure default while the test app is being imported.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

# Set before any api/core import so get_settings() sees a real secret.
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-0123456789")

import pytest
from fastapi.testclient import TestClient

from api.main import app, wire_services
from auth.passwords import PasswordHasher
from auth.tokens import TokenService
from core.config import Settings
from core.issues import IssueUsecases
from core.models import Issue, IssueStatus, Project, User
from core.projects import ProjectUsecases
from core.users import UserUsecases
from store.schema import create_db_engine

TEST_SECRET = "test-secret-key-that-is-long-enough-0123456789"

# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Callable clock that advances by `step` on every call.

    Gives every created entity a distinct, strictly increasing created_at so
    ordering assertions never depend on the host clock's resolution.
    """

    def __init__(self, start: Optional[datetime] = None, step: timedelta = timedelta(seconds=1)) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        self.now = self.now + self.step
        return self.now


# ---------------------------------------------------------------------------
# In-memory repositories
# ---------------------------------------------------------------------------


def _newest_first(items):
    return sorted(items, key=lambda e: e.created_at, reverse=True)


class InMemoryUserRepository:
    """Dict-backed UserRepository. `writes` counts create/update/delete calls."""

    def __init__(self) -> None:
        self.rows: dict[UUID, User] = {}
        self.writes = 0

    def create(self, user: User) -> None:
        self.writes += 1
        self.rows[user.id] = replace(user)

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        row = self.rows.get(user_id)
        return replace(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        for row in self.rows.values():
            if row.email == email:
                return replace(row)
        return None

    def update(self, user: User) -> None:
        self.writes += 1
        if user.id in self.rows:
            self.rows[user.id] = replace(user)

    def delete(self, user_id: UUID) -> None:
        self.writes += 1
        self.rows.pop(user_id, None)

    def list_all(self) -> list[User]:
        return [replace(u) for u in _newest_first(self.rows.values())]


class InMemoryProjectRepository:
    def __init__(self) -> None:
        self.rows: dict[UUID, Project] = {}
        self.writes = 0

    def create(self, project: Project) -> None:
        self.writes += 1
        self.rows[project.id] = replace(project, tags=list(project.tags))

    def get_by_id(self, project_id: UUID) -> Optional[Project]:
        row = self.rows.get(project_id)
        return replace(row, tags=list(row.tags)) if row else None

    def get_by_owner(self, owner_id: UUID) -> list[Project]:
        return [
            replace(p, tags=list(p.tags)) for p in _newest_first(p for p in self.rows.values() if p.owner_id == owner_id)
        ]

    def update(self, project: Project) -> None:
        self.writes += 1
        if project.id in self.rows:
            self.rows[project.id] = replace(project, tags=list(project.tags))

    def delete(self, project_id: UUID) -> None:
        self.writes += 1
        self.rows.pop(project_id, None)

    def list_all(self) -> list[Project]:
        return [replace(p, tags=list(p.tags)) for p in _newest_first(self.rows.values())]


class InMemoryIssueRepository:
    def __init__(self) -> None:
        self.rows: dict[UUID, Issue] = {}
        self.writes = 0

    def create(self, issue: Issue) -> None:
        self.writes += 1
        self.rows[issue.id] = replace(issue)

    def get_by_id(self, issue_id: UUID) -> Optional[Issue]:
        row = self.rows.get(issue_id)
        return replace(row) if row else None

    def get_by_project(self, project_id: UUID) -> list[Issue]:
        return [replace(i) for i in _newest_first(i for i in self.rows.values() if i.project_id == project_id)]

    def update(self, issue: Issue) -> None:
        self.writes += 1
        if issue.id in self.rows:
            self.rows[issue.id] = replace(issue)

    def update_status(self, issue_id: UUID, status: IssueStatus) -> None:
        self.writes += 1
        if issue_id in self.rows:
            self.rows[issue_id].status = status

    def delete(self, issue_id: UUID) -> None:
        self.writes += 1
        self.rows.pop(issue_id, None)

    def list_all(self) -> list[Issue]:
        return [replace(i) for i in _newest_first(self.rows.values())]


# ---------------------------------------------------------------------------
# Usecase fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def hasher() -> PasswordHasher:
    # Minimum bcrypt cost keeps the suite fast; the algorithm is unchanged.
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(TEST_SECRET, expire_hours=24)


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def project_repo() -> InMemoryProjectRepository:
    return InMemoryProjectRepository()


@pytest.fixture
def issue_repo() -> InMemoryIssueRepository:
    return InMemoryIssueRepository()


@pytest.fixture
def user_usecases(user_repo, hasher, clock) -> UserUsecases:
    return UserUsecases(user_repo, hasher, clock=clock)


@pytest.fixture
def project_usecases(project_repo, clock) -> ProjectUsecases:
    return ProjectUsecases(project_repo, clock=clock)


@pytest.fixture
def issue_usecases(issue_repo, clock) -> IssueUsecases:
    return IssueUsecases(issue_repo, clock=clock)


# ---------------------------------------------------------------------------
# App helpers
# ---------------------------------------------------------------------------


def _make_test_settings(db_suffix: str) -> Settings:
    return Settings(
        jwt_secret=TEST_SECRET,
        jwt_expiration_hours=1,
        bcrypt_rounds=4,
        database_url=f"sqlite:///file:test_bounty_{db_suffix}?mode=memory&cache=shared&uri=true",
    )


def _patch_lifespan(settings: Settings, engine):
    """Return an async context manager that replaces the real lifespan.

    Runs the same wire_services() as production, over the test engine.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        wire_services(app, settings, engine)
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Module-scoped fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, str, str], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so tests
    hit real route handlers but use an isolated in-memory database. A user
    ("owner@example.com" / "ownerpass123") is registered before the client
    starts; token is a valid bearer token for that user.
    """
    settings = _make_test_settings(request.module.__name__.replace(".", "_"))
    engine = create_db_engine(settings.database_url)

    app.router.lifespan_context = _patch_lifespan(settings, engine)

    with TestClient(app, raise_server_exceptions=True) as client:
        resp = client.post(
            "/api/v1/users",
            json={"username": "owner", "email": "owner@example.com", "password": "ownerpass123"},
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        yield client, body["token"], body["id"]

    engine.dispose()
