"""
API request and response models for BountyBoard REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in core/models.py, which
own the internal domain representation. Route handlers map between the two.

Separation of concerns: core/ models = domain truth; api/ models = API contract.

Required strings are NOT given min_length here. Emptiness is a domain rule
(InvalidData at creation, "no change" at update) and lives in the usecases so
it behaves the same for every caller.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.models import Issue, IssueStatus, Project, User

# bcrypt reads at most 72 bytes of UTF-8; longer input is refused outright.
# The limit is in bytes, so a 40-character password of "é" is already too long.
PASSWORD_MAX_BYTES = 72


def _check_password_bytes(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes when UTF-8 encoded")
    return value


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/v1/users."""

    username: str = Field(max_length=255)
    email: str = Field(max_length=255)
    password: str

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class LoginRequest(BaseModel):
    """Request body for POST /api/v1/users/login."""

    email: str = Field(max_length=255)
    password: str

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password_bytes(value)


class UserUpdate(BaseModel):
    """Request body for PUT /api/v1/users/{id}. Email cannot be changed."""

    username: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: Optional[str]) -> Optional[str]:
        return _check_password_bytes(value)


class UserResponse(BaseModel):
    """Public view of a User. There is deliberately no password_hash field.

    token is set only on register and login responses.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    username: str
    email: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    token: Optional[str] = None

    @classmethod
    def from_entity(cls, user: User, token: Optional[str] = None) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
            token=token,
        )


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


class ProjectCreate(BaseModel):
    owner_id: UUID
    name: str = Field(max_length=255)
    description: Optional[str] = None
    github_link: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    github_link: Optional[str] = None
    tags: Optional[list[str]] = None


class ProjectResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    owner_id: UUID
    name: str
    description: Optional[str]
    github_link: Optional[str]
    tags: list[str]
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, project: Project) -> "ProjectResponse":
        return cls(
            id=project.id,
            owner_id=project.owner_id,
            name=project.name,
            description=project.description,
            github_link=project.github_link,
            tags=project.tags,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )


# ---------------------------------------------------------------------------
# Issues
# ---------------------------------------------------------------------------


class IssueCreate(BaseModel):
    """Request body for POST /api/v1/issues. Any status sent is ignored."""

    project_id: UUID
    title: str = Field(max_length=255)
    description: Optional[str] = None
    bounty_value: float


class IssueUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    bounty_value: Optional[float] = None
    status: Optional[IssueStatus] = None


class IssueStatusUpdate(BaseModel):
    """Request body for PATCH /api/v1/issues/{id}/status."""

    status: IssueStatus


class IssueResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    project_id: UUID
    title: str
    description: Optional[str]
    bounty_value: float
    status: IssueStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, issue: Issue) -> "IssueResponse":
        return cls(
            id=issue.id,
            project_id=issue.project_id,
            title=issue.title,
            description=issue.description,
            bounty_value=issue.bounty_value,
            status=issue.status,
            created_at=issue.created_at,
            updated_at=issue.updated_at,
        )


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
