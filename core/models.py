"""
core/models.py -- Domain dataclasses for BountyBoard.

Pure data containers with zero logic. Usecases in core/users.py,
core/projects.py and core/issues.py own the business rules; store/ maps these
to rows and api/models.py maps them to the HTTP contract.

Timestamps are timezone-aware UTC datetimes. updated_at stays None until the
first mutation through an update usecase.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID


class IssueStatus(str, Enum):
    """Lifecycle state of an Issue.

    Values are the outward (API) spelling. The stored form is NOT derived from
    these values; store/issues.py owns an explicit mapping table.
    Transitions are unconstrained: any status may follow any other.
    """

    OPEN = "Open"
    IN_REVIEW = "InReview"
    APPROVED = "Approved"
    DISPUTED = "Disputed"


@dataclass
class User:
    """A registered account.

    password_hash is the bcrypt digest. It never leaves the service: the API
    response models have no field for it.
    """

    id: UUID
    username: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: Optional[datetime] = None


@dataclass
class Project:
    """A repository offering bounties. owner_id is not checked against users."""

    id: UUID
    owner_id: UUID
    name: str
    created_at: datetime
    description: Optional[str] = None
    github_link: Optional[str] = None
    tags: list[str] = field(default_factory=list)  # order kept, duplicates allowed
    updated_at: Optional[datetime] = None


@dataclass
class Issue:
    """A unit of work inside a Project with a bounty attached.

    bounty_value carries no sign or range constraint.
    """

    id: UUID
    project_id: UUID
    title: str
    bounty_value: float
    created_at: datetime
    description: Optional[str] = None
    status: IssueStatus = IssueStatus.OPEN
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Claims:
    """Validated contents of a session token. Never persisted."""

    subject: UUID
    expiry: datetime
