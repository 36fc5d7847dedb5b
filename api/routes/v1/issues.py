"""
api/routes/v1/issues.py -- Issue routes.

Routes (in registration order to avoid FastAPI path capture conflicts):
  POST   /api/v1/issues                    -- create, status forced to Open (requires auth)
  GET    /api/v1/issues[?project_id=...]   -- list, optionally by project (public)
  GET    /api/v1/issues/{id}               -- detail (public)
  PUT    /api/v1/issues/{id}               -- partial update (requires auth)
  PATCH  /api/v1/issues/{id}/status        -- set status directly (requires auth)
  DELETE /api/v1/issues/{id}               -- delete (requires auth)

PATCH .../status returns 204 whether or not the issue exists and accepts any
status regardless of the current one.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response

from api.models import IssueCreate, IssueResponse, IssueStatusUpdate, IssueUpdate
from auth.dependencies import get_current_claims
from core.issues import IssueUsecases
from core.models import Claims

router = APIRouter()


def _usecases(request: Request) -> IssueUsecases:
    return request.app.state.issue_usecases


@router.post("/issues", response_model=IssueResponse, status_code=201)
def create_issue(
    request: Request,
    body: IssueCreate,
    claims: Claims = Depends(get_current_claims),
) -> IssueResponse:
    issue = _usecases(request).create_issue(
        project_id=body.project_id,
        title=body.title,
        description=body.description,
        bounty_value=body.bounty_value,
    )
    return IssueResponse.from_entity(issue)


@router.get("/issues", response_model=list[IssueResponse])
def list_issues(request: Request, project_id: Optional[UUID] = None) -> list[IssueResponse]:
    usecases = _usecases(request)
    found = usecases.get_issues_by_project(project_id) if project_id is not None else usecases.list_issues()
    return [IssueResponse.from_entity(i) for i in found]


@router.get("/issues/{issue_id}", response_model=IssueResponse)
def get_issue(request: Request, issue_id: UUID) -> IssueResponse:
    return IssueResponse.from_entity(_usecases(request).get_issue(issue_id))


@router.put("/issues/{issue_id}", response_model=IssueResponse)
def update_issue(
    request: Request,
    issue_id: UUID,
    body: IssueUpdate,
    claims: Claims = Depends(get_current_claims),
) -> IssueResponse:
    issue = _usecases(request).update_issue(
        issue_id,
        title=body.title,
        description=body.description,
        bounty_value=body.bounty_value,
        status=body.status,
    )
    return IssueResponse.from_entity(issue)


@router.patch("/issues/{issue_id}/status", status_code=204)
def update_issue_status(
    request: Request,
    issue_id: UUID,
    body: IssueStatusUpdate,
    claims: Claims = Depends(get_current_claims),
) -> Response:
    _usecases(request).update_issue_status(issue_id, body.status)
    return Response(status_code=204)


@router.delete("/issues/{issue_id}", status_code=204)
def delete_issue(
    request: Request,
    issue_id: UUID,
    claims: Claims = Depends(get_current_claims),
) -> Response:
    _usecases(request).delete_issue(issue_id)
    return Response(status_code=204)
