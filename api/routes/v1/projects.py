"""
api/routes/v1/projects.py -- Project routes.

Routes:
  POST   /api/v1/projects                 -- create (requires auth)
  GET    /api/v1/projects[?owner_id=...]  -- list, optionally by owner (public)
  GET    /api/v1/projects/{id}            -- detail (public)
  PUT    /api/v1/projects/{id}            -- partial update (requires auth)
  DELETE /api/v1/projects/{id}            -- delete (requires auth)

Ownership is NOT checked: any authenticated subject may change or delete any
project, and owner_id on create is taken from the body as given.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response

from api.models import ProjectCreate, ProjectResponse, ProjectUpdate
from auth.dependencies import get_current_claims
from core.models import Claims
from core.projects import ProjectUsecases

router = APIRouter()


def _usecases(request: Request) -> ProjectUsecases:
    return request.app.state.project_usecases


@router.post("/projects", response_model=ProjectResponse, status_code=201)
def create_project(
    request: Request,
    body: ProjectCreate,
    claims: Claims = Depends(get_current_claims),
) -> ProjectResponse:
    project = _usecases(request).create_project(
        owner_id=body.owner_id,
        name=body.name,
        description=body.description,
        github_link=body.github_link,
        tags=body.tags,
    )
    return ProjectResponse.from_entity(project)


@router.get("/projects", response_model=list[ProjectResponse])
def list_projects(request: Request, owner_id: Optional[UUID] = None) -> list[ProjectResponse]:
    """All projects newest first, or only those of owner_id when given."""
    usecases = _usecases(request)
    found = usecases.get_projects_by_owner(owner_id) if owner_id is not None else usecases.list_projects()
    return [ProjectResponse.from_entity(p) for p in found]


@router.get("/projects/{project_id}", response_model=ProjectResponse)
def get_project(request: Request, project_id: UUID) -> ProjectResponse:
    return ProjectResponse.from_entity(_usecases(request).get_project(project_id))


@router.put("/projects/{project_id}", response_model=ProjectResponse)
def update_project(
    request: Request,
    project_id: UUID,
    body: ProjectUpdate,
    claims: Claims = Depends(get_current_claims),
) -> ProjectResponse:
    project = _usecases(request).update_project(
        project_id,
        name=body.name,
        description=body.description,
        github_link=body.github_link,
        tags=body.tags,
    )
    return ProjectResponse.from_entity(project)


@router.delete("/projects/{project_id}", status_code=204)
def delete_project(
    request: Request,
    project_id: UUID,
    claims: Claims = Depends(get_current_claims),
) -> Response:
    _usecases(request).delete_project(project_id)
    return Response(status_code=204)
