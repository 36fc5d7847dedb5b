"""
api/routes/v1/users.py -- Registration, login, and self-service user routes.

Routes:
  POST   /api/v1/users           -- register; response carries a session token
  POST   /api/v1/users/login     -- login; response carries a session token
  GET    /api/v1/users           -- list users, newest first (requires auth)
  GET    /api/v1/users/{id}      -- user detail (requires auth, any subject)
  PUT    /api/v1/users/{id}      -- partial update (requires auth, self only)
  DELETE /api/v1/users/{id}      -- delete account (requires auth, self only)

Security:
  Cache-Control: no-store on responses that carry a token.
  password_hash never appears in any response (UserResponse has no such field).
  Usecase errors propagate as core.errors taxonomy exceptions; api/main.py
  renders them. Handlers here never pick status codes for failures.
"""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response

from api.models import LoginRequest, RegisterRequest, UserResponse, UserUpdate
from auth.dependencies import get_current_claims, require_self
from auth.tokens import TokenService
from core.errors import Infra
from core.models import Claims, User
from core.users import UserUsecases

logger = logging.getLogger("bountyboard.api")

# Auth policy:
# - POST   /users, /users/login:  public
# - GET    /users, /users/{id}:   requires auth (get_current_claims)
# - PUT    /users/{id}:           requires auth + subject == id (require_self)
# - DELETE /users/{id}:           requires auth + subject == id (require_self)
router = APIRouter()


def _usecases(request: Request) -> UserUsecases:
    return request.app.state.user_usecases


def _issue_token(request: Request, user: User) -> Optional[str]:
    """Issue a token for a user that was just registered or authenticated.

    A signing failure does not undo the registration: the account exists and
    the client can log in again, so the response simply carries no token.
    """
    tokens: TokenService = request.app.state.tokens
    try:
        return tokens.issue(user.id)
    except Infra:
        logger.exception("Token issue failed for user %s", user.id)
        return None


@router.post("/users", response_model=UserResponse, status_code=201)
def register_user(request: Request, response: Response, body: RegisterRequest) -> UserResponse:
    """Create an account. 409 if the email is already registered."""
    user = _usecases(request).register_user(body.username, body.email, body.password)
    response.headers["Cache-Control"] = "no-store"
    return UserResponse.from_entity(user, token=_issue_token(request, user))


@router.post("/users/login", response_model=UserResponse)
def login_user(request: Request, response: Response, body: LoginRequest) -> UserResponse:
    """Exchange email + password for a session token.

    Unknown email -> 404, wrong password -> 401.
    """
    user = _usecases(request).login_user(body.email, body.password)
    response.headers["Cache-Control"] = "no-store"
    return UserResponse.from_entity(user, token=_issue_token(request, user))


@router.get("/users", response_model=list[UserResponse])
def list_users(request: Request, claims: Claims = Depends(get_current_claims)) -> list[UserResponse]:
    return [UserResponse.from_entity(u) for u in _usecases(request).list_users()]


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(request: Request, user_id: UUID, claims: Claims = Depends(get_current_claims)) -> UserResponse:
    return UserResponse.from_entity(_usecases(request).get_user(user_id))


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(
    request: Request,
    user_id: UUID,
    body: UserUpdate,
    claims: Claims = Depends(require_self),
) -> UserResponse:
    """Update your own username and/or password. Empty strings change nothing."""
    user = _usecases(request).update_user(user_id, username=body.username, password=body.password)
    return UserResponse.from_entity(user)


@router.delete("/users/{user_id}", status_code=204)
def delete_user(request: Request, user_id: UUID, claims: Claims = Depends(require_self)) -> Response:
    _usecases(request).delete_user(user_id)
    return Response(status_code=204)
