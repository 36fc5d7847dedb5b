"""
auth/dependencies.py -- Authorization Guard and its FastAPI Depends() helpers.

The guard turns an inbound "Authorization: Bearer <token>" header into
validated Claims, or raises Unauthorized. It keeps no state between calls, so
a single instance is shared by every request.

Two checks:
  authenticate()    -- any valid token passes.
  authorize_self()  -- the token's subject must also equal the target user id.
                       Used for routes that act on "your own" User record
                       (update, delete). Project and Issue routes only
                       authenticate; they do not compare against owner_id.

FastAPI wiring:
  get_current_claims() and require_self() look the guard up on
  request.app.state.guard (built once in api/main.py lifespan) and raise the
  domain Unauthorized error. api/main.py maps it to 401 like every other
  taxonomy error, so there is exactly one place that decides status codes.

Layer rule: no imports from api/ or store/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import Request

from auth.tokens import TokenService
from core.errors import Unauthorized
from core.models import Claims

_BEARER_PREFIX = "Bearer "


def extract_bearer_token(header_value: Optional[str]) -> Optional[str]:
    """Return the token from a "Bearer <token>" header value, else None."""
    if not header_value or not header_value.startswith(_BEARER_PREFIX):
        return None
    token = header_value[len(_BEARER_PREFIX) :].strip()
    return token or None


class AuthGuard:
    """Validates bearer credentials and enforces identity-based access."""

    def __init__(self, tokens: TokenService) -> None:
        self.tokens = tokens

    def authenticate(self, authorization: Optional[str]) -> Claims:
        """Return Claims for a valid bearer header. Raises Unauthorized otherwise."""
        token = extract_bearer_token(authorization)
        if token is None:
            raise Unauthorized("Missing bearer token")
        return self.tokens.validate(token)

    def authorize_self(self, authorization: Optional[str], target_user_id: UUID) -> Claims:
        """Like authenticate(), and the subject must be target_user_id."""
        claims = self.authenticate(authorization)
        if claims.subject != target_user_id:
            raise Unauthorized("Token subject does not match the requested user")
        return claims


def get_current_claims(request: Request) -> Claims:
    """Require a valid bearer token.

    Use as a FastAPI dependency:
        @router.post("/projects")
        def route(claims: Claims = Depends(get_current_claims)): ...
    """
    guard: AuthGuard = request.app.state.guard
    return guard.authenticate(request.headers.get("Authorization"))


def require_self(user_id: UUID, request: Request) -> Claims:
    """Require a valid bearer token whose subject is the {user_id} path parameter.

    Use as a FastAPI dependency on routes declaring a user_id path parameter:
        @router.put("/users/{user_id}")
        def route(user_id: UUID, claims: Claims = Depends(require_self)): ...
    """
    guard: AuthGuard = request.app.state.guard
    return guard.authorize_self(request.headers.get("Authorization"), user_id)
