"""
api/main.py -- FastAPI application entry point for BountyBoard.

Run with:  uvicorn api.main:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware -- adds CORS headers for allowed browser origins
  2. log_requests   -- one log line per request with latency

Lifespan builds every service exactly once (engine, stores, hasher, token
service, guard, usecases) and hangs them on app.state. Route handlers and
auth dependencies read them from there; nothing else holds global state.

Error rendering:
  Every core.errors taxonomy error is turned into a response by ONE handler
  using _STATUS_BY_ERROR. No route picks a failure status on its own.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.v1.issues import router as issues_router
from api.routes.v1.projects import router as projects_router
from api.routes.v1.users import router as users_router
from auth.dependencies import AuthGuard
from auth.passwords import PasswordHasher
from auth.tokens import TokenService
from core.config import Settings, get_settings
from core.errors import Conflict, DomainError, Infra, InvalidData, NotFound, Unauthorized
from core.issues import IssueUsecases
from core.projects import ProjectUsecases
from core.users import UserUsecases
from store.issues import IssueStore
from store.projects import ProjectStore
from store.schema import create_db_engine, ping
from store.users import UserStore

VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("bountyboard.api")

# One status per taxonomy kind. No other mapping is allowed.
_STATUS_BY_ERROR: dict[type[DomainError], int] = {
    InvalidData: 400,
    Conflict: 409,
    NotFound: 404,
    Unauthorized: 401,
    Infra: 500,
}


# ---------------------------------------------------------------------------
# Service wiring
# ---------------------------------------------------------------------------


def wire_services(app: FastAPI, settings: Settings, engine: Engine) -> None:
    """Build the core services over engine and attach them to app.state.

    Shared by the real lifespan and the test lifespan in tests/conftest.py so
    both run the exact same object graph.
    """
    tokens = TokenService(settings.jwt_secret, settings.jwt_expiration_hours)
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    app.state.engine = engine
    app.state.tokens = tokens
    app.state.guard = AuthGuard(tokens)
    app.state.user_usecases = UserUsecases(UserStore(engine), hasher)
    app.state.project_usecases = ProjectUsecases(ProjectStore(engine))
    app.state.issue_usecases = IssueUsecases(IssueStore(engine))


# ---------------------------------------------------------------------------
# Lifespan -- modern startup / shutdown pattern (replaces @app.on_event)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Everything before yield runs on startup; everything after on shutdown."""
    settings = get_settings()
    logger.info("BountyBoard API starting up")
    if settings.uses_insecure_secret:
        logger.warning("Session tokens are signed with the insecure default JWT_SECRET")

    engine = create_db_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )
    wire_services(app, settings, engine)
    logger.info("Database initialized (%s)", engine.url.render_as_string(hide_password=True))

    yield

    engine.dispose()
    logger.info("BountyBoard API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="BountyBoard API",
    description="Bounty and issue tracking for open-source projects.",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost", "http://localhost:3000", "http://127.0.0.1"],
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


# ---------------------------------------------------------------------------
# Request logging middleware
#
# Every request passes through this coroutine before reaching any route
# handler. Only method, path, status, latency and client are logged -- never
# headers or bodies, which carry tokens and passwords.
# ---------------------------------------------------------------------------


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(users_router, prefix="/api/v1", tags=["Users"])
app.include_router(projects_router, prefix="/api/v1", tags=["Projects"])
app.include_router(issues_router, prefix="/api/v1", tags=["Issues"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same ErrorResponse envelope so API clients can parse
# errors uniformly without inspecting status codes to choose a schema.
# ---------------------------------------------------------------------------


def status_for(exc: DomainError) -> int:
    """Return the single HTTP status for a taxonomy error."""
    for kind in type(exc).__mro__:
        if kind in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[kind]
    return 500


def _error_response(status_code: int, code: str, message: str, detail: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail)).model_dump(),
    )


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render a taxonomy error.

    Infra messages stay server-side: they can name tables or driver errors.
    Unauthorized adds WWW-Authenticate so clients know a bearer token is
    expected.
    """
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message, exc_info=exc)
        return _error_response(status_code, exc.code, "An unexpected error occurred.")
    response = _error_response(status_code, exc.code, exc.message)
    if isinstance(exc, Unauthorized):
        response.headers["WWW-Authenticate"] = "Bearer"
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed body or parameters are InvalidData, rendered as 400."""
    return _error_response(
        _STATUS_BY_ERROR[InvalidData],
        InvalidData.code,
        "Request validation failed.",
        detail=str(exc.errors()),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing-level errors from Starlette (unknown path, wrong method)."""
    return _error_response(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(500, "internal_error", "An unexpected error occurred.")


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py (not in a router) so it is always reachable
# regardless of router registration state. No authentication.
# ---------------------------------------------------------------------------


@app.get("/api/v1/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return API liveness, version, and database reachability."""
    database = "ok" if ping(request.app.state.engine) else "error"
    return HealthResponse(version=VERSION, components={"app": "ok", "database": database})
