"""
store/schema.py -- Table definitions, engine factory, and shared helpers.

Uses SQLAlchemy Core (not ORM) so the dataclasses in core/models.py remain
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change, not a rewrite.

Column conventions:
  ids          -- UUID strings (String(36)).
  timestamps   -- ISO 8601 UTC strings. All values share the +00:00 offset, so
                  ORDER BY created_at sorts chronologically.
  tags         -- JSON array serialized as text; order and duplicates kept.
  issue status -- snake_case strings from the table in store/issues.py.

Security: all queries use bound parameters. No f-strings in SQL.

Pooling:
  Server databases get a QueuePool bounded by pool_size + max_overflow. A
  request that finds the pool exhausted blocks in checkout until another
  request returns its connection -- the only waiting point on the request
  path. File SQLite keeps SQLAlchemy's default pool; in-memory SQLite
  (":memory:" or a named "mode=memory" URI) uses StaticPool explicitly.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Float, Index, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from core.errors import Infra

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("username", String(255), nullable=False),
    # UNIQUE here is the race guard behind UserUsecases' read-then-insert check.
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32)),
)

projects = Table(
    "projects",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("owner_id", String(36), nullable=False),  # not a FK: owner existence is not enforced
    Column("name", String(255), nullable=False),
    Column("description", Text),
    Column("github_link", Text),
    Column("tags", Text, nullable=False, server_default="[]"),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32)),
    Index("ix_projects_owner_id", "owner_id"),
)

issues = Table(
    "issues",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("project_id", String(36), nullable=False),  # not a FK, same as owner_id
    Column("title", String(255), nullable=False),
    Column("description", Text),
    Column("bounty_value", Float, nullable=False),
    Column("status", String(20), nullable=False, server_default="open"),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32)),
    Index("ix_issues_project_id", "project_id"),
)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety on file databases.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _is_memory_sqlite(db_url: str) -> bool:
    """True for sqlite:///:memory: and named shared-memory URIs (mode=memory)."""
    return ":memory:" in db_url or "mode=memory" in db_url


def create_db_engine(db_url: str, pool_size: int = 5, max_overflow: int = 10) -> Engine:
    """Build the engine and create any missing tables.

    Usage:
        engine = create_db_engine("sqlite:///bountyboard.db")
        engine = create_db_engine("postgresql://user:pw@host/db", pool_size=10)
    """
    if db_url.startswith("sqlite"):
        if _is_memory_sqlite(db_url):
            # One shared connection, so every thread sees the same in-memory database.
            engine = create_engine(db_url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
        else:
            engine = create_engine(db_url, connect_args={"check_same_thread": False})
            event.listen(engine, "connect", _set_wal_mode)
    else:
        engine = create_engine(
            db_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
        )
    metadata.create_all(engine)
    return engine


def ping(engine: Engine) -> bool:
    """Return True if a trivial query succeeds. Used by the health endpoint."""
    try:
        with engine.connect() as conn:
            conn.exec_driver_sql("SELECT 1")
    except SQLAlchemyError:
        return False
    return True


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@contextmanager
def storage_errors(entity: str) -> Iterator[None]:
    """Re-raise any SQLAlchemy failure as the domain Infra error.

    The message names the entity and the exception class only. Driver
    messages can echo bound parameters (password hashes included).
    """
    try:
        yield
    except SQLAlchemyError as exc:
        raise Infra(f"{entity} storage error: {type(exc).__name__}") from exc


def to_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    # Fixed-width microseconds keep string order equal to time order.
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_iso(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        # Naive value -- assume UTC (legacy rows)
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
