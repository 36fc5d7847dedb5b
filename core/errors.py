"""
core/errors.py -- Closed error taxonomy shared by every BountyBoard layer.

Five kinds, no more:
  InvalidData  -- malformed or missing required input
  NotFound     -- referenced entity absent
  Conflict     -- uniqueness violation (duplicate email)
  Unauthorized -- missing/malformed/expired credential, wrong password,
                  or subject/resource mismatch
  Infra        -- storage or cryptographic operation failed unexpectedly

Usecases raise these and never log. The HTTP layer maps each kind to exactly
one status code (api/main.py::_STATUS_BY_ERROR). DomainError itself is the
common base for catching; it is never raised directly.

Unauthorized deliberately collapses every credential failure into one kind.
Callers cannot tell "expired" from "forged" from "garbage".

Layer rule: core/ is the kernel. This module imports nothing from api/,
auth/, or store/.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for the taxonomy. Carries a human-readable message."""

    code: str = "domain_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class InvalidData(DomainError):
    code = "invalid_data"


class NotFound(DomainError):
    code = "not_found"


class Conflict(DomainError):
    code = "conflict"


class Unauthorized(DomainError):
    code = "unauthorized"


class Infra(DomainError):
    code = "infra_error"


# Every concrete kind, in declaration order. Tests assert the set is closed.
ERROR_KINDS: tuple[type[DomainError], ...] = (InvalidData, NotFound, Conflict, Unauthorized, Infra)
