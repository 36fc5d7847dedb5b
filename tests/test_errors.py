"""Unit tests for core/errors.py and its HTTP mapping in api/main.py.

Covers:
- the taxonomy is closed: exactly five kinds, each with a distinct code
- every kind maps to exactly one status code
"""

from __future__ import annotations

import pytest

from api.main import status_for
from core.errors import ERROR_KINDS, Conflict, DomainError, Infra, InvalidData, NotFound, Unauthorized


def test_taxonomy_is_closed() -> None:
    assert set(ERROR_KINDS) == {InvalidData, NotFound, Conflict, Unauthorized, Infra}
    assert set(DomainError.__subclasses__()) == set(ERROR_KINDS)


def test_codes_are_distinct() -> None:
    assert len({kind.code for kind in ERROR_KINDS}) == len(ERROR_KINDS)


@pytest.mark.parametrize(
    "kind, status",
    [
        (InvalidData, 400),
        (NotFound, 404),
        (Conflict, 409),
        (Unauthorized, 401),
        (Infra, 500),
    ],
)
def test_status_mapping(kind, status) -> None:
    assert status_for(kind("boom")) == status


def test_message_is_kept() -> None:
    err = NotFound("User not found")
    assert err.message == "User not found"
    assert str(err) == "User not found"
    assert repr(err) == "NotFound('User not found')"
