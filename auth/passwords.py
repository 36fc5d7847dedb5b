"""
auth/passwords.py -- One-way password hashing and verification.

Security design decisions:
  bcrypt, used directly (no passlib wrapper). Its adaptive cost factor makes
  brute-force of low-entropy secrets expensive, and every digest carries its
  own random salt. The cost comes from Settings.bcrypt_rounds and is handed to
  PasswordHasher at construction; this module reads no configuration itself.

  bcrypt accepts at most 72 bytes of input (bcrypt >= 5 raises on more). The
  limit is in UTF-8 bytes, not characters. The API layer rejects longer
  passwords with a 400 (api/models.py); this module enforces the same limit
  for any other caller.

Failure policy:
  hash()   -- over-long input is InvalidData. Infra only when bcrypt itself
              fails. Empty input is the caller's problem (UserUsecases rejects
              it before hashing).
  verify() -- a wrong password is False, never an error, and so is one too
              long to ever have been hashed. A malformed stored hash raises
              Infra: that is corrupted data, not a bad login.

Layer rule: no imports from api/ or store/. Import from core/ is allowed.
"""

from __future__ import annotations

import bcrypt

from core.errors import Infra, InvalidData

DEFAULT_ROUNDS = 12
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Credential manager. Pure: no I/O, no shared mutable state."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Return a salted bcrypt digest of the plaintext password."""
        secret = password.encode("utf-8")
        if len(secret) > MAX_PASSWORD_BYTES:
            raise InvalidData(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        try:
            digest = bcrypt.hashpw(secret, bcrypt.gensalt(rounds=self.rounds))
        except (ValueError, TypeError) as exc:
            raise Infra(f"Error hashing password: {exc}") from exc
        return digest.decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        """Return True if the plaintext matches the digest, False otherwise."""
        secret = password.encode("utf-8")
        if len(secret) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(secret, hashed.encode("utf-8"))
        except (ValueError, TypeError) as exc:
            raise Infra(f"Error verifying password: {exc}") from exc
