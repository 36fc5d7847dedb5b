"""
auth/tokens.py -- Stateless signed session tokens (JWT, HS256).

Security design decisions:
  JWT: python-jose with HS256. The MAC key is the UTF-8 encoded JWT_SECRET.
       Claims carry only "sub" (user id as a UUID string) and "exp" (absolute
       expiry, integer seconds since the epoch). Nothing is stored server-side;
       a token is valid exactly as long as its signature checks out and its
       expiry lies in the future.

  Wire format: header.claims.signature, each part base64url-encoded. jose
       produces and parses this; we never hand-assemble tokens.

  Failure collapse: validate() turns EVERY failure -- bad signature,
       malformed structure, missing or mistyped claims, expiry in the past --
       into the same Unauthorized("Invalid token"). Callers cannot tell which
       check failed, and neither can an attacker probing the endpoint.

  Configuration: secret and expiry window are passed to TokenService at
       construction (api/main.py builds it from get_settings()). No environment
       reads happen here.

Layer rule: no imports from api/ or store/. Import from core/ is allowed.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import JWTError, jwt

from core.errors import Infra, Unauthorized
from core.models import Claims

_ALGORITHM = "HS256"
_DEFAULT_EXPIRE_HOURS = 24


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and validates session tokens for a single secret.

    Usage:
        tokens = TokenService(settings.jwt_secret, settings.jwt_expiration_hours)
        token = tokens.issue(user.id)
        claims = tokens.validate(token)   # raises Unauthorized on any failure

    clock is injectable so tests can issue tokens "in the past".
    """

    def __init__(
        self,
        secret_key: str,
        expire_hours: int = _DEFAULT_EXPIRE_HOURS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._secret = secret_key.encode("utf-8")
        self.expire_hours = expire_hours if expire_hours > 0 else _DEFAULT_EXPIRE_HOURS
        self._clock = clock

    def issue(self, subject_id: UUID) -> str:
        """Encode a signed token for subject_id expiring expire_hours from now."""
        expiry = self._clock() + timedelta(hours=self.expire_hours)
        payload = {"sub": str(subject_id), "exp": int(expiry.timestamp())}
        try:
            return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)
        except JWTError as exc:
            raise Infra(f"JWT encode error: {exc}") from exc

    def validate(self, token: str) -> Claims:
        """Verify signature, structure and expiry. Returns the Claims.

        jose already rejects expired tokens, but it compares against the wall
        clock. The explicit exp > now check below uses the injected clock so
        expiry is judged by the same time source that issued the token.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[_ALGORITHM])
            subject = UUID(payload["sub"])
            exp = payload["exp"]
            if isinstance(exp, bool) or not isinstance(exp, (int, float)):
                raise ValueError("exp must be numeric")
            expiry = datetime.fromtimestamp(exp, tz=timezone.utc)
        except (JWTError, KeyError, TypeError, ValueError, OverflowError, OSError, AttributeError) as exc:
            raise Unauthorized("Invalid token") from exc
        if expiry <= self._clock():
            raise Unauthorized("Invalid token")
        return Claims(subject=subject, expiry=expiry)
