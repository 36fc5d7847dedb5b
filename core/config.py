"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for BountyBoard happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.
Services that need a value (TokenService, PasswordHasher, the DB engine) get it
passed in at construction by api/main.py; they never look it up themselves.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. jwt_secret -> JWT_SECRET). Type coercion and validation are built in.

  @model_validator(mode="after"): Flags the insecure JWT_SECRET fallback once,
      at startup, instead of at every token operation.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/, or store/.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("bountyboard.config")

# Fallback used only when JWT_SECRET is unset. Anyone can forge tokens signed
# with it, so startup logs a warning whenever it is in effect.
INSECURE_DEFAULT_SECRET = "secret"

_DEFAULT_EXPIRATION_HOURS = 24
_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'bountyboard.db'}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Session tokens
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured"; the validator below
    # swaps in INSECURE_DEFAULT_SECRET so callers never see "".
    jwt_secret: str = ""
    jwt_expiration_hours: int = _DEFAULT_EXPIRATION_HOURS

    # ------------------------------------------------------------------
    # Passwords
    # ------------------------------------------------------------------

    # bcrypt accepts 4..31. Tests drop to 4 to keep the suite fast.
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # ------------------------------------------------------------------
    # Database
    # ------------------------------------------------------------------

    database_url: str = _DEFAULT_DB_URL
    # Pool bounds apply to server databases only. SQLite uses its own pools.
    db_pool_size: int = Field(default=5, ge=1)
    db_max_overflow: int = Field(default=10, ge=0)

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("jwt_expiration_hours", mode="before")
    @classmethod
    def fallback_expiration(cls, value: Any) -> int:
        """Unset, unparsable, or non-positive expiry falls back to 24 hours."""
        try:
            hours = int(value)
        except (TypeError, ValueError):
            return _DEFAULT_EXPIRATION_HOURS
        return hours if hours > 0 else _DEFAULT_EXPIRATION_HOURS

    @model_validator(mode="after")
    def apply_secret_fallback(self) -> "Settings":
        if not self.jwt_secret:
            self.jwt_secret = INSECURE_DEFAULT_SECRET
        if self.jwt_secret == INSECURE_DEFAULT_SECRET:
            logger.warning(
                "WARNING: JWT_SECRET is not set; using the insecure default. "
                "Any client can forge session tokens. Set JWT_SECRET before deploying."
            )
        return self

    @property
    def uses_insecure_secret(self) -> bool:
        return self.jwt_secret == INSECURE_DEFAULT_SECRET


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
