"""Engine configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. DATABASE_URL is only required when a session is first
requested (see gatekeeper.infrastructure.persistence.database).
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gatekeeper.shared.utils.datetime import resolve_timezone


class Settings(BaseSettings):
    """Engine settings loaded from environment and .env."""

    # App
    app_name: str = "gatekeeper"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (postgresql+asyncpg://... in production)
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Role listing
    default_page_size: int = 20
    max_page_size: int = 100

    # Audit hook: when False, mutations are not recorded.
    audit_enabled: bool = True

    # IANA zone used to evaluate allowed_hours constraints.
    constraint_timezone: str = "UTC"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_paging_and_timezone(self) -> "Settings":
        """Validate page sizes and the constraint timezone."""
        if self.default_page_size < 1 or self.max_page_size < 1:
            raise ValueError("default_page_size and max_page_size must be positive")
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) must not exceed "
                f"max_page_size ({self.max_page_size})"
            )
        try:
            resolve_timezone(self.constraint_timezone)
        except ValueError as e:
            raise ValueError(
                f"constraint_timezone is not a known IANA zone: {self.constraint_timezone!r}"
            ) from e
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
