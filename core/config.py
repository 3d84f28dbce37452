"""
Application configuration using Pydantic settings.

Usage:
    from core.config import get_settings
    settings = get_settings()
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

WEAK_SECRETS = (
    "change_me",
    "changeme",
    "secret",
    "your-secret-key",
    "supersecret",
    "development",
    "test",
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and .env file.

    Required for production:
        - SECRET (min 32 chars, signs session cookies)
        - GITHUB_CLIENT_ID / GITHUB_CLIENT_SECRET (for OAuth)
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # App settings
    app_name: str = "Issue Triage"
    env: str = Field(default="development", validation_alias="ENV")
    debug: bool = Field(default=False, validation_alias="DEBUG")
    host: str = Field(default="127.0.0.1", validation_alias="HOST")
    port: int = Field(default=8080, validation_alias="PORT")
    public_dir: str = Field(default="backend/app/public", validation_alias="PUBLIC_DIR")

    # Database
    database_url: str = Field(default="sqlite:///issue_triage.db", validation_alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="DB_MAX_OVERFLOW")

    # Sessions
    secret: str = Field(default="CHANGE_ME", validation_alias="SECRET")
    session_cookie_name: str = "session"
    session_ttl_seconds: int = Field(default=60 * 60 * 24 * 14, validation_alias="SESSION_TTL_SECONDS")
    session_encryption_key: Optional[str] = Field(default=None, validation_alias="SESSION_ENCRYPTION_KEY")
    cookie_secure: bool = Field(default=False, validation_alias="COOKIE_SECURE")
    csrf_cookie_name: str = "XSRF-TOKEN"
    # Prefix JSON bodies with )]}', so they cannot be loaded as a script
    json_prefix: bool = Field(default=True, validation_alias="JSON_PREFIX")

    # Token encryption for GitHub access tokens stored in the users table
    token_encryption_key: Optional[str] = Field(default=None, validation_alias="TOKEN_ENCRYPTION_KEY")

    # GitHub OAuth
    github_client_id: str = Field(default="", validation_alias="GITHUB_CLIENT_ID")
    github_client_secret: str = Field(default="", validation_alias="GITHUB_CLIENT_SECRET")
    github_callback_url: Optional[str] = Field(default=None, validation_alias="GITHUB_CALLBACK_URL")
    github_access_level: Literal["public", "private"] = Field(
        default="public", validation_alias="GITHUB_ACCESS_LEVEL"
    )
    github_webhook_url: Optional[str] = Field(default=None, validation_alias="GITHUB_WEBHOOK_URL")
    github_timeout_seconds: float = Field(default=10.0, validation_alias="GITHUB_TIMEOUT_SECONDS")

    @field_validator("secret")
    @classmethod
    def validate_secret(cls, v: str, info: ValidationInfo) -> str:
        """Validate session secret - warns in dev, errors in production."""
        import warnings

        env = info.data.get("env", "development")
        is_production = env.lower() in ("production", "prod")

        is_weak = v.lower() in WEAK_SECRETS
        is_too_short = len(v) < 32

        if is_production:
            if is_weak:
                raise ValueError(
                    "SECRET cannot be a default value in production. "
                    "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
                )
            if is_too_short:
                raise ValueError(
                    f"SECRET must be at least 32 characters in production (got {len(v)})"
                )
        elif is_weak:
            warnings.warn(
                "SECRET is set to a default value. This is insecure - set a proper key for production.",
                UserWarning,
                stacklevel=2,
            )
        elif is_too_short:
            warnings.warn(
                f"SECRET should be at least 32 characters (got {len(v)})",
                UserWarning,
                stacklevel=2,
            )

        return v

    @property
    def is_production(self) -> bool:
        return self.env.lower() in ("production", "prod")

    @property
    def github_scope(self) -> list[str]:
        """OAuth scopes requested from GitHub, widened when private repos are configured."""
        return ["read:org", "repo" if self.github_access_level == "private" else "public_repo"]

    def validate_production_config(self) -> tuple[list[str], list[str]]:
        """
        Validate configuration for production deployment.

        Returns:
            Tuple of (errors, warnings) - errors are fatal, warnings are advisory
        """
        errors = []
        warnings = []

        if not self.github_client_id:
            errors.append("GITHUB_CLIENT_ID is required for OAuth")
        if not self.github_client_secret:
            errors.append("GITHUB_CLIENT_SECRET is required for OAuth")

        if not self.token_encryption_key:
            warnings.append(
                "TOKEN_ENCRYPTION_KEY not set - GitHub access tokens will be stored "
                "in plaintext. Set this key to encrypt tokens at rest."
            )
        if not self.cookie_secure and self.is_production:
            warnings.append("COOKIE_SECURE is off - session cookies will be sent over plain HTTP")

        return errors, warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
