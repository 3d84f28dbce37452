"""
Security configuration validation.

Ensures critical security settings are properly configured
before the application starts.
"""

import base64
import binascii
import os
import re

from core.logging import get_logger

logger = get_logger("security.validation")


class SecurityConfigError(Exception):
    """Raised when security configuration is invalid."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        message = "Security configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(message)


def validate_secret(secret: str) -> tuple[bool, str | None]:
    """
    Validate the session signing secret.

    Requirements:
    - Must be at least 32 characters
    - Must not be a default/placeholder value
    - Should contain letters or digits
    """
    from core.config import WEAK_SECRETS

    if not secret:
        return False, "SECRET is not set"

    if secret.lower() in WEAK_SECRETS:
        return False, "SECRET cannot be a default value"

    if len(secret) < 32:
        return False, f"SECRET must be at least 32 characters (got {len(secret)})"

    if not re.search(r"[A-Za-z0-9]", secret):
        return False, "SECRET should contain a mix of letters and numbers"

    return True, None


def validate_fernet_key(key: str | None, env_name: str) -> tuple[bool, str | None]:
    """
    Validate a Fernet key (44 characters, url-safe base64 of 32 bytes).
    """
    if not key:
        return False, f"{env_name} is not set"

    if len(key) != 44:
        return False, f"{env_name} must be 44 characters (got {len(key)})"

    try:
        decoded = base64.urlsafe_b64decode(key)
    except (binascii.Error, ValueError):
        return False, f"{env_name} is not valid base64"
    if len(decoded) != 32:
        return False, f"{env_name} is not a valid Fernet key"

    return True, None


def validate_database_url(url: str) -> tuple[bool, str | None, str | None]:
    """
    Validate database URL security.

    Returns:
        Tuple of (is_valid, error_message, warning_message)
    """
    if not url:
        return False, "DATABASE_URL is not set", None

    if url.startswith("sqlite") and os.getenv("ENV") == "production":
        return True, None, "Using SQLite in production - consider PostgreSQL"

    if "@" in url and "://" in url:
        parts = url.split("://")[1].split("@")[0]
        if ":" in parts:
            _, password = parts.split(":", 1)
            if password in ["password", "postgres", "admin", "root", ""]:
                return True, None, "Database password appears to be weak or default"

    return True, None, None


def validate_security_config(
    secret: str,
    session_encryption_key: str | None = None,
    token_encryption_key: str | None = None,
    database_url: str | None = None,
) -> list[str]:
    """
    Validate all security configuration.

    Args:
        secret: Session signing secret
        session_encryption_key: Optional Fernet key for session cookies
        token_encryption_key: Optional Fernet key for stored GitHub tokens
        database_url: Database connection URL

    Returns:
        Advisory warnings; they are logged but never fatal

    Raises:
        SecurityConfigError: If validation fails
    """
    errors = []
    warnings = []

    valid, error = validate_secret(secret)
    if not valid:
        errors.append(error)

    for key, env_name in (
        (session_encryption_key, "SESSION_ENCRYPTION_KEY"),
        (token_encryption_key, "TOKEN_ENCRYPTION_KEY"),
    ):
        if key:
            valid, error = validate_fernet_key(key, env_name)
            if not valid:
                errors.append(error)

    if database_url:
        valid, error, warning = validate_database_url(database_url)
        if not valid:
            errors.append(error)
        if warning:
            warnings.append(warning)

    errors_filtered = [e for e in errors if e is not None]
    warnings_filtered = [w for w in warnings if w is not None]

    for error in errors_filtered:
        logger.error("config_validation_error", error=error)
    for warning in warnings_filtered:
        logger.warning("config_validation_warning", warning=warning)

    if errors_filtered:
        raise SecurityConfigError(errors_filtered)

    return warnings_filtered


__all__ = [
    "SecurityConfigError",
    "validate_secret",
    "validate_fernet_key",
    "validate_database_url",
    "validate_security_config",
]
