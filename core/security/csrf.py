"""
CSRF tokens bound to a session secret.

A token is ``<salt>-<hmac>`` where the HMAC is taken over the salt with the
session's csrf secret as key. Every issue uses a fresh salt, so tokens
differ per response while all verifying against the same session.
"""

import base64
import hashlib
import hmac
import secrets

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
CSRF_HEADERS = ("x-xsrf-token", "x-csrf-token")


def _digest(secret: str, salt: str) -> str:
    mac = hmac.new(secret.encode(), salt.encode(), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(mac).decode("ascii").rstrip("=")


def issue_token(secret: str) -> str:
    salt = secrets.token_hex(8)
    return f"{salt}-{_digest(secret, salt)}"


def verify_token(secret: str, token: str | None) -> bool:
    """Check token against secret in constant time."""
    if not secret or not token:
        return False
    salt, sep, provided = token.partition("-")
    if not sep or not salt:
        return False
    return hmac.compare_digest(provided.encode(), _digest(secret, salt).encode())


def is_safe_method(method: str) -> bool:
    return method.upper() in SAFE_METHODS


__all__ = ["issue_token", "verify_token", "is_safe_method", "SAFE_METHODS", "CSRF_HEADERS"]
