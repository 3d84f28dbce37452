"""
Security module for Issue Triage.

Provides:
- Signed-cookie sessions
- CSRF tokens bound to a session
- Token encryption (Fernet)
- Webhook signature checks
- Configuration validation
"""

from .csrf import issue_token, is_safe_method, verify_token
from .encryption import EncryptionError, TokenEncryption
from .session import Session, SessionCodec, SessionUser
from .validation import SecurityConfigError, validate_security_config
from .webhook import sign_payload, verify_signature

__all__ = [
    "Session",
    "SessionCodec",
    "SessionUser",
    "issue_token",
    "is_safe_method",
    "verify_token",
    "EncryptionError",
    "TokenEncryption",
    "SecurityConfigError",
    "validate_security_config",
    "sign_payload",
    "verify_signature",
]
