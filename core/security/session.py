"""
Stateless signed-cookie sessions.

The whole session lives in the cookie: a compact HS256 JWT signed with the
application secret, optionally wrapped in a Fernet token so the payload is
not readable by the client. The server keeps no session table.
"""

import secrets
import time
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Optional

from jose import JWTError, jwt

from core.logging import get_logger

from .encryption import EncryptionError, TokenEncryption

logger = get_logger("security.session")

SESSION_ALGORITHM = "HS256"


def new_csrf_secret() -> str:
    return secrets.token_urlsafe(18)


@dataclass(frozen=True)
class SessionUser:
    """Identity attached to a session after a successful OAuth callback."""

    id: int
    login: str
    avatar_url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Session:
    """
    Client-held session record.

    Sessions are immutable; stages that change one put a new value on
    ``request.state.session`` and the session middleware re-signs it.
    """

    csrf_secret: str = field(default_factory=new_csrf_secret)
    user: Optional[SessionUser] = None
    oauth_state: Optional[str] = None
    created_at: int = field(default_factory=lambda: int(time.time()))

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def login(self, user: SessionUser) -> "Session":
        return replace(self, user=user, oauth_state=None)

    def with_oauth_state(self, state: Optional[str]) -> "Session":
        return replace(self, oauth_state=state)


class SessionCodec:
    """
    Convert between cookie values and Session objects.

    decode() never raises: a bad signature, an expired token, a tampered or
    malformed payload all read as "no session".
    """

    def __init__(self, secret: str, ttl_seconds: int, encryption: TokenEncryption | None = None):
        if not secret:
            raise ValueError("A session secret is required")
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self._encryption = encryption if encryption is not None and encryption.is_available else None

    def encode(self, session: Session, now: int | None = None) -> str:
        issued_at = int(time.time()) if now is None else now
        claims = {
            "csrf": session.csrf_secret,
            "user": session.user.to_dict() if session.user else None,
            "state": session.oauth_state,
            "ctime": session.created_at,
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        token = jwt.encode(claims, self._secret, algorithm=SESSION_ALGORITHM)
        if self._encryption is not None:
            return self._encryption.encrypt(token)
        return token

    def decode(self, value: str | None) -> Session | None:
        if not value:
            return None
        try:
            token = self._encryption.decrypt(value) if self._encryption is not None else value
            claims = jwt.decode(token, self._secret, algorithms=[SESSION_ALGORITHM])
            return _session_from_claims(claims)
        except (EncryptionError, JWTError, KeyError, TypeError, ValueError) as e:
            logger.debug("session_rejected", reason=type(e).__name__)
            return None


def _session_from_claims(claims: dict[str, Any]) -> Session:
    csrf_secret = claims["csrf"]
    if not isinstance(csrf_secret, str) or not csrf_secret:
        raise ValueError("missing csrf secret")

    user = None
    raw_user = claims.get("user")
    if raw_user is not None:
        if not isinstance(raw_user, dict):
            raise ValueError("malformed user claim")
        user = SessionUser(
            id=int(raw_user["id"]),
            login=str(raw_user["login"]),
            avatar_url=raw_user.get("avatar_url"),
        )

    state = claims.get("state")
    return Session(
        csrf_secret=csrf_secret,
        user=user,
        oauth_state=str(state) if state else None,
        created_at=int(claims["ctime"]),
    )


__all__ = ["Session", "SessionUser", "SessionCodec", "new_csrf_secret"]
