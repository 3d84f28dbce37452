"""
Authentication dependencies for FastAPI routes.

The session middleware puts the decoded Session on ``request.state``;
these helpers read the identity from it.
"""

from typing import Optional

from fastapi import Request

from core.errors import Unauthenticated
from core.security.session import Session, SessionUser


def get_session(request: Request) -> Optional[Session]:
    """Return the request's session, or None once it has been cleared."""
    return getattr(request.state, "session", None)


def set_session(request: Request, session: Optional[Session]) -> None:
    """Replace the request's session; None clears the cookie on the way out."""
    request.state.session = session


def get_optional_user(request: Request) -> Optional[SessionUser]:
    """Get the current user if authenticated, otherwise return None."""
    session = get_session(request)
    return session.user if session is not None else None


def get_current_user(request: Request) -> SessionUser:
    """
    Resolve the authenticated identity or fail the request.

    Raises:
        Unauthenticated: No session, or a session without a user.
    """
    user = get_optional_user(request)
    if user is None:
        raise Unauthenticated(f"{request.method} {request.url.path} requires a signed-in user")
    return user


__all__ = [
    "get_session",
    "set_session",
    "get_optional_user",
    "get_current_user",
]
