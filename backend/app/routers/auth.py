"""
Authentication router for the GitHub OAuth flow.

- ``GET /auth/github`` stores a fresh state in the session and redirects to GitHub
- ``GET /auth/github/callback`` checks the state, exchanges the code and signs the user in
- ``GET /api/logout`` replaces the session with a fresh anonymous one
"""

import hmac
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool

from core.errors import UpstreamProviderError
from core.logging import get_logger
from core.security.session import Session, SessionUser
from core.utils import make_safe

from ..auth.dependencies import get_session, set_session
from ..auth.github_oauth import FAILURE_REDIRECT, GitHubOAuth
from ..dependencies import get_auth_strategy, get_user_service
from ..services import UserService

logger = get_logger("auth")

router = APIRouter(tags=["auth"])


def _state_matches(expected: Optional[str], provided: Optional[str]) -> bool:
    if not expected or not provided:
        return False
    return hmac.compare_digest(expected.encode(), provided.encode())


@router.get("/auth/github")
@make_safe
def login(request: Request, auth: GitHubOAuth = Depends(get_auth_strategy)):
    """Redirect to GitHub's authorize page."""
    state = secrets.token_urlsafe(32)
    session = get_session(request) or Session()
    set_session(request, session.with_oauth_state(state))
    return RedirectResponse(auth.authorize_url(state), status_code=302)


@router.get("/auth/github/callback")
@make_safe
async def callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    auth: GitHubOAuth = Depends(get_auth_strategy),
    users: UserService = Depends(get_user_service),
):
    """
    Finish the OAuth flow.

    Any provider failure redirects to /401 with no identity attached.
    """
    session = get_session(request) or Session()
    try:
        if error:
            raise UpstreamProviderError(f"grant denied: {error}")
        if not code:
            raise UpstreamProviderError("callback without code")
        if not _state_matches(session.oauth_state, state):
            raise UpstreamProviderError("OAuth state mismatch")
        identity, token = await auth.authenticate(code)
    except UpstreamProviderError as e:
        logger.warning(
            "oauth_callback_failed",
            provider=auth.name,
            error=str(e),
            error_type=type(e).__name__,
        )
        set_session(request, session.with_oauth_state(None))
        return RedirectResponse(FAILURE_REDIRECT, status_code=302)

    await run_in_threadpool(users.sign_in, identity, token)
    user = SessionUser(
        id=identity["id"],
        login=identity["login"],
        avatar_url=identity.get("avatar_url"),
    )
    set_session(request, session.login(user))
    logger.info("user_signed_in", provider=auth.name, user_id=user.id)
    return RedirectResponse("/", status_code=302)


@router.get("/api/logout")
@make_safe
def logout(request: Request):
    """Drop the identity. A fresh anonymous session keeps the XSRF cookie flowing."""
    set_session(request, Session())
    return RedirectResponse("/", status_code=302)
