"""
CSRF guard.

Unsafe methods must echo a token bound to the session's csrf secret in
``X-XSRF-TOKEN`` (or ``X-CSRF-Token``). Safe responses carry a fresh token
in the script-readable ``XSRF-TOKEN`` cookie. Exempt routes bypass the
guard entirely and must authenticate requests another way.
"""

from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.routing import compile_path

from core.errors import CsrfMismatch
from core.security.csrf import CSRF_HEADERS, is_safe_method, issue_token, verify_token

from ..error_handlers import render_error
from .session import cookie_header

WEBHOOK_EXEMPTION = ("POST", "/api/repos/{key}/hook")


class CSRFMiddleware:
    def __init__(
        self,
        app,
        cookie_name: str = "XSRF-TOKEN",
        secure: bool = False,
        exempt: tuple[tuple[str, str], ...] = (WEBHOOK_EXEMPTION,),
    ):
        self.app = app
        self.cookie_name = cookie_name
        self.secure = secure
        self.exempt = [(method, compile_path(path)[0]) for method, path in exempt]

    def is_exempt(self, method: str, path: str) -> bool:
        return any(method == m and pattern.match(path) for m, pattern in self.exempt)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or self.is_exempt(scope["method"], scope["path"]):
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})
        if not is_safe_method(scope["method"]):
            request = Request(scope, receive=receive)
            session = state.get("session")
            token = next((request.headers[h] for h in CSRF_HEADERS if h in request.headers), None)
            if session is None or not verify_token(session.csrf_secret, token):
                reason = "missing" if token is None else "mismatched"
                response = render_error(request, CsrfMismatch(f"{reason} CSRF token"))
                await response(scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                session = state.get("session")
                if session is not None:
                    MutableHeaders(scope=message).append(
                        "set-cookie",
                        cookie_header(
                            self.cookie_name,
                            issue_token(session.csrf_secret),
                            secure=self.secure,
                            httponly=False,
                        ),
                    )
            await send(message)

        await self.app(scope, receive, send_wrapper)
