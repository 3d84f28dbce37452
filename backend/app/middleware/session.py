"""
Cookie session stage.

Decodes the signed ``session`` cookie into ``request.state.session`` and
writes it back on the response. A request without a valid cookie gets a
fresh anonymous session. A handler that sets the session to None (logout)
deletes the cookie.
"""

from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.responses import Response

from core.logging import get_logger
from core.security.session import Session, SessionCodec, new_csrf_secret

logger = get_logger("http.session")


def cookie_header(
    key: str,
    value: str = "",
    max_age: int | None = None,
    secure: bool = False,
    httponly: bool = True,
) -> str:
    """Render a single Set-Cookie header value (SameSite=Lax, path /)."""
    response = Response()
    response.set_cookie(
        key,
        value,
        max_age=max_age,
        path="/",
        secure=secure,
        httponly=httponly,
        samesite="lax",
    )
    for name, raw in response.raw_headers:
        if name == b"set-cookie":
            return raw.decode("latin-1")
    raise RuntimeError("set_cookie produced no header")


class SessionMiddleware:
    def __init__(
        self,
        app,
        codec: SessionCodec,
        cookie_name: str = "session",
        secure: bool = False,
    ):
        self.app = app
        self.codec = codec
        self.cookie_name = cookie_name
        self.secure = secure

    def load(self, cookie: str | None) -> Session:
        session = self.codec.decode(cookie) if cookie else None
        if session is None:
            if cookie:
                logger.debug("session_cookie_rejected")
            session = Session(csrf_secret=new_csrf_secret())
        return session

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        cookie = HTTPConnection(scope).cookies.get(self.cookie_name)
        state = scope.setdefault("state", {})
        state["session"] = self.load(cookie)

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                session = state.get("session")
                if session is None:
                    header = cookie_header(self.cookie_name, "", max_age=0, secure=self.secure)
                else:
                    header = cookie_header(
                        self.cookie_name,
                        self.codec.encode(session),
                        max_age=self.codec.ttl_seconds,
                        secure=self.secure,
                    )
                MutableHeaders(scope=message).append("set-cookie", header)
            await send(message)

        await self.app(scope, receive, send_wrapper)
