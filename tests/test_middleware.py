"""
Tests for the pipeline middleware in isolation.

Tests:
- Request ID propagation
- Static file serving and path containment
- Session cookie load and write-back
- Security headers and the JSON body prefix
"""

import json

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route
from starlette.testclient import TestClient

from backend.app.middleware.request_id import RequestIDMiddleware
from backend.app.middleware.security import JSON_PREFIX, SecurityHeadersMiddleware
from backend.app.middleware.session import SessionMiddleware
from backend.app.middleware.static import StaticFilesMiddleware
from core.security.session import Session, SessionUser


def _echo_state(request: Request):
    session = getattr(request.state, "session", None)
    return JSONResponse(
        {
            "request_id": getattr(request.state, "request_id", None),
            "user": session.user.login if session and session.user else None,
        }
    )


def _logout(request: Request):
    request.state.session = None
    return JSONResponse({"ok": True})


def _app() -> Starlette:
    return Starlette(routes=[Route("/state", _echo_state), Route("/logout", _logout)])


class TestRequestIDMiddleware:
    def test_generates_request_id(self):
        app = _app()
        app.add_middleware(RequestIDMiddleware)
        client = TestClient(app)

        response = client.get("/state")

        assert response.headers["x-request-id"]
        assert response.json()["request_id"] == response.headers["x-request-id"]

    def test_keeps_incoming_request_id(self):
        app = _app()
        app.add_middleware(RequestIDMiddleware)
        client = TestClient(app)

        response = client.get("/state", headers={"X-Request-ID": "trace-123"})

        assert response.headers["x-request-id"] == "trace-123"

    def test_replaces_oversized_request_id(self):
        app = _app()
        app.add_middleware(RequestIDMiddleware)
        client = TestClient(app)

        response = client.get("/state", headers={"X-Request-ID": "x" * 500})

        assert response.headers["x-request-id"] != "x" * 500


class TestStaticFilesMiddleware:
    def test_serves_existing_file(self, public_dir):
        app = _app()
        app.add_middleware(StaticFilesMiddleware, directory=str(public_dir))
        client = TestClient(app)

        response = client.get("/assets/app.js")

        assert response.status_code == 200
        assert "triage" in response.text

    def test_head_request(self, public_dir):
        app = _app()
        app.add_middleware(StaticFilesMiddleware, directory=str(public_dir))
        client = TestClient(app)

        response = client.head("/assets/app.js")

        assert response.status_code == 200
        assert response.content == b""

    def test_falls_through_for_unknown_paths(self, public_dir):
        app = _app()
        app.add_middleware(StaticFilesMiddleware, directory=str(public_dir))
        client = TestClient(app)

        assert client.get("/state").status_code == 200
        assert client.get("/").status_code == 404

    def test_post_is_not_served(self, public_dir):
        app = _app()
        app.add_middleware(StaticFilesMiddleware, directory=str(public_dir))
        client = TestClient(app)

        assert client.post("/assets/app.js").status_code == 404

    def test_lookup_rejects_escape(self, public_dir, tmp_path):
        (tmp_path / "secret.txt").write_text("nope")
        middleware = StaticFilesMiddleware(_app(), directory=str(public_dir))

        assert middleware.lookup("/../secret.txt") is None
        assert middleware.lookup("/assets") is None
        assert middleware.lookup("/index.html") is not None


class TestSessionMiddleware:
    def _client(self, codec) -> TestClient:
        app = _app()
        app.add_middleware(SessionMiddleware, codec=codec)
        return TestClient(app)

    def test_anonymous_request_gets_session_cookie(self, codec):
        client = self._client(codec)

        response = client.get("/state")

        assert response.json()["user"] is None
        session = codec.decode(response.cookies["session"])
        assert session is not None
        assert session.csrf_secret

    def test_valid_cookie_is_loaded(self, codec):
        client = self._client(codec)
        client.cookies.set("session", codec.encode(Session(user=SessionUser(id=1, login="octocat"))))

        assert client.get("/state").json()["user"] == "octocat"

    def test_invalid_cookie_is_replaced(self, codec):
        client = self._client(codec)
        client.cookies.set("session", "tampered.cookie.value")

        response = client.get("/state")

        assert response.json()["user"] is None
        assert codec.decode(response.cookies["session"]) is not None

    def test_cookie_attributes(self, codec):
        client = self._client(codec)

        header = client.get("/state").headers["set-cookie"].lower()

        assert "httponly" in header
        assert "samesite=lax" in header
        assert "path=/" in header

    def test_clearing_session_deletes_cookie(self, codec):
        client = self._client(codec)
        client.cookies.set("session", codec.encode(Session(user=SessionUser(id=1, login="octocat"))))

        response = client.get("/logout")

        header = response.headers["set-cookie"].lower()
        assert header.startswith("session=")
        assert "max-age=0" in header


class TestSecurityHeadersMiddleware:
    def _client(self, **kwargs) -> TestClient:
        app = Starlette(
            routes=[
                Route("/state", _echo_state),
                Route("/text", lambda request: PlainTextResponse("plain")),
                Route("/empty", lambda request: Response(status_code=204, media_type="application/json")),
            ]
        )
        app.add_middleware(SecurityHeadersMiddleware, **kwargs)
        return TestClient(app)

    def test_security_headers(self):
        response = self._client().get("/text")

        assert response.headers["x-frame-options"] == "DENY"
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["referrer-policy"] == "strict-origin-when-cross-origin"
        assert "strict-transport-security" not in response.headers

    def test_hsts_in_production(self):
        response = self._client(is_production=True).get("/text")

        assert response.headers["strict-transport-security"].startswith("max-age=")

    def test_json_body_is_prefixed(self):
        response = self._client().get("/state")

        assert response.content.startswith(JSON_PREFIX)
        assert int(response.headers["content-length"]) == len(response.content)
        assert json.loads(response.content[len(JSON_PREFIX):]) == {"request_id": None, "user": None}

    def test_non_json_body_untouched(self):
        response = self._client().get("/text")

        assert response.text == "plain"

    def test_head_reports_prefixed_length(self):
        client = self._client()

        head = client.head("/state")

        assert head.headers["content-length"] == str(len(client.get("/state").content))

    def test_no_content_response_untouched(self):
        response = self._client().get("/empty")

        assert response.status_code == 204
        assert response.content == b""

    def test_prefix_can_be_disabled(self):
        response = self._client(json_prefix=False).get("/state")

        assert response.json() == {"request_id": None, "user": None}
        assert response.headers["x-frame-options"] == "DENY"
