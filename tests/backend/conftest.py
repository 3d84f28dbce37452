from collections.abc import Callable, Iterator
from typing import Any
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from backend.app.auth.github_oauth import GitHubOAuth
from backend.app.container import build_container
from backend.app.main import create_app
from core.api import GitHubError
from core.errors import UpstreamProviderError
from core.security.session import Session, SessionUser

GOOD_CODE = "good-code"
ACCESS_TOKEN = "gho_test_access_token"
IDENTITY = {
    "id": 4242,
    "login": "octocat",
    "avatar_url": "https://avatars.example.com/u/4242",
    "email": "octocat@example.com",
}
REPO_ID = 1296269
REPO = {
    "id": REPO_ID,
    "full_name": "octocat/hello-world",
    "description": "My first repository",
    "private": False,
    "html_url": "https://github.com/octocat/hello-world",
    "open_issues_count": 3,
}


class FakeGitHub:
    """In-memory stand-in for GitHubClient that records every call."""

    def __init__(self):
        self.repos = {REPO_ID: dict(REPO)}
        self.calls: list[tuple[str, Any]] = []
        self.hooks: list[dict[str, Any]] = []
        self.deleted_hooks: list[int] = []

    async def get_user(self, token):
        self.calls.append(("get_user", token))
        return dict(IDENTITY)

    async def list_user_repos(self, token, per_page=100):
        self.calls.append(("list_user_repos", token))
        return list(self.repos.values())

    async def search_repo(self, owner, repo, token):
        self.calls.append(("search_repo", f"{owner}/{repo}"))
        for data in self.repos.values():
            if data["full_name"] == f"{owner}/{repo}":
                return dict(data)
        raise GitHubError(f"GET /repos/{owner}/{repo} returned 404", 404)

    async def get_repo_by_id(self, repo_id, token):
        self.calls.append(("get_repo_by_id", repo_id))
        if repo_id not in self.repos:
            raise GitHubError(f"GET /repositories/{repo_id} returned 404", 404)
        return dict(self.repos[repo_id])

    async def create_hook(self, owner, repo, token, url, secret):
        hook = {"id": 9000 + len(self.hooks) + 1, "repo": f"{owner}/{repo}", "url": url, "secret": secret}
        self.hooks.append(hook)
        return {"id": hook["id"]}

    async def delete_hook(self, owner, repo, hook_id, token):
        self.deleted_hooks.append(hook_id)


class FakeOAuth(GitHubOAuth):
    """Real authorize URL, canned grant exchange."""

    async def authenticate(self, code):
        if code != GOOD_CODE:
            raise UpstreamProviderError(f"bad code {code}")
        return dict(IDENTITY), ACCESS_TOKEN


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def container(settings, github):
    container = build_container(settings)
    container.register("github", github, override=True)
    container.register(
        "auth",
        FakeOAuth(
            client_id=settings.github_client_id,
            client_secret=settings.github_client_secret,
            scope=settings.github_scope,
            github=github,
            callback_url=settings.github_callback_url,
        ),
        override=True,
    )
    return container


@pytest.fixture
def client(container) -> Iterator[TestClient]:
    app = create_app(container)
    with TestClient(app) as client:
        yield client


def sign_in(client: TestClient) -> str:
    """Run the OAuth flow and return an XSRF token for the signed-in session."""
    response = client.get("/auth/github", follow_redirects=False)
    state = parse_qs(urlparse(response.headers["location"]).query)["state"][0]
    response = client.get(
        "/auth/github/callback",
        params={"code": GOOD_CODE, "state": state},
        follow_redirects=False,
    )
    assert response.headers["location"] == "/"
    return csrf_token(client)


def csrf_token(client: TestClient) -> str:
    response = client.get("/api/user")
    return response.cookies["XSRF-TOKEN"]


@pytest.fixture
def authorized_client(client) -> TestClient:
    """Client with a signed-in session whose requests carry the XSRF header."""
    client.headers["X-XSRF-TOKEN"] = sign_in(client)
    return client


@pytest.fixture
def create_session_cookie(codec) -> Callable[..., str]:
    """Encode a session cookie directly, bypassing the OAuth flow."""

    def _create(user: SessionUser | None = None, **kwargs) -> str:
        return codec.encode(Session(user=user, **kwargs))

    return _create
