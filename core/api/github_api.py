"""GitHub REST API client used by the user and repos services."""

from typing import Any

import httpx

from core.logging import get_logger

logger = get_logger("github")

GITHUB_API_BASE = "https://api.github.com"
USER_AGENT = "IssueTriage/1.0"


class GitHubError(Exception):
    """Raised when a GitHub API call fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class GitHubClient:
    """
    Thin async wrapper over the GitHub REST API.

    Every call takes the caller's OAuth token; the client holds no
    credentials of its own.

    Usage:
        client = GitHubClient(timeout=10)
        repos = await client.list_user_repos(token)
    """

    def __init__(
        self,
        timeout: float = 10.0,
        base_url: str = GITHUB_API_BASE,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    def _headers(self, token: str | None) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        token: str | None,
        params: dict | None = None,
        json: dict | None = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(
                    method, url, headers=self._headers(token), params=params, json=json
                )
        except httpx.HTTPError as e:
            logger.error("github_request_failed", method=method, path=path, error_type=type(e).__name__)
            raise GitHubError(f"{method} {path} failed: {type(e).__name__}") from e

        if response.status_code >= 400:
            level = logger.debug if response.status_code == 404 else logger.warning
            level("github_api_error", method=method, path=path, status=response.status_code)
            raise GitHubError(f"{method} {path} returned {response.status_code}", response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def get_user(self, token: str) -> dict[str, Any]:
        return await self._request("GET", "/user", token)

    async def list_user_repos(self, token: str, per_page: int = 100) -> list[dict[str, Any]]:
        return await self._request(
            "GET",
            "/user/repos",
            token,
            params={"per_page": per_page, "sort": "updated"},
        )

    async def search_repo(self, owner: str, repo: str, token: str | None) -> dict[str, Any]:
        return await self._request("GET", f"/repos/{owner}/{repo}", token)

    async def get_repo_by_id(self, repo_id: int, token: str | None) -> dict[str, Any]:
        return await self._request("GET", f"/repositories/{repo_id}", token)

    async def create_hook(
        self, owner: str, repo: str, token: str, url: str, secret: str
    ) -> dict[str, Any]:
        """Register an ``issues`` webhook that posts JSON to url."""
        return await self._request(
            "POST",
            f"/repos/{owner}/{repo}/hooks",
            token,
            json={
                "name": "web",
                "active": True,
                "events": ["issues"],
                "config": {"url": url, "content_type": "json", "secret": secret},
            },
        )

    async def delete_hook(self, owner: str, repo: str, hook_id: int, token: str) -> None:
        await self._request("DELETE", f"/repos/{owner}/{repo}/hooks/{hook_id}", token)


def summarize_repo(data: dict[str, Any]) -> dict[str, Any]:
    """Reduce a GitHub repository payload to the fields the API returns."""
    return {
        "id": data.get("id"),
        "full_name": data.get("full_name"),
        "description": data.get("description"),
        "private": bool(data.get("private")),
        "html_url": data.get("html_url"),
        "open_issues_count": data.get("open_issues_count"),
    }


__all__ = ["GitHubClient", "GitHubError", "GITHUB_API_BASE", "summarize_repo"]
