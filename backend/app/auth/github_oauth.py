"""
GitHub OAuth strategy.

Builds the authorize redirect, exchanges the callback grant for an access
token and loads the GitHub identity behind it.
"""

import asyncio
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from core.api import GitHubClient, GitHubError
from core.errors import UpstreamProviderError
from core.logging import get_logger

logger = get_logger("auth.github")

GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_ACCESS_TOKEN_URL = "https://github.com/login/oauth/access_token"

FAILURE_REDIRECT = "/401"


class GitHubOAuth:
    """OAuth web flow against github.com."""

    name = "github"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        scope: list[str],
        github: GitHubClient,
        callback_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.scope = scope
        self.github = github
        self.callback_url = callback_url
        self.timeout = timeout
        self.transport = transport

    def authorize_url(self, state: str) -> str:
        """Build GitHub OAuth authorize URL with client settings and state."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.callback_url,
            "scope": " ".join(self.scope),
            "state": state,
        }
        return f"{GITHUB_AUTHORIZE_URL}?{urlencode({k: v for k, v in params.items() if v})}"

    async def exchange_code(self, code: str) -> str:
        """
        Exchange GitHub OAuth code for an access token.

        Raises:
            UpstreamProviderError when GitHub rejects the grant or is unreachable.
        """
        payload = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
        }
        if self.callback_url:
            payload["redirect_uri"] = self.callback_url
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    GITHUB_ACCESS_TOKEN_URL, data=payload, headers={"Accept": "application/json"}
                )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamProviderError(f"token exchange failed: {type(e).__name__}") from e

        access_token = data.get("access_token")
        if not access_token:
            raise UpstreamProviderError(f"token exchange rejected: {data.get('error', 'no token')}")
        return access_token

    async def fetch_identity(self, access_token: str) -> dict[str, Any]:
        """Load the GitHub profile for an access token."""
        try:
            profile = await self.github.get_user(access_token)
        except GitHubError as e:
            raise UpstreamProviderError("could not load GitHub profile") from e

        if not profile or not profile.get("id") or not profile.get("login"):
            raise UpstreamProviderError("GitHub profile is missing id or login")
        return {
            "id": int(profile["id"]),
            "login": profile["login"],
            "avatar_url": profile.get("avatar_url"),
            "email": profile.get("email"),
        }

    async def authenticate(self, code: str) -> tuple[dict[str, Any], str]:
        """
        Run the whole grant exchange under one deadline.

        Returns:
            Tuple of (identity, access_token)
        """
        async def _exchange() -> tuple[dict[str, Any], str]:
            token = await self.exchange_code(code)
            return await self.fetch_identity(token), token

        try:
            return await asyncio.wait_for(_exchange(), timeout=self.timeout * 2)
        except asyncio.TimeoutError as e:
            raise UpstreamProviderError("provider exchange timed out") from e
