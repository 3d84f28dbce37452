"""
User service: the signed-in profile and the repositories it can see.
"""

from typing import Any, Optional

from core.api import GitHubClient, GitHubError, summarize_repo
from core.db import DatabaseManager
from core.errors import Unauthenticated
from core.logging import get_logger
from core.models import User
from core.repositories import UserRepository
from core.security.encryption import TokenEncryption
from core.security.session import SessionUser

logger = get_logger("services.user")


class UserService:
    def __init__(self, db: DatabaseManager, github: GitHubClient, encryption: TokenEncryption):
        self.db = db
        self.github = github
        self.encryption = encryption

    def user(self, user: Optional[SessionUser]) -> dict[str, Any]:
        """Return the session identity, or an empty dict for anonymous requests."""
        if user is None:
            return {}
        return user.to_dict()

    def sign_in(self, identity: dict[str, Any], access_token: str) -> User:
        """Create or refresh the user row after a successful OAuth callback."""
        with self.db.session() as session:
            return UserRepository(session, self.encryption).create_or_update_from_github(
                github_id=identity["id"],
                login=identity["login"],
                avatar_url=identity.get("avatar_url"),
                email=identity.get("email"),
                access_token=access_token,
            )

    def access_token(self, user: SessionUser) -> str:
        """
        Return the stored GitHub token for user.

        Raises:
            Unauthenticated: No token on file; the user has to sign in again.
        """
        with self.db.session() as session:
            users = UserRepository(session, self.encryption)
            row = users.get_by_id(user.id)
            token = users.get_decrypted_token(row) if row is not None else None
        if not token:
            raise Unauthenticated(f"no stored GitHub token for user {user.id}")
        return token

    async def repos(self, user: SessionUser) -> list[dict[str, Any]]:
        """List the repositories the signed-in user can access on GitHub."""
        token = self.access_token(user)
        try:
            repos = await self.github.list_user_repos(token)
        except GitHubError as e:
            if e.status_code == 401:
                raise Unauthenticated("GitHub rejected the stored token") from e
            raise
        return [summarize_repo(repo) for repo in repos or []]
