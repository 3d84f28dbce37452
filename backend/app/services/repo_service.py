"""
Repo service: tracked repositories and their issue webhooks.

A repository becomes tracked on its first update. At that point a GitHub
``issues`` webhook is registered with a per-repo secret; deliveries come
back through ``POST /api/repos/{key}/hook`` and are checked against it.
"""

import secrets
from typing import Any, Optional

from core.api import GitHubClient, GitHubError, summarize_repo
from core.db import DatabaseManager
from core.errors import InvalidWebhookSignature, NotFound
from core.logging import get_logger
from core.models import Repo
from core.repositories import MLModelRepository, RepoRepository
from core.security.session import SessionUser
from core.security.webhook import verify_signature

from ..schemas import RepoUpdate
from .user_service import UserService

logger = get_logger("services.repos")


class RepoService:
    def __init__(
        self,
        db: DatabaseManager,
        github: GitHubClient,
        users: UserService,
        webhook_url: Optional[str] = None,
    ):
        self.db = db
        self.github = github
        self.users = users
        self.webhook_url = webhook_url.rstrip("/") if webhook_url else None

    @staticmethod
    def _get(repos: RepoRepository, user: SessionUser, key: int) -> Repo:
        repo = repos.get_for_owner(user.id, key)
        if repo is None:
            raise NotFound(f"repo {key} not tracked by user {user.id}")
        return repo

    def _hook_url(self, key: int) -> str:
        return f"{self.webhook_url}/api/repos/{key}/hook"

    async def search(self, user: SessionUser, owner: str, repo: str) -> dict[str, Any]:
        """Look up ``owner/repo`` on GitHub with the user's token."""
        token = self.users.access_token(user)
        try:
            data = await self.github.search_repo(owner, repo, token)
        except GitHubError as e:
            if e.is_not_found:
                raise NotFound(f"{owner}/{repo} not found on GitHub") from e
            raise
        return summarize_repo(data)

    def find_all(self, user: SessionUser) -> list[Repo]:
        with self.db.session() as session:
            return RepoRepository(session).list_for_owner(user.id)

    def find_one(self, user: SessionUser, key: int) -> Repo:
        with self.db.session() as session:
            return self._get(RepoRepository(session), user, key)

    def _check_model(self, session, user: SessionUser, model_id: Optional[int]) -> None:
        if model_id is not None and MLModelRepository(session).get_for_owner(user.id, model_id) is None:
            raise NotFound(f"model {model_id} not found for user {user.id}")

    async def update_one(self, user: SessionUser, key: int, payload: RepoUpdate) -> Repo:
        """
        Update a tracked repo, or start tracking it.

        Starting to track reads the repository from GitHub and, when a
        webhook URL is configured, registers the issues hook.

        Raises:
            NotFound: The repo does not exist on GitHub or is tracked by
                another user, or ``model_id`` is not one of the user's models.
        """
        changes = payload.model_dump(exclude_unset=True)

        with self.db.session() as session:
            repos = RepoRepository(session)
            existing = repos.get_by_id(key)
            if existing is not None and existing.owner_id != user.id:
                raise NotFound(f"repo {key} not tracked by user {user.id}")
            # Before any GitHub call, so a bad model_id never leaves a hook behind.
            self._check_model(session, user, changes.get("model_id"))
            if existing is not None:
                return repos.update(existing, **changes)

        token = self.users.access_token(user)
        try:
            data = await self.github.get_repo_by_id(key, token)
        except GitHubError as e:
            if e.is_not_found:
                raise NotFound(f"repo {key} not found on GitHub") from e
            raise

        secret = secrets.token_hex(20)
        hook_id = None
        if self.webhook_url:
            owner, name = data["full_name"].split("/", 1)
            hook = await self.github.create_hook(owner, name, token, self._hook_url(key), secret)
            hook_id = hook.get("id") if hook else None
            logger.info("webhook_created", repo_id=key, hook_id=hook_id)

        with self.db.session() as session:
            repo = RepoRepository(session).create(
                id=key,
                owner_id=user.id,
                full_name=data["full_name"],
                description=changes.get("description", data.get("description")),
                private=bool(data.get("private")),
                model_id=changes.get("model_id"),
                hook_id=hook_id,
                webhook_secret=secret,
            )
        logger.info("repo_tracked", repo_id=key, user_id=user.id)
        return repo

    async def destroy_one(self, user: SessionUser, key: int) -> None:
        """Stop tracking a repo. Removing the GitHub hook is best effort."""
        with self.db.session() as session:
            repos = RepoRepository(session)
            repo = self._get(repos, user, key)
            full_name, hook_id = repo.full_name, repo.hook_id
            repos.delete(repo)

        if hook_id is not None:
            owner, name = full_name.split("/", 1)
            try:
                await self.github.delete_hook(owner, name, hook_id, self.users.access_token(user))
            except Exception as e:  # noqa: BLE001
                logger.warning("webhook_delete_failed", repo_id=key, hook_id=hook_id, error=str(e))
        logger.info("repo_untracked", repo_id=key, user_id=user.id)

    def hook(self, key: int, body: bytes, signature: Optional[str], event: Optional[str]) -> dict[str, str]:
        """
        Accept a webhook delivery for a tracked repo.

        Raises:
            NotFound: The repo is not tracked.
            InvalidWebhookSignature: The body was not signed with the repo's secret.
        """
        with self.db.session() as session:
            repos = RepoRepository(session)
            repo = repos.get_by_id(key)
            if repo is None:
                raise NotFound(f"webhook for untracked repo {key}")
            if not verify_signature(repo.webhook_secret, body, signature):
                raise InvalidWebhookSignature(f"bad signature for repo {key}")
            event = event or "unknown"
            repos.record_event(repo, event)
        logger.info("webhook_received", repo_id=key, event_name=event)
        return {"status": "received", "event": event}
