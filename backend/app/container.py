"""
Application wiring: every collaborator the routers use, registered by name.

Each factory names its dependencies as parameters; the container resolves
them against the other registrations. Tests swap a collaborator with
``container.register(name, fake, override=True)`` before building the app.
"""

from typing import Optional

from core.api import GitHubClient
from core.config import Settings, get_settings
from core.container import Container
from core.db import DatabaseManager
from core.security.encryption import TokenEncryption
from core.security.session import SessionCodec

from .auth.github_oauth import GitHubOAuth
from .services import ModelService, RepoService, UserService


def _encryption(settings: Settings) -> TokenEncryption:
    return TokenEncryption(settings.token_encryption_key)


def _session_encryption(settings: Settings) -> TokenEncryption:
    return TokenEncryption(settings.session_encryption_key)


def _session_codec(settings: Settings, session_encryption: TokenEncryption) -> SessionCodec:
    return SessionCodec(settings.secret, settings.session_ttl_seconds, session_encryption)


def _db(settings: Settings) -> DatabaseManager:
    db = DatabaseManager(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        echo=settings.debug,
    )
    db.create_all_tables()
    return db


def _github(settings: Settings) -> GitHubClient:
    return GitHubClient(timeout=settings.github_timeout_seconds)


def _auth(settings: Settings, github: GitHubClient) -> GitHubOAuth:
    return GitHubOAuth(
        client_id=settings.github_client_id,
        client_secret=settings.github_client_secret,
        scope=settings.github_scope,
        github=github,
        callback_url=settings.github_callback_url,
        timeout=settings.github_timeout_seconds,
    )


def _user(db: DatabaseManager, github: GitHubClient, encryption: TokenEncryption) -> UserService:
    return UserService(db, github, encryption)


def _repos(
    settings: Settings, db: DatabaseManager, github: GitHubClient, user: UserService
) -> RepoService:
    return RepoService(db, github, user, settings.github_webhook_url)


def _models(db: DatabaseManager) -> ModelService:
    return ModelService(db)


REQUIRED = ("settings", "session_codec", "db", "auth", "user", "repos", "models")


def build_container(settings: Optional[Settings] = None) -> Container:
    """Register the application's collaborators on a fresh container."""
    container = Container()
    container.register("settings", settings or get_settings())
    container.register("encryption", _encryption)
    container.register("session_encryption", _session_encryption)
    container.register("session_codec", _session_codec)
    container.register("db", _db)
    container.register("github", _github)
    container.register("auth", _auth)
    container.register("user", _user)
    container.register("repos", _repos)
    container.register("models", _models)
    return container


__all__ = ["build_container", "REQUIRED"]
