"""
FastAPI dependency module.

Route handlers never build collaborators themselves; they pull the
singletons the application container resolved at startup.
"""

from fastapi import Request

from core.config import Settings
from core.container import Container

from ..auth.github_oauth import GitHubOAuth
from ..services import ModelService, RepoService, UserService


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_app_settings(request: Request) -> Settings:
    return get_container(request).get("settings")


def get_auth_strategy(request: Request) -> GitHubOAuth:
    return get_container(request).get("auth")


def get_user_service(request: Request) -> UserService:
    return get_container(request).get("user")


def get_repo_service(request: Request) -> RepoService:
    return get_container(request).get("repos")


def get_model_service(request: Request) -> ModelService:
    return get_container(request).get("models")


__all__ = [
    "get_container",
    "get_app_settings",
    "get_auth_strategy",
    "get_user_service",
    "get_repo_service",
    "get_model_service",
]
