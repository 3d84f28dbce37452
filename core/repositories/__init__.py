"""
Repository pattern implementations for data access.

Usage:
    from core.repositories import RepoRepository

    with db.session() as session:
        repos = RepoRepository(session).list_for_owner(user_id)
"""

from .base import BaseRepository, OwnedRepository
from .model_repository import MLModelRepository
from .repo_repository import RepoRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "OwnedRepository",
    "MLModelRepository",
    "RepoRepository",
    "UserRepository",
]
