"""
Backend services behind the API routers.
"""

from .model_service import ModelService
from .repo_service import RepoService
from .user_service import UserService

__all__ = ["ModelService", "RepoService", "UserService"]
