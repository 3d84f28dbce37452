"""
SQLAlchemy models for Issue Triage.

Usage:
    from core.models import User, Repo, MLModel
"""

from .base import Base
from .ml import MODEL_STATUS_NEW, MODEL_STATUS_TRAINING, MLModel
from .repo import Repo
from .user import User

__all__ = [
    "Base",
    "User",
    "MLModel",
    "MODEL_STATUS_NEW",
    "MODEL_STATUS_TRAINING",
    "Repo",
]
