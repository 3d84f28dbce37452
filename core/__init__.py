"""
Issue Triage Core Library.

Framework-level pieces shared by the web backend: the dependency container,
configuration, logging, persistence, security primitives and the GitHub
API client.

Usage:
    # Container
    from core.container import Container

    # Config
    from core.config import get_settings, Settings

    # Logging
    from core.logging import get_logger, configure_logging

    # Persistence
    from core.db import DatabaseManager
    from core.models import User, Repo, MLModel
    from core.repositories import RepoRepository, MLModelRepository
"""

__version__ = "1.0.0"

# Import directly from submodules:
#   from core.db import DatabaseManager
#   from core.config import get_settings
