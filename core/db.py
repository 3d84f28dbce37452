"""
Database Management Layer.

Provides a DatabaseManager for:
- Connection pooling (PostgreSQL) / StaticPool (SQLite)
- Session management with context managers
- Auto-commit/rollback behavior

The application container owns a single DatabaseManager; nothing here is
initialized at import time.

Usage:
    from core.db import DatabaseManager, Base

    db = DatabaseManager("sqlite:///issue_triage.db")
    with db.session() as session:
        repo = session.get(Repo, 1)
"""

import time
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


class DatabaseManager:
    """
    Database manager with connection pooling and health checks.

    Features:
    - Connection pooling (QueuePool for PostgreSQL, StaticPool for SQLite)
    - Context manager for automatic commit/rollback
    - Thread-safe session factory
    """

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        echo: bool = False,
    ):
        self.url = database_url
        is_sqlite = database_url.startswith("sqlite")

        if is_sqlite:
            connect_args = {"check_same_thread": False}
            pool_class: type[StaticPool | QueuePool] = StaticPool
            pool_config = {}
        else:
            connect_args = {}
            pool_class = QueuePool
            pool_config = {
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_pre_ping": True,
            }

        self.engine = create_engine(
            database_url,
            poolclass=pool_class,
            connect_args=connect_args,
            echo=echo,
            **pool_config,
        )

        # Enable foreign keys for SQLite
        if is_sqlite:

            @event.listens_for(self.engine, "connect")
            def set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
        )

    def create_all_tables(self) -> None:
        """Create all tables defined by models."""
        # Models register themselves on Base.metadata at import
        import core.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager for database sessions with auto-commit/rollback.

        Usage:
            with db.session() as session:
                model = session.get(MLModel, key)
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def health_check(self) -> dict:
        """
        Perform database health check.

        Returns:
            dict with 'healthy' (bool) and 'latency_ms' (float)
        """
        start = time.perf_counter()
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            healthy = True
        except Exception:  # noqa: BLE001
            healthy = False
        latency = (time.perf_counter() - start) * 1000
        return {"healthy": healthy, "latency_ms": round(latency, 2)}

    def dispose(self) -> None:
        self.engine.dispose()


__all__ = ["Base", "DatabaseManager"]
