"""
Pytest fixtures for Issue Triage tests.

Every test gets its own in-memory SQLite database and a public directory
under tmp_path; nothing touches the developer's files or a real database.
"""

from collections.abc import Iterator

import pytest

from core.config import Settings
from core.db import DatabaseManager
from core.security.session import SessionCodec

TEST_SECRET = "test-session-secret-0123456789-abcdefghijklmnop"


@pytest.fixture
def public_dir(tmp_path):
    public = tmp_path / "public"
    (public / "assets").mkdir(parents=True)
    (public / "index.html").write_text("<!doctype html><title>Issue Triage</title><div id=app></div>")
    (public / "assets" / "app.js").write_text("console.log('triage');")
    return public


@pytest.fixture
def settings(public_dir) -> Settings:
    return Settings(
        env="test",
        secret=TEST_SECRET,
        database_url="sqlite://",
        public_dir=str(public_dir),
        github_client_id="test-client-id",
        github_client_secret="test-client-secret",
        github_callback_url="http://testserver/auth/github/callback",
        github_webhook_url="https://triage.example.com",
        github_access_level="public",
        json_prefix=False,
    )


@pytest.fixture
def codec() -> SessionCodec:
    return SessionCodec(TEST_SECRET, ttl_seconds=3600)


@pytest.fixture
def db() -> Iterator[DatabaseManager]:
    """Fresh in-memory database with all tables created."""
    manager = DatabaseManager("sqlite://")
    manager.create_all_tables()
    yield manager
    manager.dispose()


@pytest.fixture
def test_session(db):
    with db.session() as session:
        yield session
