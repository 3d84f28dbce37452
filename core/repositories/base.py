"""Base repository class with common CRUD operations."""

from typing import Generic, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Session

from core.db import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.

    Usage:
        class RepoRepository(BaseRepository[Repo]):
            model = Repo

        repos = RepoRepository(session)
        repo = repos.get_by_id(1)
    """

    model: type[T]

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, id: int) -> T | None:
        """Get a single record by ID."""
        return self.session.get(self.model, id)

    def create(self, **kwargs) -> T:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        self.session.flush()
        return instance

    def update(self, instance: T, **kwargs) -> T:
        """Set known attributes on instance; unknown keys are ignored."""
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        self.session.flush()
        return instance

    def delete(self, instance: T) -> None:
        self.session.delete(instance)
        self.session.flush()

    def count(self, **filters) -> int:
        """Get count of records, optionally filtered."""
        query = self.session.query(func.count(self.model.id))  # type: ignore[attr-defined]
        for key, value in filters.items():
            if not hasattr(self.model, key):
                raise ValueError(f"Unknown filter key: {key}")
            query = query.filter(getattr(self.model, key) == value)
        return query.scalar() or 0


class OwnedRepository(BaseRepository[T]):
    """Repository for rows scoped to an owning GitHub user (``owner_id``)."""

    def list_for_owner(self, owner_id: int, limit: int = 100, offset: int = 0) -> list[T]:
        return (
            self.session.query(self.model)
            .filter(self.model.owner_id == owner_id)  # type: ignore[attr-defined]
            .order_by(self.model.id)  # type: ignore[attr-defined]
            .offset(offset)
            .limit(limit)
            .all()
        )

    def get_for_owner(self, owner_id: int, id: int) -> T | None:
        instance = self.get_by_id(id)
        if instance is None or instance.owner_id != owner_id:  # type: ignore[attr-defined]
            return None
        return instance
