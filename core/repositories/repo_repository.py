"""Repository for tracked GitHub repositories."""

from datetime import datetime, timezone

from core.models import Repo

from .base import OwnedRepository


class RepoRepository(OwnedRepository[Repo]):
    model = Repo

    def record_event(self, instance: Repo, event: str) -> Repo:
        """Bump the delivery counter for a webhook event."""
        return self.update(
            instance,
            event_count=(instance.event_count or 0) + 1,
            last_event=event,
            last_event_at=datetime.now(timezone.utc),
        )
