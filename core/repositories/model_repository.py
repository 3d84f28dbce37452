"""Repository for issue-triage models."""

from datetime import datetime, timezone

from core.models import MODEL_STATUS_TRAINING, MLModel

from .base import OwnedRepository


class MLModelRepository(OwnedRepository[MLModel]):
    model = MLModel

    def start_training(self, instance: MLModel) -> MLModel:
        return self.update(
            instance,
            status=MODEL_STATUS_TRAINING,
            training_started_at=datetime.now(timezone.utc),
        )
