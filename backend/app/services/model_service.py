"""
Model service: CRUD over a user's triage models plus the train trigger.
"""

from core.db import DatabaseManager
from core.errors import NotFound
from core.logging import get_logger
from core.models import MLModel
from core.repositories import MLModelRepository
from core.security.session import SessionUser

from ..schemas import ModelCreate, ModelUpdate

logger = get_logger("services.models")


class ModelService:
    def __init__(self, db: DatabaseManager):
        self.db = db

    @staticmethod
    def _get(models: MLModelRepository, user: SessionUser, key: int) -> MLModel:
        model = models.get_for_owner(user.id, key)
        if model is None:
            raise NotFound(f"model {key} not found for user {user.id}")
        return model

    def find_all(self, user: SessionUser) -> list[MLModel]:
        with self.db.session() as session:
            return MLModelRepository(session).list_for_owner(user.id)

    def find_one(self, user: SessionUser, key: int) -> MLModel:
        with self.db.session() as session:
            return self._get(MLModelRepository(session), user, key)

    def create_one(self, user: SessionUser, payload: ModelCreate) -> MLModel:
        with self.db.session() as session:
            model = MLModelRepository(session).create(
                owner_id=user.id,
                name=payload.name,
                description=payload.description,
            )
        logger.info("model_created", model_id=model.id, user_id=user.id)
        return model

    def update_one(self, user: SessionUser, key: int, payload: ModelUpdate) -> MLModel:
        with self.db.session() as session:
            models = MLModelRepository(session)
            model = self._get(models, user, key)
            return models.update(model, **payload.model_dump(exclude_unset=True))

    def destroy_one(self, user: SessionUser, key: int) -> None:
        with self.db.session() as session:
            models = MLModelRepository(session)
            models.delete(self._get(models, user, key))
        logger.info("model_deleted", model_id=key, user_id=user.id)

    def train_one(self, user: SessionUser, key: int) -> MLModel:
        """Mark a model as training. The training job itself runs out of process."""
        with self.db.session() as session:
            models = MLModelRepository(session)
            model = models.start_training(self._get(models, user, key))
        logger.info("model_training_started", model_id=key, user_id=user.id)
        return model
