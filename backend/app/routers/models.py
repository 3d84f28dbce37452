"""
Triage model endpoints. Every route requires a signed-in user.
"""

from fastapi import APIRouter, Depends, status

from core.security.session import SessionUser
from core.utils import make_safe

from ..auth.dependencies import get_current_user
from ..dependencies import get_model_service
from ..schemas import ModelCreate, ModelResponse, ModelUpdate
from ..services import ModelService

router = APIRouter(
    prefix="/api/models",
    tags=["models"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=list[ModelResponse])
@make_safe
def list_models(
    user: SessionUser = Depends(get_current_user),
    models: ModelService = Depends(get_model_service),
):
    return models.find_all(user)


@router.post("", response_model=ModelResponse, status_code=status.HTTP_201_CREATED)
@make_safe
def create_model(
    payload: ModelCreate,
    user: SessionUser = Depends(get_current_user),
    models: ModelService = Depends(get_model_service),
):
    return models.create_one(user, payload)


@router.get("/{key}", response_model=ModelResponse)
@make_safe
def get_model(
    key: int,
    user: SessionUser = Depends(get_current_user),
    models: ModelService = Depends(get_model_service),
):
    return models.find_one(user, key)


@router.put("/{key}", response_model=ModelResponse)
@make_safe
def update_model(
    key: int,
    payload: ModelUpdate,
    user: SessionUser = Depends(get_current_user),
    models: ModelService = Depends(get_model_service),
):
    return models.update_one(user, key, payload)


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
@make_safe
def delete_model(
    key: int,
    user: SessionUser = Depends(get_current_user),
    models: ModelService = Depends(get_model_service),
):
    models.destroy_one(user, key)


@router.post("/{key}/train", response_model=ModelResponse)
@make_safe
def train_model(
    key: int,
    user: SessionUser = Depends(get_current_user),
    models: ModelService = Depends(get_model_service),
):
    """Queue a model for training."""
    return models.train_one(user, key)
