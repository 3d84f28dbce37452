"""
Current-user endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from core.security.session import SessionUser
from core.utils import make_safe

from ..auth.dependencies import get_current_user, get_optional_user
from ..dependencies import get_user_service
from ..schemas import GitHubRepoResponse
from ..services import UserService

router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("")
@make_safe
def get_user(
    user: Optional[SessionUser] = Depends(get_optional_user),
    users: UserService = Depends(get_user_service),
):
    """Signed-in identity, or ``{}`` for anonymous callers."""
    return users.user(user)


@router.get(
    "/repos",
    response_model=list[GitHubRepoResponse],
    dependencies=[Depends(get_current_user)],
)
@make_safe
async def list_repos(
    user: SessionUser = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    return await users.repos(user)
