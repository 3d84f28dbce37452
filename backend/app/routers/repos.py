"""
Tracked repository endpoints.

``router`` requires a signed-in user. ``hook_router`` carries the GitHub
webhook, which has neither a session nor a CSRF token and is authenticated
by its signature instead.
"""

from fastapi import APIRouter, Depends, Request, status
from starlette.concurrency import run_in_threadpool

from core.security.session import SessionUser
from core.security.webhook import SIGNATURE_HEADER
from core.utils import make_safe

from ..auth.dependencies import get_current_user
from ..dependencies import get_repo_service
from ..schemas import GitHubRepoResponse, HookResponse, RepoResponse, RepoUpdate
from ..services import RepoService

router = APIRouter(
    prefix="/api/repos",
    tags=["repos"],
    dependencies=[Depends(get_current_user)],
)
hook_router = APIRouter(prefix="/api/repos", tags=["webhooks"])


@router.get("", response_model=list[RepoResponse])
@make_safe
def list_repos(
    user: SessionUser = Depends(get_current_user),
    repos: RepoService = Depends(get_repo_service),
):
    return repos.find_all(user)


@router.get("/search/{owner}/{repo}", response_model=GitHubRepoResponse)
@make_safe
async def search_repo(
    owner: str,
    repo: str,
    user: SessionUser = Depends(get_current_user),
    repos: RepoService = Depends(get_repo_service),
):
    return await repos.search(user, owner, repo)


@router.get("/{key}", response_model=RepoResponse)
@make_safe
def get_repo(
    key: int,
    user: SessionUser = Depends(get_current_user),
    repos: RepoService = Depends(get_repo_service),
):
    return repos.find_one(user, key)


@router.put("/{key}", response_model=RepoResponse)
@make_safe
async def update_repo(
    key: int,
    payload: RepoUpdate,
    user: SessionUser = Depends(get_current_user),
    repos: RepoService = Depends(get_repo_service),
):
    """Update a tracked repo; the first update starts tracking it."""
    return await repos.update_one(user, key, payload)


@router.delete("/{key}", status_code=status.HTTP_204_NO_CONTENT)
@make_safe
async def delete_repo(
    key: int,
    user: SessionUser = Depends(get_current_user),
    repos: RepoService = Depends(get_repo_service),
):
    await repos.destroy_one(user, key)


@hook_router.post("/{key}/hook", response_model=HookResponse)
@make_safe
async def receive_hook(
    key: int,
    request: Request,
    repos: RepoService = Depends(get_repo_service),
):
    body = await request.body()
    return await run_in_threadpool(
        repos.hook,
        key,
        body,
        request.headers.get(SIGNATURE_HEADER),
        request.headers.get("x-github-event"),
    )
