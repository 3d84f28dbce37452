"""
Single-page app fallback: any GET nothing else matched returns index.html.
"""

import os

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from core.config import Settings
from core.errors import NotFound
from core.utils import make_safe

from ..dependencies import get_app_settings

router = APIRouter(tags=["spa"])


@router.get("/{path:path}", include_in_schema=False)
@make_safe
def index(path: str, settings: Settings = Depends(get_app_settings)):
    if path == "api" or path.startswith("api/"):
        raise NotFound(f"no API route for /{path}")
    index_file = os.path.join(settings.public_dir, "index.html")
    if not os.path.isfile(index_file):
        raise NotFound(f"{index_file} is missing")
    return FileResponse(index_file)
