"""
Serve files from the public directory ahead of the session stage.

Only existing files inside the directory are served, for GET and HEAD.
Everything else, including ``/``, falls through to the application.
"""

import os

from starlette.responses import FileResponse

from core.logging import get_logger

logger = get_logger("http.static")


class StaticFilesMiddleware:
    def __init__(self, app, directory: str):
        self.app = app
        self.directory = os.path.realpath(directory)

    def lookup(self, path: str) -> str | None:
        relative = path.lstrip("/")
        if not relative:
            return None
        full_path = os.path.realpath(os.path.join(self.directory, relative))
        if os.path.commonpath([full_path, self.directory]) != self.directory:
            return None
        return full_path if os.path.isfile(full_path) else None

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and scope["method"] in ("GET", "HEAD"):
            full_path = self.lookup(scope["path"])
            if full_path is not None:
                logger.debug("static_file", path=scope["path"])
                await FileResponse(full_path)(scope, receive, send)
                return
        await self.app(scope, receive, send)
