"""
Middleware that injects a request ID into every incoming request.
"""

import uuid

from starlette.datastructures import Headers, MutableHeaders

from core.logging import bind_context, clear_context

MAX_REQUEST_ID_LENGTH = 128


class RequestIDMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get("x-request-id", "")
        if not request_id or len(request_id) > MAX_REQUEST_ID_LENGTH:
            request_id = str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id

        # Bind request ID to logging context
        clear_context()
        bind_context(request_id=request_id)

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append("x-request-id", request_id)
            await send(message)

        await self.app(scope, receive, send_wrapper)
