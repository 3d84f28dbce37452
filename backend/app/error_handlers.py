"""
Error funnel: the single place a failed request becomes a response.

Security:
- Request IDs are logged server-side for tracing but NOT exposed to clients
- Bodies carry only a generic message per status; internal messages and
  tracebacks stay in the logs
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.errors import PipelineError
from core.logging import get_context, get_logger

logger = get_logger("backend.errors")

_HTTP_MESSAGES = {
    400: "Bad request",
    401: "Not authenticated",
    403: "Forbidden",
    404: "Not found",
    405: "Method not allowed",
    422: "Validation error",
}


def _get_request_id(request: Request) -> str:
    """
    Get the current request ID.

    Used for server-side logging only - NOT exposed to clients.
    """
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return request_id
    return get_context().get("request_id", "-")


def _response_payload(detail: str, status_code: int) -> dict:
    return {
        "detail": detail,
        "status_code": status_code,
    }


def _classify(exc: Exception) -> tuple[int, str]:
    if isinstance(exc, PipelineError):
        return exc.status_code, exc.public_message
    if isinstance(exc, RequestValidationError):
        return 422, _HTTP_MESSAGES[422]
    if isinstance(exc, StarletteHTTPException):
        message = _HTTP_MESSAGES.get(exc.status_code)
        if message is None:
            message = "Internal server error" if exc.status_code >= 500 else "Request failed"
        return exc.status_code, message
    return 500, "Internal server error"


def render_error(request: Request, exc: Exception) -> JSONResponse:
    """
    Log exc once and render the generic JSON error response for it.

    Used by the exception handlers below and by middleware that ends a
    request before routing.
    """
    status_code, message = _classify(exc)
    fields = {
        "method": request.method,
        "path": request.url.path,
        "request_id": _get_request_id(request),
        "status_code": status_code,
        "error_type": type(exc).__name__,
    }
    if status_code >= 500:
        logger.error("request_failed", exc_info=exc, **fields)
    else:
        logger.warning("request_rejected", error=str(exc), **fields)

    headers = getattr(exc, "headers", None) if isinstance(exc, StarletteHTTPException) else None
    return JSONResponse(
        status_code=status_code,
        content=_response_payload(message, status_code),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PipelineError)
    async def pipeline_error_handler(request: Request, exc: PipelineError):
        return render_error(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return render_error(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return render_error(request, exc)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        return render_error(request, exc)


__all__ = ["render_error", "register_exception_handlers"]
