"""
Request pipeline error taxonomy.

Every error a pipeline stage or route handler can surface derives from
PipelineError. The error funnel maps these to HTTP responses using
``status_code`` and ``public_message``; the message passed to the
constructor is for server-side logs only.
"""


class PipelineError(Exception):
    """Base class for errors recovered at the error funnel."""

    status_code: int = 500
    public_message: str = "Internal server error"


class Unauthenticated(PipelineError):
    """The route requires an authenticated identity and none is attached."""

    status_code = 401
    public_message = "Not authenticated"


class CsrfMismatch(PipelineError):
    """An unsafe request did not present a token matching its session."""

    status_code = 403
    public_message = "Invalid CSRF token"


class NotFound(PipelineError):
    status_code = 404
    public_message = "Not found"


class InvalidWebhookSignature(PipelineError):
    """A webhook delivery failed its signature check."""

    status_code = 401
    public_message = "Invalid signature"


class UpstreamProviderError(PipelineError):
    """The OAuth provider exchange failed (denied grant, network error, bad state)."""

    status_code = 502
    public_message = "Authentication provider error"


class HandlerError(PipelineError):
    """Opaque failure surfaced by a route handler."""


__all__ = [
    "PipelineError",
    "Unauthenticated",
    "CsrfMismatch",
    "NotFound",
    "InvalidWebhookSignature",
    "UpstreamProviderError",
    "HandlerError",
]
