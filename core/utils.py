"""Handler helpers shared by the API routers."""

import functools
import inspect
from collections.abc import Callable
from typing import Any

from fastapi import HTTPException
from starlette.concurrency import run_in_threadpool

from core.errors import HandlerError, PipelineError


def make_safe(handler: Callable[..., Any]) -> Callable[..., Any]:
    """
    Wrap a route handler so every failure reaches the error funnel exactly once.

    The handler may return a value, return an awaitable, be a coroutine
    function, or raise. Sync handlers run in the threadpool. Pipeline errors
    and HTTPExceptions pass through unchanged; anything else is wrapped in
    HandlerError with the original as ``__cause__``.

    A handler must not write a response after it has failed.

    Usage:
        router.get("/models")(make_safe(models.find_all))
    """

    @functools.wraps(handler)
    async def wrapper(*args, **kwargs):
        try:
            if inspect.iscoroutinefunction(handler):
                result = await handler(*args, **kwargs)
            else:
                result = await run_in_threadpool(handler, *args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            return result
        except (PipelineError, HTTPException):
            raise
        except Exception as e:
            raise HandlerError(f"{handler.__name__} failed: {e}") from e

    # Routes read parameters from __signature__; without __wrapped__ they
    # cannot unwrap to a sync handler and skip awaiting the wrapper.
    wrapper.__signature__ = inspect.signature(handler)
    del wrapper.__wrapped__
    return wrapper


__all__ = ["make_safe"]
