"""
Name-based dependency container.

Dependencies are registered under a string name, either as a constant value
or as a factory. A factory's parameters are resolved by *name* against the
same registry, depth-first, and every resolved value is cached for the life
of the container.

Usage:
    from core.container import Container

    container = Container()
    container.register("settings", get_settings())
    container.register("db", lambda settings: DatabaseManager(settings.database_url))

    db = container.get("db")

    def build(settings, db):
        ...

    app = container.resolve(build)
"""

import inspect
import threading
from collections.abc import Callable, Iterator
from typing import Any

from core.logging import get_logger

logger = get_logger("container")

_MISSING = object()


class ContainerError(Exception):
    """Base class for resolution failures. These are fatal at startup."""


class DependencyNotFound(ContainerError):
    """Raised when a name is requested that was never registered."""

    def __init__(self, name: str, chain: tuple[str, ...] = ()):
        self.name = name
        self.chain = chain
        if chain:
            message = f"Dependency '{name}' is not registered (required by {' -> '.join(chain)})"
        else:
            message = f"Dependency '{name}' is not registered"
        super().__init__(message)


class CircularDependency(ContainerError):
    """Raised when a name appears in its own transitive parameter chain."""

    def __init__(self, chain: tuple[str, ...]):
        self.chain = chain
        super().__init__(f"Circular dependency: {' -> '.join(chain)}")


class _Registration:
    __slots__ = ("name", "provider", "is_factory", "params")

    def __init__(self, name: str, provider: Any):
        self.name = name
        self.provider = provider
        self.is_factory = callable(provider)
        self.params = _parameters(provider) if self.is_factory else ()


def _parameters(fn: Callable[..., Any]) -> tuple[inspect.Parameter, ...]:
    """Return the named parameters of fn that the container can fill."""
    params = []
    for param in inspect.signature(fn).parameters.values():
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        params.append(param)
    return tuple(params)


class Container:
    """
    Process-wide registry of named singletons.

    Cached values are read without locking; first resolution of a factory
    runs under a re-entrant lock so concurrent callers observe exactly one
    invocation.
    """

    def __init__(self):
        self._registrations: dict[str, _Registration] = {}
        self._resolved: dict[str, Any] = {}
        self._lock = threading.RLock()

    def register(self, name: str, factory_or_value: Any, override: bool = False) -> None:
        """
        Register a constant or a factory under name.

        Callables are treated as factories; wrap a callable in a lambda with
        no parameters to register it as a value.
        """
        with self._lock:
            if name in self._registrations and not override:
                raise ValueError(f"Dependency '{name}' is already registered")
            self._registrations[name] = _Registration(name, factory_or_value)
            self._resolved.pop(name, None)

    def has(self, name: str) -> bool:
        return name in self._registrations

    def names(self) -> Iterator[str]:
        return iter(sorted(self._registrations))

    def get(self, name: str) -> Any:
        """Return the singleton for name, resolving and caching it on first use."""
        value = self._resolved.get(name, _MISSING)
        if value is not _MISSING:
            return value
        with self._lock:
            return self._get(name, ())

    def resolve(self, fn: Callable[..., Any]) -> Any:
        """Call fn with each of its parameters resolved by name."""
        with self._lock:
            kwargs = self._arguments(_parameters(fn), ())
        return fn(**kwargs)

    def _get(self, name: str, chain: tuple[str, ...]) -> Any:
        if name in chain:
            raise CircularDependency(chain + (name,))

        value = self._resolved.get(name, _MISSING)
        if value is not _MISSING:
            return value

        registration = self._registrations.get(name)
        if registration is None:
            raise DependencyNotFound(name, chain)

        if registration.is_factory:
            kwargs = self._arguments(registration.params, chain + (name,))
            value = registration.provider(**kwargs)
            logger.debug("dependency_resolved", name=name)
        else:
            value = registration.provider

        self._resolved[name] = value
        return value

    def _arguments(self, params: tuple[inspect.Parameter, ...], chain: tuple[str, ...]) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        for param in params:
            if param.name not in self._registrations and param.default is not inspect.Parameter.empty:
                continue
            kwargs[param.name] = self._get(param.name, chain)
        return kwargs


# Default process-wide container
container = Container()


__all__ = [
    "Container",
    "ContainerError",
    "DependencyNotFound",
    "CircularDependency",
    "container",
]
