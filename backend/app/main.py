"""
FastAPI application entry point.

Request pipeline, outermost first:

    RequestID -> security headers -> static files -> session -> CSRF guard -> request logging -> routes

Every collaborator is resolved from the container before the app is
returned, so a missing or circular registration fails at startup rather
than on the first request.
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, status
from fastapi.responses import JSONResponse

from core.config import Settings, get_settings
from core.container import Container
from core.logging import RequestLoggingMiddleware, configure_logging, get_logger
from core.security import SecurityConfigError, validate_security_config

from .container import REQUIRED, build_container
from .error_handlers import register_exception_handlers
from .middleware.csrf import CSRFMiddleware
from .middleware.request_id import RequestIDMiddleware
from .middleware.security import SecurityHeadersMiddleware
from .middleware.session import SessionMiddleware
from .middleware.static import StaticFilesMiddleware
from .routers import auth as auth_router
from .routers import models as models_router
from .routers import repos as repos_router
from .routers import spa as spa_router
from .routers import user as user_router

logger = get_logger("api")


def validate_security_on_startup(settings: Settings) -> None:
    """
    Validate security configuration before serving.

    Errors are fatal in production; elsewhere they are logged and the
    app starts anyway.
    """
    try:
        validate_security_config(
            secret=settings.secret,
            session_encryption_key=settings.session_encryption_key,
            token_encryption_key=settings.token_encryption_key,
            database_url=settings.database_url,
        )
        config_errors, config_warnings = settings.validate_production_config()
        for warning in config_warnings:
            logger.warning("config_warning", message=warning)
        if config_errors and settings.is_production:
            raise SecurityConfigError(config_errors)
        for error in config_errors:
            logger.warning("config_warning", message=error)
        logger.info("security_validation_passed")
    except SecurityConfigError:
        if settings.is_production:
            logger.error(
                "security_validation_failed_fatal",
                message="Security validation failed. Set valid secrets or run with ENV=development.",
            )
            raise
        logger.warning(
            "security_validation_skipped",
            message="Security validation failed outside production; continuing",
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: Container = app.state.container
    settings: Settings = container.get("settings")

    logger.info("app_startup", app_name=settings.app_name, env=settings.env)
    validate_security_on_startup(settings)

    yield

    logger.info("app_shutdown")
    container.get("db").dispose()


def create_app(container: Optional[Container] = None) -> FastAPI:
    container = container or build_container()
    settings: Settings = container.get("settings")
    configure_logging(level="DEBUG" if settings.debug else "INFO")

    for name in REQUIRED:
        container.get(name)

    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    app.state.container = container

    # Exception handlers
    register_exception_handlers(app)

    # The last middleware added runs first.
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CSRFMiddleware,
        cookie_name=settings.csrf_cookie_name,
        secure=settings.cookie_secure,
    )
    app.add_middleware(
        SessionMiddleware,
        codec=container.get("session_codec"),
        cookie_name=settings.session_cookie_name,
        secure=settings.cookie_secure,
    )
    app.add_middleware(StaticFilesMiddleware, directory=settings.public_dir)
    app.add_middleware(
        SecurityHeadersMiddleware,
        json_prefix=settings.json_prefix,
        is_production=settings.is_production,
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness probe. Returns no infrastructure details."""
        return {"status": "ok"}

    @app.get("/health/ready", tags=["health"])
    def readiness_check():
        """Readiness probe. 503 until the database answers."""
        database = container.get("db").health_check()
        if not database["healthy"]:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "checks": {"database": False}},
            )
        return {"status": "ready", "checks": {"database": True}}

    app.include_router(repos_router.hook_router)
    app.include_router(auth_router.router)
    app.include_router(user_router.router)
    app.include_router(models_router.router)
    app.include_router(repos_router.router)
    # Catch-all GET; must stay last.
    app.include_router(spa_router.router)

    logger.info("app_created", dependencies=list(container.names()))
    return app


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    settings = get_settings()
    configure_logging(level="DEBUG" if settings.debug else "INFO")
    logger.info("server_starting", host=settings.host, port=settings.port)
    uvicorn.run(
        "backend.app.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )
