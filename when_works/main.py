"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from when_works import __commit_short__, __version__
from when_works.api import create_api_router
from when_works.core.config import Settings, get_settings
from when_works.core.container import ApplicationContainer
from when_works.infrastructure.database import DatabaseBootstrapError
from when_works.web.middleware import RequestTimeoutMiddleware, RequestTracingMiddleware
from when_works.web.spa import create_spa_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: ApplicationContainer = app.state.container
    logger.info("starting %s version=%s commit=%s", container.settings.project_name, __version__, __commit_short__)
    try:
        await container.init_infrastructure()
    except DatabaseBootstrapError as exc:
        logger.error("%s", exc)
        await container.shutdown()
        raise
    container.init_assets()
    try:
        yield
    finally:
        await container.shutdown()
        logger.info("server stopped")


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred"},
    )


def create_app(
    settings: Settings | None = None,
    container: ApplicationContainer | None = None,
) -> FastAPI:
    """Build the application.

    Development mode allows any cross-origin caller and leaves unmatched
    paths as plain 404s (the Vite dev server serves the SPA). Every other
    environment installs the SPA fallback after the API routes.
    """
    if container is None:
        container = ApplicationContainer(settings=settings or get_settings())
    settings = container.settings

    app = FastAPI(
        title=settings.project_name,
        version=__version__,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs" if settings.is_development else None,
        redoc_url=None,
        openapi_url=f"{settings.api_prefix}/openapi.json" if settings.is_development else None,
    )
    app.state.container = container

    app.add_exception_handler(Exception, handle_unexpected_exception)

    app.add_middleware(RequestTimeoutMiddleware, timeout=settings.request_timeout)
    if settings.is_development:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(RequestTracingMiddleware, slow_threshold=settings.slow_request_threshold)

    app.include_router(create_api_router(settings.api_prefix))
    if not settings.is_development:
        app.include_router(create_spa_router(settings.api_prefix))

    return app
