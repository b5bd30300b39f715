"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from yarnsite import __version__
from yarnsite.api.events import EventManager
from yarnsite.api.models import APIResponse
from yarnsite.api.routes import events, plugins
from yarnsite.api.routes import status as status_routes
from yarnsite.config import DEFAULT_PLUGIN_PREFIX
from yarnsite.dispatcher import DispatcherError
from yarnsite.plugins import ManifestNotFoundError, PluginError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from yarnsite.dispatcher import RebuildDispatcher

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Start the dispatcher with the server and stop it on shutdown."""
    dispatcher: RebuildDispatcher | None = app.state.dispatcher

    # Startup: a failed initial read aborts the server
    if dispatcher is not None:
        await dispatcher.start()

    yield

    # Shutdown
    if dispatcher is not None:
        await dispatcher.stop()


def create_app(
    dispatcher: RebuildDispatcher | None = None,
    project_root: str | Path | None = None,
    plugin_prefix: str = DEFAULT_PLUGIN_PREFIX,
    event_manager: EventManager | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        dispatcher: Dispatcher to run for the lifetime of the app.
        project_root: Directory holding package.json. Defaults to the cwd.
        plugin_prefix: Naming prefix for plugin packages.
        event_manager: Event fan-out for SSE clients. Defaults to the
                       dispatcher's, or a new one.
    """
    app = FastAPI(
        title="yarnsite",
        description="Live-reload API for the Yarn incremental rebuild core",
        version=__version__,
        lifespan=lifespan,
    )

    if event_manager is None and dispatcher is not None:
        event_manager = dispatcher.event_manager

    app.state.dispatcher = dispatcher
    app.state.event_manager = event_manager or EventManager()
    app.state.project_root = Path(project_root or ".").resolve()
    app.state.plugin_prefix = plugin_prefix

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(ManifestNotFoundError)
    async def manifest_not_found_handler(
        _request: Request, _exc: ManifestNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=APIResponse[None](data=None, error="package.json not found").model_dump(),
        )

    @app.exception_handler(PluginError)
    async def plugin_error_handler(_request: Request, exc: PluginError) -> JSONResponse:
        logger.warning("Plugin resolution failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=APIResponse[None](data=None, error="Invalid package.json").model_dump(),
        )

    @app.exception_handler(DispatcherError)
    async def dispatcher_error_handler(_request: Request, exc: DispatcherError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=APIResponse[None](data=None, error=str(exc)).model_dump(),
        )

    # Include routers
    app.include_router(status_routes.router, prefix="/api/v1")
    app.include_router(plugins.router, prefix="/api/v1")
    app.include_router(events.router, prefix="/api/v1")

    return app
