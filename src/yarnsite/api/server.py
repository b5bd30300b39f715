"""Run the live-reload API with uvicorn."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uvicorn

from yarnsite.api.app import create_app
from yarnsite.api.events import EventManager
from yarnsite.dispatcher import create_dispatcher
from yarnsite.logging import setup_logging

if TYPE_CHECKING:
    from pathlib import Path

    from fastapi import FastAPI

    from yarnsite.config import SiteConfig
    from yarnsite.site import Site

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 4000


def serve(
    app: FastAPI,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    log_level: str = "info",
) -> None:
    """Serve ``app`` until interrupted.

    The app's lifespan runs the dispatcher, so this is the watch process's
    main loop.
    """
    config = uvicorn.Config(app, host=host, port=port, log_level=log_level)
    uvicorn.Server(config).run()


def serve_site(
    site: Site,
    config: SiteConfig,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    log_dir: str | Path | None = None,
) -> FastAPI:
    """Watch ``site`` and serve its live-reload API until interrupted.

    Raises:
        ConfigError: If the log directory is inside the watched source.
    """
    setup_logging(log_dir, paths=config.path)

    dispatcher = create_dispatcher(site, config, event_manager=EventManager())
    app = create_app(
        dispatcher=dispatcher,
        project_root=config.root,
        plugin_prefix=config.plugin_prefix,
    )
    serve(app, host=host, port=port)
    return app
