"""FastAPI dependencies for dependency injection.

Shared objects live on ``app.state``; create_app() puts them there.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from fastapi import Depends, Request

from yarnsite.api.events import EventManager
from yarnsite.dispatcher import RebuildDispatcher
from yarnsite.plugins import PackageResolver


def get_dispatcher(request: Request) -> RebuildDispatcher:
    """Dependency that provides the RebuildDispatcher instance."""
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise RuntimeError("No dispatcher configured. Pass one to create_app().")
    return dispatcher


def get_event_manager(request: Request) -> EventManager:
    """Dependency that provides the EventManager instance."""
    event_manager = getattr(request.app.state, "event_manager", None)
    if event_manager is None:
        raise RuntimeError("EventManager not initialized. Use create_app().")
    return event_manager


def get_package_resolver(request: Request) -> PackageResolver:
    """Dependency that provides a PackageResolver for the configured prefix."""
    return PackageResolver(request.app.state.plugin_prefix)


def get_project_root(request: Request) -> Path:
    """Dependency that provides the project root holding package.json."""
    return Path(request.app.state.project_root)


# Type aliases for dependency injection
DispatcherDep = Annotated[RebuildDispatcher, Depends(get_dispatcher)]
EventManagerDep = Annotated[EventManager, Depends(get_event_manager)]
PackageResolverDep = Annotated[PackageResolver, Depends(get_package_resolver)]
ProjectRootDep = Annotated[Path, Depends(get_project_root)]
