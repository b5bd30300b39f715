"""Live-reload API for yarnsite."""

from yarnsite.api.app import create_app
from yarnsite.api.events import Event, EventManager, EventType
from yarnsite.api.models import APIResponse, DispatcherStatusResponse, PluginListResponse
from yarnsite.api.server import serve, serve_site

__all__ = [
    "APIResponse",
    "DispatcherStatusResponse",
    "Event",
    "EventManager",
    "EventType",
    "PluginListResponse",
    "create_app",
    "serve",
    "serve_site",
]
