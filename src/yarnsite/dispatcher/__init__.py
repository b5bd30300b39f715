"""Dispatcher package - Filesystem events to Site rebuild actions."""

from yarnsite.dispatcher.dispatcher import RebuildDispatcher, create_dispatcher
from yarnsite.dispatcher.exceptions import (
    DispatcherError,
    DispatcherStateError,
    StartupError,
)
from yarnsite.dispatcher.models import DispatcherState, DispatcherStatus

__all__ = [
    "DispatcherError",
    "DispatcherState",
    "DispatcherStateError",
    "DispatcherStatus",
    "RebuildDispatcher",
    "StartupError",
    "create_dispatcher",
]
