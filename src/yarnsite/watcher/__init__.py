"""Watcher - Filesystem watch sessions and the ignore rule."""

from yarnsite.watcher.classifier import PathClass, PathClassifier, is_within
from yarnsite.watcher.exceptions import WatcherError, WatchSessionError
from yarnsite.watcher.models import FileEvent, FileEventKind, WatchRole, WatchRoot
from yarnsite.watcher.session import (
    SessionFactory,
    WatchfilesSession,
    WatchRootFilter,
    WatchSession,
    normalize_changes,
    scan_directories,
)

__all__ = [
    "FileEvent",
    "FileEventKind",
    "PathClass",
    "PathClassifier",
    "SessionFactory",
    "WatchRole",
    "WatchRoot",
    "WatchRootFilter",
    "WatchSession",
    "WatchSessionError",
    "WatcherError",
    "WatchfilesSession",
    "is_within",
    "normalize_changes",
    "scan_directories",
]
