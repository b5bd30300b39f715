"""Exceptions for the watcher module."""


class WatcherError(Exception):
    """Base exception for watcher errors."""


class WatchSessionError(WatcherError):
    """The underlying filesystem watcher failed before becoming ready."""
