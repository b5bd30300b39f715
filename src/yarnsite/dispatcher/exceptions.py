"""Exceptions for the RebuildDispatcher module."""


class DispatcherError(Exception):
    """Base exception for dispatcher errors."""

    pass


class StartupError(DispatcherError):
    """The initial site read failed; no watch session was opened."""

    pass


class DispatcherStateError(DispatcherError):
    """Operation not allowed in the dispatcher's current state."""

    pass
