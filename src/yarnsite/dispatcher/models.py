"""Data models for the RebuildDispatcher module."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path


class DispatcherState(StrEnum):
    """Lifecycle of a RebuildDispatcher."""

    IDLE = "idle"
    INITIALIZING = "initializing"
    WATCHING = "watching"
    DISPATCHING = "dispatching"
    STOPPED = "stopped"


@dataclass
class DispatcherStatus:
    """Snapshot of a dispatcher.

    Attributes:
        state: Current lifecycle state.
        source: Watched source directory.
        themes: Watched themes directory.
        ignored: Roots under the source directory that never trigger actions.
        dispatched: Events handed to an action so far.
        completed: Actions that finished successfully.
        failed: Actions that raised.
        in_flight: Actions currently running.
    """

    state: DispatcherState
    source: Path
    themes: Path
    ignored: list[Path] = field(default_factory=list)
    dispatched: int = 0
    completed: int = 0
    failed: int = 0
    in_flight: int = 0
