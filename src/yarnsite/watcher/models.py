"""Data models for watch sessions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from yarnsite.watcher.classifier import PathClassifier

if TYPE_CHECKING:
    from yarnsite.config import PathConfig


class WatchRole(StrEnum):
    """What a watched tree holds."""

    SOURCE = "source"
    THEME = "theme"


class FileEventKind(StrEnum):
    """Filesystem mutation kinds delivered by a watch session."""

    ADDED = "added"
    CHANGED = "changed"
    REMOVED = "removed"


@dataclass(frozen=True)
class WatchRoot:
    """A watched directory and the roots under it that never trigger actions.

    Attributes:
        path: Absolute directory path.
        role: Source or theme tree.
        ignored: Absolute directory roots suppressed for this session.
    """

    path: Path
    role: WatchRole
    ignored: tuple[Path, ...] = ()

    def __post_init__(self) -> None:
        for p in (self.path, *self.ignored):
            if not Path(p).is_absolute():
                raise ValueError(f"watch paths must be absolute: {p}")

    @classmethod
    def for_source(cls, paths: PathConfig) -> WatchRoot:
        """Source tree, ignoring plugins, themes and destination."""
        return cls(path=paths.source, role=WatchRole.SOURCE, ignored=paths.ignored_by_source)

    @classmethod
    def for_theme(cls, paths: PathConfig) -> WatchRoot:
        """Theme tree; every change there forces a full rebuild."""
        return cls(path=paths.themes, role=WatchRole.THEME)

    @property
    def classifier(self) -> PathClassifier:
        return PathClassifier(self.ignored)


@dataclass(frozen=True)
class FileEvent:
    """A single filesystem mutation under a watch root."""

    kind: FileEventKind
    path: Path
    root: WatchRoot
