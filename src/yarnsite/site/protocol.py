"""Interface the rebuild core expects from a Site."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path


@runtime_checkable
class Site(Protocol):
    """A long-lived site holding parsed content, theme and configuration.

    Every action may raise; the rebuild core never retries.
    """

    async def read_files(self) -> None:
        """Read and build every source file."""
        ...

    async def file_changed(self, path: Path) -> None:
        """Rebuild output derived from a modified source file."""
        ...

    async def file_added(self, path: Path) -> None:
        """Build output for a new source file."""
        ...

    async def file_removed(self, path: Path) -> None:
        """Drop output derived from a deleted source file."""
        ...

    async def read_theme(self) -> None:
        """Reload the active theme's templates."""
        ...

    async def build(self) -> None:
        """Rebuild the whole site."""
        ...
