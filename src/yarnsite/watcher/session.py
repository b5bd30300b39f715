"""Watch sessions: async streams of FileEvents for one watch root."""

from __future__ import annotations

import asyncio
import logging
import os
from collections import defaultdict
from collections.abc import AsyncIterator, Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from watchfiles import Change, DefaultFilter, awatch

from yarnsite.config import WatchOptions
from yarnsite.watcher.classifier import is_within
from yarnsite.watcher.exceptions import WatchSessionError
from yarnsite.watcher.models import FileEvent, FileEventKind, WatchRoot

if TYPE_CHECKING:
    from yarnsite.watcher.classifier import PathClassifier

logger = logging.getLogger(__name__)

CHANGE_MAP: dict[Change, FileEventKind] = {
    Change.added: FileEventKind.ADDED,
    Change.modified: FileEventKind.CHANGED,
    Change.deleted: FileEventKind.REMOVED,
}


class WatchSession(Protocol):
    """Interface for a live subscription to one watch root."""

    root: WatchRoot

    async def open(self) -> None:
        """Start watching."""
        ...

    async def wait_ready(self) -> None:
        """Return once the initial directory scan is complete."""
        ...

    def __aiter__(self) -> AsyncIterator[FileEvent]:
        """Yield events in delivery order until the session is closed."""
        ...

    async def close(self) -> None:
        """Stop watching; iteration ends after already-delivered events."""
        ...


SessionFactory = Callable[[WatchRoot], WatchSession]

VCS_DIRS = (".git", ".hg", ".svn")
EDITOR_TEMP_PATTERNS = (
    r"\.sw.$",  # vim swap
    r"^\.#",  # emacs lock
    r"\.___jb_\w+___$",  # JetBrains safe write
)


class WatchRootFilter(DefaultFilter):
    """watchfiles filter for one watch root.

    Drops anything under the root's ignored roots, VCS metadata
    directories and editor temp files. Everything else is content.
    """

    def __init__(self, root: WatchRoot) -> None:
        super().__init__(ignore_dirs=VCS_DIRS, ignore_entity_patterns=EDITOR_TEMP_PATTERNS)
        self.root = root
        self.classifier: PathClassifier = root.classifier

    def __call__(self, change: Change, path: str) -> bool:
        if self.classifier.is_ignored(path):
            return False
        return super().__call__(change, path)


def scan_directories(root: WatchRoot) -> set[str]:
    """Every directory under ``root`` outside its ignored roots."""
    classifier = root.classifier
    found: set[str] = set()
    for dirpath, dirnames, _filenames in os.walk(root.path):
        dirnames[:] = [d for d in dirnames if not classifier.is_ignored(os.path.join(dirpath, d))]
        found.update(os.path.join(dirpath, d) for d in dirnames)
    return found


def _order_kinds(kinds: set[FileEventKind], exists: bool) -> list[FileEventKind]:
    updates = [k for k in (FileEventKind.ADDED, FileEventKind.CHANGED) if k in kinds]
    if FileEventKind.REMOVED not in kinds:
        return updates
    if not exists:
        return [*updates, FileEventKind.REMOVED]
    # Deleted and written again within one batch
    return [FileEventKind.REMOVED, *updates] if updates else [FileEventKind.CHANGED]


def normalize_changes(
    changes: Iterable[tuple[Change, str]],
    root: WatchRoot,
    known_dirs: set[str] | None = None,
) -> list[FileEvent]:
    """Convert a raw watchfiles batch into FileEvents for files, sorted by path.

    watchfiles reports a batch as a set, so when one path has both a
    removal and an add or modify the file's current state decides the
    order: a file that exists again ends with its add or modify, a file
    that is gone ends with its removal.

    Directories never produce events. ``known_dirs`` is updated with
    directories seen in the batch, and a removal is dropped when the path
    is a known directory or when other entries of the batch lie under it.
    """
    dirs = known_dirs if known_dirs is not None else set()
    by_path: dict[str, set[FileEventKind]] = defaultdict(set)
    for change, path_str in changes:
        kind = CHANGE_MAP.get(change)
        if kind is not None:
            by_path[path_str].add(kind)

    events: list[FileEvent] = []
    for path_str in sorted(by_path):
        kinds = by_path[path_str]
        if os.path.isdir(path_str):
            dirs.add(path_str)
            continue
        if FileEventKind.REMOVED in kinds and _was_directory(path_str, dirs, by_path):
            dirs.difference_update({d for d in dirs if is_within(d, path_str)})
            continue
        path = Path(path_str)
        for kind in _order_kinds(kinds, exists=os.path.exists(path_str)):
            events.append(FileEvent(kind=kind, path=path, root=root))
    return events


def _was_directory(path_str: str, dirs: set[str], batch: Iterable[str]) -> bool:
    if path_str in dirs:
        return True
    return any(other != path_str and is_within(other, path_str) for other in batch)


class WatchfilesSession:
    """Watch session backed by ``watchfiles.awatch``.

    A pump task drains awatch into a queue. The session becomes ready
    once awatch hands back its first batch; ``yield_on_timeout`` makes
    that happen after one quiet poll cycle.
    """

    def __init__(self, root: WatchRoot, options: WatchOptions | None = None) -> None:
        self.root = root
        self.options = options or WatchOptions()
        self.watch_filter = WatchRootFilter(root)
        self._queue: asyncio.Queue[FileEvent | None] = asyncio.Queue()
        self._ready = asyncio.Event()
        self._stop = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self._dirs: set[str] = set()

    async def open(self) -> None:
        if self._task is not None:
            return
        logger.debug("Opening %s watch session at %s", self.root.role, self.root.path)
        self._task = asyncio.create_task(self._pump(), name=f"watch-{self.root.role}")

    async def wait_ready(self) -> None:
        if self._task is None:
            raise WatchSessionError(f"{self.root.role} session was never opened")

        ready = asyncio.create_task(self._ready.wait())
        done, _ = await asyncio.wait({ready, self._task}, return_when=asyncio.FIRST_COMPLETED)
        if ready in done:
            logger.info("Watching %s files at %s", self.root.role, self.root.path)
            return

        ready.cancel()
        error = self._task.exception()
        if error is not None:
            raise WatchSessionError(
                f"Could not watch {self.root.role} directory {self.root.path}: {error}"
            ) from error

    def __aiter__(self) -> AsyncIterator[FileEvent]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[FileEvent]:
        while True:
            event = await self._queue.get()
            if event is None:
                return
            yield event

    async def close(self) -> None:
        self._stop.set()
        if self._task is None:
            self._queue.put_nowait(None)
            return
        try:
            await self._task
        except Exception:
            # Reported by _pump and wait_ready()
            logger.debug("%s watch session ended with an error", self.root.role, exc_info=True)

    async def _pump(self) -> None:
        try:
            self._dirs = await asyncio.to_thread(scan_directories, self.root)
            async for changes in awatch(
                self.root.path,
                watch_filter=self.watch_filter,
                debounce=self.options.debounce_ms,
                step=self.options.step_ms,
                stop_event=self._stop,
                rust_timeout=self.options.ready_poll_ms,
                yield_on_timeout=True,
                force_polling=self.options.force_polling,
            ):
                self._ready.set()
                for event in normalize_changes(changes, self.root, self._dirs):
                    self._queue.put_nowait(event)
        except Exception:
            logger.exception("%s watcher at %s failed", self.root.role, self.root.path)
            raise
        finally:
            self._queue.put_nowait(None)
