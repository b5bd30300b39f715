"""RebuildDispatcher - Turns filesystem events into Site rebuild actions."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import TYPE_CHECKING

from yarnsite.dispatcher.exceptions import DispatcherStateError, StartupError
from yarnsite.dispatcher.models import DispatcherState, DispatcherStatus
from yarnsite.watcher import FileEventKind, WatchfilesSession, WatchRoot

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine
    from typing import Any

    from yarnsite.api.events import EventManager
    from yarnsite.config import SiteConfig
    from yarnsite.site import Site
    from yarnsite.watcher import FileEvent, SessionFactory, WatchSession

logger = logging.getLogger(__name__)


class RebuildDispatcher:
    """Owns a Site and its two watch sessions and drives rebuilds.

    Source-tree events map to path-scoped actions (``file_added``,
    ``file_changed``, ``file_removed``). Any theme-tree event reloads the
    theme and then rebuilds the whole site.

    Each action runs in its own task: events from one session are
    dispatched in delivery order, but their actions may overlap. A failed
    action is reported to the event loop's exception handler and the
    sessions keep running.
    """

    def __init__(
        self,
        site: Site,
        source_root: WatchRoot,
        theme_root: WatchRoot,
        session_factory: SessionFactory,
        event_manager: EventManager | None = None,
    ) -> None:
        """Initialize the RebuildDispatcher.

        Args:
            site: Site receiving rebuild actions.
            source_root: Content tree, with its ignored roots.
            theme_root: Themes tree.
            session_factory: Creates a WatchSession for a WatchRoot.
            event_manager: Optional EventManager notified of each rebuild.
        """
        self.site = site
        self.source_root = source_root
        self.theme_root = theme_root
        self.session_factory = session_factory
        self.event_manager = event_manager

        self._state = DispatcherState.IDLE
        self._sessions: list[WatchSession] = []
        self._consumers: list[asyncio.Task[None]] = []
        self._actions: set[asyncio.Task[None]] = set()
        self._stopped = asyncio.Event()
        self._dispatched = 0
        self._completed = 0
        self._failed = 0

    @property
    def state(self) -> DispatcherState:
        if self._state is DispatcherState.WATCHING and self._actions:
            return DispatcherState.DISPATCHING
        return self._state

    def status(self) -> DispatcherStatus:
        """Get a snapshot of state and counters."""
        return DispatcherStatus(
            state=self.state,
            source=self.source_root.path,
            themes=self.theme_root.path,
            ignored=list(self.source_root.ignored),
            dispatched=self._dispatched,
            completed=self._completed,
            failed=self._failed,
            in_flight=len(self._actions),
        )

    async def start(self) -> None:
        """Read the site once, then open both watch sessions.

        Raises:
            DispatcherStateError: If the dispatcher was already started.
            StartupError: If the initial read fails. No session is opened.
            WatchSessionError: If a session cannot start watching.
        """
        if self._state is not DispatcherState.IDLE:
            raise DispatcherStateError(f"Cannot start dispatcher in state {self._state}")

        self._state = DispatcherState.INITIALIZING
        logger.info("Reading site files...")
        try:
            await self.site.read_files()
        except Exception as e:
            logger.exception("Initial site read failed")
            self._mark_stopped()
            raise StartupError(f"Initial site read failed: {e}") from e

        try:
            await self._open(self.source_root, self._dispatch_source)
            await self._open(self.theme_root, self._dispatch_theme)
        except Exception:
            await self.stop()
            raise

        self._state = DispatcherState.WATCHING
        logger.info(
            "Watching %s (themes: %s)",
            self.source_root.path,
            self.theme_root.path,
        )

    async def stop(self) -> None:
        """Close both sessions and wait for every in-flight action.

        Events already delivered by a session are still dispatched.
        Calling stop() more than once is a no-op.
        """
        if self._state is DispatcherState.STOPPED:
            return

        logger.info("Stopping rebuild dispatcher")
        for session in self._sessions:
            await session.close()

        results = await asyncio.gather(*self._consumers, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error("Watch consumer ended with error: %s", result)

        while self._actions:
            await asyncio.gather(*self._actions, return_exceptions=True)

        self._mark_stopped()
        logger.info(
            "Rebuild dispatcher stopped (completed=%d, failed=%d)",
            self._completed,
            self._failed,
        )

    async def wait_stopped(self) -> None:
        """Block until stop() has finished."""
        await self._stopped.wait()

    def _mark_stopped(self) -> None:
        self._state = DispatcherState.STOPPED
        self._stopped.set()

    async def _open(self, root: WatchRoot, handler: Callable[[FileEvent], None]) -> None:
        session = self.session_factory(root)
        self._sessions.append(session)
        await session.open()
        # Handlers attach only after the initial scan
        await session.wait_ready()
        consumer = asyncio.create_task(self._consume(session, handler), name=f"consume-{root.role}")
        self._consumers.append(consumer)

    async def _consume(self, session: WatchSession, handler: Callable[[FileEvent], None]) -> None:
        try:
            async for event in session:
                handler(event)
        except Exception:
            logger.exception("%s watch session failed", session.root.role)
            raise

    def _dispatch_source(self, event: FileEvent) -> None:
        logger.info("File %s at: %s", event.kind, event.path)
        logger.info("Rebuilding...")
        self._spawn(self._apply_source_change(event), event)

    def _dispatch_theme(self, event: FileEvent) -> None:
        logger.info("Theme file %s at: %s", event.kind, event.path)
        logger.info("Rebuilding...")
        self._spawn(self._reload_theme(), event)

    async def _apply_source_change(self, event: FileEvent) -> None:
        match event.kind:
            case FileEventKind.ADDED:
                await self.site.file_added(event.path)
            case FileEventKind.CHANGED:
                await self.site.file_changed(event.path)
            case FileEventKind.REMOVED:
                await self.site.file_removed(event.path)
        logger.info("\tdone!")

    async def _reload_theme(self) -> None:
        await self.site.read_theme()
        # The build renders with the newly loaded templates
        await self.site.build()
        logger.info("\tdone!")

    def _spawn(self, action: Coroutine[Any, Any, None], event: FileEvent) -> None:
        self._dispatched += 1
        if self.event_manager is not None:
            self.event_manager.emit_rebuild_started(event.root.role, event.kind, str(event.path))
        task = asyncio.create_task(action, name=f"rebuild-{event.kind}-{event.path}")
        self._actions.add(task)
        task.add_done_callback(functools.partial(self._on_action_done, event=event))

    def _on_action_done(self, task: asyncio.Task[None], event: FileEvent) -> None:
        self._actions.discard(task)
        if task.cancelled():
            return

        error = task.exception()
        if error is None:
            self._completed += 1
            if self.event_manager is not None:
                self.event_manager.emit_rebuild_completed(
                    event.root.role, event.kind, str(event.path)
                )
            return

        self._failed += 1
        if self.event_manager is not None:
            self.event_manager.emit_rebuild_failed(
                event.root.role, event.kind, str(event.path), str(error)
            )
        task.get_loop().call_exception_handler(
            {
                "message": f"Rebuild after {event.kind} of {event.path} failed",
                "exception": error,
                "task": task,
            }
        )


def create_dispatcher(
    site: Site,
    config: SiteConfig,
    *,
    event_manager: EventManager | None = None,
    session_factory: SessionFactory | None = None,
) -> RebuildDispatcher:
    """Build a RebuildDispatcher from site configuration.

    Args:
        site: Site receiving rebuild actions.
        config: Site configuration supplying the watched paths.
        event_manager: Optional EventManager notified of each rebuild.
        session_factory: Creates watch sessions. Defaults to watchfiles
                         sessions using ``config.watch``.

    Returns:
        A dispatcher in the idle state.
    """
    if session_factory is None:
        session_factory = functools.partial(WatchfilesSession, options=config.watch)

    return RebuildDispatcher(
        site=site,
        source_root=WatchRoot.for_source(config.path),
        theme_root=WatchRoot.for_theme(config.path),
        session_factory=session_factory,
        event_manager=event_manager,
    )
