"""Rebuild notifications for live-reload clients, as Server-Sent Events."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import uuid4

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

# Browsers wait this long before reconnecting a dropped stream
RECONNECT_MS = 1000


class EventType(str, Enum):
    """Types of events that can be emitted."""

    REBUILD_STARTED = "rebuild_started"
    REBUILD_COMPLETED = "rebuild_completed"
    REBUILD_FAILED = "rebuild_failed"
    HEARTBEAT = "heartbeat"


def _timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass
class Event:
    """One SSE message. ``scope`` is the watch role that caused it."""

    event_type: EventType
    data: dict[str, Any]
    scope: str | None = None

    def to_sse(self) -> str:
        return f"event: {self.event_type.value}\ndata: {json.dumps(self.data)}\n\n"


@dataclass
class Subscriber:
    """A connected client and its pending events."""

    id: str
    queue: asyncio.Queue[Event]
    scope: str | None = None

    @classmethod
    def create(cls, scope: str | None = None) -> Subscriber:
        return cls(id=str(uuid4()), queue=asyncio.Queue(), scope=scope)

    def wants(self, event: Event) -> bool:
        """Heartbeats and unscoped subscribers see everything."""
        return self.scope is None or event.scope is None or self.scope == event.scope


@dataclass
class EventManager:
    """Fans rebuild events out to SSE subscribers.

    Every method is called from the event loop that serves the app, so
    queues are fed with ``put_nowait`` and nothing blocks.
    """

    heartbeat_interval: float = 30.0
    _subscribers: dict[str, Subscriber] = field(default_factory=dict)

    def subscribe(self, scope: str | None = None) -> Subscriber:
        """Register a client.

        Args:
            scope: "source" or "theme" to receive only rebuilds caused by
                   that watch root. None receives both.
        """
        subscriber = Subscriber.create(scope)
        self._subscribers[subscriber.id] = subscriber
        return subscriber

    def unsubscribe(self, subscriber_id: str) -> None:
        self._subscribers.pop(subscriber_id, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: Event) -> None:
        for subscriber in self._subscribers.values():
            if subscriber.wants(event):
                subscriber.queue.put_nowait(event)

    async def stream(self, subscriber: Subscriber) -> AsyncIterator[str]:
        """Yield SSE text for ``subscriber`` until the client goes away.

        The stream opens with a reconnect hint and sends a heartbeat
        whenever ``heartbeat_interval`` passes without a rebuild.
        """
        try:
            yield f"retry: {RECONNECT_MS}\n\n"
            while True:
                try:
                    event = await asyncio.wait_for(
                        subscriber.queue.get(), timeout=self.heartbeat_interval
                    )
                except TimeoutError:
                    event = self.heartbeat()
                yield event.to_sse()
        finally:
            self.unsubscribe(subscriber.id)

    def heartbeat(self) -> Event:
        return Event(event_type=EventType.HEARTBEAT, data={"timestamp": _timestamp()})

    def _rebuild(
        self, event_type: EventType, scope: str, kind: str, path: str, **extra: Any
    ) -> None:
        data = {"scope": scope, "kind": kind, "path": path, **extra}
        self.publish(Event(event_type=event_type, data=data, scope=scope))

    def emit_rebuild_started(self, scope: str, kind: str, path: str) -> None:
        self._rebuild(EventType.REBUILD_STARTED, scope, kind, path)

    def emit_rebuild_completed(self, scope: str, kind: str, path: str) -> None:
        """Browsers reload on this one."""
        self._rebuild(EventType.REBUILD_COMPLETED, scope, kind, path, timestamp=_timestamp())

    def emit_rebuild_failed(self, scope: str, kind: str, path: str, error: str) -> None:
        self._rebuild(
            EventType.REBUILD_FAILED, scope, kind, path, error=error, timestamp=_timestamp()
        )
