"""Server-Sent Events (SSE) endpoint for live reload."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse

from yarnsite.api.dependencies import EventManagerDep

router = APIRouter(prefix="/events", tags=["events"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


@router.get("/stream")
async def event_stream(
    event_manager: EventManagerDep,
    scope: Literal["source", "theme"] | None = Query(
        default=None, description="Only rebuilds triggered by this watch root"
    ),
) -> StreamingResponse:
    """Subscribe to rebuild events; reload the page on ``rebuild_completed``."""
    subscriber = event_manager.subscribe(scope)
    return StreamingResponse(
        event_manager.stream(subscriber),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
