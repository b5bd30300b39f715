"""Pydantic models for the live-reload API."""

from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from yarnsite.dispatcher import DispatcherState

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


class DispatcherStatusResponse(BaseModel):
    """Response model for dispatcher status."""

    model_config = ConfigDict(from_attributes=True)

    state: DispatcherState
    source: Path
    themes: Path
    ignored: list[Path]
    dispatched: int
    completed: int
    failed: int
    in_flight: int


def dispatcher_status_to_response(status: Any) -> DispatcherStatusResponse:
    """Convert a DispatcherStatus to DispatcherStatusResponse."""
    return DispatcherStatusResponse.model_validate(status)


class PluginListResponse(BaseModel):
    """Response model for resolved plugin packages."""

    prefix: str
    plugins: list[str]
