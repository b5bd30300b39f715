"""Configuration models for a Yarn site."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PLUGIN_PREFIX = "yarn-"


class PathConfig(BaseModel):
    """Absolute directory paths read once at startup.

    Attributes:
        source: Root of the site's content tree.
        plugins: Local plugins directory.
        themes: Directory holding all themes.
        destination: Generated output directory.
    """

    model_config = ConfigDict(frozen=True)

    source: Path
    plugins: Path
    themes: Path
    destination: Path

    @field_validator("source", "plugins", "themes", "destination")
    @classmethod
    def _must_be_absolute(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"path must be absolute: {value}")
        return value

    @property
    def ignored_by_source(self) -> tuple[Path, ...]:
        """Roots that never trigger a rebuild when watching the source tree."""
        return (self.plugins, self.themes, self.destination)


class WatchOptions(BaseModel):
    """Tuning for the underlying filesystem watcher (milliseconds)."""

    model_config = ConfigDict(frozen=True)

    debounce_ms: int = Field(default=50, ge=0)
    step_ms: int = Field(default=50, gt=0)
    ready_poll_ms: int = Field(default=200, gt=0)
    force_polling: bool | None = None


class SiteConfig(BaseModel):
    """Everything the rebuild core needs from site configuration."""

    model_config = ConfigDict(frozen=True)

    root: Path
    path: PathConfig
    plugin_prefix: str = Field(default=DEFAULT_PLUGIN_PREFIX, min_length=1)
    watch: WatchOptions = Field(default_factory=WatchOptions)
