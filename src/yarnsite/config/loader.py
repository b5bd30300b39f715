"""Build a SiteConfig from defaults, overrides and the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from yarnsite.config.exceptions import ConfigError
from yarnsite.config.models import DEFAULT_PLUGIN_PREFIX, SiteConfig

logger = logging.getLogger(__name__)

DEFAULT_PATHS: dict[str, str] = {
    "source": ".",
    "plugins": "_plugins",
    "themes": "_themes",
    "destination": "_site",
}


def load_config(root: str | Path, data: Mapping[str, Any] | None = None) -> SiteConfig:
    """Create a SiteConfig rooted at ``root``.

    Args:
        root: Project root. Relative entries under ``path`` are resolved
              against it.
        data: Parsed configuration. Only ``path``, ``plugin_prefix`` and
              ``watch`` are read; other keys belong to the Site.

    Returns:
        Frozen SiteConfig.

    Raises:
        ConfigError: If the data has the wrong shape or fails validation.
    """
    data = dict(data or {})
    root_path = Path(root).resolve()

    raw_paths = data.get("path") or {}
    if not isinstance(raw_paths, Mapping):
        raise ConfigError("'path' must be a mapping of directory names")

    paths = {**DEFAULT_PATHS, **raw_paths}
    resolved = {key: _resolve(root_path, value) for key, value in paths.items()}

    prefix = data.get("plugin_prefix")
    if prefix is None:
        prefix = os.environ.get("YARNSITE_PLUGIN_PREFIX", DEFAULT_PLUGIN_PREFIX)

    try:
        config = SiteConfig(
            root=root_path,
            path=resolved,
            plugin_prefix=prefix,
            watch=data.get("watch") or {},
        )
    except ValidationError as e:
        raise ConfigError(str(e)) from e

    logger.debug("Loaded config for %s: %s", root_path, config.path)
    return config


def _resolve(root: Path, value: Any) -> Path:
    if not isinstance(value, str | Path):
        raise ConfigError(f"path entries must be strings, got {value!r}")
    path = Path(value)
    if not path.is_absolute():
        path = root / path
    return Path(os.path.normpath(path))
