"""Site configuration consumed by the rebuild core."""

from yarnsite.config.exceptions import ConfigError
from yarnsite.config.loader import DEFAULT_PATHS, load_config
from yarnsite.config.models import (
    DEFAULT_PLUGIN_PREFIX,
    PathConfig,
    SiteConfig,
    WatchOptions,
)

__all__ = [
    "DEFAULT_PATHS",
    "DEFAULT_PLUGIN_PREFIX",
    "ConfigError",
    "PathConfig",
    "SiteConfig",
    "WatchOptions",
    "load_config",
]
