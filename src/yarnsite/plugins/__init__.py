"""Plugins - Convention-based plugin package resolution."""

from yarnsite.plugins.exceptions import (
    ManifestNotFoundError,
    ManifestParseError,
    PluginError,
    PluginNotInstalledError,
)
from yarnsite.plugins.mirror import (
    mirror_paths_to_content,
    mirror_plugin_packages,
    plugin_package_files,
    walk_files,
)
from yarnsite.plugins.models import ManifestDependencies
from yarnsite.plugins.resolver import (
    MANIFEST_FILE,
    PackageResolver,
    get_plugin_package_names,
    load_manifest,
)

__all__ = [
    "MANIFEST_FILE",
    "ManifestDependencies",
    "ManifestNotFoundError",
    "ManifestParseError",
    "PackageResolver",
    "PluginError",
    "PluginNotInstalledError",
    "get_plugin_package_names",
    "load_manifest",
    "mirror_paths_to_content",
    "mirror_plugin_packages",
    "plugin_package_files",
    "walk_files",
]
