"""PackageResolver - Finds plugin packages by naming convention."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from yarnsite.config import DEFAULT_PLUGIN_PREFIX
from yarnsite.plugins.exceptions import ManifestNotFoundError, ManifestParseError
from yarnsite.plugins.models import ManifestDependencies

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"


class PackageResolver:
    """Selects dependency names that follow the plugin naming convention.

    A name qualifies when it starts with the prefix and has a non-empty
    suffix. Matching is case-sensitive and verbatim.
    """

    def __init__(self, prefix: str = DEFAULT_PLUGIN_PREFIX) -> None:
        if not prefix:
            raise ValueError("plugin prefix must not be empty")
        self.prefix = prefix

    def matches(self, name: str) -> bool:
        return name.startswith(self.prefix) and len(name) > len(self.prefix)

    def resolve(self, manifest: ManifestDependencies) -> frozenset[str]:
        """Return the plugin package names declared in ``manifest``."""
        return frozenset(name for name in manifest.names if self.matches(name))


def load_manifest(root_dir: str | Path) -> ManifestDependencies:
    """Read the dependency lists from ``<root_dir>/package.json``.

    Raises:
        ManifestNotFoundError: If the manifest does not exist.
        ManifestParseError: If it is not UTF-8 JSON or a list has the wrong type.
    """
    manifest_path = Path(root_dir) / MANIFEST_FILE
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ManifestNotFoundError(f"No {MANIFEST_FILE} in {root_dir}") from e
    except UnicodeDecodeError as e:
        raise ManifestParseError(f"{manifest_path} is not valid UTF-8: {e}") from e

    try:
        return ManifestDependencies.model_validate_json(text)
    except ValidationError as e:
        raise ManifestParseError(f"Invalid {manifest_path}: {e}") from e


def get_plugin_package_names(
    root_dir: str | Path, prefix: str = DEFAULT_PLUGIN_PREFIX
) -> frozenset[str]:
    """Plugin package names declared by the project at ``root_dir``."""
    names = PackageResolver(prefix).resolve(load_manifest(root_dir))
    logger.debug("Resolved %d plugin packages in %s", len(names), root_dir)
    return names
