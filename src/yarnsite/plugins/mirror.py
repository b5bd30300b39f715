"""Mirror plugin package files alongside the generator's own files."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable
from pathlib import Path

from yarnsite.plugins.exceptions import PluginNotInstalledError
from yarnsite.plugins.resolver import PackageResolver, load_manifest

logger = logging.getLogger(__name__)

PACKAGES_DIR = "node_modules"


def walk_files(directory: str | Path) -> list[Path]:
    """Return every regular file below ``directory``, sorted."""
    found: list[Path] = []
    for dirpath, _dirnames, filenames in os.walk(directory):
        for filename in filenames:
            path = Path(dirpath) / filename
            if path.is_file():
                found.append(path)
    return sorted(found)


def mirror_paths_to_content(
    paths: Iterable[Path],
    map_key: Callable[[Path], str] | None = None,
) -> dict[str, str]:
    """Map each path (through ``map_key``) to its UTF-8 contents.

    Args:
        paths: Files to read.
        map_key: Turns a path into the returned key. Defaults to ``str``.

    Returns:
        Mapping of keys to file contents.
    """
    key_for = map_key or str
    return {key_for(path): path.read_text(encoding="utf-8") for path in paths}


def plugin_package_files(root_dir: str | Path, resolver: PackageResolver) -> list[Path]:
    """All files of the installed plugin packages declared at ``root_dir``.

    Raises:
        PluginNotInstalledError: If a declared plugin is not installed.
    """
    root = Path(root_dir)
    files: list[Path] = []
    for name in sorted(resolver.resolve(load_manifest(root))):
        package_dir = root / PACKAGES_DIR / name
        if not package_dir.is_dir():
            raise PluginNotInstalledError(
                f"Plugin {name} is not installed in {root / PACKAGES_DIR}"
            )
        files.extend(walk_files(package_dir))
    return files


def mirror_plugin_packages(root_dir: str | Path, resolver: PackageResolver) -> dict[str, str]:
    """Plugin package contents keyed ``node_modules/<name>/...``."""
    root = Path(root_dir)
    mirrored = mirror_paths_to_content(
        plugin_package_files(root, resolver),
        map_key=lambda path: path.relative_to(root).as_posix(),
    )
    logger.info("Mirrored %d plugin package files from %s", len(mirrored), root)
    return mirrored
