"""Boundary-aware ignore rule for watched paths."""

from __future__ import annotations

import os
from collections.abc import Iterable
from enum import StrEnum
from pathlib import PurePath


class PathClass(StrEnum):
    """Whether a changed path may trigger a rebuild."""

    IGNORABLE = "ignorable"
    RELEVANT = "relevant"


def _normalize(path: str | os.PathLike[str]) -> PurePath:
    return PurePath(os.path.normpath(os.fspath(path)))


def is_within(path: str | os.PathLike[str], root: str | os.PathLike[str]) -> bool:
    """Return True if ``path`` equals ``root`` or is nested under it.

    Comparison is per path component, so ``/src/theme-x`` is not within
    ``/src/theme``.
    """
    return _normalize(path).is_relative_to(_normalize(root))


class PathClassifier:
    """Classifies paths against a fixed set of ignored roots."""

    def __init__(self, ignored_roots: Iterable[str | os.PathLike[str]] = ()) -> None:
        self.ignored_roots: tuple[PurePath, ...] = tuple(_normalize(r) for r in ignored_roots)

    def is_ignored(self, path: str | os.PathLike[str]) -> bool:
        candidate = _normalize(path)
        return any(candidate.is_relative_to(root) for root in self.ignored_roots)

    def classify(self, path: str | os.PathLike[str]) -> PathClass:
        if self.is_ignored(path):
            return PathClass.IGNORABLE
        return PathClass.RELEVANT
