"""Manifest models for plugin resolution."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ManifestDependencies(BaseModel):
    """Declared dependency names from a project manifest.

    Versions are discarded; only names are kept.

    Attributes:
        runtime: Names under ``dependencies``.
        development: Names under ``devDependencies``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    runtime: frozenset[str] = Field(default=frozenset(), alias="dependencies")
    development: frozenset[str] = Field(default=frozenset(), alias="devDependencies")

    @field_validator("runtime", "development", mode="before")
    @classmethod
    def _names_only(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, Mapping):
            return list(value)
        return value

    @property
    def names(self) -> frozenset[str]:
        """All declared names; a name in both lists appears once."""
        return self.runtime | self.development
