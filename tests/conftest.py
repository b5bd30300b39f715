"""Shared pytest fixtures and configuration."""

from pathlib import Path

import pytest

from yarnsite.config import PathConfig, SiteConfig, load_config


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def site_paths() -> PathConfig:
    """Paths of a site whose destination is generated inside the source tree."""
    return PathConfig(
        source=Path("/proj/src"),
        plugins=Path("/proj/src/_plugins"),
        themes=Path("/proj/src/_themes"),
        destination=Path("/proj/src/_site"),
    )


@pytest.fixture
def site_tree(tmp_path: Path) -> SiteConfig:
    """A real on-disk site layout with the default directory names."""
    for name in ("_plugins", "_themes/one", "_site"):
        (tmp_path / name).mkdir(parents=True)
    (tmp_path / "index.md").write_text("# Home\n")
    (tmp_path / "_themes" / "one" / "page.html").write_text("<main></main>\n")
    return load_config(tmp_path, {"watch": {"debounce_ms": 20, "step_ms": 20, "ready_poll_ms": 50}})
