"""Unit tests for the serve entry points."""

import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from yarnsite.api import EventManager, serve, serve_site
from yarnsite.config import ConfigError, SiteConfig, load_config
from yarnsite.dispatcher import DispatcherState
from yarnsite.site import Site


@pytest.fixture(autouse=True)
def reset_yarnsite_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("yarnsite")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def config(tmp_path: Path) -> SiteConfig:
    return load_config(tmp_path / "blog", {"plugin_prefix": "mocha-"})


@pytest.mark.unit
class TestServe:
    """Tests for serve."""

    def test_runs_uvicorn_server(self) -> None:
        app = MagicMock()
        with patch("yarnsite.api.server.uvicorn") as mock_uvicorn:
            serve(app, port=4010)

        mock_uvicorn.Config.assert_called_once_with(
            app, host="127.0.0.1", port=4010, log_level="info"
        )
        mock_uvicorn.Server.return_value.run.assert_called_once_with()


@pytest.mark.unit
class TestServeSite:
    """Tests for serve_site."""

    def test_wires_dispatcher_into_app(self, config: SiteConfig, tmp_path: Path) -> None:
        site = MagicMock(spec=Site)

        with patch("yarnsite.api.server.serve") as mock_serve:
            app = serve_site(site, config, port=4010, log_dir=tmp_path / "logs")

        mock_serve.assert_called_once_with(app, host="127.0.0.1", port=4010)
        dispatcher = app.state.dispatcher
        assert dispatcher.site is site
        assert dispatcher.state == DispatcherState.IDLE
        assert dispatcher.source_root.path == config.path.source
        assert isinstance(app.state.event_manager, EventManager)
        assert app.state.event_manager is dispatcher.event_manager
        assert app.state.project_root == config.root
        assert app.state.plugin_prefix == "mocha-"
        assert (tmp_path / "logs" / "yarnsite.log").exists()

    def test_log_directory_in_source_refused(self, config: SiteConfig) -> None:
        with (
            patch("yarnsite.api.server.serve") as mock_serve,
            pytest.raises(ConfigError),
        ):
            serve_site(MagicMock(spec=Site), config, log_dir=config.root / "logs")

        mock_serve.assert_not_called()
