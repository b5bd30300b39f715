"""Integration tests for the live-reload app with a running dispatcher."""

import socket
import threading
import time
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest
import uvicorn
from fastapi.testclient import TestClient

from yarnsite.api import EventManager, create_app
from yarnsite.config import SiteConfig
from yarnsite.dispatcher import DispatcherState, StartupError, create_dispatcher
from yarnsite.site import Site


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def event_manager() -> EventManager:
    return EventManager(heartbeat_interval=2)


@pytest.fixture
def app(site_tree: SiteConfig, event_manager: EventManager):
    """App whose lifespan runs a dispatcher on the temporary site."""
    dispatcher = create_dispatcher(MagicMock(spec=Site), site_tree, event_manager=event_manager)
    return create_app(dispatcher=dispatcher, project_root=site_tree.root)


@pytest.fixture
def server(app):
    """Start the app in a background thread."""
    port = _free_port()
    config = uvicorn.Config(app, host="127.0.0.1", port=port, log_level="error")
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    deadline = time.time() + 10
    while not server.started and time.time() < deadline:
        time.sleep(0.05)
    assert server.started, "server did not start"

    yield f"http://127.0.0.1:{port}"

    server.should_exit = True
    thread.join(timeout=10)


@pytest.mark.integration
class TestLifespan:
    """The app starts and stops its dispatcher."""

    def test_dispatcher_runs_with_app(self, app) -> None:
        dispatcher = app.state.dispatcher

        with TestClient(app) as client:
            response = client.get("/api/v1/status")
            assert response.json()["data"]["state"] in ("watching", "dispatching")

        assert dispatcher.state == DispatcherState.STOPPED
        dispatcher.site.read_files.assert_awaited_once_with()

    def test_failed_initial_read_aborts_startup(self, site_tree: SiteConfig) -> None:
        site = MagicMock(spec=Site)
        site.read_files.side_effect = OSError("unreadable")
        app = create_app(dispatcher=create_dispatcher(site, site_tree))

        with pytest.raises(StartupError), TestClient(app):
            pass


@pytest.mark.integration
class TestLiveReloadStream:
    """SSE clients are told when a rebuild finishes."""

    def test_rebuild_completed_streamed(self, server: str, site_tree: SiteConfig) -> None:
        post: Path = site_tree.path.source / "streamed.md"
        seen: list[str] = []

        with (
            httpx.Client(timeout=10) as client,
            client.stream("GET", f"{server}/api/v1/events/stream") as response,
        ):
            assert response.status_code == 200
            post.write_text("# Streamed\n")
            for line in response.iter_lines():
                seen.append(line)
                if line == "event: rebuild_completed":
                    break

        assert "event: rebuild_started" in seen
        assert seen[-1] == "event: rebuild_completed"

    def test_plugins_endpoint(self, server: str, site_tree: SiteConfig) -> None:
        (site_tree.root / "package.json").write_text('{"devDependencies": {"yarn-scaffold": "*"}}')

        response = httpx.get(f"{server}/api/v1/plugins", timeout=10)

        assert response.json()["data"]["plugins"] == ["yarn-scaffold"]
