from __future__ import annotations

import json
from pathlib import Path

import pytest

from tracklog.config import TracklogSettings
from tracklog.server import create_server
from tracklog.storage import InMemoryTrackRepository
from tracklog.tracks import TrackService


class StubFastMCP:
    def __init__(self, *args, **kwargs):
        self.init_kwargs = kwargs
        self.tools: dict[str, object] = {}
        self.resources: dict[str, object] = {}

    def tool(self, *args, **kwargs):
        def decorator(fn):
            self.tools[kwargs.get("name") or fn.__name__] = fn
            return fn

        return decorator

    def resource(self, uri, **kwargs):
        def decorator(fn):
            self.resources[uri] = fn
            return fn

        return decorator

    def run(self):  # pragma: no cover - not used in tests
        return None


@pytest.fixture()
def settings(tmp_path: Path) -> TracklogSettings:
    return TracklogSettings(
        TRACKLOG_DATABASE_PATH=str(tmp_path / "tracklog.sqlite"),
        TRACKLOG_ENVIRONMENT_PATHS=str(tmp_path / "environments"),
    )


def test_create_server_registers_tools_and_status(monkeypatch, settings) -> None:
    monkeypatch.setattr("tracklog.server.FastMCP", StubFastMCP)
    service = TrackService(InMemoryTrackRepository())

    server = create_server(settings, service=service)

    assert set(server.tools) == {"start_track", "stop_track", "list_tracks", "current_track"}
    assert server.init_kwargs["name"] == "tracklog"
    assert getattr(server, "track_service") is service

    status = json.loads(server.resources["resource://tracklog/status"](None))
    assert status["tracks"] == {"count": 0, "active": None}
    assert status["environment"]["id"] == "dev"
    assert status["environment"]["database_path"] == str(settings.database_path)


def test_status_reports_active_track(monkeypatch, settings) -> None:
    monkeypatch.setattr("tracklog.server.FastMCP", StubFastMCP)
    service = TrackService(InMemoryTrackRepository())
    server = create_server(settings, service=service)

    started = server.tools["start_track"]("Review", "tracklog", "home")
    status = json.loads(server.resources["resource://tracklog/status"](None))

    assert status["tracks"]["count"] == 1
    assert status["tracks"]["active"]["id"] == started["id"]


def test_create_server_builds_sqlite_service(monkeypatch, settings) -> None:
    monkeypatch.setattr("tracklog.server.FastMCP", StubFastMCP)

    server = create_server(settings)
    server.tools["start_track"]("t", "p", "w")

    assert settings.database_path.exists()
    reopened = create_server(settings)
    assert len(reopened.track_service.list()) == 1


def test_status_reports_environment_errors(monkeypatch, settings, tmp_path: Path) -> None:
    monkeypatch.setattr("tracklog.server.FastMCP", StubFastMCP)
    service = TrackService(InMemoryTrackRepository())
    environments = tmp_path / "environments"
    environments.mkdir()
    (environments / "broken.yaml").write_text("id: ''\n", encoding="utf-8")

    server = create_server(settings, service=service)
    status = json.loads(server.resources["resource://tracklog/status"](None))

    assert status["environment"]["database_path"] is None
    assert "broken.yaml" in status["environment"]["error"]
