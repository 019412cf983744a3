from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tracklog.storage import InMemoryTrackRepository, StorageFailureError
from tracklog.tools import register_tools
from tracklog.tracks import Track, TrackService


class StubTool:
    def __init__(self, fn, name):
        self.fn = fn
        self.name = name


class StubServer:
    def __init__(self) -> None:
        self._tools: dict[str, StubTool] = {}

    def tool(self, *args, **kwargs):
        provided_name = None
        if args and isinstance(args[0], str):
            provided_name = args[0]
        provided_name = kwargs.get("name", provided_name)

        def decorator(fn):
            tool_name = provided_name or fn.__name__
            tool = StubTool(fn, tool_name)
            self._tools[tool_name] = tool
            return tool

        return decorator


class StubLogger:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def info(self, message, extra=None):
        self.messages.append(("info", message))

    def error(self, message, extra=None):
        self.messages.append(("error", message))

    def debug(self, message, extra=None):
        self.messages.append(("debug", message))


class StubContext:
    def __init__(self) -> None:
        self.logger = StubLogger()


class FailingRepository(InMemoryTrackRepository):
    def save(self, track: Track) -> None:
        raise StorageFailureError("read-only")


def _clock():
    current = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)

    def tick() -> datetime:
        nonlocal current
        value = current
        current = current + timedelta(minutes=1)
        return value

    return tick


def _setup(repository=None):
    server = StubServer()
    service = TrackService(repository or InMemoryTrackRepository(), clock=_clock())
    handles = register_tools(server, service=service)
    return server, service, handles


def test_registers_all_tools() -> None:
    server, _, handles = _setup()

    assert set(server._tools) == {"start_track", "stop_track", "list_tracks", "current_track"}
    assert handles.start_track is server._tools["start_track"]


def test_start_track_returns_serialized_track() -> None:
    server, service, _ = _setup()

    payload = server._tools["start_track"].fn("Write docs", "tracklog", "home")

    assert payload["name"] == "Write docs"
    assert payload["active"] is True
    assert payload["end"] is None
    assert payload["start"] == "2025-01-01T09:00:00+00:00"
    assert service.current_track is not None
    assert service.current_track.id == payload["id"]


def test_start_track_stops_running_track() -> None:
    server, _, _ = _setup()
    tools = server._tools

    first = tools["start_track"].fn("first", "p", "w")
    tools["start_track"].fn("second", "p", "w")

    listing = tools["list_tracks"].fn()
    assert [item["id"] for item in listing][0] == first["id"]
    assert [item["active"] for item in listing] == [False, True]


def test_stop_track_reports_whether_anything_stopped() -> None:
    server, _, _ = _setup()
    tools = server._tools

    assert tools["stop_track"].fn() == {"stopped": False, "track": None}

    tools["start_track"].fn("t", "p", "w")
    result = tools["stop_track"].fn()
    assert result["stopped"] is True
    assert result["track"]["active"] is False

    again = tools["stop_track"].fn()
    assert again["stopped"] is False
    assert again["track"]["end"] == result["track"]["end"]


def test_list_tracks_filters() -> None:
    server, _, _ = _setup()
    tools = server._tools
    tools["start_track"].fn("a", "alpha", "home")
    tools["start_track"].fn("b", "beta", "home")
    tools["start_track"].fn("c", "alpha", "office")

    assert [item["name"] for item in tools["list_tracks"].fn(project="alpha")] == ["a", "c"]
    assert [item["name"] for item in tools["list_tracks"].fn(workspace="home")] == ["a", "b"]
    assert [
        item["name"] for item in tools["list_tracks"].fn(project="alpha", workspace="office")
    ] == ["c"]


def test_current_track_tool() -> None:
    server, _, _ = _setup()
    tools = server._tools

    assert tools["current_track"].fn() is None
    started = tools["start_track"].fn("t", "p", "w")
    assert tools["current_track"].fn()["id"] == started["id"]
    tools["stop_track"].fn()
    assert tools["current_track"].fn() is None


def test_context_logger_receives_messages() -> None:
    server, _, _ = _setup()
    context = StubContext()

    server._tools["start_track"].fn("t", "p", "w", context=context)

    assert ("info", "Track started") in context.logger.messages


def test_storage_failure_propagates() -> None:
    server, service, _ = _setup(FailingRepository())
    context = StubContext()

    with pytest.raises(StorageFailureError):
        server._tools["start_track"].fn("t", "p", "w", context=context)

    assert service.list() == []
    assert ("error", "Failed to start track") in context.logger.messages
