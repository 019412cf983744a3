"""Tool registration for the tracklog MCP server."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

from fastmcp import Context, FastMCP

from ..storage import RepositoryError
from ..tracks import TrackService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ToolHandles:
    start_track: Any
    stop_track: Any
    list_tracks: Any
    current_track: Any
    lock: threading.Lock


def register_tools(server: FastMCP, *, service: TrackService) -> ToolHandles:
    """Register tracklog's MCP tools on the server.

    The track service is single-threaded; every tool call takes ``lock`` so
    concurrent requests reach it one at a time.
    """

    lock = threading.Lock()

    def _start_track(
        name: str,
        project: str,
        workspace: str,
        context: Context | None = None,
    ) -> dict[str, Any]:
        """Start a new track, stopping the running one first."""

        with lock:
            try:
                track = service.start_new_track(name, project, workspace)
            except RepositoryError as exc:
                _emit_log(context, "error", "Failed to start track", extra={"error": str(exc)})
                raise
        _emit_log(
            context,
            "info",
            "Track started",
            extra={"track_id": track.id, "project": project, "workspace": workspace},
        )
        return track.to_dict()

    def _stop_track(context: Context | None = None) -> dict[str, Any]:
        """Stop the running track, if any."""

        with lock:
            running = service.current_track
            was_active = running is not None and running.is_active
            try:
                service.stop_current_track()
            except RepositoryError as exc:
                _emit_log(context, "error", "Failed to stop track", extra={"error": str(exc)})
                raise
            current = service.current_track

        _emit_log(context, "info", "Stop requested", extra={"stopped": was_active})
        return {
            "stopped": was_active,
            "track": current.to_dict() if current is not None else None,
        }

    def _list_tracks(
        project: str | None = None,
        workspace: str | None = None,
        context: Context | None = None,
    ) -> list[dict[str, Any]]:
        """List tracks in the order they were started."""

        with lock:
            tracks = service.list()
        if project:
            tracks = [track for track in tracks if track.project == project]
        if workspace:
            tracks = [track for track in tracks if track.workspace == workspace]

        _emit_log(context, "debug", "Listing tracks", extra={"count": len(tracks)})
        return [track.to_dict() for track in tracks]

    def _current_track(context: Context | None = None) -> dict[str, Any] | None:
        """Return the running track, or null when nothing is being tracked."""

        with lock:
            current = service.current_track
        if current is None or not current.is_active:
            return None
        return current.to_dict()

    tool_start = server.tool(
        name="start_track",
        description=(
            "Start tracking time on a named task within a project and workspace. "
            "Any running track is stopped first."
        ),
    )(_start_track)

    tool_stop = server.tool(
        name="stop_track",
        description="Stop the running track. Does nothing when no track is running.",
    )(_stop_track)

    tool_list = server.tool(
        name="list_tracks",
        description="List all tracks in start order, optionally filtered by project or workspace.",
    )(_list_tracks)

    tool_current = server.tool(
        name="current_track",
        description="Return the running track, if any.",
    )(_current_track)

    return ToolHandles(
        start_track=tool_start,
        stop_track=tool_stop,
        list_tracks=tool_list,
        current_track=tool_current,
        lock=lock,
    )


def _emit_log(
    context: Context | None,
    level: str,
    message: str,
    *,
    extra: dict[str, Any] | None = None,
) -> None:
    """Best-effort logging that prefers the MCP context logger when available."""

    payload = extra or {}

    if context is not None:
        ctx_logger = getattr(context, "logger", None)
        if ctx_logger is not None:
            log_method = getattr(ctx_logger, level, None)
            if callable(log_method):
                log_method(message, extra=payload)
                return

    fallback = getattr(logger, level, logger.info)
    fallback(message, extra=payload)


__all__ = ["register_tools", "ToolHandles"]
