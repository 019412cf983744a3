"""FastMCP server bootstrap for tracklog."""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from fastmcp import Context, FastMCP

from . import __version__
from .bootstrap import configure_logging, init
from .config import TracklogSettings, get_settings
from .environments import EnvironmentLoadError, resolve_database_path
from .tracks import TrackService
from .tools import register_tools


def create_server(
    settings: Optional[TracklogSettings] = None,
    service: TrackService | None = None,
) -> FastMCP:
    """Instantiate the FastMCP server around a track service."""

    settings = settings or get_settings()
    service = service or init(settings)

    try:
        database_path: str | None = str(resolve_database_path(settings))
        environment_error: str | None = None
    except EnvironmentLoadError as exc:
        database_path = None
        environment_error = str(exc)

    server = FastMCP(
        name="tracklog",
        instructions=(
            "tracklog records time spent on named tracks grouped by project and "
            "workspace. Only one track runs at a time: starting a track stops the "
            "running one."
        ),
    )

    handles = register_tools(server, service=service)

    @server.resource(
        "resource://tracklog/status",
        name="tracklog_status",
        description="Current tracking state and storage location.",
        mime_type="application/json",
    )
    def status_resource(context: Context) -> str:
        """Return a JSON string summarizing the tracker state."""

        with handles.lock:
            tracks = service.list()
            current = service.current_track

        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "server_version": __version__,
            "log_level": settings.log_level,
            "environment": {
                "id": settings.environment,
                "database_path": database_path,
                "error": environment_error,
            },
            "tracks": {
                "count": len(tracks),
                "active": current.to_dict() if current is not None and current.is_active else None,
            },
            "request_id": getattr(context, "request_id", None),
        }
        return json.dumps(payload)

    setattr(server, "track_service", service)
    setattr(server, "tool_handles", handles)
    setattr(server, "status_resource", status_resource)
    return server


def main() -> None:
    """Entry point for running the tracklog MCP server via CLI."""

    settings = get_settings()
    configure_logging(settings.log_level)

    server = create_server(settings)
    logging.getLogger(__name__).info(
        "Launching tracklog MCP server",
        extra={
            "version": __version__,
            "log_level": settings.log_level,
            "environment": settings.environment,
        },
    )
    server.run()


if __name__ == "__main__":
    main()
