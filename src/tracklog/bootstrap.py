"""Process setup: logging, database connection and service construction."""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from .config import TracklogSettings, get_settings
from .environments import resolve_database_path
from .storage import SQLiteTrackRepository, StorageFailureError, bootstrap_schema, open_connection
from .tracks import TrackService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging for tracklog entry points."""

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


def init(
    settings: Optional[TracklogSettings] = None,
    *,
    environment: str | None = None,
) -> TrackService:
    """Open the environment's database, create the schema and rebuild the service."""

    settings = settings or get_settings()
    environment_id = environment or settings.environment
    database_path = resolve_database_path(settings, environment_id)

    try:
        connection = open_connection(database_path)
    except (sqlite3.Error, OSError) as exc:
        raise StorageFailureError(f"Cannot open track database at {database_path}: {exc}") from exc
    try:
        bootstrap_schema(connection)
    except sqlite3.Error as exc:
        connection.close()
        raise StorageFailureError(
            f"Cannot create track schema in {database_path}: {exc}"
        ) from exc

    logger.info(
        "Opened track database",
        extra={"environment": environment_id, "database_path": str(database_path)},
    )
    return TrackService(SQLiteTrackRepository(connection))


__all__ = ["configure_logging", "init"]
