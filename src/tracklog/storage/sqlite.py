"""SQLite-backed track repository."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from ..tracks.models import Track
from .base import DataCorruptionError, StorageFailureError, TrackNotFoundError, history_sort_key

logger = logging.getLogger(__name__)

# Every column is TEXT. Timestamps use ISO-8601 UTC with microseconds; an
# active track stores an empty string in "end".
SCHEMA = """
CREATE TABLE IF NOT EXISTS tracks (
    id TEXT,
    name TEXT,
    "start" TEXT,
    "end" TEXT,
    project TEXT,
    workspace TEXT
);
"""

_COLUMNS = 'id, name, "start", "end", project, workspace'
_SELECT_ONE = f"SELECT {_COLUMNS} FROM tracks WHERE id = ?"
_SELECT_ALL = f"SELECT {_COLUMNS} FROM tracks ORDER BY rowid"
_INSERT = f"INSERT INTO tracks ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)"
_UPDATE = (
    'UPDATE tracks SET name = ?, "start" = ?, "end" = ?, project = ?, workspace = ? '
    "WHERE id = ?"
)

_LEGACY_UTC_SUFFIX = " UTC"


def open_connection(path: Path | str) -> sqlite3.Connection:
    """Open the single long-lived connection used by the repository."""

    if str(path) != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(str(path), check_same_thread=False)


def bootstrap_schema(connection: sqlite3.Connection) -> None:
    """Create the tracks table if it does not already exist."""

    with connection:
        connection.executescript(SCHEMA)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_timestamp(raw: str) -> datetime:
    """Parse a stored timestamp into an aware UTC datetime.

    Accepts ISO-8601 (with offset, ``Z`` or naive-as-UTC) and the
    ``YYYY-MM-DD HH:MM:SS UTC`` form written by older releases.
    """

    text = raw.strip()
    if text.endswith(_LEGACY_UTC_SUFFIX):
        text = text[: -len(_LEGACY_UTC_SUFFIX)]
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SQLiteTrackRepository:
    """Persist tracks in a single SQLite table."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    @property
    def connection(self) -> sqlite3.Connection:
        return self._connection

    def save(self, track: Track) -> None:
        end = format_timestamp(track.end) if track.end is not None else ""
        start = format_timestamp(track.start)
        try:
            with self._connection:
                exists = self._connection.execute(_SELECT_ONE, (track.id,)).fetchone() is not None
                if exists:
                    self._connection.execute(
                        _UPDATE,
                        (track.name, start, end, track.project, track.workspace, track.id),
                    )
                else:
                    self._connection.execute(
                        _INSERT,
                        (track.id, track.name, start, end, track.project, track.workspace),
                    )
        except sqlite3.Error as exc:
            logger.error("Failed to save track", extra={"track_id": track.id, "error": str(exc)})
            raise StorageFailureError(f"Failed to save track '{track.id}': {exc}") from exc

    def find_by_id(self, track_id: str) -> Track:
        row = self._fetch(_SELECT_ONE, (track_id,), many=False)
        if row is None:
            raise TrackNotFoundError(track_id)
        return self._convert_row(row)

    def find_all(self) -> list[Track]:
        rows = self._fetch(_SELECT_ALL, (), many=True)
        tracks = [self._convert_row(row) for row in rows]
        return sorted(tracks, key=history_sort_key)

    def _fetch(self, sql: str, params: Sequence[Any], *, many: bool) -> Any:
        try:
            cursor = self._connection.execute(sql, params)
            return cursor.fetchall() if many else cursor.fetchone()
        except sqlite3.Error as exc:
            logger.error("Failed to read tracks", extra={"error": str(exc)})
            raise StorageFailureError(f"Failed to read tracks: {exc}") from exc

    @staticmethod
    def _convert_row(row: Sequence[Any]) -> Track:
        track_id, name, start_raw, end_raw, project, workspace = row
        if not isinstance(start_raw, str):
            raise DataCorruptionError(f"Track '{track_id}' has no start timestamp")
        try:
            start = parse_timestamp(start_raw)
            end = parse_timestamp(end_raw) if end_raw else None
        except (AttributeError, TypeError, ValueError) as exc:
            raise DataCorruptionError(f"Track '{track_id}' has an unreadable timestamp: {exc}") from exc
        return Track.create(track_id, name, start, end, project, workspace)


__all__ = [
    "SCHEMA",
    "SQLiteTrackRepository",
    "bootstrap_schema",
    "format_timestamp",
    "open_connection",
    "parse_timestamp",
]
