"""Persistence contract shared by every track repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tracks.models import Track


class RepositoryError(RuntimeError):
    """Base class for track repository errors."""


class TrackNotFoundError(RepositoryError):
    """Raised when no stored track matches the requested id."""

    def __init__(self, track_id: str) -> None:
        super().__init__(f"Track '{track_id}' not found")
        self.track_id = track_id


class StorageFailureError(RepositoryError):
    """Raised when the underlying store rejects an operation."""


class DataCorruptionError(RepositoryError):
    """Raised when a stored row cannot be mapped back to a track."""


class TrackRepository(Protocol):
    """Save/find contract consumed by the track service."""

    def save(self, track: Track) -> None:
        ...

    def find_by_id(self, track_id: str) -> Track:
        ...

    def find_all(self) -> list[Track]:
        ...


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def history_sort_key(track: Track) -> tuple[bool, datetime, datetime]:
    """Order stopped tracks by end, then start; active tracks go last by start.

    Naive timestamps are read as UTC so they compare against aware ones.
    """

    start = _as_utc(track.start)
    if track.end is None:
        return (True, start, start)
    return (False, _as_utc(track.end), start)


__all__ = [
    "DataCorruptionError",
    "RepositoryError",
    "StorageFailureError",
    "TrackNotFoundError",
    "TrackRepository",
    "history_sort_key",
]
