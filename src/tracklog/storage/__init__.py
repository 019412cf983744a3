"""Storage abstractions for tracklog."""

from .base import (
    DataCorruptionError,
    RepositoryError,
    StorageFailureError,
    TrackNotFoundError,
    TrackRepository,
)
from .memory import InMemoryTrackRepository
from .sqlite import SQLiteTrackRepository, bootstrap_schema, open_connection

__all__ = [
    "DataCorruptionError",
    "InMemoryTrackRepository",
    "RepositoryError",
    "SQLiteTrackRepository",
    "StorageFailureError",
    "TrackNotFoundError",
    "TrackRepository",
    "bootstrap_schema",
    "open_connection",
]
