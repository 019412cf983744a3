from __future__ import annotations

from dataclasses import replace

from ..tracks.models import Track
from .base import TrackNotFoundError, history_sort_key


class InMemoryTrackRepository:
    """Dict-backed repository for tests and throwaway sessions."""

    def __init__(self, tracks: list[Track] | None = None) -> None:
        self._tracks: dict[str, Track] = {}
        for track in tracks or []:
            self.save(track)

    def save(self, track: Track) -> None:
        self._tracks[track.id] = replace(track)

    def find_by_id(self, track_id: str) -> Track:
        try:
            return replace(self._tracks[track_id])
        except KeyError:
            raise TrackNotFoundError(track_id) from None

    def find_all(self) -> list[Track]:
        return [replace(track) for track in sorted(self._tracks.values(), key=history_sort_key)]


__all__ = ["InMemoryTrackRepository"]
