"""Track lifecycle: keeps at most one active track and mirrors history to storage."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable

from ..storage.base import RepositoryError, TrackRepository
from .models import Track

logger = logging.getLogger(__name__)


class TrackService:
    """Own the in-memory track history and coordinate writes through a repository.

    History is rebuilt from ``repository.find_all()`` on construction; the last
    element of that result becomes the current track. A failed load is logged
    and treated as an empty first run.

    Every write goes to the repository before ``history`` changes, so a storage
    failure leaves the in-memory state exactly as it was.
    """

    def __init__(
        self,
        repository: TrackRepository,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._repository = repository
        self._clock = clock
        try:
            tracks = list(repository.find_all())
        except RepositoryError as exc:
            logger.warning("Could not load track history; starting empty", extra={"error": str(exc)})
            tracks = []
        self._history: list[Track] = tracks
        self._current_index: int | None = len(tracks) - 1 if tracks else None

    @property
    def repository(self) -> TrackRepository:
        return self._repository

    @property
    def current_index(self) -> int | None:
        return self._current_index

    @property
    def current_track(self) -> Track | None:
        if self._current_index is None:
            return None
        return self._history[self._current_index]

    def stop_current_track(self) -> None:
        """Stop the current track if it is still running. Safe to repeat."""

        current = self.current_track
        if current is None or not current.is_active:
            return

        stopped = replace(current)
        stopped.stop(clock=self._clock)
        self._repository.save(stopped)
        current.end = stopped.end
        logger.info(
            "Stopped track",
            extra={"track_id": current.id, "track_name": current.name},
        )

    def start_new_track(self, name: str, project: str, workspace: str) -> Track:
        """Stop whatever is running, then open and persist a new track."""

        self.stop_current_track()
        track = Track.start_new(name, project, workspace, clock=self._clock)
        self._repository.save(track)
        self._history.append(track)
        self._current_index = len(self._history) - 1
        logger.info(
            "Started track",
            extra={
                "track_id": track.id,
                "track_name": track.name,
                "project": track.project,
                "workspace": track.workspace,
            },
        )
        return track

    def list(self) -> list[Track]:
        """Snapshot of the history in the order tracks were started."""

        return [replace(track) for track in self._history]


__all__ = ["TrackService"]
