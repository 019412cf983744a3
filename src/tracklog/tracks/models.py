"""Track entity."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_track_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class Track:
    """One recorded interval of work. ``end`` is ``None`` while the track runs."""

    id: str
    name: str
    start: datetime
    end: datetime | None
    project: str
    workspace: str

    @classmethod
    def create(
        cls,
        id: str,
        name: str,
        start: datetime,
        end: datetime | None,
        project: str,
        workspace: str,
    ) -> "Track":
        """Rebuild a track from stored values without validation."""

        return cls(id=id, name=name, start=start, end=end, project=project, workspace=workspace)

    @classmethod
    def start_new(
        cls,
        name: str,
        project: str,
        workspace: str,
        *,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> "Track":
        """Open a fresh track with a new id, started now."""

        now = (clock or utc_now)()
        return cls(
            id=(id_factory or new_track_id)(),
            name=name,
            start=now,
            end=None,
            project=project,
            workspace=workspace,
        )

    def stop(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self.end = (clock or utc_now)()

    @property
    def is_active(self) -> bool:
        return self.end is None

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view with ISO-8601 timestamps."""

        return {
            "id": self.id,
            "name": self.name,
            "project": self.project,
            "workspace": self.workspace,
            "start": self.start.isoformat(),
            "end": self.end.isoformat() if self.end is not None else None,
            "active": self.is_active,
        }


__all__ = ["Track", "new_track_id", "utc_now"]
