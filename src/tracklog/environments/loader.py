"""Environment profile loading and database path resolution."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import yaml
from pydantic import ValidationError

from ..config import TracklogSettings
from .models import EnvironmentProfile


class EnvironmentLoadError(RuntimeError):
    """Raised when one or more environment files cannot be parsed."""


class EnvironmentLoader:
    """Loads environment profiles from YAML files on disk."""

    def __init__(self, search_paths: Iterable[Path] | None = None) -> None:
        paths = [Path(path) for path in (search_paths or [])]
        self._search_paths: list[Path] = [path for path in paths if path.exists()]

    @property
    def search_paths(self) -> list[Path]:
        return list(self._search_paths)

    def load_all(self) -> dict[str, EnvironmentProfile]:
        """Load environments from all configured search paths.

        Later search paths override earlier ones when ids collide. Relative
        ``database_path`` values are resolved against the directory of the
        file that declares them.
        """

        if not self._search_paths:
            return {}

        environments: dict[str, EnvironmentProfile] = {}
        errors: list[str] = []

        for base in self._search_paths:
            for path in sorted(base.glob("*.yml")) + sorted(base.glob("*.yaml")):
                try:
                    document = yaml.safe_load(path.read_text(encoding="utf-8"))
                except yaml.YAMLError as exc:
                    errors.append(f"Failed to parse YAML in {path}: {exc}")
                    continue

                if document is None:
                    continue

                try:
                    profile = EnvironmentProfile.model_validate(document)
                except ValidationError as exc:
                    errors.append(f"Environment validation error in {path}: {exc}")
                    continue

                if not profile.database_path.is_absolute():
                    profile.database_path = (path.parent / profile.database_path).resolve()
                environments[profile.id] = profile

        if errors:
            raise EnvironmentLoadError("; ".join(errors))

        return environments

    def get(self, environment_id: str) -> EnvironmentProfile:
        environments = self.load_all()
        try:
            return environments[environment_id]
        except KeyError as exc:
            raise EnvironmentLoadError(
                f"Environment '{environment_id}' not found in search paths"
            ) from exc


def resolve_database_path(settings: TracklogSettings, environment: str | None = None) -> Path:
    """Pick the database file for ``environment``.

    Falls back to ``settings.database_path`` when no profile declares the
    environment.
    """

    environment_id = environment or settings.environment
    environments = EnvironmentLoader(settings.environment_paths).load_all()
    profile = environments.get(environment_id)
    if profile is None:
        return settings.database_path
    return profile.database_path.expanduser()


__all__ = [
    "EnvironmentLoadError",
    "EnvironmentLoader",
    "EnvironmentProfile",
    "resolve_database_path",
]
