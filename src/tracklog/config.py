"""Configuration management for tracklog."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated
import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class TracklogSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_path: Path = Field(
        default=Path("./tracklog.sqlite"), validation_alias="TRACKLOG_DATABASE_PATH"
    )
    environment: str = Field(default="dev", validation_alias="TRACKLOG_ENV")
    environment_paths: Annotated[tuple[Path, ...], NoDecode] = Field(
        default=(Path("environments"),), validation_alias="TRACKLOG_ENVIRONMENT_PATHS"
    )
    log_level: str = Field(default="INFO", validation_alias="TRACKLOG_LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "TRACKLOG_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("environment")
    @classmethod
    def _normalize_environment(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("TRACKLOG_ENV must not be empty")
        return normalized

    @field_validator("environment_paths", mode="before")
    @classmethod
    def _parse_environment_paths(cls, value):
        if isinstance(value, str):
            parts = [part.strip() for part in value.split(os.pathsep) if part.strip()]
            return tuple(Path(part) for part in parts) or (Path("environments"),)
        return value


@lru_cache(maxsize=1)
def get_settings() -> TracklogSettings:
    """Return cached settings instance."""

    settings = TracklogSettings()
    settings.database_path = settings.database_path.expanduser().resolve()
    settings.environment_paths = tuple(
        path.expanduser().resolve() for path in settings.environment_paths
    )
    return settings


__all__ = ["TracklogSettings", "get_settings"]
