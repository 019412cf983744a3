"""Environment profile model."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator


class EnvironmentProfile(BaseModel):
    """Named environment that selects the database a tracker session writes to."""

    id: str = Field(..., description="Environment name passed via --env, e.g. 'dev'.")
    database_path: Path = Field(
        ...,
        description="SQLite file for this environment. Relative paths resolve against the profile file.",
    )
    description: str = Field(default="", description="Human-friendly note about the environment.")
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id")
    @classmethod
    def _normalize_id(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Environment id must not be empty")
        return normalized


__all__ = ["EnvironmentProfile"]
