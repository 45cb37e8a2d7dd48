"""Input contract for workout session records.

Records arrive from the data-access layer (or a JSON export) and are read
once per computation pass. Missing set or weight data is tolerated: null
lists become empty lists, null weights mean bodyweight/unweighted.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


class SetRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    weight: float | None = None

    @property
    def is_weighted(self) -> bool:
        return self.weight is not None and self.weight > 0


class ExerciseEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary_muscle: str | None = None
    secondary_muscles: list[str] = Field(default_factory=list)
    sets: list[SetRecord] = Field(default_factory=list)

    @field_validator("secondary_muscles", "sets", mode="before")
    @classmethod
    def coerce_null_lists(cls, value: Any) -> Any:
        return _none_to_list(value)

    @field_validator("primary_muscle")
    @classmethod
    def normalize_primary(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @property
    def set_count(self) -> int:
        return len(self.sets)

    @property
    def had_weight(self) -> bool:
        return any(s.is_weighted for s in self.sets)


class WorkoutSessionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    date: datetime
    exercises: list[ExerciseEntry] = Field(default_factory=list)

    @field_validator("exercises", mode="before")
    @classmethod
    def coerce_null_exercises(cls, value: Any) -> Any:
        return _none_to_list(value)

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: datetime) -> datetime:
        return as_utc(value)
