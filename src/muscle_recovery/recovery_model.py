"""Intensity classification and the time-decay recovery model."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Literal

from .aggregation import Bout
from .config import DEFAULT_CONSTANTS, RecoveryConstants
from .session_models import as_utc

RecoveryStatus = Literal["not_recovered", "recovering", "recovered", "untrained"]
WorkoutIntensity = Literal["light", "moderate", "heavy"]

RECOVERY_STATUSES: tuple[str, ...] = ("not_recovered", "recovering", "recovered", "untrained")
STILL_RECOVERING: frozenset[str] = frozenset({"not_recovered", "recovering"})
INTENSITY_ORDER: dict[str, int] = {"light": 0, "moderate": 1, "heavy": 2}


@dataclass(frozen=True)
class RecoverySnapshot:
    muscle_group: str
    last_worked_date: datetime | None
    hours_since_last_workout: float | None
    status: RecoveryStatus
    recovery_percentage: int
    intensity: WorkoutIntensity | None
    recovery_time_hours: float | None

    @property
    def is_fresh(self) -> bool:
        return self.status not in STILL_RECOVERING

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.last_worked_date is not None:
            data["last_worked_date"] = self.last_worked_date.isoformat()
        return data


def effective_sets(
    total_sets: int,
    had_weighted_sets: bool,
    constants: RecoveryConstants = DEFAULT_CONSTANTS,
) -> float:
    """Weighted sets count more towards intensity."""
    if had_weighted_sets:
        return total_sets * constants.weighted_multiplier
    return float(total_sets)


def classify_intensity(
    total_sets: int,
    had_weighted_sets: bool,
    constants: RecoveryConstants = DEFAULT_CONSTANTS,
) -> WorkoutIntensity:
    sets = effective_sets(total_sets, had_weighted_sets, constants)
    if sets < constants.light_threshold:
        return "light"
    if sets < constants.moderate_threshold:
        return "moderate"
    return "heavy"


def recovery_time_for(
    intensity: WorkoutIntensity | None,
    constants: RecoveryConstants = DEFAULT_CONSTANTS,
) -> float | None:
    if intensity is None:
        return None
    return constants.recovery_time_hours[intensity]


def recovery_status(
    hours_since_last_workout: float | None,
    intensity: WorkoutIntensity | None,
    constants: RecoveryConstants = DEFAULT_CONSTANTS,
) -> RecoveryStatus:
    """First third of the recovery time is not_recovered, then recovering."""
    if hours_since_last_workout is None or intensity is None:
        return "untrained"

    recovery_hours = constants.recovery_time_hours[intensity]
    if hours_since_last_workout < recovery_hours * constants.not_recovered_fraction:
        return "not_recovered"
    if hours_since_last_workout < recovery_hours:
        return "recovering"
    return "recovered"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def recovery_percentage(
    hours_since_last_workout: float | None,
    intensity: WorkoutIntensity | None,
    constants: RecoveryConstants = DEFAULT_CONSTANTS,
) -> int:
    """Linear share of the recovery time elapsed, clamped to [0, 100]."""
    if hours_since_last_workout is None or intensity is None:
        return 100

    recovery_hours = constants.recovery_time_hours[intensity]
    pct = min(100.0, (hours_since_last_workout / recovery_hours) * 100.0)
    return max(0, _round_half_up(pct))


def untrained_snapshot(muscle_group: str) -> RecoverySnapshot:
    return RecoverySnapshot(
        muscle_group=muscle_group,
        last_worked_date=None,
        hours_since_last_workout=None,
        status="untrained",
        recovery_percentage=100,
        intensity=None,
        recovery_time_hours=None,
    )


def build_snapshot(
    muscle_group: str,
    bout: Bout | None,
    now: datetime,
    constants: RecoveryConstants = DEFAULT_CONSTANTS,
) -> RecoverySnapshot:
    if bout is None:
        return untrained_snapshot(muscle_group)

    hours = (as_utc(now) - bout.last_session_date).total_seconds() / 3600.0
    intensity = classify_intensity(bout.total_sets, bout.had_weighted_sets, constants)

    return RecoverySnapshot(
        muscle_group=muscle_group,
        last_worked_date=bout.last_session_date,
        hours_since_last_workout=hours,
        status=recovery_status(hours, intensity, constants),
        recovery_percentage=recovery_percentage(hours, intensity, constants),
        intensity=intensity,
        recovery_time_hours=recovery_time_for(intensity, constants),
    )
