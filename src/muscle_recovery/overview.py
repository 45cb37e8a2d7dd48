"""Whole-body dashboard summary."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping

from .recovery_model import STILL_RECOVERING, RecoverySnapshot
from .session_models import as_utc


@dataclass(frozen=True)
class RecoveryOverview:
    days_since_last_workout: int | None
    fresh_muscle_groups: int
    total_muscle_groups: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def days_since(last_workout_date: datetime | None, now: datetime) -> int | None:
    if last_workout_date is None:
        return None
    elapsed = as_utc(now) - as_utc(last_workout_date)
    return math.floor(elapsed.total_seconds() / 86400)


def summarize(
    snapshots: Mapping[str, RecoverySnapshot],
    last_workout_date: datetime | None,
    now: datetime,
    muscle_groups: Iterable[str],
) -> RecoveryOverview:
    """Fresh = every canonical group not still recovering (recovered or untrained)."""
    groups = list(muscle_groups)
    still_recovering = sum(
        1
        for group in groups
        if group in snapshots and snapshots[group].status in STILL_RECOVERING
    )
    return RecoveryOverview(
        days_since_last_workout=days_since(last_workout_date, now),
        fresh_muscle_groups=len(groups) - still_recovering,
        total_muscle_groups=len(groups),
    )
