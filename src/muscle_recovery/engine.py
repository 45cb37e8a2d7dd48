"""Recovery pipeline: sessions -> per-muscle snapshots -> overview.

Synchronous and pure. Every call rebuilds all derived state from the
session records it is given; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable

from .aggregation import build_muscle_history, collapse_bout
from .body_mapping import canonical_muscle_groups, muscle_group_for_body_part
from .config import DEFAULT_CONSTANTS, RecoveryConstants
from .overview import RecoveryOverview, summarize
from .recovery_model import RecoverySnapshot, build_snapshot, untrained_snapshot
from .session_models import WorkoutSessionRecord, as_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecoveryResult:
    snapshots: dict[str, RecoverySnapshot]
    overview: RecoveryOverview
    last_workout_date: datetime | None = None
    profile: dict[str, Any] | None = field(default=None, compare=False)

    def for_muscle_group(self, muscle_group: str) -> RecoverySnapshot | None:
        return self.snapshots.get(muscle_group)

    def for_body_part(self, slug: str) -> RecoverySnapshot | None:
        muscle_group = muscle_group_for_body_part(slug)
        if muscle_group is None:
            return None
        return self.snapshots.get(muscle_group)


def empty_result(muscle_groups: Iterable[str] | None = None) -> RecoveryResult:
    """Result before any data has loaded: every group untrained."""
    groups = canonical_muscle_groups() if muscle_groups is None else tuple(muscle_groups)
    return RecoveryResult(
        snapshots={group: untrained_snapshot(group) for group in groups},
        overview=RecoveryOverview(
            days_since_last_workout=None,
            fresh_muscle_groups=len(groups),
            total_muscle_groups=len(groups),
        ),
    )


def recompute(
    now: datetime,
    sessions: Iterable[WorkoutSessionRecord],
    profile: dict[str, Any] | None = None,
    constants: RecoveryConstants = DEFAULT_CONSTANTS,
    muscle_groups: Iterable[str] | None = None,
) -> RecoveryResult:
    now = as_utc(now)
    groups = canonical_muscle_groups() if muscle_groups is None else tuple(muscle_groups)

    history, last_workout = build_muscle_history(sessions, now, constants)

    snapshots: dict[str, RecoverySnapshot] = {}
    for group in groups:
        bout = collapse_bout(history.get(group, ()), constants)
        snapshots[group] = build_snapshot(group, bout, now, constants)

    overview = summarize(snapshots, last_workout, now, groups)

    logger.debug(
        "Recomputed recovery (muscles=%d, trained=%d, fresh=%d)",
        overview.total_muscle_groups,
        sum(1 for s in snapshots.values() if s.status != "untrained"),
        overview.fresh_muscle_groups,
    )

    return RecoveryResult(
        snapshots=snapshots,
        overview=overview,
        last_workout_date=last_workout,
        profile=profile,
    )
