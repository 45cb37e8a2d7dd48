"""Session aggregation and bout collapsing.

Turns raw workout sessions into a per-muscle event history, then collapses
one muscle's history into the most recent training bout.
"""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable

from .body_mapping import normalize_secondary_muscle
from .config import DEFAULT_CONSTANTS, RecoveryConstants
from .session_models import WorkoutSessionRecord, as_utc

MuscleHistory = dict[str, list["MuscleEvent"]]


@dataclass(frozen=True)
class MuscleEvent:
    """One (session, muscle) training event."""

    date: datetime
    set_count: int
    had_weight: bool


@dataclass(frozen=True)
class Bout:
    """All events within the bout window of a muscle's most recent event."""

    last_session_date: datetime
    total_sets: int
    had_weighted_sets: bool


@dataclass
class _Tally:
    sets: int = 0
    had_weight: bool = False

    def add(self, sets: int, had_weight: bool) -> None:
        self.sets += sets
        self.had_weight = self.had_weight or had_weight


def secondary_sets(set_count: int, constants: RecoveryConstants = DEFAULT_CONSTANTS) -> int:
    """Half-weighted set attribution for a secondary muscle, rounded up."""
    return math.ceil(set_count * constants.secondary_set_factor)


def tally_session(
    session: WorkoutSessionRecord,
    constants: RecoveryConstants = DEFAULT_CONSTANTS,
) -> dict[str, _Tally]:
    tally: dict[str, _Tally] = defaultdict(_Tally)

    for exercise in session.exercises:
        primary = exercise.primary_muscle
        set_count = exercise.set_count
        had_weight = exercise.had_weight

        if primary:
            tally[primary].add(set_count, had_weight)

        for label in exercise.secondary_muscles:
            muscle = normalize_secondary_muscle(label)
            if muscle is None or muscle == primary:
                continue
            tally[muscle].add(secondary_sets(set_count, constants), had_weight)

    return dict(tally)


def build_muscle_history(
    sessions: Iterable[WorkoutSessionRecord],
    now: datetime,
    constants: RecoveryConstants = DEFAULT_CONSTANTS,
) -> tuple[MuscleHistory, datetime | None]:
    """Aggregate sessions into per-muscle events inside the lookback window.

    Returns the history and the latest date of any session with at least
    one exercise entry.
    """
    cutoff = as_utc(now) - timedelta(days=constants.lookback_days)
    history: MuscleHistory = defaultdict(list)
    last_workout: datetime | None = None

    for session in sessions:
        if session.date < cutoff or not session.exercises:
            continue

        if last_workout is None or session.date > last_workout:
            last_workout = session.date

        for muscle, tally in tally_session(session, constants).items():
            history[muscle].append(
                MuscleEvent(date=session.date, set_count=tally.sets, had_weight=tally.had_weight)
            )

    return dict(history), last_workout


def collapse_bout(
    events: Iterable[MuscleEvent],
    constants: RecoveryConstants = DEFAULT_CONSTANTS,
) -> Bout | None:
    """Merge events within the bout window of the most recent one.

    Same-day or adjacent sessions count as one stimulus; earlier events
    belong to an already-decayed bout and are ignored.
    """
    events = list(events)
    if not events:
        return None

    last = max(e.date for e in events)
    window = timedelta(hours=constants.bout_window_hours)

    total_sets = 0
    had_weight = False
    for event in events:
        if abs(event.date - last) <= window:
            total_sets += event.set_count
            had_weight = had_weight or event.had_weight

    return Bout(last_session_date=last, total_sets=total_sets, had_weighted_sets=had_weight)
