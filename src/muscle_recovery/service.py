"""Orchestration shell around the recovery pipeline.

Owns the async fetch, loading/refreshing flags and manual refresh. The
pipeline itself stays pure; a failed fetch leaves the previous result in
place.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from .config import DEFAULT_CONSTANTS, RecoveryConstants
from .engine import RecoveryResult, empty_result, recompute
from .overview import RecoveryOverview
from .recovery_model import RecoverySnapshot
from .repository import RecoveryDataSource

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecoveryService:
    def __init__(
        self,
        source: RecoveryDataSource,
        user_id: str | None = None,
        constants: RecoveryConstants = DEFAULT_CONSTANTS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.source = source
        self.user_id = user_id
        self.constants = constants
        self._clock = clock
        self._result: RecoveryResult = empty_result()
        self._loads_in_flight = 0
        self._generation = 0
        self.last_error: Exception | None = None
        self.is_loading = True
        self.refreshing = False

    @property
    def result(self) -> RecoveryResult:
        return self._result

    @property
    def snapshots(self) -> dict[str, RecoverySnapshot]:
        return self._result.snapshots

    @property
    def overview(self) -> RecoveryOverview:
        return self._result.overview

    @property
    def profile(self) -> dict[str, Any] | None:
        return self._result.profile

    @property
    def last_workout_date(self) -> datetime | None:
        return self._result.last_workout_date

    def snapshot_for(self, muscle_group: str) -> RecoverySnapshot | None:
        return self._result.for_muscle_group(muscle_group)

    def snapshot_for_body_part(self, slug: str) -> RecoverySnapshot | None:
        return self._result.for_body_part(slug)

    async def load(self) -> None:
        """Fetch and recompute. Never raises; failures keep prior state.

        A load that finishes after an identity change leaves the flags and
        ``last_error`` alone; they belong to the current user's load.
        """
        if not self.user_id:
            return

        user_id = self.user_id
        generation = self._generation
        self._loads_in_flight += 1
        started = time.monotonic()
        try:
            now = self._clock()
            cutoff = now - timedelta(days=self.constants.lookback_days)
            profile = await self.source.fetch_profile(user_id)
            sessions = await self.source.fetch_sessions(user_id, cutoff)
            result = recompute(now, sessions, profile=profile, constants=self.constants)
            if generation != self._generation:
                logger.info("Discarding recovery result for stale user=%s", user_id)
                return
            self._result = result
            self.last_error = None
            logger.info(
                "Recovery updated for user=%s (sessions=%d, fresh=%d/%d)",
                user_id,
                len(sessions),
                result.overview.fresh_muscle_groups,
                result.overview.total_muscle_groups,
                extra={
                    "recovery_user_id": user_id,
                    "recovery_duration_ms": round((time.monotonic() - started) * 1000, 1),
                },
            )
        except Exception as exc:
            logger.exception(
                "Error loading recovery data for user=%s",
                user_id,
                extra={"recovery_user_id": user_id},
            )
            if generation == self._generation:
                self.last_error = exc
        finally:
            self._loads_in_flight -= 1
            if generation == self._generation:
                self.is_loading = False
                self.refreshing = False

    async def refresh(self) -> bool:
        """Manual refresh. Returns False if a load is already running."""
        if not self.user_id:
            return False
        if self._loads_in_flight:
            logger.debug("Refresh ignored: load already in flight")
            return False
        self.refreshing = True
        await self.load()
        return True

    async def set_user(self, user_id: str | None) -> None:
        """Identity change: drop state from the previous user and reload."""
        if user_id == self.user_id:
            return
        self.user_id = user_id
        self._generation += 1
        self._result = empty_result()
        self.last_error = None
        self.refreshing = False
        self.is_loading = user_id is not None
        if user_id is not None:
            await self.load()
