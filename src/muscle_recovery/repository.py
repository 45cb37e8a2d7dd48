"""Data-access boundary: recent workout sessions and profile rows.

The session query returns one row per set (LEFT JOINed, so sessions and
exercises without sets still show up); rows are folded back into nested
session records in query order.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Protocol

import psycopg
from psycopg import sql
from psycopg.rows import dict_row

from .config import Config
from .session_models import WorkoutSessionRecord

logger = logging.getLogger(__name__)

_RECENT_SESSIONS_SQL = """
    SELECT ws.id AS session_id,
           ws.created_at AS session_date,
           we.id AS workout_exercise_id,
           e.muscle_group,
           e.secondary_muscles,
           s.id AS set_id,
           s.weight
    FROM workout_sessions ws
    LEFT JOIN workout_exercises we ON we.session_id = ws.id
    LEFT JOIN exercises e ON e.id = we.exercise_id
    LEFT JOIN sets s ON s.workout_exercise_id = we.id
    WHERE ws.user_id = %s
      AND ws.created_at >= %s
    ORDER BY ws.created_at ASC, ws.id, we.order_index ASC, s.set_number ASC
"""


class RecoveryDataSource(Protocol):
    async def fetch_sessions(
        self, user_id: str, cutoff: datetime
    ) -> list[WorkoutSessionRecord]: ...

    async def fetch_profile(self, user_id: str) -> dict[str, Any] | None: ...


def fold_session_rows(rows: list[dict[str, Any]]) -> list[WorkoutSessionRecord]:
    """Nest flat session/exercise/set rows into session records."""
    sessions: dict[str, dict[str, Any]] = {}
    exercises: dict[str, dict[str, Any]] = {}

    for row in rows:
        session_id = str(row["session_id"])
        session = sessions.get(session_id)
        if session is None:
            session = {"id": session_id, "date": row["session_date"], "exercises": []}
            sessions[session_id] = session

        if row.get("workout_exercise_id") is None:
            continue

        exercise_key = str(row["workout_exercise_id"])
        exercise = exercises.get(exercise_key)
        if exercise is None:
            exercise = {
                "primary_muscle": row.get("muscle_group"),
                "secondary_muscles": row.get("secondary_muscles") or [],
                "sets": [],
            }
            exercises[exercise_key] = exercise
            session["exercises"].append(exercise)

        if row.get("set_id") is not None:
            exercise["sets"].append({"weight": row.get("weight")})

    return [WorkoutSessionRecord.model_validate(s) for s in sessions.values()]


async def load_recent_sessions(
    conn: psycopg.AsyncConnection[Any], user_id: str, cutoff: datetime
) -> list[WorkoutSessionRecord]:
    async with conn.cursor(row_factory=dict_row) as cur:
        await cur.execute(_RECENT_SESSIONS_SQL, (user_id, cutoff))
        rows = await cur.fetchall()
    return fold_session_rows(rows)


async def load_profile(
    conn: psycopg.AsyncConnection[Any], user_id: str
) -> dict[str, Any] | None:
    async with conn.cursor(row_factory=dict_row) as cur:
        await cur.execute("SELECT * FROM profiles WHERE id = %s", (user_id,))
        row = await cur.fetchone()
    return dict(row) if row else None


class PostgresRecoveryDataSource:
    """Opens a short-lived connection per query."""

    def __init__(self, config: Config) -> None:
        self.config = config

    async def _connect(self) -> psycopg.AsyncConnection[Any]:
        conn = await psycopg.AsyncConnection.connect(self.config.database_url)
        if self.config.db_role:
            await conn.execute(
                sql.SQL("SET ROLE {}").format(sql.Identifier(self.config.db_role))
            )
        return conn

    async def fetch_sessions(
        self, user_id: str, cutoff: datetime
    ) -> list[WorkoutSessionRecord]:
        async with await self._connect() as conn:
            sessions = await load_recent_sessions(conn, user_id, cutoff)
        logger.info(
            "Loaded %d sessions for user=%s since %s",
            len(sessions),
            user_id,
            cutoff.isoformat(),
            extra={"recovery_user_id": user_id, "recovery_session_count": len(sessions)},
        )
        return sessions

    async def fetch_profile(self, user_id: str) -> dict[str, Any] | None:
        async with await self._connect() as conn:
            return await load_profile(conn, user_id)
