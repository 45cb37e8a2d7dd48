"""CLI for inspecting recovery state."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import click
from pydantic import TypeAdapter, ValidationError

from .config import Config
from .engine import RecoveryResult, recompute
from .gradient import body_highlight_data, gradient_color, gradient_step
from .logging import LOG_FORMAT_ENV, LOG_FORMATS, setup_logging
from .presentation import format_time_ago, status_label
from .repository import PostgresRecoveryDataSource
from .service import RecoveryService
from .session_models import WorkoutSessionRecord, as_utc

_SESSIONS = TypeAdapter(list[WorkoutSessionRecord])


def _parse_now(value: str | None) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    try:
        return as_utc(datetime.fromisoformat(value))
    except ValueError as exc:
        raise click.BadParameter(f"not an ISO 8601 timestamp: {value!r}") from exc


def result_payload(result: RecoveryResult) -> dict[str, Any]:
    muscles = []
    for snapshot in result.snapshots.values():
        entry = snapshot.to_dict()
        entry["label"] = status_label(snapshot.status)
        entry["last_worked"] = format_time_ago(snapshot.hours_since_last_workout)
        entry["gradient_color"] = gradient_color(snapshot.recovery_percentage)
        entry["gradient_step"] = gradient_step(snapshot.recovery_percentage)
        muscles.append(entry)

    return {
        "overview": result.overview.to_dict(),
        "last_workout_date": (
            result.last_workout_date.isoformat() if result.last_workout_date else None
        ),
        "muscles": muscles,
        "body_map": body_highlight_data(result.snapshots),
    }


def _echo(payload: dict[str, Any], pretty: bool) -> None:
    if pretty:
        click.echo(json.dumps(payload, indent=2, default=str))
    else:
        click.echo(json.dumps(payload, separators=(",", ":"), default=str))


@click.group()
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS, case_sensitive=False),
    envvar=LOG_FORMAT_ENV,
    default="json",
    show_default=True,
    help="Log output format (stderr).",
)
def main(log_format: str):
    """Muscle recovery state from recent training history."""
    setup_logging(log_format)


@main.command()
@click.argument("sessions_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--now", "now_value", help="Evaluation time (ISO 8601). Defaults to now.")
@click.option("--pretty/--compact", default=True, show_default=True)
def compute(sessions_file: Path, now_value: str | None, pretty: bool):
    """Compute recovery from a JSON list of session records."""
    try:
        sessions = _SESSIONS.validate_json(sessions_file.read_bytes())
    except ValidationError as exc:
        raise click.UsageError(f"Invalid session records in {sessions_file}:\n{exc}") from exc

    result = recompute(_parse_now(now_value), sessions)
    _echo(result_payload(result), pretty)


@main.command()
@click.option("--user-id", required=True, help="User whose sessions should be loaded.")
@click.option("--now", "now_value", help="Evaluation time (ISO 8601). Defaults to now.")
@click.option("--pretty/--compact", default=True, show_default=True)
def snapshot(user_id: str, now_value: str | None, pretty: bool):
    """Load recent sessions from PostgreSQL and compute recovery."""
    try:
        config = Config.from_env()
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc

    now = _parse_now(now_value)
    service = RecoveryService(
        PostgresRecoveryDataSource(config), user_id=user_id, clock=lambda: now
    )
    asyncio.run(service.load())
    if service.last_error is not None:
        raise click.ClickException(f"Failed to load recovery data: {service.last_error}")
    _echo(result_payload(service.result), pretty)


if __name__ == "__main__":
    main()
