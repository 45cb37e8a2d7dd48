"""Display text and colors for recovery states."""

from __future__ import annotations

import math

from .recovery_model import RecoveryStatus, WorkoutIntensity

_STATUS_LABELS: dict[str, str] = {
    "not_recovered": "Not Recovered",
    "recovering": "Recovering",
    "recovered": "Recovered",
    "untrained": "No Data",
}

_STATUS_COLORS: dict[str, str] = {
    "not_recovered": "#EF4444",
    "recovering": "#F59E0B",
    "recovered": "#10B981",
    "untrained": "#6B7280",
}

# Status-based highlight level; recovered and untrained are not drawn.
_STATUS_HIGHLIGHT: dict[str, int] = {
    "not_recovered": 1,
    "recovering": 2,
    "recovered": 0,
    "untrained": 0,
}

_STATUS_MESSAGES: dict[str, str] = {
    "not_recovered": (
        "This muscle needs more rest before your next workout. "
        "Training now could increase injury risk and reduce gains."
    ),
    "recovering": (
        "This muscle is still recovering. Light training is OK, "
        "but wait a bit longer for heavy lifts."
    ),
    "recovered": "This muscle is recovered and ready for your next workout!",
    "untrained": "No workout data available for this muscle group yet.",
}

PLACEHOLDER = "—"


def status_label(status: RecoveryStatus) -> str:
    return _STATUS_LABELS[status]


def status_color(status: RecoveryStatus) -> str:
    return _STATUS_COLORS[status]


def status_highlight_intensity(status: RecoveryStatus) -> int:
    return _STATUS_HIGHLIGHT[status]


def status_message(status: RecoveryStatus) -> str:
    return _STATUS_MESSAGES[status]


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit if n == 1 else unit + 's'}"


def format_time_ago(hours: float | None) -> str:
    if hours is None:
        return "Never trained"
    if hours < 1:
        return "Less than an hour ago"
    if hours < 24:
        return f"{_plural(math.floor(hours), 'hour')} ago"
    return f"{_plural(math.floor(hours / 24), 'day')} ago"


def format_recovery_time(hours: float | None) -> str:
    if not hours:
        return PLACEHOLDER
    h = math.floor(hours + 0.5)
    if h < 24:
        return f"{h} hours"
    days = math.floor(h / 24 * 10 + 0.5) / 10
    return f"{days:g} days"


def format_intensity(intensity: WorkoutIntensity | None) -> str:
    if not intensity:
        return PLACEHOLDER
    return intensity[:1].upper() + intensity[1:]


def format_days_since(days: int | None) -> str:
    if days is None:
        return PLACEHOLDER
    return str(days)
