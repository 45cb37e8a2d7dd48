"""Recovery gradient for the body-map renderer.

Five equal 20% bands plus a baseline color for fully recovered muscles.
The bands are independent of the status thresholds in ``recovery_model``
(a muscle at 30% is ``not_recovered`` but sits in the second band).
"""

from __future__ import annotations

import math
from typing import Iterable, Mapping

from .body_mapping import display_name, muscle_group_for_body_part, visible_body_parts
from .recovery_model import RecoverySnapshot

RECOVERY_GRADIENT_COLORS: tuple[str, ...] = (
    "#EF4444",  # 0-20
    "#F97316",  # 20-40
    "#F59E0B",  # 40-60
    "#C7A33A",  # 60-80
    "#8A8F5E",  # 80-99
    "#546073",  # 100, baseline
)

MAX_STEP = len(RECOVERY_GRADIENT_COLORS)
DO_NOT_RENDER = 0


def gradient_color(percentage: float) -> str:
    if percentage >= 100:
        return RECOVERY_GRADIENT_COLORS[-1]
    clamped = max(0.0, min(99.0, percentage))
    return RECOVERY_GRADIENT_COLORS[math.floor(clamped / 20)]


def gradient_step(percentage: float) -> int:
    """Renderer intensity step 1-6, or 0 when the value must not be drawn."""
    if percentage > 100:
        return DO_NOT_RENDER
    if percentage == 100:
        return MAX_STEP
    step = math.floor(percentage / 20) + 1
    return max(1, min(MAX_STEP, step))


def body_highlight_data(
    snapshots: Mapping[str, RecoverySnapshot],
    slugs: Iterable[str] | None = None,
) -> list[dict[str, object]]:
    """Per body part highlight entries covering the whole body.

    Hidden regions (head, hands, ...) are skipped. Untrained muscles and
    slugs with no muscle group render at the baseline step.
    """
    data: list[dict[str, object]] = []
    for slug in visible_body_parts() if slugs is None else slugs:
        step = MAX_STEP
        muscle_group = muscle_group_for_body_part(slug)
        snapshot = snapshots.get(muscle_group) if muscle_group else None
        if snapshot is not None and snapshot.status != "untrained":
            step = gradient_step(snapshot.recovery_percentage)
        data.append({"slug": slug, "name": display_name(slug), "intensity": step})
    return data
