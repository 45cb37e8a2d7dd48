"""Body-map configuration and muscle-name normalization.

Body part slugs are the anatomical regions the body highlighter can draw.
Each maps onto one canonical muscle group (the ``muscle_group`` vocabulary of
the exercises table). Several slugs may share a group (abs + obliques).
"""

from __future__ import annotations

# Every region the body highlighter can draw, in renderer order.
ALL_BODY_PART_SLUGS: tuple[str, ...] = (
    "trapezius",
    "triceps",
    "forearm",
    "adductors",
    "calves",
    "hair",
    "neck",
    "deltoids",
    "hands",
    "feet",
    "head",
    "ankles",
    "tibialis",
    "obliques",
    "chest",
    "biceps",
    "abs",
    "quadriceps",
    "knees",
    "upper-back",
    "lower-back",
    "hamstring",
    "gluteal",
)

# Non-muscular regions left out of the highlight map.
HIDDEN_BODY_PARTS: frozenset[str] = frozenset({"head", "hands", "feet", "hair", "ankles", "neck"})

BODY_PART_TO_MUSCLE_GROUP: dict[str, str] = {
    "deltoids": "Shoulders",
    "chest": "Chest",
    "triceps": "Triceps",
    "biceps": "Biceps",
    "upper-back": "Back",
    "lower-back": "Lower Back",
    "forearm": "Forearms",
    "trapezius": "Traps",
    "quadriceps": "Quads",
    "hamstring": "Hamstrings",
    "gluteal": "Glutes",
    "calves": "Calves",
    "abs": "Abs",
    "obliques": "Abs",
}

BODY_PART_DISPLAY_NAMES: dict[str, str] = {
    "chest": "Chest",
    "triceps": "Triceps",
    "deltoids": "Shoulders",
    "biceps": "Biceps",
    "upper-back": "Upper Back",
    "forearm": "Forearms",
    "trapezius": "Traps",
    "quadriceps": "Quads",
    "hamstring": "Hamstrings",
    "gluteal": "Glutes",
    "calves": "Calves",
    "adductors": "Adductors",
    "lower-back": "Lower Back",
    "abs": "Abs",
    "obliques": "Obliques",
}

# Secondary muscles are stored as free-form lowercase labels; primary
# muscle_group values are capitalized (Back, Biceps, Quads, ...).
SECONDARY_MUSCLE_MAP: dict[str, str] = {
    "biceps": "Biceps",
    "triceps": "Triceps",
    "forearms": "Forearms",
    "glutes": "Glutes",
    "hamstrings": "Hamstrings",
    "calves": "Calves",
    "core": "Core",
    "back": "Back",
    "chest": "Chest",
    "quadriceps": "Quads",
    "quads": "Quads",
    "shoulders": "Shoulders",
    "deltoids": "Shoulders",
    "rear deltoids": "Shoulders",
    "front deltoids": "Shoulders",
    "lats": "Back",
    "rhomboids": "Back",
    "trapezius": "Back",
    "traps": "Back",
    "lower back": "Back",
    "upper back": "Back",
}


def normalize_secondary_muscle(label: str | None) -> str | None:
    """Map a secondary-muscle label onto a canonical muscle group.

    Case-insensitive. Returns None for unknown labels; callers skip them.
    """
    if not label:
        return None
    return SECONDARY_MUSCLE_MAP.get(label.strip().lower())


def canonical_muscle_groups(
    body_parts: dict[str, str] | None = None,
) -> tuple[str, ...]:
    """Distinct muscle groups of the body-map table, in table order."""
    table = BODY_PART_TO_MUSCLE_GROUP if body_parts is None else body_parts
    return tuple(dict.fromkeys(table.values()))


def muscle_group_for_body_part(slug: str) -> str | None:
    return BODY_PART_TO_MUSCLE_GROUP.get(slug)


def body_parts_for_muscle_group(muscle_group: str) -> list[str]:
    return [slug for slug, group in BODY_PART_TO_MUSCLE_GROUP.items() if group == muscle_group]


def display_name(slug: str) -> str:
    return BODY_PART_DISPLAY_NAMES.get(slug, slug)


def visible_body_parts() -> tuple[str, ...]:
    return tuple(slug for slug in ALL_BODY_PART_SLUGS if slug not in HIDDEN_BODY_PARTS)
