from muscle_recovery.body_mapping import (
    ALL_BODY_PART_SLUGS,
    BODY_PART_TO_MUSCLE_GROUP,
    body_parts_for_muscle_group,
    canonical_muscle_groups,
    display_name,
    muscle_group_for_body_part,
    normalize_secondary_muscle,
    visible_body_parts,
)


class TestNormalizeSecondaryMuscle:
    def test_direct_mapping(self):
        assert normalize_secondary_muscle("biceps") == "Biceps"

    def test_case_insensitive(self):
        assert normalize_secondary_muscle("Rear Deltoids") == "Shoulders"
        assert normalize_secondary_muscle("LATS") == "Back"

    def test_naming_differences(self):
        assert normalize_secondary_muscle("quadriceps") == "Quads"
        assert normalize_secondary_muscle("traps") == "Back"

    def test_unknown_label(self):
        assert normalize_secondary_muscle("adductors") is None

    def test_empty_label(self):
        assert normalize_secondary_muscle("") is None
        assert normalize_secondary_muscle(None) is None

    def test_surrounding_whitespace(self):
        assert normalize_secondary_muscle("  lower back ") == "Back"


class TestCanonicalMuscleGroups:
    def test_distinct_groups_in_table_order(self):
        groups = canonical_muscle_groups()
        assert groups[0] == "Shoulders"
        assert len(groups) == len(set(groups)) == 13
        assert set(groups) == set(BODY_PART_TO_MUSCLE_GROUP.values())

    def test_custom_table(self):
        assert canonical_muscle_groups({"a": "X", "b": "Y", "c": "X"}) == ("X", "Y")


class TestBodyPartLookup:
    def test_known_slug(self):
        assert muscle_group_for_body_part("upper-back") == "Back"

    def test_unknown_slug(self):
        assert muscle_group_for_body_part("hair") is None

    def test_shared_group(self):
        assert body_parts_for_muscle_group("Abs") == ["abs", "obliques"]


class TestBodyPartSlugs:
    def test_visible_parts_skip_non_muscular_regions(self):
        visible = visible_body_parts()
        assert len(ALL_BODY_PART_SLUGS) == 23
        assert len(visible) == 17
        assert "neck" not in visible
        assert set(BODY_PART_TO_MUSCLE_GROUP) <= set(visible)

    def test_display_name_falls_back_to_slug(self):
        assert display_name("upper-back") == "Upper Back"
        assert display_name("knees") == "knees"
