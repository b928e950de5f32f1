"""Tests for persisted snapshot shapes."""

import pytest

from brigandine_sheet.persistence.snapshot import (
    PersistedCharacter,
    PersistedSkill,
    PropertyKey,
    SnapshotError,
    encode_property,
)
from brigandine_sheet.sheet.attributes import SKILL_NAMES


class TestPersistedCharacter:
    """Tests for parsing stored records."""

    def test_missing_record_is_empty(self):
        """Test a missing record parses as the empty snapshot."""
        snapshot = PersistedCharacter.from_record("nobody", None)
        assert snapshot.name == ""
        assert snapshot.vitality == 0
        assert snapshot.cold_blood == 0
        for skill_name in SKILL_NAMES:
            assert snapshot.skill(skill_name) == PersistedSkill(base=0, current_progression=0)

    def test_partial_record_defaults_absent_fields(self):
        """Test absent fields default to zero or empty."""
        snapshot = PersistedCharacter.from_record(
            "aria",
            {"name": "Aria", "strength": {"base": 5, "currentProgression": 2}, "vitality": 7},
        )
        assert snapshot.name == "Aria"
        assert snapshot.vitality == 7
        assert snapshot.cold_blood == 0
        assert snapshot.strength.base == 5
        assert snapshot.strength.current_progression == 2
        assert snapshot.combat.base == 0

    def test_skill_record_missing_progression(self):
        """Test a skill record without progression defaults it to zero."""
        snapshot = PersistedCharacter.from_record("aria", {"combat": {"base": 31}})
        assert snapshot.combat.current_progression == 0

    def test_camel_case_cold_blood(self):
        """Test cold blood is read from its camelCase key."""
        snapshot = PersistedCharacter.from_record("aria", {"coldBlood": 4})
        assert snapshot.cold_blood == 4

    def test_unknown_fields_ignored(self):
        """Test fields outside the schema are ignored."""
        snapshot = PersistedCharacter.from_record("aria", {"notes": "lost in the marsh"})
        assert snapshot.name == ""

    def test_malformed_record_raises_snapshot_error(self):
        """Test a wrongly typed field raises SnapshotError with the identity."""
        with pytest.raises(SnapshotError) as exc_info:
            PersistedCharacter.from_record("aria", {"vitality": "lots"})
        assert exc_info.value.identity == "aria"

    def test_to_record_uses_stored_keys(self):
        """Test exported records use the stored key names."""
        record = PersistedCharacter(name="Aria", cold_blood=2).to_record()
        assert record["coldBlood"] == 2
        assert record["strength"] == {"base": 0, "currentProgression": 0}


class TestPropertyKeys:
    """Tests for individually saved field keys."""

    def test_skill_keys_match_skill_names(self):
        """Test every skill has a property key of the same name."""
        for skill_name in SKILL_NAMES:
            assert PropertyKey(skill_name).value == skill_name

    def test_pool_keys(self):
        """Test the pool keys use their stored spelling."""
        assert PropertyKey.COLD_BLOOD == "coldBlood"
        assert PropertyKey.VITALITY == "vitality"

    def test_encode_skill_value(self):
        """Test skills encode as sub-records and scalars as themselves."""
        value = PersistedSkill(base=6, current_progression=2)
        assert encode_property(value) == {"base": 6, "currentProgression": 2}
        assert encode_property("Aria") == "Aria"
        assert encode_property(7) == 7
