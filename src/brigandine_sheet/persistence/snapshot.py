"""Persisted character snapshot shapes.

Stored records keep the camelCase keys used by the sheet front-end
(``coldBlood``, ``currentProgression``). Every field is optional in storage
and defaults to zero, or to the empty string for the name.
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from brigandine_sheet.sheet.attributes import SkillName


class PersistenceError(Exception):
    """Raised when the character store cannot serve a request."""

    pass


class SnapshotError(PersistenceError):
    """Raised when a stored record does not match the snapshot shape."""

    def __init__(self, identity: str, error: ValidationError) -> None:
        super().__init__(f"Invalid stored character '{identity}': {error}")
        self.identity = identity
        self.error = error


class PropertyKey(StrEnum):
    """Keys of the individually saved fields of a snapshot."""

    NAME = "name"
    VITALITY = "vitality"
    COLD_BLOOD = "coldBlood"
    STRENGTH = "strength"
    ENDURANCE = "endurance"
    WILLPOWER = "willpower"
    KNOWLEDGE = "knowledge"
    COMBAT = "combat"
    MOVEMENT = "movement"
    PERCEPTION = "perception"


class PersistedSkill(BaseModel):
    """Stored state of one skill."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    base: int = 0
    current_progression: int = Field(default=0, alias="currentProgression")


class PersistedCharacter(BaseModel):
    """Full stored record of one character."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = ""
    vitality: int = 0
    cold_blood: int = Field(default=0, alias="coldBlood")

    strength: PersistedSkill = Field(default_factory=PersistedSkill)
    endurance: PersistedSkill = Field(default_factory=PersistedSkill)
    willpower: PersistedSkill = Field(default_factory=PersistedSkill)
    knowledge: PersistedSkill = Field(default_factory=PersistedSkill)
    combat: PersistedSkill = Field(default_factory=PersistedSkill)
    movement: PersistedSkill = Field(default_factory=PersistedSkill)
    perception: PersistedSkill = Field(default_factory=PersistedSkill)

    @classmethod
    def from_record(cls, identity: str, data: dict[str, Any] | None) -> "PersistedCharacter":
        """Parse a raw stored record, treating a missing record as empty.

        Raises:
            SnapshotError: If a present field has the wrong shape
        """
        try:
            return cls.model_validate(data or {})
        except ValidationError as e:
            raise SnapshotError(identity, e) from e

    def skill(self, name: SkillName | str) -> PersistedSkill:
        """Get the stored state of a skill by name."""
        return getattr(self, SkillName(name).value)

    def to_record(self) -> dict[str, Any]:
        """Dump in the stored (camelCase) shape."""
        return self.model_dump(by_alias=True)


def encode_property(value: "str | int | PersistedSkill") -> Any:
    """Convert a property value to its stored JSON form."""
    if isinstance(value, PersistedSkill):
        return value.model_dump(by_alias=True)
    return value
