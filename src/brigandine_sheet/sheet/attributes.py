"""Character attributes: the seven Brigandine skills and everything derived from them.

All derived values (skill levels, pool maxima and initiative) are wired
through the injected ``Rules`` when the attributes are built, so writing any
leaf is reflected in every dependent without a refresh call.
"""

from collections.abc import Iterator
from enum import StrEnum
from typing import TYPE_CHECKING

from .characteristics import ResourcePool, Skill
from .reactive import Computed, batch
from .rules import BRIGANDINE_RULES, Rules

if TYPE_CHECKING:
    from brigandine_sheet.persistence.snapshot import PersistedCharacter


class SkillName(StrEnum):
    """The fixed set of character skills."""

    STRENGTH = "strength"
    ENDURANCE = "endurance"
    WILLPOWER = "willpower"
    KNOWLEDGE = "knowledge"
    COMBAT = "combat"
    MOVEMENT = "movement"
    PERCEPTION = "perception"


# Constant skill names for easy import
SKILL_NAMES = [skill.value for skill in SkillName]


class CharacterAttributes:
    """
    Skills, resource pools and initiative of one character.

    Skills are reachable by attribute (``attributes.combat``) or by name
    (``attributes.skill("combat")``). ``vitality`` and ``cold_blood`` expose
    a writable ``current`` and a derived ``max``; ``initiative`` is derived.
    No range validation happens here: any integer is accepted.
    """

    def __init__(self, rules: Rules = BRIGANDINE_RULES) -> None:
        self.rules = rules
        self.skills: dict[SkillName, Skill] = {
            skill_name: Skill(rules=rules, name=skill_name.value) for skill_name in SkillName
        }

        self.vitality = ResourcePool(
            lambda: rules.compute_max_vitality(
                self.strength.level(), self.endurance.level(), self.willpower.level()
            ),
            name="vitality",
        )
        self.cold_blood = ResourcePool(
            lambda: rules.compute_max_cold_blood(
                self.willpower.level(), self.knowledge.level(), self.combat.level()
            ),
            name="cold_blood",
        )
        self.initiative: Computed[int] = Computed(
            lambda: rules.compute_initiative(
                rules.extract_tens_digit(self.combat.level()),
                rules.extract_tens_digit(self.movement.level()),
                rules.extract_tens_digit(self.perception.level()),
            ),
            name="initiative",
        )

    @property
    def strength(self) -> Skill:
        return self.skills[SkillName.STRENGTH]

    @property
    def endurance(self) -> Skill:
        return self.skills[SkillName.ENDURANCE]

    @property
    def willpower(self) -> Skill:
        return self.skills[SkillName.WILLPOWER]

    @property
    def knowledge(self) -> Skill:
        return self.skills[SkillName.KNOWLEDGE]

    @property
    def combat(self) -> Skill:
        return self.skills[SkillName.COMBAT]

    @property
    def movement(self) -> Skill:
        return self.skills[SkillName.MOVEMENT]

    @property
    def perception(self) -> Skill:
        return self.skills[SkillName.PERCEPTION]

    def skill(self, name: str) -> Skill:
        """Get a skill by name.

        Args:
            name: Skill name, e.g. ``"combat"`` or ``SkillName.COMBAT``

        Raises:
            KeyError: If no skill has that name
        """
        try:
            return self.skills[SkillName(name)]
        except ValueError:
            raise KeyError(name) from None

    def __iter__(self) -> Iterator[tuple[SkillName, Skill]]:
        return iter(self.skills.items())

    def reset(self) -> None:
        """Return every leaf to zero; watchers are notified once."""
        with batch():
            for skill in self.skills.values():
                skill.assign(0, 0)
            self.vitality.current.set(0)
            self.cold_blood.current.set(0)

    def to_snapshot(self, name: str = "") -> "PersistedCharacter":
        """Build the persisted record matching the current leaves."""
        from brigandine_sheet.persistence.snapshot import PersistedCharacter, PersistedSkill

        return PersistedCharacter(
            name=name,
            vitality=self.vitality.current.peek(),
            cold_blood=self.cold_blood.current.peek(),
            **{
                skill_name.value: PersistedSkill(
                    base=skill.base.peek(),
                    current_progression=skill.progression.current.peek(),
                )
                for skill_name, skill in self.skills.items()
            },
        )
