"""Reactive character sheet graph and Brigandine rules."""

from .attributes import SKILL_NAMES, CharacterAttributes, SkillName
from .characteristics import ResourcePool, Skill, VariableCharacteristic
from .reactive import Computed, Signal, Watcher, batch, watch
from .rules import BRIGANDINE_RULES, Rules, extract_tens_digit

__all__ = [
    "BRIGANDINE_RULES",
    "SKILL_NAMES",
    "CharacterAttributes",
    "Computed",
    "ResourcePool",
    "Rules",
    "Signal",
    "Skill",
    "SkillName",
    "VariableCharacteristic",
    "Watcher",
    "batch",
    "extract_tens_digit",
    "watch",
]
