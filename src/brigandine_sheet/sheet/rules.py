"""Brigandine rule formulas for derived character attributes.

Every formula is a pure function of integers. They are grouped in a ``Rules``
value object which is handed to skills and character attributes explicitly,
so a sheet can be built against house rules or test doubles.
"""

from collections.abc import Callable
from dataclasses import dataclass


def extract_tens_digit(value: int) -> int:
    """Get the tens bracket of a value.

    Args:
        value: Any integer, usually a skill level

    Returns:
        ``value // 10``

    Examples:
        >>> extract_tens_digit(9)
        0
        >>> extract_tens_digit(17)
        1
        >>> extract_tens_digit(99)
        9
    """
    return value // 10


def compute_skill_level(base: int, progression: int) -> int:
    """Calculate a skill level from its base rating and progression counter.

    Args:
        base: Base rating chosen at character creation
        progression: Progression points earned in play

    Returns:
        The skill level: base + progression
    """
    return base + progression


def compute_max_vitality(strength_level: int, endurance_level: int, willpower_level: int) -> int:
    """Calculate maximum vitality.

    Endurance counts double; strength and willpower add their tens bracket.

    Returns:
        tens(strength) + 2 * tens(endurance) + tens(willpower)
    """
    return (
        extract_tens_digit(strength_level)
        + 2 * extract_tens_digit(endurance_level)
        + extract_tens_digit(willpower_level)
    )


def compute_max_cold_blood(willpower_level: int, knowledge_level: int, combat_level: int) -> int:
    """Calculate maximum cold blood.

    Returns:
        2 * tens(willpower) + tens(knowledge) + tens(combat)
    """
    return (
        2 * extract_tens_digit(willpower_level)
        + extract_tens_digit(knowledge_level)
        + extract_tens_digit(combat_level)
    )


def compute_initiative(combat_tens: int, movement_tens: int, perception_tens: int) -> int:
    """Calculate initiative from already bracketed skill levels."""
    return combat_tens + movement_tens + perception_tens


@dataclass(frozen=True)
class Rules:
    """Table of the rule functions a character sheet derives its values with."""

    compute_skill_level: Callable[[int, int], int] = compute_skill_level
    extract_tens_digit: Callable[[int], int] = extract_tens_digit
    compute_max_vitality: Callable[[int, int, int], int] = compute_max_vitality
    compute_max_cold_blood: Callable[[int, int, int], int] = compute_max_cold_blood
    compute_initiative: Callable[[int, int, int], int] = compute_initiative


# Standard rules from the Brigandine rulebook
BRIGANDINE_RULES = Rules()
