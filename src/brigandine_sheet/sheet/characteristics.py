"""Reactive building blocks of a character sheet: progressions, skills and pools."""

from collections.abc import Callable

from .reactive import Computed, Signal, batch
from .rules import BRIGANDINE_RULES, Rules


class VariableCharacteristic:
    """
    A progression counter that changes during play.

    ``current()`` always returns the value of the last ``update_current``
    call; dependents see the new value before ``update_current`` returns.
    No bounds are enforced here.
    """

    def __init__(self, current: int = 0) -> None:
        self.current: Signal[int] = Signal(current, name="progression")

    def update_current(self, value: int) -> None:
        """Replace the current value."""
        self.current.set(value)

    def __repr__(self) -> str:
        return f"<VariableCharacteristic(current={self.current.peek()})>"


class Skill:
    """
    One of a character's skills.

    Attributes:
        base: Mutable base rating (``base()`` to read, ``base.set(v)`` to write)
        progression: Progression counter earned in play
        level: Read-only derived level, always equal to
            ``rules.compute_skill_level(base(), progression.current())``
    """

    def __init__(
        self,
        base: int = 0,
        current_progression: int = 0,
        *,
        rules: Rules = BRIGANDINE_RULES,
        name: str | None = None,
    ) -> None:
        self.name = name
        self.progression = VariableCharacteristic()
        self.base: Signal[int] = Signal(0, name=f"{name}.base" if name else "base")
        self.level: Computed[int] = Computed(
            lambda: rules.compute_skill_level(self.base(), self.progression.current()),
            name=f"{name}.level" if name else "level",
        )

        if base:
            self.base.set(base)
        if current_progression:
            self.progression.update_current(current_progression)

    def assign(self, base: int, current_progression: int) -> None:
        """Set base and progression together, notifying watchers once."""
        with batch():
            self.base.set(base)
            self.progression.update_current(current_progression)

    def __repr__(self) -> str:
        return (
            f"<Skill(name={self.name!r}, base={self.base.peek()}, "
            f"progression={self.progression.current.peek()})>"
        )


class ResourcePool:
    """A spendable resource such as vitality: a mutable current and a derived maximum."""

    def __init__(self, compute_max: Callable[[], int], *, name: str | None = None) -> None:
        self.name = name
        self.current: Signal[int] = Signal(0, name=f"{name}.current" if name else "current")
        self.max: Computed[int] = Computed(compute_max, name=f"{name}.max" if name else "max")

    def __repr__(self) -> str:
        return f"<ResourcePool(name={self.name!r}, current={self.current.peek()})>"
