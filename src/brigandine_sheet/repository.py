"""Character sheet composition root.

A ``CharacterSheet`` owns one ``CharacterAttributes`` graph, the character
name and the ``PersistenceSync`` bridging both to a store. UI collaborators
read derived values from it and write raw input into its leaves.

Switching characters reuses the graph: ``open`` detaches the previous
identity (no further writes to it), resets every leaf and reseeds from the
new identity's snapshot.
"""

import structlog

from brigandine_sheet.persistence.store import CharacterStore
from brigandine_sheet.persistence.sync import PersistenceSync, SyncState
from brigandine_sheet.sheet.attributes import CharacterAttributes
from brigandine_sheet.sheet.characteristics import ResourcePool, Skill
from brigandine_sheet.sheet.reactive import Computed, Signal
from brigandine_sheet.sheet.rules import BRIGANDINE_RULES, Rules

logger = structlog.get_logger(__name__)


class CharacterSheet:
    """
    One open character sheet.

    Example:
        sheet = CharacterSheet(SqlCharacterStore())
        await sheet.open("aria")
        sheet.strength.base.set(6)
        sheet.initiative()
        await sheet.close()
    """

    def __init__(
        self,
        store: CharacterStore,
        *,
        rules: Rules = BRIGANDINE_RULES,
        default_name: str | None = None,
    ) -> None:
        self.store = store
        self.attributes = CharacterAttributes(rules)
        self.name: Signal[str] = Signal("", name="name")
        self.sync = PersistenceSync(store, self.attributes, self.name, default_name=default_name)

    @property
    def identity(self) -> str | None:
        """Identity currently bound, or None when closed."""
        return self.sync.identity

    @property
    def state(self) -> SyncState:
        return self.sync.state

    @property
    def is_open(self) -> bool:
        return self.sync.state == SyncState.SYNCED

    async def open(self, identity: str) -> None:
        """Load a character and keep its store record in sync with the sheet."""
        if identity == self.identity and self.is_open:
            return
        previous = self.identity
        await self.sync.attach(identity)
        if previous is not None:
            logger.info("character_sheet_switched", previous=previous, identity=identity)

    async def close(self) -> None:
        """Stop syncing. Stored data is left as is."""
        await self.sync.detach()

    async def flush(self) -> None:
        """Wait until every pending write reached the store."""
        await self.sync.flush()

    def rename(self, name: str) -> None:
        self.name.set(name)

    # Shortcuts for UI collaborators

    def skill(self, name: str) -> Skill:
        return self.attributes.skill(name)

    @property
    def strength(self) -> Skill:
        return self.attributes.strength

    @property
    def endurance(self) -> Skill:
        return self.attributes.endurance

    @property
    def willpower(self) -> Skill:
        return self.attributes.willpower

    @property
    def knowledge(self) -> Skill:
        return self.attributes.knowledge

    @property
    def combat(self) -> Skill:
        return self.attributes.combat

    @property
    def movement(self) -> Skill:
        return self.attributes.movement

    @property
    def perception(self) -> Skill:
        return self.attributes.perception

    @property
    def vitality(self) -> ResourcePool:
        return self.attributes.vitality

    @property
    def cold_blood(self) -> ResourcePool:
        return self.attributes.cold_blood

    @property
    def initiative(self) -> Computed[int]:
        return self.attributes.initiative
