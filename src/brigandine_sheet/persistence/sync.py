"""Change-driven synchronization between a character sheet and its store.

``PersistenceSync`` binds the leaves of one ``CharacterAttributes`` (plus the
character name) to a single identity at a time:

- ``attach`` reads the stored snapshot and seeds the leaves from it without
  writing anything back, then registers one watcher per leaf group.
- Each watcher fires once per change and queues a write of the current value
  under the identity it was registered for.
- A single writer task drains the queue in FIFO order, so writes for a leaf
  reach the store in the order the leaf changed.
- ``detach`` disposes the watchers before anything else, so no write for the
  old identity can be queued afterwards, then drains what is already queued.

Store failures are logged and skipped; they never reach the sheet.
"""

import asyncio
from enum import StrEnum

import structlog

from brigandine_sheet.config import get_settings
from brigandine_sheet.sheet.attributes import CharacterAttributes
from brigandine_sheet.sheet.characteristics import Skill
from brigandine_sheet.sheet.reactive import Signal, Watcher, batch, watch

from .snapshot import PersistedCharacter, PersistedSkill, PropertyKey
from .store import CharacterStore, PropertyValue

logger = structlog.get_logger(__name__)

_PendingWrite = tuple[str, PropertyKey, PropertyValue]


class SyncState(StrEnum):
    """Lifecycle of a sync binding."""

    UNLOADED = "unloaded"
    LOADING = "loading"
    SYNCED = "synced"
    DETACHED = "detached"


def default_name_if_empty(name: str, default: str) -> str:
    """Replace an empty or blank character name with the default one.

    Examples:
        >>> default_name_if_empty("", "Unnamed character")
        'Unnamed character'
        >>> default_name_if_empty("Aria", "Unnamed character")
        'Aria'
    """
    if not name or not name.strip():
        return default
    return name


class PersistenceSync:
    """Mirror every leaf mutation of a character sheet to a keyed store."""

    def __init__(
        self,
        store: CharacterStore,
        attributes: CharacterAttributes,
        name: Signal[str],
        *,
        default_name: str | None = None,
    ) -> None:
        self.store = store
        self.attributes = attributes
        self.name = name
        self.default_name = (
            default_name if default_name is not None else get_settings().default_character_name
        )

        self.state = SyncState.UNLOADED
        self.identity: str | None = None
        self._watchers: list[Watcher] = []
        self._queue: asyncio.Queue[_PendingWrite] | None = None
        self._writer: asyncio.Task[None] | None = None
        # Held for a whole attach or detach; overlapping calls run one after another
        self._binding_lock = asyncio.Lock()

    @property
    def watchers(self) -> tuple[Watcher, ...]:
        """Watchers of the current binding."""
        return tuple(self._watchers)

    async def attach(self, identity: str) -> None:
        """
        Bind to an identity: load its snapshot, seed the leaves, start syncing.

        Any previous binding is detached first. Overlapping calls are
        serialized, so the last one to run wins and no watcher of an earlier
        binding survives it.

        Args:
            identity: Character identity key

        Raises:
            SnapshotError: If the stored record is malformed. The sync is left
                detached and the leaves are untouched.
        """
        async with self._binding_lock:
            await self._detach()

            self.state = SyncState.LOADING
            self.identity = identity
            logger.debug("character_snapshot_loading", identity=identity)

            try:
                snapshot = await self.store.get(identity)
            except Exception:
                self.state = SyncState.DETACHED
                self.identity = None
                raise

            self._seed(snapshot)
            self._start_writer()
            self._register_watchers(identity)
            self.state = SyncState.SYNCED

        logger.info("character_sheet_attached", identity=identity)

    async def detach(self) -> None:
        """Stop syncing the current identity and wait for its queued writes."""
        async with self._binding_lock:
            await self._detach()

    async def _detach(self) -> None:
        if self.state not in (SyncState.LOADING, SyncState.SYNCED):
            return

        identity = self.identity
        self._dispose_watchers()
        await self._stop_writer()

        self.state = SyncState.DETACHED
        self.identity = None
        logger.info("character_sheet_detached", identity=identity)

    async def flush(self) -> None:
        """Wait until every queued write has been handed to the store."""
        if self._queue is not None:
            await self._queue.join()

    def _seed(self, snapshot: PersistedCharacter) -> None:
        with batch():
            self.attributes.reset()
            self.name.set(snapshot.name)
            for skill_name, skill in self.attributes:
                stored = snapshot.skill(skill_name)
                skill.assign(stored.base, stored.current_progression)
            self.attributes.vitality.current.set(snapshot.vitality)
            self.attributes.cold_blood.current.set(snapshot.cold_blood)

    def _dispose_watchers(self) -> None:
        for watcher in self._watchers:
            watcher.dispose()
        self._watchers = []

    def _register_watchers(self, identity: str) -> None:
        self._dispose_watchers()
        pools = self.attributes
        self._watchers = [
            watch(
                self.name,
                lambda name: self._on_name_changed(identity, name),
                name="persist_name",
            ),
            watch(
                pools.vitality.current,
                lambda value: self._enqueue(identity, PropertyKey.VITALITY, value),
                name="persist_vitality",
            ),
            watch(
                pools.cold_blood.current,
                lambda value: self._enqueue(identity, PropertyKey.COLD_BLOOD, value),
                name="persist_cold_blood",
            ),
        ]
        for skill_name, skill in self.attributes:
            self._watchers.append(self._watch_skill(identity, PropertyKey(skill_name.value), skill))

    def _watch_skill(self, identity: str, key: PropertyKey, skill: Skill) -> Watcher:
        # Base and progression are stored together as one sub-record
        return watch(
            lambda: PersistedSkill(base=skill.base(), current_progression=skill.progression.current()),
            lambda value: self._enqueue(identity, key, value),
            name=f"persist_{key}",
        )

    def _on_name_changed(self, identity: str, name: str) -> None:
        normalized = default_name_if_empty(name, self.default_name)
        if normalized != name:
            # Shown and stored names must match; the rewrite triggers the write
            self.name.set(normalized)
            return
        self._enqueue(identity, PropertyKey.NAME, name)

    def _enqueue(self, identity: str, key: PropertyKey, value: PropertyValue) -> None:
        if self._queue is None:
            return
        self._queue.put_nowait((identity, key, value))

    def _start_writer(self) -> None:
        if self._writer is not None:
            self._writer.cancel()
        self._queue = asyncio.Queue()
        self._writer = asyncio.create_task(self._drain(self._queue))

    async def _stop_writer(self) -> None:
        if self._queue is not None:
            await self._queue.join()
        if self._writer is not None:
            self._writer.cancel()
            try:
                await self._writer
            except asyncio.CancelledError:
                pass
        self._queue = None
        self._writer = None

    async def _drain(self, queue: "asyncio.Queue[_PendingWrite]") -> None:
        while True:
            identity, key, value = await queue.get()
            try:
                await self.store.save_property(identity, key, value)
            except Exception as e:
                logger.error(
                    "character_property_save_failed",
                    identity=identity,
                    key=str(key),
                    error=str(e),
                    exc_info=True,
                )
            finally:
                queue.task_done()
