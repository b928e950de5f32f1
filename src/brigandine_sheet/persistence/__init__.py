"""Character snapshot storage and change-driven synchronization."""

from .snapshot import (
    PersistedCharacter,
    PersistedSkill,
    PersistenceError,
    PropertyKey,
    SnapshotError,
)
from .store import CharacterStore, InMemoryCharacterStore, SqlCharacterStore
from .sync import PersistenceSync, SyncState, default_name_if_empty

__all__ = [
    "CharacterStore",
    "InMemoryCharacterStore",
    "PersistedCharacter",
    "PersistedSkill",
    "PersistenceError",
    "PersistenceSync",
    "PropertyKey",
    "SnapshotError",
    "SqlCharacterStore",
    "SyncState",
    "default_name_if_empty",
]
