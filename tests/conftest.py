"""Shared fixtures for all tests."""

import asyncio
import os
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from brigandine_sheet.database.models import Base
from brigandine_sheet.persistence import InMemoryCharacterStore, PersistedCharacter, PropertyKey
from brigandine_sheet.persistence.store import PropertyValue
from brigandine_sheet.repository import CharacterSheet

DEFAULT_NAME = "Unnamed character"


# Set the test database URL before anything can cache the settings
@pytest.fixture(scope="session", autouse=True)
def use_test_database(tmp_path_factory):
    """Force all tests to use a temporary database instead of the real one.

    The engine and settings caches are reset so that any code path falling
    back to ``get_session_factory()`` points at the temporary file.
    """
    test_db_dir = tmp_path_factory.mktemp("brigandine_test")
    test_db_path = test_db_dir / "test_brigandine.db"

    os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{test_db_path}"
    os.environ["DEFAULT_CHARACTER_NAME"] = DEFAULT_NAME

    import brigandine_sheet.database.engine as engine_module

    engine_module._engine = None
    engine_module._async_session_factory = None

    from brigandine_sheet.config import get_settings

    get_settings.cache_clear()

    yield

    engine_module._engine = None
    engine_module._async_session_factory = None
    get_settings.cache_clear()


@pytest.fixture
async def session_factory():
    """Create a session factory bound to a fresh in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


class RecordingStore(InMemoryCharacterStore):
    """In-memory store remembering every write, optionally failing some keys.

    ``get_delay`` makes every read yield to the event loop for that many
    seconds, so overlapping loads can interleave.
    """

    def __init__(self, records: dict[str, dict[str, Any]] | None = None) -> None:
        super().__init__(records)
        self.saves: list[tuple[str, str, Any]] = []
        self.failing_keys: set[PropertyKey] = set()
        self.get_delay: float = 0

    async def get(self, identity: str) -> PersistedCharacter:
        if self.get_delay:
            await asyncio.sleep(self.get_delay)
        return await super().get(identity)

    async def save_property(self, identity: str, key: PropertyKey, value: PropertyValue) -> None:
        if key in self.failing_keys:
            raise RuntimeError(f"store unavailable for {key}")
        self.saves.append((identity, str(key), value))
        await super().save_property(identity, key, value)

    def saves_for(self, identity: str) -> list[tuple[str, str, Any]]:
        return [save for save in self.saves if save[0] == identity]


@pytest.fixture
def store() -> RecordingStore:
    """Recording store seeded with one character."""
    return RecordingStore(
        {
            "aria": {
                "name": "Aria",
                "vitality": 7,
                "strength": {"base": 5, "currentProgression": 2},
            }
        }
    )


@pytest.fixture
async def sheet(store: RecordingStore):
    """Character sheet over the recording store, closed after the test."""
    character_sheet = CharacterSheet(store, default_name=DEFAULT_NAME)
    yield character_sheet
    await character_sheet.close()


@pytest.fixture
def default_name() -> str:
    """Name substituted for an emptied character name."""
    return DEFAULT_NAME
