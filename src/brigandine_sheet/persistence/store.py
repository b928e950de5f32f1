"""Keyed character stores.

A store holds one record per character identity and upserts single fields of
it. ``get`` never fails for an unknown identity: it returns the empty record.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from brigandine_sheet.database.models import CharacterSheetRecord

from .snapshot import PersistedCharacter, PersistedSkill, PropertyKey, encode_property

logger = structlog.get_logger(__name__)

PropertyValue = str | int | PersistedSkill


class CharacterStore(ABC):
    """Interface of the durable store behind a character sheet."""

    @abstractmethod
    async def get(self, identity: str) -> PersistedCharacter:
        """
        Read the snapshot of a character.

        Args:
            identity: Character identity key

        Returns:
            The stored snapshot, or an empty one if the identity is unknown

        Raises:
            SnapshotError: If the stored record is malformed
        """

    @abstractmethod
    async def save_property(self, identity: str, key: PropertyKey, value: PropertyValue) -> None:
        """
        Upsert a single field of a character record.

        Args:
            identity: Character identity key
            key: Field to write
            value: New value; a ``PersistedSkill`` for skill keys
        """

    @abstractmethod
    async def list_identities(self) -> list[str]:
        """Get all stored identities, sorted."""


class InMemoryCharacterStore(CharacterStore):
    """Store keeping raw records in a dict. Useful for tests and scratch sheets."""

    def __init__(self, records: dict[str, dict[str, Any]] | None = None) -> None:
        self.records: dict[str, dict[str, Any]] = records if records is not None else {}

    async def get(self, identity: str) -> PersistedCharacter:
        return PersistedCharacter.from_record(identity, self.records.get(identity))

    async def save_property(self, identity: str, key: PropertyKey, value: PropertyValue) -> None:
        record = self.records.setdefault(identity, {})
        record[PropertyKey(key).value] = encode_property(value)

    async def list_identities(self) -> list[str]:
        return sorted(self.records)


class SqlCharacterStore(CharacterStore):
    """Store backed by the ``character_sheets`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        if session_factory is None:
            from brigandine_sheet.database.engine import get_session_factory

            session_factory = get_session_factory()
        self._session_factory = session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Async context manager for a store session.

        Yields:
            An async database session, committed on success and rolled back on error

        Example:
            async with store.session() as session:
                record = await session.get(CharacterSheetRecord, "aria")
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def get(self, identity: str) -> PersistedCharacter:
        async with self.session() as session:
            record = await session.get(CharacterSheetRecord, identity)

        if record is None:
            logger.debug("character_record_not_found", identity=identity)
            return PersistedCharacter()

        return PersistedCharacter.from_record(identity, record.data)

    async def save_property(self, identity: str, key: PropertyKey, value: PropertyValue) -> None:
        async with self.session() as session:
            record = await session.get(CharacterSheetRecord, identity)
            if record is None:
                record = CharacterSheetRecord(identity=identity, data={})
                session.add(record)

            # Reassign the dict so SQLAlchemy sees the JSON column change
            data = dict(record.data)
            data[PropertyKey(key).value] = encode_property(value)
            record.data = data

        logger.debug("character_property_saved", identity=identity, key=str(key))

    async def list_identities(self) -> list[str]:
        async with self.session() as session:
            result = await session.execute(
                select(CharacterSheetRecord.identity).order_by(CharacterSheetRecord.identity)
            )
            return list(result.scalars().all())
