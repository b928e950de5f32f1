"""SQLAlchemy models for the character store."""

from brigandine_sheet.database.models.base import Base, TimestampMixin
from brigandine_sheet.database.models.character_sheet import CharacterSheetRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "CharacterSheetRecord",
]
