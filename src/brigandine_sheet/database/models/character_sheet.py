"""Persisted character sheet record."""

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class CharacterSheetRecord(Base, TimestampMixin):
    """One stored character snapshot, keyed by the character identity."""

    __tablename__ = "character_sheets"

    identity: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
        comment="Opaque character identity supplied by the application",
    )

    # Raw snapshot in its stored (camelCase) shape. Example:
    # {"name": "Aria", "vitality": 7, "strength": {"base": 5, "currentProgression": 2}}
    data: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        server_default="{}",
        comment="Character snapshot fields",
    )

    def __repr__(self) -> str:
        """String representation of CharacterSheetRecord."""
        return f"<CharacterSheetRecord(identity='{self.identity}', fields={sorted(self.data)})>"
