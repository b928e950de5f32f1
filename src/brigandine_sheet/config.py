"""Configuration management for the Brigandine character sheet using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="BRIGANDINE_",
        extra="ignore",
    )

    debug: bool = Field(default=False, description="Enable debug mode (echoes SQL)")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/brigandine.db",
        description="Database connection URL for the character store",
        alias="DATABASE_URL",
    )

    # Character sheet
    default_character_name: str = Field(
        default="Unnamed character",
        description="Name stored and displayed when a character name is cleared",
        alias="DEFAULT_CHARACTER_NAME",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level", alias="LOG_LEVEL")
    log_format: str = Field(
        default="console", description="Log format (console or json)", alias="LOG_FORMAT"
    )

    @property
    def data_dir(self) -> Path:
        """Get the data directory path."""
        return Path("./data")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
