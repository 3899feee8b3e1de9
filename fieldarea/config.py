"""
Configuration using Pydantic Settings.

Settings are read from ``FIELDAREA_``-prefixed environment variables and an
optional ``.env`` file. Storage settings use the ``FIELDAREA_STORAGE_``
prefix, e.g. ``FIELDAREA_STORAGE_BACKEND=memory``.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fieldarea.storage import InMemoryObjectStore, LocalObjectStore, ObjectStore


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StorageBackend(str, Enum):
    """Object store implementations selectable by configuration."""

    LOCAL = "local"
    MEMORY = "memory"


class StorageSettings(BaseSettings):
    """Object storage settings for session blobs and indexes."""

    model_config = SettingsConfigDict(
        env_prefix="FIELDAREA_STORAGE_",
        env_file=".env",
        extra="ignore",
    )

    backend: StorageBackend = Field(
        default=StorageBackend.LOCAL, description="Storage backend: local, memory"
    )
    local_path: Path = Field(
        default=Path("./data/objects"), description="Root directory of the local store"
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="FIELDAREA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Identity of the signed-in user; unset means signed out
    user_id: Optional[str] = Field(default=None, description="Signed-in user id")

    # Local draft of the measurement in progress
    workspace_path: Path = Field(
        default=Path("./data/workspace"),
        description="Directory holding unsaved points and the current session",
    )

    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Logging level")

    bounds_padding: float = Field(
        default=0.15,
        ge=0.0,
        description="Fraction of each axis' span added around a polygon's bounds",
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)

    @field_validator("user_id", mode="before")
    @classmethod
    def blank_user_is_signed_out(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty or whitespace-only user id as no user."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


def build_object_store(settings: Settings) -> ObjectStore:
    """Instantiate the object store selected by ``settings``."""
    if settings.storage.backend == StorageBackend.MEMORY:
        return InMemoryObjectStore()
    return LocalObjectStore(settings.storage.local_path)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.

    Returns:
        Settings instance with loaded configuration.
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """
    Get fresh settings instance (useful for testing).

    Returns:
        New Settings instance with loaded configuration.
    """
    return Settings()
