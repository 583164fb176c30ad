"""
Application Configuration

Settings class using pydantic-settings for environment variable loading.
Only the thin job layer reads these; the compiler itself is configured
purely by its arguments.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For example, preset_table_path can be set via PRESET_TABLE_PATH.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")

    # Presets
    preset_table_path: Optional[str] = Field(
        default=None,
        description="Optional JSON file layered over the built-in preset catalog",
    )

    # Frame rate
    assume_source_cfr: Optional[bool] = Field(
        default=None,
        description="source_cfr used when a request omits it (None = unknown, normalize)",
    )

    # Storage
    storage_path: str = Field(
        default="/data",
        alias="STORAGE_PATH",
        description="Root path for file storage",
    )
    cache_enabled: bool = Field(default=True, description="Cache compiled expressions on disk")

    @property
    def cache_root(self) -> str:
        """Directory holding cached compiled expressions."""
        return f"{self.storage_path.rstrip('/')}/derived/cache/compiled_motion"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once per process.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
