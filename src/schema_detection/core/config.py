"""Configuration management.

Uses pydantic-settings for type-safe configuration from environment variables.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_config_dir() -> Path:
    """Find the config directory by walking up from the package location.

    Looks for a 'config/' directory containing the pattern and threshold files.
    Falls back to relative Path("config") if not found.
    """
    # Start from this file: src/schema_detection/core/config.py
    # Project root is 4 levels up: config.py -> core/ -> schema_detection/ -> src/ -> root/
    package_dir = Path(__file__).resolve().parent.parent.parent.parent
    candidate = package_dir / "config"
    if (candidate / "patterns").is_dir():
        return candidate

    # Fallback: relative path (works when CWD is project root)
    return Path("config")


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Prefix: SCHEMA_DETECTION_
    """

    model_config = SettingsConfigDict(
        env_prefix="SCHEMA_DETECTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Detector config store (SQLAlchemy)
    # SQLite for local dev, PostgreSQL for production
    database_url: str = Field(
        default="sqlite+aiosqlite:///./schema_detection.db",
        description="SQLAlchemy database URL. Use postgresql+asyncpg://... for production",
    )

    # Configuration paths
    config_path: Path = Field(
        default_factory=_find_config_dir,
        description="Path to configuration files (field name patterns, thresholds)",
    )

    # Host integration
    detectors_collection_slug: str = Field(
        default="schema-detectors",
        description="Name of the persisted detector-config collection",
    )
    datasets_collection_slug: str = Field(
        default="datasets",
        description="Dataset collection that receives the detector selection field",
    )

    # Logging (CLI)
    log_format: str = Field(default="console")  # 'json' or 'console'


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
