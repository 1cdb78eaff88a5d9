"""Configuration settings for the sync engine."""

from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from vtsync.core.constants import DEFAULT_BATCH_SIZE, DEFAULT_LOOKAHEAD_MINUTES


class Settings(BaseSettings):
    """Application settings loaded from environment variables and config.yaml."""

    model_config = SettingsConfigDict(  # type: ignore[assignment]
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "vt-api"

    # YouTube Data API
    google_api_key: str | None = None
    youtube_api_timeout: int = 30
    youtube_api_language: str = "ja"

    # Channel definitions
    channels_dir: str = "channels/organizations"

    # Sync engine
    sync_lookahead_minutes: int = DEFAULT_LOOKAHEAD_MINUTES
    sync_batch_size: int = DEFAULT_BATCH_SIZE

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    @property
    def lookahead(self) -> timedelta:
        """Get lookahead window as timedelta."""
        return timedelta(minutes=self.sync_lookahead_minutes)

    @property
    def channels_path(self) -> Path:
        """Get channel definitions directory as Path."""
        return Path(self.channels_dir)


# (section, key) in config.yaml -> Settings attribute
YAML_KEYS: dict[tuple[str, str], str] = {
    ("mongodb", "url"): "mongodb_url",
    ("mongodb", "database"): "mongodb_database",
    ("youtube_api", "timeout"): "youtube_api_timeout",
    ("youtube_api", "language"): "youtube_api_language",
    ("sync", "lookahead_minutes"): "sync_lookahead_minutes",
    ("sync", "batch_size"): "sync_batch_size",
    ("sync", "channels_dir"): "channels_dir",
    ("logging", "level"): "log_level",
    ("logging", "file"): "log_file",
}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_yaml_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """
    Read ``config.yaml`` (or ``config.yml``) if present.

    Args:
        config_path: Explicit file; defaults to the working directory

    Returns:
        Parsed mapping, empty when no file exists
    """
    candidates = [Path(config_path)] if config_path else [Path("config.yaml"), Path("config.yml")]
    for path in candidates:
        if path.exists():
            with path.open(encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
    return {}


def apply_yaml_config(settings: Settings, config: dict[str, Any]) -> Settings:
    """
    Overlay YAML values onto ``settings``.

    A value is taken from YAML only while the setting still holds its
    default, so environment variables win.
    """
    fields = Settings.model_fields
    for (section, key), attr in YAML_KEYS.items():
        value = (config.get(section) or {}).get(key)
        if value is None or getattr(settings, attr) != fields[attr].default:
            continue
        cast = int if fields[attr].annotation is int else str
        setattr(settings, attr, cast(value))
    return settings


def get_settings_with_yaml(config_path: Path | str | None = None) -> Settings:
    """
    Get settings with YAML configuration applied.

    Priority: Environment Variables > YAML Config > Defaults
    """
    return apply_yaml_config(get_settings(), load_yaml_config(config_path))
