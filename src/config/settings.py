"""Configuration management using Pydantic Settings.

This module provides type-safe configuration with automatic environment
variable loading and validation.

The configuration is organized into logical groups:
- DatabaseConfig: Database connection settings for the SQL store
- StorageConfig: Which persistence backend to use and where the file store lives
- LoggingConfig: Logging levels, files, and debugging options
- CredentialsConfig: Spotify OAuth credentials
- APIConfig: Spotify paging, batching and HTTP behaviour
- HistoryConfig: Listening history ingestion and throwback defaults
- SyncConfig: Release synchronization defaults
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = "sqlite+aiosqlite:///data/needledrop.db"
    echo: bool = False


class StorageConfig(BaseModel):
    """Persistence backend selection."""

    backend: Literal["database", "file"] = "database"
    file_path: Path = Path("data/store")


class LoggingConfig(BaseModel):
    """Logging configuration for console and file output."""

    console_level: str = "INFO"
    file_level: str = "DEBUG"
    log_file: Path = Path("needledrop.log")
    real_time_debug: bool = True


class CredentialsConfig(BaseModel):
    """Spotify credentials and authentication settings."""

    spotify_client_id: str = ""
    spotify_client_secret: str = ""
    spotify_redirect_uri: str = "http://localhost:8888/callback"
    spotify_token_cache: Path = Path(".spotify_cache")


class APIConfig(BaseModel):
    """Spotify API configuration.

    Retries default to zero: a failed request surfaces immediately as a
    terminal error for the running command.
    """

    spotify_page_size: int = 50
    spotify_add_batch_size: int = 100
    spotify_search_limit: int = 5
    spotify_market: str = "from_token"
    spotify_retry_count: int = 0
    spotify_request_timeout: int = 10


class HistoryConfig(BaseModel):
    """Listening history and throwback defaults."""

    recent_limit: int = 50
    throwback_size: int = 50
    throwback_period: str = "25w"
    throwback_name_prefix: str = "Throwback"


class SyncConfig(BaseModel):
    """Release synchronization defaults."""

    cold_start_size: int = 5
    album_types: list[str] = ["album", "single"]


class Settings(BaseSettings):
    """Main application settings with environment variable support.

    Environment variables can be set using flat naming or nested naming:
    - Flat: DATABASE_URL, STORAGE_BACKEND, CONSOLE_LOG_LEVEL
    - Nested: DATABASE__URL, STORAGE__BACKEND, LOGGING__CONSOLE_LEVEL

    The .env file is automatically loaded for development convenience.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    database: DatabaseConfig = DatabaseConfig()
    storage: StorageConfig = StorageConfig()
    logging: LoggingConfig = LoggingConfig()
    credentials: CredentialsConfig = CredentialsConfig()
    api: APIConfig = APIConfig()
    history: HistoryConfig = HistoryConfig()
    sync: SyncConfig = SyncConfig()

    @model_validator(mode="before")
    @classmethod
    def transform_flat_env_vars(cls, data: Any) -> Any:
        """Map flat environment variables (DATABASE_URL) onto nested groups."""
        if not isinstance(data, dict):
            return data

        mappings = {
            "database": {
                "database_url": "url",
                "database_echo": "echo",
            },
            "storage": {
                "storage_backend": "backend",
                "store_path": "file_path",
            },
            "logging": {
                "console_log_level": "console_level",
                "file_log_level": "file_level",
                "log_file": "log_file",
                "log_real_time_debug": "real_time_debug",
            },
            "credentials": {
                "spotify_client_id": "spotify_client_id",
                "spotify_client_secret": "spotify_client_secret",
                "spotify_redirect_uri": "spotify_redirect_uri",
                "spotify_token_cache": "spotify_token_cache",
            },
        }

        transformed: dict[str, dict[str, Any]] = {}
        for group, mapping in mappings.items():
            for env_key, field_key in mapping.items():
                if env_key in data:
                    transformed.setdefault(group, {})[field_key] = data.pop(env_key)

        for group, values in transformed.items():
            existing = data.get(group)
            if isinstance(existing, dict):
                data[group] = {**existing, **values}
            else:
                data[group] = values

        return data


# Singleton instance for application use
settings = Settings()


# =============================================================================
# FLAT KEY ACCESS
# =============================================================================

_FLAT_KEY_MAP = {
    "DATABASE_URL": lambda: settings.database.url,
    "DATABASE_ECHO": lambda: settings.database.echo,
    "STORAGE_BACKEND": lambda: settings.storage.backend,
    "STORE_PATH": lambda: settings.storage.file_path,
    "CONSOLE_LOG_LEVEL": lambda: settings.logging.console_level,
    "FILE_LOG_LEVEL": lambda: settings.logging.file_level,
    "LOG_FILE": lambda: settings.logging.log_file,
    "SPOTIFY_CLIENT_ID": lambda: settings.credentials.spotify_client_id,
    "SPOTIFY_CLIENT_SECRET": lambda: settings.credentials.spotify_client_secret,
    "SPOTIFY_REDIRECT_URI": lambda: settings.credentials.spotify_redirect_uri,
    "SPOTIFY_API_PAGE_SIZE": lambda: settings.api.spotify_page_size,
    "SPOTIFY_API_ADD_BATCH_SIZE": lambda: settings.api.spotify_add_batch_size,
    "SPOTIFY_API_SEARCH_LIMIT": lambda: settings.api.spotify_search_limit,
    "SPOTIFY_API_RETRY_COUNT": lambda: settings.api.spotify_retry_count,
    "HISTORY_RECENT_LIMIT": lambda: settings.history.recent_limit,
    "THROWBACK_SIZE": lambda: settings.history.throwback_size,
    "THROWBACK_PERIOD": lambda: settings.history.throwback_period,
    "THROWBACK_NAME_PREFIX": lambda: settings.history.throwback_name_prefix,
    "SYNC_COLD_START_SIZE": lambda: settings.sync.cold_start_size,
    "SYNC_ALBUM_TYPES": lambda: settings.sync.album_types,
}


def get_config(key: str, default=None):
    """Get configuration value by flat key with optional default.

    Example:
        >>> limit = get_config("HISTORY_RECENT_LIMIT", 50)
        >>> db_url = get_config("DATABASE_URL")
    """
    if key in _FLAT_KEY_MAP:
        return _FLAT_KEY_MAP[key]()
    return default
