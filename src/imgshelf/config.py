"""Configuration management for imgshelf application.

Values come from environment variables first and Streamlit secrets second,
are cast to the requested type and cached per (key, type) until
clear_cache() is called.
"""

import os
from typing import Any

import streamlit as st

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_DB_PATH = "data/imgshelf.duckdb"
DEFAULT_UPLOAD_READ_WORKERS = 4

TRUTHY_VALUES = ("true", "1", "yes", "on")


class Config:
    """Centralized configuration management using environment variables."""

    def __init__(self):
        self._cache: dict[str, Any] = {}

    def get(self, key: str, default: Any = None, cast_type: type = str) -> Any:
        """Get a configuration value.

        Args:
            key: Configuration key
            default: Value used when the key is missing or cannot be cast
            cast_type: Type to cast the value to (str, int, bool, float)

        Returns:
            Configuration value cast to the specified type
        """
        cache_key = f"{key}:{cast_type.__name__}"
        if cache_key not in self._cache:
            raw = self._lookup(key)
            self._cache[cache_key] = default if raw is None else self._cast(key, raw, cast_type, default)
        return self._cache[cache_key]

    @staticmethod
    def _lookup(key: str) -> Any:
        value = os.getenv(key)
        if value is not None:
            return value
        try:
            return st.secrets.get(key)
        except Exception:  # nosec B110
            # No secrets file, or not running inside Streamlit
            return None

    @staticmethod
    def _cast(key: str, value: Any, cast_type: type, default: Any) -> Any:
        if cast_type is bool:
            return value.lower() in TRUTHY_VALUES if isinstance(value, str) else bool(value)
        if cast_type is str:
            return value
        try:
            return cast_type(value)
        except (ValueError, TypeError) as e:
            logger.warning("config_cast_failed", key=key, cast_type=cast_type.__name__, error=str(e))
            return default

    def clear_cache(self):
        """Forget cached values so the next lookup re-reads the environment."""
        self._cache.clear()


_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_env(key: str, default: Any = None, cast_type: type = str) -> Any:
    """Get environment variable with type casting."""
    return get_config().get(key, default, cast_type)


def get_database_path() -> str:
    """Get the DuckDB file holding credentials and image collections."""
    return str(get_env("IMGSHELF_DB_PATH", DEFAULT_DB_PATH))


def get_upload_read_workers() -> int:
    """Get the number of threads used to read uploaded files."""
    workers = get_env("UPLOAD_READ_WORKERS", DEFAULT_UPLOAD_READ_WORKERS, int)
    if workers < 1:
        logger.warning("invalid_upload_read_workers", workers=workers, fallback=DEFAULT_UPLOAD_READ_WORKERS)
        return DEFAULT_UPLOAD_READ_WORKERS
    return int(workers)
