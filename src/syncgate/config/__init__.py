"""Application configuration helpers."""

from __future__ import annotations

from .engine import DEFAULT_CALCULATION_METHOD, EngineConfig, get_engine_config
from .env import env_flag, optional_env_var
from .errors import ConfigurationError
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_CALCULATION_METHOD",
    "ConfigurationError",
    "DatabaseConfig",
    "EngineConfig",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "get_database_config",
    "get_engine_config",
    "get_storage_config",
    "optional_env_var",
]
