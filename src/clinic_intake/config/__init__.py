"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, env_int, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .places import PlacesConfig, get_places_config
from .resolution import ResolutionConfig, get_resolution_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "PlacesConfig",
    "RateLimit",
    "ResilienceConfig",
    "ResolutionConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_int",
    "get_database_config",
    "get_places_config",
    "get_resolution_config",
    "get_storage_config",
    "require_env_vars",
]
