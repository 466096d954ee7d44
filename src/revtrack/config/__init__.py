"""Application configuration helpers."""

from __future__ import annotations

from .env import env_int, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .harbor import HarborConfig, get_harbor_config
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "HarborConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "env_int",
    "get_database_config",
    "get_harbor_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
