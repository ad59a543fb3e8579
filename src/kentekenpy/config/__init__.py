"""Application configuration helpers."""

from __future__ import annotations

from .batch import BatchConfig, get_batch_config
from .env import env_float, env_int, optional_env_var
from .errors import ConfigurationError, InvalidSettingError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .rdw import RdwConfig, get_rdw_config
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_current_owner,
    get_database_config,
    get_storage_config,
)

__all__ = [
    "BatchConfig",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "InvalidSettingError",
    "RateLimit",
    "RdwConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "env_float",
    "env_int",
    "get_batch_config",
    "get_current_owner",
    "get_database_config",
    "get_rdw_config",
    "get_storage_config",
    "optional_env_var",
]
