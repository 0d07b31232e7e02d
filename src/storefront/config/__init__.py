"""Application configuration helpers."""

from __future__ import annotations

from .checkout import TAX_RATE, CheckoutConfig, get_checkout_config
from .database import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .env import env_flag, env_float, env_int, optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, InvalidConfigurationError, MissingConfigurationError
from .event_bus import EventBusConfig, get_event_bus_config
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging

__all__ = [
    "TAX_RATE",
    "CheckoutConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "EventBusConfig",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_float",
    "env_int",
    "get_checkout_config",
    "get_database_config",
    "get_event_bus_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
