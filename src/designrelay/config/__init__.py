"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .mail import MailConfig, get_mail_config
from .orders import OrderSourceConfig, get_order_source_config
from .polling import PollingConfig, get_polling_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MailConfig",
    "MissingConfigurationError",
    "OrderSourceConfig",
    "PollingConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_mail_config",
    "get_order_source_config",
    "get_polling_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
