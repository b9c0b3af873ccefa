"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .fields import ActorConfig, FieldConfig, get_actor_config, get_field_config
from .logging import configure_logging
from .storage import DatabaseConfig, get_data_dir, get_database_config

__all__ = [
    "ActorConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "FieldConfig",
    "MissingConfigurationError",
    "configure_logging",
    "get_actor_config",
    "get_data_dir",
    "get_database_config",
    "get_field_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
