"""Errors raised while reading transactor settings from the environment."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """An environment setting is present but unusable, e.g. a malformed field prefix."""


class MissingConfigurationError(ConfigurationError):
    """A mandatory environment variable is unset or blank."""
