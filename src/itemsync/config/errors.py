"""Errors raised while loading itemsync settings."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A setting is present but unusable, such as a non-numeric concurrency."""


class MissingConfigurationError(ConfigurationError):
    """A required environment variable is unset or blank."""
