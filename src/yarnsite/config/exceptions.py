"""Exceptions for the configuration module."""


class ConfigError(Exception):
    """Configuration data is missing or invalid."""
