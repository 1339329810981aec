"""Configuration management module for jobfilter."""

from .duration import DurationParseError, parse_duration, validate_duration_range
from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, validate_config_file
from .models import (
    AppConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    SettingsBackend,
    SettingsConfig,
    WatcherSettings,
)

__all__ = [
    # Main loader functions
    "load_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "SettingsConfig",
    "WatcherSettings",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "SettingsBackend",
    "LogLevel",
    "LogFormat",
    # Durations
    "parse_duration",
    "validate_duration_range",
    "DurationParseError",
    # Exceptions
    "ConfigurationError",
]
