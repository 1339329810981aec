"""Custom exceptions for site adapters."""


class AdapterError(Exception):
    """Base exception for all site adapter errors."""

    pass


class AdapterConfigurationError(AdapterError):
    """Unknown site name or invalid adapter configuration."""

    pass
