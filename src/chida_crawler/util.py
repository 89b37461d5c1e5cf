"""Common utilities and exception classes."""


class ChidaError(Exception):
    """Base exception for chida_crawler."""


class FetchError(ChidaError):
    """HTTP fetch failure."""


class StoreError(ChidaError):
    """Store request rejected or unreachable."""


class ConfigError(ChidaError):
    """Missing or invalid configuration."""
