"""
Configuration - Application settings and error taxonomy.
"""

from .errors import (
    ConfigurationError,
    DocAgentError,
    ErrorCode,
    ExtractionError,
    ProviderAPIError,
    ProviderUnavailableError,
    ResponseParseError,
    SchemaValidationError,
    StorageError,
    UnsupportedProviderError,
)
from .settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Errors
    "ErrorCode",
    "DocAgentError",
    "ConfigurationError",
    "UnsupportedProviderError",
    "ProviderAPIError",
    "ProviderUnavailableError",
    "ResponseParseError",
    "SchemaValidationError",
    "ExtractionError",
    "StorageError",
]
