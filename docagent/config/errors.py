"""
Error Taxonomy - Consistent error codes across the extraction pipeline.

Usage:
    from docagent.config.errors import ErrorCode, DocAgentError

    raise DocAgentError(ErrorCode.EXTRACTION_FAILED, "Could not read document")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Configuration errors
    CONFIG_MISSING_CREDENTIAL = "CONFIG_MISSING_CREDENTIAL"
    PROVIDER_NOT_IMPLEMENTED = "PROVIDER_NOT_IMPLEMENTED"

    # Provider errors
    PROVIDER_API_ERROR = "PROVIDER_API_ERROR"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"

    # Model output errors
    RESPONSE_PARSE_FAILED = "RESPONSE_PARSE_FAILED"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Extraction errors
    EXTRACTION_FAILED = "EXTRACTION_FAILED"

    # Storage errors
    STORAGE_WRITE_FAILED = "STORAGE_WRITE_FAILED"


class DocAgentError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a serializable dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(DocAgentError):
    """A required credential or setting is missing."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.CONFIG_MISSING_CREDENTIAL, message, details)


class UnsupportedProviderError(DocAgentError):
    """The configured AI provider has no adapter."""

    def __init__(self, provider: str) -> None:
        super().__init__(
            ErrorCode.PROVIDER_NOT_IMPLEMENTED,
            f"Provider {provider} not yet implemented",
            {"provider": provider},
        )


class ProviderAPIError(DocAgentError):
    """The provider rejected the request (non-2xx or client failure)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.PROVIDER_API_ERROR, message, details)

    @property
    def status_code(self) -> int | None:
        return self.details.get("status")


class ProviderUnavailableError(ProviderAPIError):
    """The provider could not be reached at all."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        DocAgentError.__init__(self, ErrorCode.PROVIDER_UNAVAILABLE, message, details)


class ResponseParseError(DocAgentError):
    """Model output could not be recovered as JSON."""

    def __init__(self, raw_text: str) -> None:
        super().__init__(
            ErrorCode.RESPONSE_PARSE_FAILED,
            f"Failed to parse JSON response: {raw_text}",
            {"response": raw_text},
        )

    @property
    def raw_text(self) -> str:
        return self.details["response"]


class SchemaValidationError(DocAgentError):
    """Model output is JSON but its shape cannot be normalized."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.VALIDATION_ERROR, message, details)


class ExtractionError(DocAgentError):
    """Extraction domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.EXTRACTION_FAILED, message, details)


class StorageError(DocAgentError):
    """Storage/database errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.STORAGE_WRITE_FAILED, message, details)
