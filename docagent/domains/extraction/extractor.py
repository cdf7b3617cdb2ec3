"""
Document Extractor - Top-level extraction orchestrator.

Routes a document to the configured provider adapter, normalizes the model
output through the response schema and stamps the finished record.

Local-daemon output that fails schema validation is retried exactly once,
with the observer detached.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from collections.abc import Mapping
from pathlib import Path

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt

from docagent.config import ExtractionError, SchemaValidationError, UnsupportedProviderError

from .contracts import ProviderAdapter
from .events import emit_log
from .models import AIProvider, DocumentFields, ExtractedDocument, ExtractionConfig, StreamCallback
from .providers import GeminiExtractor, OllamaExtractor
from .schema import validate_document_data

logger = logging.getLogger(__name__)

__all__ = ["DocumentExtractor", "extract_document", "default_providers"]

# Providers whose output gets a second, silent attempt on validation failure
RETRY_ON_VALIDATION: frozenset[AIProvider] = frozenset({AIProvider.OLLAMA})
MAX_ATTEMPTS = 2


def default_providers() -> dict[AIProvider, ProviderAdapter]:
    """Adapters for every implemented provider."""
    return {
        AIProvider.GEMINI: GeminiExtractor(),
        AIProvider.OLLAMA: OllamaExtractor(),
    }


class DocumentExtractor:
    """
    Extraction orchestrator.

    Example:
        >>> extractor = DocumentExtractor()
        >>> config = ExtractionConfig(ai_provider="ollama")
        >>> document = await extractor.extract("receipt.pdf", config, on_stream=print)
        >>> print(document.vendor, document.amount)
    """

    def __init__(
        self,
        providers: Mapping[AIProvider, ProviderAdapter] | None = None,
    ) -> None:
        """
        Initialize extractor.

        Args:
            providers: Adapter per provider. Defaults to the built-in adapters.
        """
        self._providers = dict(providers) if providers is not None else default_providers()

    async def extract(
        self,
        file_path: str | Path,
        config: ExtractionConfig,
        on_stream: StreamCallback | None = None,
    ) -> ExtractedDocument:
        """
        Extract structured data from a PDF or image.

        Args:
            file_path: Path to the document
            config: Provider selection and credentials
            on_stream: Optional observer for log/prompt/response events

        Returns:
            The finished record with a fresh id

        Raises:
            UnsupportedProviderError: No adapter for config.ai_provider
            ConfigurationError: Missing credential
            ProviderAPIError: Provider rejected the request
            ExtractionError: The file could not be read
            ResponseParseError: Model output is not JSON
            SchemaValidationError: Output unusable after the retry
        """
        file_path = Path(file_path)
        provider = config.ai_provider

        emit_log(
            on_stream,
            "info",
            f"Starting extraction with {provider.value}",
            {"filePath": str(file_path), "provider": provider.value},
            logger=logger,
        )

        try:
            data = await asyncio.to_thread(file_path.read_bytes)
        except OSError as e:
            raise ExtractionError(
                f"Could not read {file_path}: {e}", {"filePath": str(file_path)}
            ) from e
        encoded = base64.b64encode(data).decode("ascii")

        adapter = self._providers.get(provider)
        if adapter is None:
            raise UnsupportedProviderError(provider.value)

        try:
            if provider in RETRY_ON_VALIDATION:
                fields = await self._extract_with_retry(adapter, file_path, encoded, config, on_stream)
            else:
                payload = await adapter.extract(file_path, encoded, config, 0, on_stream)
                fields = validate_document_data(payload)
        except Exception as e:
            emit_log(
                on_stream,
                "error",
                "Extraction failed",
                {"filePath": str(file_path), "error": str(e)},
                logger=logger,
            )
            raise

        document = ExtractedDocument.from_fields(fields, file_path)
        emit_log(
            on_stream,
            "info",
            f"Extraction successful: {document.type.value}",
            {"filePath": str(file_path), "type": document.type.value, "itemCount": document.item_count},
            logger=logger,
        )
        return document

    async def _extract_with_retry(
        self,
        adapter: ProviderAdapter,
        file_path: Path,
        encoded: str,
        config: ExtractionConfig,
        on_stream: StreamCallback | None,
    ) -> DocumentFields:
        """Call the adapter, retrying once without an observer on validation failure."""

        def log_retry(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception() if retry_state.outcome else None
            emit_log(
                on_stream,
                "warn",
                "Validation failed, retrying extraction",
                {
                    "filePath": str(file_path),
                    "error": str(error),
                    "details": getattr(error, "details", {}),
                },
                logger=logger,
            )

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(MAX_ATTEMPTS),
            retry=retry_if_exception_type(SchemaValidationError),
            before_sleep=log_retry,
            reraise=True,
        ):
            with attempt:
                number = attempt.retry_state.attempt_number - 1
                observer = on_stream if number == 0 else None
                payload = await adapter.extract(file_path, encoded, config, number, observer)
                return validate_document_data(payload)

        raise AssertionError("unreachable")  # pragma: no cover


async def extract_document(
    file_path: str | Path,
    config: ExtractionConfig,
    on_stream: StreamCallback | None = None,
) -> ExtractedDocument:
    """Extract a document with the default provider adapters."""
    return await DocumentExtractor().extract(file_path, config, on_stream)
