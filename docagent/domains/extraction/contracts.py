"""
Extraction Contracts - Interfaces for extraction domain.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from .models import ExtractedDocument, ExtractionConfig, SearchResult, StreamCallback


@runtime_checkable
class ProviderAdapter(Protocol):
    """
    Contract for model backends.

    Example:
        >>> class MyAdapter:
        ...     async def extract(self, file_path, encoded, config, attempt=0, on_stream=None):
        ...         ...
        >>> assert isinstance(MyAdapter(), ProviderAdapter)
    """

    async def extract(
        self,
        file_path: str | Path,
        encoded: str,
        config: ExtractionConfig,
        attempt: int = 0,
        on_stream: StreamCallback | None = None,
    ) -> Any:
        """
        Extract raw document data from the model.

        Args:
            file_path: Source document path
            encoded: Base64-encoded document bytes
            config: Extraction configuration
            attempt: 0 for the first call, 1 for the silent retry
            on_stream: Optional observer for stream events

        Returns:
            Parsed model output, to be normalized by the response schema
        """
        ...


@runtime_checkable
class DocumentStore(Protocol):
    """Contract for persisting finished extractions."""

    async def save_document(self, document: ExtractedDocument, file_path: str | Path) -> None:
        """Upsert a document by id and mark it pending for indexing."""
        ...

    async def get_document(self, doc_id: str) -> dict[str, Any] | None:
        """Get a stored document by id."""
        ...

    async def list_documents(self) -> list[dict[str, Any]]:
        """List stored documents, newest first."""
        ...


@runtime_checkable
class DocumentIndex(Protocol):
    """Contract for semantic search over extracted documents (not implemented)."""

    async def index(self, document: ExtractedDocument) -> None:
        """Add or refresh a document in the index."""
        ...

    async def search(self, query: str, limit: int = 10) -> list[SearchResult]:
        """Return ranked matches for a free-text query."""
        ...
