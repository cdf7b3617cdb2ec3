"""
Extraction Models - Data types for extraction domain.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from docagent.config import Settings, UnsupportedProviderError, get_settings


class DocumentType(str, Enum):
    """Closed set of document classifications."""

    INVOICE = "invoice"
    RECEIPT = "receipt"
    BANK_STATEMENT = "bank_statement"
    OTHER = "other"


class AIProvider(str, Enum):
    """Model backends a caller can select."""

    GEMINI = "gemini"  # cloud API
    OLLAMA = "ollama"  # local daemon
    OPENAI = "openai"  # no adapter yet


def parse_provider(name: str | AIProvider) -> AIProvider:
    """Resolve a provider name, raising UnsupportedProviderError for unknown names."""
    try:
        return AIProvider(name)
    except ValueError:
        raise UnsupportedProviderError(str(name)) from None


class ExtractionConfig(BaseModel):
    """Per-call extraction configuration."""

    ai_provider: AIProvider = AIProvider.OLLAMA
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"
    ollama_model: str = "llama3.2-vision"
    ollama_url: str = "http://localhost:11434"
    request_timeout: float = Field(default=300.0, gt=0)
    ocr_language: str = "eng"

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        **overrides: Any,
    ) -> ExtractionConfig:
        """
        Build a config from application settings, applying explicit overrides.

        Raises:
            UnsupportedProviderError: The provider name is not a known backend
        """
        settings = settings or get_settings()
        provider = overrides.pop("ai_provider", None) or settings.ai_provider
        values: dict[str, Any] = {
            "ai_provider": parse_provider(provider),
            "gemini_api_key": settings.gemini_api_key,
            "gemini_model": settings.gemini_model,
            "ollama_model": settings.ollama_model,
            "ollama_url": settings.ollama_url,
            "request_timeout": settings.ollama_timeout,
            "ocr_language": settings.ocr_language,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class LineItem(BaseModel):
    """A single line on a receipt, invoice or statement."""

    description: str = "Unknown item"
    quantity: float | None = None
    unit_price: float | None = Field(default=None, alias="unitPrice")
    total: float | None = None

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class DocumentFields(BaseModel):
    """Canonical fields produced by the response schema."""

    type: DocumentType = DocumentType.OTHER
    vendor: str | None = None
    amount: float | None = None
    date: str | None = None  # YYYY-MM-DD
    date_raw: str | None = Field(default=None, alias="dateRaw")
    items: list[LineItem] | None = None
    raw_text: str | None = Field(default=None, alias="rawText")

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict using wire names, absent fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ExtractedDocument(DocumentFields):
    """Finished extraction record."""

    id: str
    filename: str
    extracted_at: datetime = Field(alias="extractedAt")

    @classmethod
    def from_fields(
        cls,
        fields: DocumentFields,
        file_path: str | Path,
    ) -> ExtractedDocument:
        """Stamp a fresh id and completion time onto validated fields."""
        return cls(
            id=str(uuid.uuid4()),
            filename=Path(file_path).name or "unknown",
            extracted_at=datetime.now(timezone.utc),
            **fields.model_dump(),
        )

    def to_record(self) -> dict[str, Any]:
        """Serializable record for storage and JSON output."""
        return self.to_payload()

    @property
    def item_count(self) -> int:
        return len(self.items or [])


class SearchResult(BaseModel):
    """A ranked hit returned by a document index."""

    document: ExtractedDocument
    similarity: float = Field(ge=0.0, le=1.0)
    snippet: str = ""


# --- Stream events ---

LogLevel = Literal["debug", "info", "warn", "error"]


class LogEvent(BaseModel):
    """Diagnostic message with structured context."""

    type: Literal["log"] = "log"
    level: LogLevel = "info"
    message: str
    data: dict[str, Any] = Field(default_factory=dict)


class PromptEvent(BaseModel):
    """Text sent to the model, or a progress line shown in its place."""

    type: Literal["prompt"] = "prompt"
    content: str


class ResponseEvent(BaseModel):
    """Incremental fragment of model output."""

    type: Literal["response"] = "response"
    content: str


StreamEvent = Annotated[
    LogEvent | PromptEvent | ResponseEvent,
    Field(discriminator="type"),
]

StreamCallback = Callable[[LogEvent | PromptEvent | ResponseEvent], None]
OcrProgressCallback = Callable[[int, int, float, str], None]
