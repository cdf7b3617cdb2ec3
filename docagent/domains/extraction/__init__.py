"""
Extraction Domain - Documents to structured records.

This domain handles:
- File type detection
- PDF rasterization and OCR
- Provider routing (cloud and local models)
- Lenient normalization of model output
"""

from .contracts import DocumentIndex, DocumentStore, ProviderAdapter
from .extractor import DocumentExtractor, default_providers, extract_document
from .mime import MimeType, get_mime_type
from .models import (
    AIProvider,
    DocumentFields,
    DocumentType,
    ExtractedDocument,
    ExtractionConfig,
    LineItem,
    LogEvent,
    PromptEvent,
    ResponseEvent,
    SearchResult,
    StreamEvent,
    parse_provider,
)
from .ocr import ocr_images
from .pdf import pdf_to_images
from .schema import normalize_date, validate_document_data

__all__ = [
    # Contracts
    "ProviderAdapter",
    "DocumentStore",
    "DocumentIndex",
    # Models
    "AIProvider",
    "DocumentType",
    "DocumentFields",
    "ExtractedDocument",
    "ExtractionConfig",
    "LineItem",
    "SearchResult",
    "LogEvent",
    "PromptEvent",
    "ResponseEvent",
    "StreamEvent",
    "parse_provider",
    # Implementations
    "DocumentExtractor",
    "default_providers",
    "extract_document",
    "MimeType",
    "get_mime_type",
    "ocr_images",
    "pdf_to_images",
    "normalize_date",
    "validate_document_data",
]
