"""
Ollama provider - Local vision model with OCR text as context.

Ollama vision models cannot read PDFs, so PDFs are rasterized first. Only the
first page is sent as the image; OCR text from every page goes into the
prompt.
"""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Any

from docagent.adapters.ollama import OllamaClient
from docagent.config import ResponseParseError

from ..events import emit_log, emit_prompt, emit_response
from ..mime import MimeType, get_mime_type
from ..models import ExtractionConfig, OcrProgressCallback, StreamCallback
from ..ocr import ocr_images
from ..parsing import parse_json_response
from ..pdf import pdf_to_images
from .prompts import LOCAL_SYSTEM_PROMPT, build_user_prompt

logger = logging.getLogger(__name__)

__all__ = ["OllamaExtractor", "OcrProgressTracker"]


class OcrProgressTracker:
    """Per-call OCR progress, rendered as a single prompt line."""

    def __init__(self, on_stream: StreamCallback) -> None:
        self._on_stream = on_stream
        self._pages: dict[int, int] = {}

    def format(self, total_pages: int) -> str:
        pages = " ".join(f"p{page}:{pct}%" for page, pct in sorted(self._pages.items()))
        return f"OCR ({len(self._pages)}/{total_pages}): {pages}"

    def __call__(self, page: int, total_pages: int, progress: float, status: str) -> None:
        self._pages[page] = round(progress * 100)
        emit_prompt(self._on_stream, self.format(total_pages))


class OllamaExtractor:
    """
    Provider adapter for a local Ollama daemon.

    Example:
        >>> extractor = OllamaExtractor()
        >>> payload = await extractor.extract("receipt.png", encoded, config, on_stream=print)
    """

    def __init__(self, client: OllamaClient | None = None) -> None:
        """
        Initialize extractor.

        Args:
            client: Shared client. If None, one is created per call from the
                config and closed afterwards.
        """
        self._client = client

    async def _prepare_inputs(
        self,
        file_path: str | Path,
        encoded: str,
        mime_type: MimeType,
        config: ExtractionConfig,
        on_stream: StreamCallback | None,
    ) -> tuple[str, str]:
        """Return (base64 image for the model, OCR text)."""
        progress: OcrProgressCallback | None = (
            OcrProgressTracker(on_stream) if on_stream else None
        )

        if mime_type is not MimeType.PDF:
            ocr_text = await ocr_images(
                [base64.b64decode(encoded)], progress, on_stream, language=config.ocr_language
            )
            return encoded, ocr_text

        emit_log(on_stream, "info", "Converting PDF to images", {"filePath": str(file_path)}, logger=logger)
        pages = await pdf_to_images(file_path, on_stream)
        if not pages:
            # Raw PDF bytes are the only visual input left
            return encoded, ""

        emit_log(
            on_stream,
            "debug",
            "PDF converted",
            {"pageCount": len(pages), "firstPageSize": f"{round(len(pages[0]) / 1024)}KB"},
            logger=logger,
        )
        emit_log(
            on_stream,
            "info",
            f"Running OCR on {len(pages)} page(s)",
            {"pageCount": len(pages)},
            logger=logger,
        )
        emit_prompt(on_stream, f"Running OCR on {len(pages)} page(s)...")
        ocr_text = await ocr_images(pages, progress, on_stream, language=config.ocr_language)
        return base64.b64encode(pages[0]).decode("ascii"), ocr_text

    async def extract(
        self,
        file_path: str | Path,
        encoded: str,
        config: ExtractionConfig,
        attempt: int = 0,
        on_stream: StreamCallback | None = None,
    ) -> Any:
        """
        Run OCR, prompt the local model and parse its JSON answer.

        Streams the response when an observer is given.

        Raises:
            ProviderAPIError: The daemon rejected the request or is unreachable
            ResponseParseError: The answer is not JSON
        """
        mime_type = get_mime_type(file_path)
        image_base64, ocr_text = await self._prepare_inputs(
            file_path, encoded, mime_type, config, on_stream
        )

        user_prompt = build_user_prompt(ocr_text, mime_type)
        should_stream = on_stream is not None

        emit_log(
            on_stream,
            "info",
            "Starting extraction with ollama",
            {"filePath": str(file_path), "provider": "ollama", "attempt": attempt},
            logger=logger,
        )
        if ocr_text:
            emit_log(
                on_stream,
                "debug",
                "OCR text preview (first 200 chars)",
                {"preview": ocr_text[:200].replace("\n", " "), "totalLength": len(ocr_text)},
                logger=logger,
            )

        emit_prompt(on_stream, f"System:\n{LOCAL_SYSTEM_PROMPT}\n\nUser:\n{user_prompt}")
        emit_log(
            on_stream,
            "debug",
            "Sending request to Ollama",
            {"model": config.ollama_model, "promptLength": len(user_prompt), "hasImage": True},
            logger=logger,
        )

        client = self._client or OllamaClient(
            base_url=config.ollama_url, timeout=config.request_timeout
        )
        try:
            response_text = await client.generate(
                model=config.ollama_model,
                prompt=user_prompt,
                system=LOCAL_SYSTEM_PROMPT,
                images=[image_base64],
                stream=should_stream,
                format="json",
                on_chunk=(lambda chunk: emit_response(on_stream, chunk)) if should_stream else None,
            )
        finally:
            if self._client is None:
                await client.close()

        emit_log(
            on_stream,
            "debug",
            "Model response received",
            {"responseLength": len(response_text), "preview": response_text[:100]},
            logger=logger,
        )

        try:
            parsed = parse_json_response(response_text)
        except ResponseParseError:
            emit_log(on_stream, "error", "JSON parse failed", {"response": response_text}, logger=logger)
            raise

        if isinstance(parsed, dict):
            emit_log(
                on_stream,
                "debug",
                "Raw parsed JSON",
                {
                    "type": parsed.get("type"),
                    "vendor": parsed.get("vendor"),
                    "amount": parsed.get("amount"),
                    "itemCount": len(parsed["items"]) if isinstance(parsed.get("items"), list) else 0,
                },
                logger=logger,
            )
            if ocr_text and not parsed.get("rawText"):
                parsed["rawText"] = ocr_text

        return parsed
