"""
Gemini provider - Cloud extraction with the whole document inlined.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from docagent.adapters.gemini import GeminiClient, GeminiConfig
from docagent.config import ConfigurationError

from ..events import emit_log, emit_prompt, emit_response
from ..mime import get_mime_type
from ..models import ExtractionConfig, StreamCallback
from ..parsing import parse_json_response, strip_code_fences
from .prompts import CLOUD_EXTRACTION_PROMPT

logger = logging.getLogger(__name__)

__all__ = ["GeminiExtractor"]

ClientFactory = Callable[[str, GeminiConfig], GeminiClient]


def _default_client(api_key: str, config: GeminiConfig) -> GeminiClient:
    return GeminiClient(api_key=api_key, config=config)


class GeminiExtractor:
    """
    Provider adapter for the Gemini API.

    Example:
        >>> extractor = GeminiExtractor()
        >>> payload = await extractor.extract("invoice.pdf", encoded, config)
    """

    def __init__(self, client_factory: ClientFactory = _default_client) -> None:
        """
        Initialize extractor.

        Args:
            client_factory: Builds a client from (api_key, config)
        """
        self._client_factory = client_factory

    async def extract(
        self,
        file_path: str | Path,
        encoded: str,
        config: ExtractionConfig,
        attempt: int = 0,
        on_stream: StreamCallback | None = None,
    ) -> Any:
        """
        Send the document to Gemini and parse its JSON answer.

        Raises:
            ConfigurationError: No API key configured
            ProviderAPIError: The API call failed
            ResponseParseError: The answer is not JSON
        """
        if not config.gemini_api_key:
            raise ConfigurationError(
                "Gemini API key required. Set GEMINI_API_KEY env variable."
            )

        client = self._client_factory(
            config.gemini_api_key,
            GeminiConfig(model=config.gemini_model, timeout_seconds=config.request_timeout),
        )
        mime_type = get_mime_type(file_path)

        emit_prompt(on_stream, CLOUD_EXTRACTION_PROMPT)
        emit_log(
            on_stream,
            "debug",
            "Sending request to Gemini",
            {"model": config.gemini_model, "mimeType": mime_type.value, "attempt": attempt},
            logger=logger,
        )

        response = await client.generate_with_document(
            CLOUD_EXTRACTION_PROMPT,
            base64.b64decode(encoded),
            mime_type.value,
        )
        emit_response(on_stream, response.text)

        return parse_json_response(strip_code_fences(response.text))
