"""
Gemini Client - Google Gemini multimodal API client.

This is the only place that calls the Gemini API. The SDK is synchronous,
so every call runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import google.generativeai as genai

from docagent.config import ConfigurationError, ProviderAPIError

from .models import GeminiConfig, GeminiResponse

logger = logging.getLogger(__name__)

__all__ = ["GeminiClient"]


class GeminiClient:
    """
    Gemini API client authenticated with an API key.

    Note:
        google-generativeai only takes credentials through the process-wide
        ``genai.configure``; there is no per-model key. Building a client
        reconfigures the SDK for the whole process, so clients with different
        keys must not be used concurrently.

    Example:
        >>> client = GeminiClient(api_key="...")
        >>> response = await client.generate_with_document(prompt, pdf_bytes, "application/pdf")
        >>> print(response.text)
    """

    def __init__(
        self,
        api_key: str,
        config: GeminiConfig | None = None,
    ) -> None:
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key
            config: Client configuration. Uses defaults if None.

        Raises:
            ConfigurationError: api_key is empty
        """
        if not api_key:
            raise ConfigurationError(
                "Gemini API key required. Set GEMINI_API_KEY env variable."
            )
        self.config = config or GeminiConfig()
        genai.configure(api_key=api_key)

        # Model instance (lazy loaded)
        self._model: genai.GenerativeModel | None = None

        logger.debug("GeminiClient initialized: model=%s", self.config.model)

    def _get_model(self) -> genai.GenerativeModel:
        """Get or create model instance."""
        if self._model is None:
            generation_config: dict[str, Any] = {
                "temperature": self.config.temperature,
                "max_output_tokens": self.config.max_output_tokens,
            }
            self._model = genai.GenerativeModel(
                model_name=self.config.model,
                generation_config=generation_config,
            )
        return self._model

    async def generate_with_document(
        self,
        prompt: str,
        document: bytes,
        mime_type: str,
    ) -> GeminiResponse:
        """
        Generate text from an instruction plus an inlined document.

        Args:
            prompt: Instruction text
            document: Raw document bytes
            mime_type: MIME type the document is tagged with

        Returns:
            GeminiResponse with generated text

        Raises:
            ProviderAPIError: API call failed
        """
        model = self._get_model()
        contents = [prompt, {"mime_type": mime_type, "data": document}]

        try:
            response = await asyncio.to_thread(
                model.generate_content,
                contents,
                request_options={"timeout": self.config.timeout_seconds},
            )
            text = response.text
        except Exception as e:
            raise ProviderAPIError(
                f"Gemini API error: {e}",
                {"provider": "gemini", "model": self.config.model},
            ) from e

        usage = getattr(response, "usage_metadata", None)
        prompt_tokens = getattr(usage, "prompt_token_count", 0) if usage else 0
        completion_tokens = getattr(usage, "candidates_token_count", 0) if usage else 0

        return GeminiResponse(
            text=text,
            model=self.config.model,
            prompt_tokens=prompt_tokens or 0,
            completion_tokens=completion_tokens or 0,
            total_tokens=(prompt_tokens or 0) + (completion_tokens or 0),
        )
