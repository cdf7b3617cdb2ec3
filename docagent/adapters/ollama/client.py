"""
Ollama Client - Local inference daemon over HTTP.

Features:
- Async HTTP client
- Newline-delimited JSON streaming
- Model availability checks and pulls
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

import httpx

from docagent.config import ProviderAPIError, ProviderUnavailableError

logger = logging.getLogger(__name__)

__all__ = ["OllamaClient", "DEFAULT_OLLAMA_URL"]

DEFAULT_OLLAMA_URL = "http://localhost:11434"


class OllamaClient:
    """
    Ollama local LLM client.

    Example:
        >>> async with OllamaClient() as client:
        ...     text = await client.generate("llama3.2-vision", "Describe this", images=[b64])
    """

    def __init__(
        self,
        base_url: str = DEFAULT_OLLAMA_URL,
        timeout: float = 300.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Ollama client.

        Args:
            base_url: Ollama server URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> OllamaClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    @staticmethod
    def _api_error(status: int, body: str) -> ProviderAPIError:
        return ProviderAPIError(
            f"Ollama API error: {status} {body}",
            {"status": status, "body": body},
        )

    @staticmethod
    def _connect_error(error: httpx.TransportError) -> ProviderUnavailableError:
        return ProviderUnavailableError(
            f"Ollama not reachable: {error}",
            {"hint": "Run 'ollama serve' in a terminal"},
        )

    async def generate(
        self,
        model: str,
        prompt: str,
        system: str | None = None,
        images: list[str] | None = None,
        stream: bool = False,
        format: str | None = None,
        on_chunk: Callable[[str], None] | None = None,
    ) -> str:
        """
        Generate a completion.

        Args:
            model: Model name (e.g., "llama3.2-vision")
            prompt: User prompt
            system: Optional system prompt
            images: Base64-encoded images for vision models
            stream: Read the response as newline-delimited JSON
            format: Output format constraint ("json")
            on_chunk: Called with each streamed fragment, in arrival order

        Returns:
            Full generated text

        Raises:
            ProviderAPIError: The daemon answered non-2xx or was unreachable
        """
        client = await self._get_client()

        payload: dict[str, Any] = {
            "model": model,
            "prompt": prompt,
            "stream": stream,
        }
        if system:
            payload["system"] = system
        if images:
            payload["images"] = images
        if format:
            payload["format"] = format

        try:
            if stream:
                return await self._generate_stream(client, payload, on_chunk)

            response = await client.post("/api/generate", json=payload)
            if response.is_error:
                raise self._api_error(response.status_code, response.text)
            data = response.json()
            return data.get("response", "")
        except httpx.TransportError as e:
            raise self._connect_error(e) from e

    async def _generate_stream(
        self,
        client: httpx.AsyncClient,
        payload: dict[str, Any],
        on_chunk: Callable[[str], None] | None,
    ) -> str:
        fragments: list[str] = []

        async with client.stream("POST", "/api/generate", json=payload) as response:
            if response.is_error:
                body = (await response.aread()).decode("utf-8", errors="replace")
                raise self._api_error(response.status_code, body)

            async for line in response.aiter_lines():
                if not line.strip():
                    continue
                try:
                    data = json.loads(line)
                except json.JSONDecodeError:
                    logger.debug("Skipping malformed stream line: %r", line)
                    continue
                if not isinstance(data, dict):
                    logger.debug("Skipping non-object stream line: %r", line)
                    continue
                if "error" in data:
                    raise self._api_error(response.status_code, str(data["error"]))
                fragment = data.get("response")
                if fragment:
                    fragments.append(fragment)
                    if on_chunk:
                        on_chunk(fragment)
                if data.get("done"):
                    break

        return "".join(fragments)

    async def is_running(self) -> bool:
        """Check whether the daemon answers."""
        client = await self._get_client()
        try:
            response = await client.get("/api/tags")
        except httpx.HTTPError:
            return False
        return response.is_success

    async def list_models(self) -> list[str]:
        """List available models."""
        client = await self._get_client()
        response = await client.get("/api/tags")
        if response.is_error:
            raise self._api_error(response.status_code, response.text)

        data = response.json()
        return [m["name"] for m in data.get("models", [])]

    async def model_exists(self, model: str) -> bool:
        """Check if a model is available locally."""
        try:
            names = await self.list_models()
        except (ProviderAPIError, httpx.HTTPError):
            return False
        return any(model in name for name in names)

    async def pull_model(
        self,
        model: str,
        on_progress: Callable[[dict[str, Any]], None] | None = None,
    ) -> None:
        """
        Pull a model from the registry.

        Args:
            model: Model name
            on_progress: Called with each progress object
                ({"status", "digest", "total", "completed"})
        """
        client = await self._get_client()

        async with client.stream(
            "POST", "/api/pull", json={"name": model}, timeout=None
        ) as response:
            if response.is_error:
                body = (await response.aread()).decode("utf-8", errors="replace")
                raise self._api_error(response.status_code, body)

            async for line in response.aiter_lines():
                if not line.strip():
                    continue
                try:
                    progress = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if not isinstance(progress, dict):
                    continue
                if "error" in progress:
                    raise self._api_error(response.status_code, str(progress["error"]))
                if on_progress:
                    on_progress(progress)
                if progress.get("status") == "success":
                    logger.info("Pulled model %s", model)
                    return

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
