"""
Ollama Adapter - Local inference daemon client.
"""

from .client import DEFAULT_OLLAMA_URL, OllamaClient

__all__ = ["OllamaClient", "DEFAULT_OLLAMA_URL"]
