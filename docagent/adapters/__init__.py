"""
Adapters - External service integrations.

All external API calls are wrapped here to isolate domains from third-party changes.
"""

from .gemini import GeminiClient
from .ollama import OllamaClient
from .sqlite import DocumentRepository

__all__ = [
    "GeminiClient",
    "OllamaClient",
    "DocumentRepository",
]
