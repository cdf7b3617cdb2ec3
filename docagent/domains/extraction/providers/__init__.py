"""
Provider adapters - One per model backend.
"""

from .gemini import GeminiExtractor
from .ollama import OcrProgressTracker, OllamaExtractor

__all__ = ["GeminiExtractor", "OllamaExtractor", "OcrProgressTracker"]
