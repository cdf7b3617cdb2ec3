"""
CLI Interface - Command-line tools for DocAgent.

Provides commands for:
- Document extraction
- Listing stored documents
"""

from .main import app, main

__all__ = ["app", "main"]
