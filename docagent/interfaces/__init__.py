"""
Interfaces - User-facing applications.

- cli: Command-line interface
- mcp: Model Context Protocol server
"""

__all__ = ["cli", "mcp"]
