"""
SQLite Adapter - Persistent storage for extracted documents.
"""

from .repository import DocumentRepository, DocumentStatus

__all__ = ["DocumentRepository", "DocumentStatus"]
