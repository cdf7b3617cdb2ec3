"""
SQLite Repository - Storage for extracted documents.

Features:
- Async operations via aiosqlite
- Upsert by document id
- Indexing status tracking (pending / indexed / failed)
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite

from docagent.config import StorageError
from docagent.domains.extraction.models import ExtractedDocument

logger = logging.getLogger(__name__)

__all__ = ["DocumentRepository", "DocumentStatus"]


class DocumentStatus:
    """Indexing status values."""

    PENDING = "pending"
    INDEXED = "indexed"
    FAILED = "failed"


class DocumentRepository:
    """
    SQLite repository for extracted documents.

    Example:
        >>> repo = DocumentRepository("data/doc-agent.db")
        >>> await repo.initialize()
        >>> await repo.save_document(document, "/path/to/receipt.pdf")
        >>> rows = await repo.list_documents()
    """

    def __init__(self, db_path: str | Path) -> None:
        """
        Initialize repository.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._connection: aiosqlite.Connection | None = None

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
        return self._connection

    async def initialize(self) -> None:
        """Initialize database schema."""
        conn = await self._get_connection()

        await conn.executescript("""
            CREATE TABLE IF NOT EXISTS documents (
                id TEXT PRIMARY KEY,
                path TEXT NOT NULL,
                hash TEXT,
                status TEXT NOT NULL DEFAULT 'pending'
                    CHECK (status IN ('pending', 'indexed', 'failed')),
                data TEXT NOT NULL,
                created_at TIMESTAMP NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_documents_status ON documents(status);
            CREATE INDEX IF NOT EXISTS idx_documents_created ON documents(created_at);
        """)

        await conn.commit()
        logger.info("Database initialized: %s", self.db_path)

    @staticmethod
    def _file_hash(file_path: Path) -> str | None:
        try:
            return hashlib.sha256(file_path.read_bytes()).hexdigest()
        except OSError:
            return None

    async def save_document(
        self,
        document: ExtractedDocument,
        file_path: str | Path,
    ) -> None:
        """
        Insert or update a document.

        Every save resets the status to pending so the document is re-indexed.
        """
        conn = await self._get_connection()
        path = Path(file_path)
        file_hash = await asyncio.to_thread(self._file_hash, path)

        try:
            await conn.execute(
                """
                INSERT INTO documents (id, path, hash, status, data, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    path = excluded.path,
                    hash = excluded.hash,
                    status = excluded.status,
                    data = excluded.data
                """,
                (
                    document.id,
                    str(path),
                    file_hash,
                    DocumentStatus.PENDING,
                    json.dumps(document.to_record()),
                    datetime.now(timezone.utc).isoformat(),
                ),
            )
            await conn.commit()
        except aiosqlite.Error as e:
            raise StorageError(
                f"Failed to save document {document.id}: {e}",
                {"id": document.id, "path": str(path)},
            ) from e

        logger.debug("Saved document %s (%s)", document.id, document.filename)

    async def set_status(self, doc_id: str, status: str) -> None:
        """Update the indexing status of a document."""
        conn = await self._get_connection()
        await conn.execute("UPDATE documents SET status = ? WHERE id = ?", (status, doc_id))
        await conn.commit()

    @staticmethod
    def _row_to_dict(row: aiosqlite.Row) -> dict[str, Any]:
        record = dict(row)
        record["data"] = json.loads(record["data"])
        return record

    async def get_document(self, doc_id: str) -> dict[str, Any] | None:
        """Get document by ID."""
        conn = await self._get_connection()

        cursor = await conn.execute("SELECT * FROM documents WHERE id = ?", (doc_id,))
        row = await cursor.fetchone()

        if row:
            return self._row_to_dict(row)
        return None

    async def list_documents(self) -> list[dict[str, Any]]:
        """List all documents, newest first."""
        conn = await self._get_connection()

        cursor = await conn.execute(
            "SELECT * FROM documents ORDER BY created_at DESC, rowid DESC"
        )
        rows = await cursor.fetchall()

        return [self._row_to_dict(row) for row in rows]

    async def get_document_count(self) -> int:
        """Get total document count."""
        conn = await self._get_connection()
        cursor = await conn.execute("SELECT COUNT(*) FROM documents")
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
