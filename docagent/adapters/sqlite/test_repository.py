"""Tests for SQLite Repository."""

from datetime import datetime, timezone
from pathlib import Path

import aiosqlite
import pytest

from docagent.domains.extraction.contracts import DocumentStore
from docagent.domains.extraction.models import DocumentType, ExtractedDocument, LineItem

from .repository import DocumentRepository, DocumentStatus


@pytest.fixture
async def repo(tmp_path: Path):
    """Create a test repository with temporary database."""
    repo = DocumentRepository(tmp_path / "data" / "test.db")
    await repo.initialize()
    yield repo
    await repo.close()


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "receipt.pdf"
    path.write_bytes(b"%PDF-1.4 receipt")
    return path


def _document(doc_id: str = "doc-1", vendor: str = "Trader Joe's") -> ExtractedDocument:
    return ExtractedDocument(
        id=doc_id,
        filename="receipt.pdf",
        extracted_at=datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc),
        type=DocumentType.RECEIPT,
        vendor=vendor,
        amount=22.4,
        date="2024-03-05",
        date_raw="3/5/24",
        items=[LineItem(description="Bananas", total=0.58)],
    )


async def test_initialize_creates_table(repo: DocumentRepository):
    conn = await repo._get_connection()
    cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    tables = {row[0] for row in await cursor.fetchall()}

    assert "documents" in tables
    assert isinstance(repo, DocumentStore)


async def test_save_and_get_document(repo: DocumentRepository, source: Path):
    await repo.save_document(_document(), source)

    row = await repo.get_document("doc-1")
    assert row is not None
    assert row["path"] == str(source)
    assert row["status"] == DocumentStatus.PENDING
    assert len(row["hash"]) == 64
    assert row["data"]["vendor"] == "Trader Joe's"
    assert row["data"]["dateRaw"] == "3/5/24"
    assert row["data"]["items"] == [{"description": "Bananas", "total": 0.58}]
    assert "rawText" not in row["data"]


async def test_get_missing_document(repo: DocumentRepository):
    assert await repo.get_document("nope") is None


async def test_upsert_resets_status(repo: DocumentRepository, source: Path):
    """Saving again replaces the data and marks the document for re-indexing."""
    await repo.save_document(_document(), source)
    await repo.set_status("doc-1", DocumentStatus.INDEXED)
    assert (await repo.get_document("doc-1"))["status"] == DocumentStatus.INDEXED

    await repo.save_document(_document(vendor="TJ's"), source)

    row = await repo.get_document("doc-1")
    assert row["status"] == DocumentStatus.PENDING
    assert row["data"]["vendor"] == "TJ's"
    assert await repo.get_document_count() == 1


async def test_list_documents_newest_first(repo: DocumentRepository, source: Path):
    for doc_id in ("first", "second", "third"):
        await repo.save_document(_document(doc_id), source)

    rows = await repo.list_documents()

    assert [r["id"] for r in rows] == ["third", "second", "first"]
    assert await repo.get_document_count() == 3


async def test_missing_source_file_has_no_hash(repo: DocumentRepository, tmp_path: Path):
    await repo.save_document(_document(), tmp_path / "deleted.pdf")

    row = await repo.get_document("doc-1")
    assert row["hash"] is None


async def test_invalid_status_rejected(repo: DocumentRepository, source: Path):
    await repo.save_document(_document(), source)

    with pytest.raises(aiosqlite.IntegrityError):
        await repo.set_status("doc-1", "archived")


async def test_in_memory_database():
    repo = DocumentRepository(":memory:")
    await repo.initialize()
    assert await repo.get_document_count() == 0
    await repo.close()
