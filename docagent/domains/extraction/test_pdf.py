"""Tests for the PDF rasterizer."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

from .models import LogEvent
from .pdf import PDF_RENDER_SCALE, pdf_to_images


def _fake_document(pages: list[bytes]) -> MagicMock:
    document = MagicMock()
    document.__enter__.return_value = document
    document.__iter__.return_value = [
        MagicMock(**{"get_pixmap.return_value.tobytes.return_value": data}) for data in pages
    ]
    return document


async def test_renders_every_page_in_order(tmp_path: Path) -> None:
    with patch("docagent.domains.extraction.pdf.fitz") as mock_fitz:
        mock_fitz.open.return_value = _fake_document([b"page-1", b"page-2"])

        images = await pdf_to_images(tmp_path / "doc.pdf")

    assert images == [b"page-1", b"page-2"]
    mock_fitz.Matrix.assert_called_once_with(PDF_RENDER_SCALE, PDF_RENDER_SCALE)


async def test_zero_pages_returns_none(tmp_path: Path) -> None:
    with patch("docagent.domains.extraction.pdf.fitz") as mock_fitz:
        mock_fitz.open.return_value = _fake_document([])

        assert await pdf_to_images(tmp_path / "empty.pdf") is None


async def test_failure_returns_none_and_logs(tmp_path: Path) -> None:
    events: list = []

    with patch(
        "docagent.domains.extraction.pdf._render_pages",
        side_effect=RuntimeError("cannot open broken document"),
    ):
        images = await pdf_to_images(tmp_path / "broken.pdf", events.append)

    assert images is None
    assert len(events) == 1
    assert isinstance(events[0], LogEvent)
    assert events[0].level == "error"
    assert events[0].message == "PDF conversion failed"
    assert "broken document" in events[0].data["error"]


async def test_missing_file_returns_none(tmp_path: Path) -> None:
    assert await pdf_to_images(tmp_path / "missing.pdf") is None
