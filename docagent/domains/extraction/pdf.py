"""
PDF Rasterizer - Render PDF pages to PNG images for OCR and vision models.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import fitz

from .events import emit_log
from .models import StreamCallback

logger = logging.getLogger(__name__)

__all__ = ["PDF_RENDER_SCALE", "pdf_to_images"]

# Zoom factor applied to every rendered page
PDF_RENDER_SCALE = 3


def _render_pages(pdf_path: Path, scale: float) -> list[bytes]:
    matrix = fitz.Matrix(scale, scale)
    with fitz.open(pdf_path) as document:
        return [page.get_pixmap(matrix=matrix).tobytes("png") for page in document]


async def pdf_to_images(
    file_path: str | Path,
    on_stream: StreamCallback | None = None,
) -> list[bytes] | None:
    """
    Convert every PDF page to a PNG image.

    Args:
        file_path: Path to the PDF
        on_stream: Optional observer for log events

    Returns:
        Page images in document order, or None if the PDF could not be
        rendered or has no pages
    """
    try:
        pages = await asyncio.to_thread(_render_pages, Path(file_path), PDF_RENDER_SCALE)
    except Exception as e:
        emit_log(
            on_stream,
            "error",
            "PDF conversion failed",
            {"filePath": str(file_path), "error": str(e)},
            logger=logger,
        )
        return None

    emit_log(
        on_stream,
        "debug",
        f"PDF converted: {len(pages)} pages",
        {"filePath": str(file_path), "pageCount": len(pages)},
        logger=logger,
    )
    return pages or None
