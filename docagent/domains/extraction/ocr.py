"""
OCR Engine - Tesseract text recognition over page images.

Pages are recognized concurrently, one worker thread per page.
"""

from __future__ import annotations

import asyncio
import io
import logging

import pytesseract
from PIL import Image

from .events import emit_log
from .models import OcrProgressCallback, StreamCallback

logger = logging.getLogger(__name__)

__all__ = ["OCR_STATUS", "OCR_FAILED_STATUS", "ocr_images"]

OCR_STATUS = "recognizing text"
OCR_FAILED_STATUS = "failed"


def _recognize(image: bytes, language: str) -> str:
    with Image.open(io.BytesIO(image)) as picture:
        return pytesseract.image_to_string(picture, lang=language)


async def ocr_images(
    images: list[bytes],
    on_progress: OcrProgressCallback | None = None,
    on_stream: StreamCallback | None = None,
    language: str = "eng",
) -> str:
    """
    OCR all images in parallel.

    Args:
        images: Encoded page images (PNG/JPEG/...) in page order
        on_progress: Called with (page, total_pages, progress, status)
        on_stream: Optional observer for log events
        language: Tesseract language code

    Returns:
        Page texts joined as "--- Page N ---" sections; pages without
        recognizable text are left out
    """
    if not images:
        return ""

    total_pages = len(images)

    async def recognize_page(page: int, image: bytes) -> tuple[int, str]:
        if on_progress:
            on_progress(page, total_pages, 0.0, OCR_STATUS)
        try:
            text = await asyncio.to_thread(_recognize, image, language)
        except Exception as e:
            emit_log(
                on_stream,
                "error",
                f"OCR failed for page {page}",
                {"page": page, "error": str(e)},
                logger=logger,
            )
            if on_progress:
                on_progress(page, total_pages, 1.0, OCR_FAILED_STATUS)
            return page, ""

        if on_progress:
            on_progress(page, total_pages, 1.0, OCR_STATUS)
        emit_log(
            on_stream,
            "debug",
            f"OCR completed for page {page}",
            {"page": page, "textLength": len(text)},
            logger=logger,
        )
        return page, text

    results = await asyncio.gather(
        *(recognize_page(index, image) for index, image in enumerate(images, start=1))
    )

    ocr_text = "\n\n".join(
        f"--- Page {page} ---\n{text.strip()}" for page, text in results if text.strip()
    )

    emit_log(
        on_stream,
        "info",
        f"OCR complete: {total_pages} pages, {len(ocr_text)} chars",
        {"totalPages": total_pages, "totalTextLength": len(ocr_text)},
        logger=logger,
    )
    return ocr_text
