"""Tests for the OCR engine."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from .ocr import OCR_FAILED_STATUS, OCR_STATUS, ocr_images

PATCH_TARGET = "docagent.domains.extraction.ocr._recognize"


def _fake_recognize(texts: dict[bytes, str]):
    def recognize(image: bytes, language: str) -> str:
        result = texts[image]
        if result == "FAIL":
            raise RuntimeError("tesseract crashed")
        return result

    return recognize


async def test_empty_input_returns_empty_string() -> None:
    with patch(PATCH_TARGET) as recognize:
        assert await ocr_images([]) == ""

    recognize.assert_not_called()


async def test_pages_joined_in_order() -> None:
    texts = {b"one": "  First page  \n", b"two": "Second page"}

    with patch(PATCH_TARGET, side_effect=_fake_recognize(texts)):
        result = await ocr_images([b"one", b"two"])

    assert result == "--- Page 1 ---\nFirst page\n\n--- Page 2 ---\nSecond page"


async def test_failed_page_is_dropped() -> None:
    texts = {b"one": "Store total 12.00", b"two": "FAIL"}
    events: list = []

    with patch(PATCH_TARGET, side_effect=_fake_recognize(texts)):
        result = await ocr_images([b"one", b"two"], on_stream=events.append)

    assert result == "--- Page 1 ---\nStore total 12.00"
    assert "--- Page 2 ---" not in result
    assert any(e.level == "error" and e.message == "OCR failed for page 2" for e in events)


async def test_blank_page_is_dropped() -> None:
    texts = {b"one": " \n\t ", b"two": "Only text"}

    with patch(PATCH_TARGET, side_effect=_fake_recognize(texts)):
        result = await ocr_images([b"one", b"two"])

    assert result == "--- Page 2 ---\nOnly text"


async def test_progress_reported_per_page() -> None:
    texts = {b"a": "A", b"b": "B"}
    progress: list[tuple[int, int, float, str]] = []

    with patch(PATCH_TARGET, side_effect=_fake_recognize(texts)):
        await ocr_images(
            [b"a", b"b"],
            on_progress=lambda *args: progress.append(args),
        )

    for page in (1, 2):
        reported = [p for p in progress if p[0] == page]
        assert reported[0] == (page, 2, 0.0, OCR_STATUS)
        assert reported[-1] == (page, 2, 1.0, OCR_STATUS)
    assert all(0.0 <= p[2] <= 1.0 for p in progress)


async def test_failed_page_reports_terminal_progress() -> None:
    texts = {b"a": "A", b"b": "FAIL"}
    progress: list[tuple[int, int, float, str]] = []

    with patch(PATCH_TARGET, side_effect=_fake_recognize(texts)):
        await ocr_images(
            [b"a", b"b"],
            on_progress=lambda *args: progress.append(args),
        )

    reported = [p for p in progress if p[0] == 2]
    assert reported[-1] == (2, 2, 1.0, OCR_FAILED_STATUS)


async def test_language_passed_through() -> None:
    with patch(PATCH_TARGET, return_value="Texte") as recognize:
        await ocr_images([b"page"], language="fra")

    recognize.assert_called_once_with(b"page", "fra")


@pytest.mark.parametrize("count", [1, 5])
async def test_every_page_recognized(count: int) -> None:
    images = [f"page-{i}".encode() for i in range(count)]

    with patch(PATCH_TARGET, side_effect=lambda image, language: image.decode()) as recognize:
        result = await ocr_images(images)

    assert recognize.call_count == count
    assert result.count("--- Page ") == count
