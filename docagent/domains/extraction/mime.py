"""
MIME Classifier - File extension to document kind.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

__all__ = ["MimeType", "get_mime_type"]


class MimeType(str, Enum):
    """Document kinds the pipeline accepts."""

    PDF = "application/pdf"
    PNG = "image/png"
    JPEG = "image/jpeg"
    GIF = "image/gif"
    WEBP = "image/webp"

    @property
    def is_image(self) -> bool:
        return self.value.startswith("image/")


MIME_TYPES: dict[str, MimeType] = {
    ".pdf": MimeType.PDF,
    ".png": MimeType.PNG,
    ".jpg": MimeType.JPEG,
    ".jpeg": MimeType.JPEG,
    ".gif": MimeType.GIF,
    ".webp": MimeType.WEBP,
}


def get_mime_type(file_path: str | Path) -> MimeType:
    """
    Detect the document kind from the file extension.

    Unknown or missing extensions default to PDF.
    """
    return MIME_TYPES.get(Path(file_path).suffix.lower(), MimeType.PDF)
