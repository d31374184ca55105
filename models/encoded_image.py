from __future__ import annotations
from dataclasses import dataclass

from models.source_image import PNG_MIME_TYPE

PREVIEW_FILENAME = "original.png"


@dataclass(frozen=True)
class EncodedImage:
    """
    PNG bytes for one output square.
    `size` is the target edge length, or None for the full-size preview.
    """
    data: bytes
    size: int | None
    width: int
    height: int
    mime_type: str = PNG_MIME_TYPE

    @property
    def filename(self) -> str:
        if self.size is None:
            return PREVIEW_FILENAME
        return f"resized_{self.size}x{self.size}.png"
