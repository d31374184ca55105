from __future__ import annotations


class ImageResizerError(Exception):
    """Base class for every failure the resize pipeline reports."""


class UnsupportedFormatError(ImageResizerError):
    """Declared mime type is not PNG or SVG. Raised before any decode attempt."""

    def __init__(self, mime_type: str | None):
        self.mime_type = mime_type
        super().__init__(f"Unsupported image type: {mime_type or 'unknown'} (expected PNG or SVG)")


class DecodeError(ImageResizerError):
    """Source bytes or SVG document could not be turned into pixels."""


class EncodeError(ImageResizerError):
    """Final pixels could not be serialized to PNG."""

    def __init__(self, message: str, size: int | None = None):
        self.size = size
        super().__init__(message)
