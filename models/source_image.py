from __future__ import annotations
from dataclasses import dataclass
from typing import Union

PNG_MIME_TYPE = "image/png"
SVG_MIME_TYPE = "image/svg+xml"


def is_raster_mime(mime_type: str | None) -> bool:
    # Browsers sometimes report parameters after the type, e.g. "image/png; q=1".
    return bool(mime_type) and mime_type.lower().startswith(PNG_MIME_TYPE)


def is_vector_mime(mime_type: str | None) -> bool:
    return bool(mime_type) and mime_type.lower() == SVG_MIME_TYPE


@dataclass(frozen=True)
class RasterSource:
    """Raw PNG bytes as captured from the caller."""
    data: bytes
    mime_type: str = PNG_MIME_TYPE


@dataclass(frozen=True)
class VectorSource:
    """SVG markup, kept as text until it is rasterized."""
    document_text: str
    mime_type: str = SVG_MIME_TYPE


SourceImage = Union[RasterSource, VectorSource]
