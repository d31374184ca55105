# repositories/vector_repository.py
import logging
import cairosvg

from models.errors import DecodeError

logger = logging.getLogger(__name__)


class VectorRepository:
    """
    SVG -> PNG rasterization.

    • Renders at the size the document declares (width/height or viewBox).
    • No scaling here; the compositor handles all resizing uniformly.
    """

    @staticmethod
    def rasterize(document_text: str) -> bytes:
        """
        Returns PNG bytes for the SVG markup.
        Any parse or render failure is reported as DecodeError.
        """
        if not document_text or not document_text.strip():
            raise DecodeError("SVG document is empty")

        try:
            png_bytes = cairosvg.svg2png(bytestring=document_text.encode("utf-8"))
        except Exception as exc:
            # cairosvg surfaces XML, CSS and cairo errors with unrelated types.
            raise DecodeError(f"Could not rasterize SVG document: {exc}") from exc

        if not png_bytes:
            raise DecodeError("SVG document rendered to an empty raster")

        logger.debug(f"Rasterized SVG ({len(document_text)} chars) to {len(png_bytes)} PNG bytes")
        return png_bytes
