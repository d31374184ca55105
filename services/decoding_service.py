import logging

from models.image import Image
from models.source_image import SourceImage, RasterSource, VectorSource, is_raster_mime, is_vector_mime
from models.errors import UnsupportedFormatError, DecodeError
from repositories.image_repository import ImageRepository
from repositories.vector_repository import VectorRepository

logger = logging.getLogger(__name__)


class DecodingService:
    """Turns a captured PNG or SVG source into RGBA pixels."""

    def __init__(self):
        self.image_repository = ImageRepository()
        self.vector_repository = VectorRepository()

    @staticmethod
    def is_supported(mime_type: str | None) -> bool:
        return is_raster_mime(mime_type) or is_vector_mime(mime_type)

    @classmethod
    def ensure_supported(cls, mime_type: str | None) -> None:
        """
        Reject anything that is not PNG or SVG.
        Callers run this on the declared type before touching the file contents.
        """
        if not cls.is_supported(mime_type):
            raise UnsupportedFormatError(mime_type)

    def rasterize(self, source: VectorSource) -> bytes:
        return self.vector_repository.rasterize(source.document_text)

    def decode(self, source: SourceImage) -> Image:
        """
        Args:
            source (SourceImage): raster bytes or SVG markup.

        Returns:
            Image: pixels at the source's natural size.

        Raises:
            UnsupportedFormatError: declared type is neither PNG nor SVG.
            DecodeError: the data cannot be read as an image.
        """
        if isinstance(source, VectorSource):
            if not is_vector_mime(source.mime_type):
                raise UnsupportedFormatError(source.mime_type)
            png_bytes = self.rasterize(source)
        elif isinstance(source, RasterSource):
            if not is_raster_mime(source.mime_type):
                raise UnsupportedFormatError(source.mime_type)
            png_bytes = source.data
        else:
            raise TypeError(f"Expected RasterSource or VectorSource, got {type(source).__name__}")

        if not self.image_repository.looks_like_png(png_bytes):
            raise DecodeError("Data declared as PNG does not start with a PNG signature")

        image = self.image_repository.decode_png(png_bytes)
        logger.debug(f"Decoded {source.mime_type} source to {image.width}x{image.height}")
        return image
