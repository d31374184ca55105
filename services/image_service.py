from pathlib import Path
from typing import List, Union
import logging
import mimetypes

from models.source_image import SourceImage, RasterSource, VectorSource, is_vector_mime
from models.pipeline_result import PipelineResult
from models.errors import DecodeError
from repositories.image_repository import ImageRepository
from services.decoding_service import DecodingService

logger = logging.getLogger(__name__)


class ImageService:
    """I/O helpers around the pipeline: capturing sources and saving results."""

    def __init__(self):
        self.image_repository = ImageRepository()

    @staticmethod
    def guess_mime_type(filename: Union[str, Path, None]) -> str | None:
        if not filename:
            return None
        mime_type, _ = mimetypes.guess_type(str(filename))
        return mime_type

    @staticmethod
    def create_source(data: bytes, mime_type: str | None) -> SourceImage:
        """
        Wrap captured bytes as a raster or vector source.

        Raises:
            UnsupportedFormatError: mime type is not PNG or SVG.
            DecodeError: SVG bytes are not valid UTF-8 text.
        """
        DecodingService.ensure_supported(mime_type)
        if is_vector_mime(mime_type):
            try:
                text = data.decode("utf-8-sig")
            except UnicodeDecodeError as exc:
                raise DecodeError(f"SVG document is not valid UTF-8: {exc}") from exc
            return VectorSource(document_text=text)
        return RasterSource(data=data, mime_type=mime_type)

    def load_source(self, path: Union[str, Path], mime_type: str | None = None) -> SourceImage:
        """
        Capture a file from disk. The type check (declared or guessed from the
        extension) runs before the file is opened.
        """
        path = Path(path)
        mime_type = mime_type or self.guess_mime_type(path)
        DecodingService.ensure_supported(mime_type)

        data = self.image_repository.read_bytes(path)
        logger.info(f"Loaded {path.name} ({mime_type}, {len(data)} bytes)")
        return self.create_source(data, mime_type)

    def save_result(
        self,
        result: PipelineResult,
        output_dir: Union[str, Path],
        *,
        include_preview: bool = False,
    ) -> List[Path]:
        """Write every encoded size (and optionally the preview) as resized_NxN.png."""
        output_dir = Path(output_dir)
        encoded = list(result.images.values())
        if include_preview:
            encoded.append(result.preview)

        saved = []
        for item in encoded:
            saved.append(self.image_repository.save(item.data, output_dir / item.filename))
        return saved
