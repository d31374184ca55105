import logging

from models.image import Image
from models.encoded_image import EncodedImage
from models.errors import EncodeError
from repositories.image_repository import ImageRepository

logger = logging.getLogger(__name__)


class EncodingService:
    """PNG serialization. Pixels are written exactly as given."""

    def __init__(self):
        self.image_repository = ImageRepository()

    def encode(self, img: Image, size: int | None = None) -> EncodedImage:
        try:
            data = self.image_repository.encode_png(img)
        except EncodeError as exc:
            raise EncodeError(str(exc), size=size) from exc

        logger.debug(f"Encoded {img.width}x{img.height} image ({len(data)} bytes)")
        return EncodedImage(data=data, size=size, width=img.width, height=img.height)
