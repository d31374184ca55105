from pathlib import Path
from typing import Union
from io import BytesIO
import logging
import numpy as np
from PIL import Image as PILImage, UnidentifiedImageError

from models.image import Image
from models.errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class ImageRepository:
    """
    Handles PNG bytes <-> Image conversion and writing results to disk.
    No Pillow logic outside this file.
    """

    @staticmethod
    def looks_like_png(data: bytes) -> bool:
        return data[:len(PNG_SIGNATURE)] == PNG_SIGNATURE

    @staticmethod
    def decode_png(data: bytes) -> Image:
        """
        Decode PNG bytes into straight-alpha RGBA pixels.

        Raises:
            DecodeError: if Pillow cannot read the data or the image has no area.
        """
        try:
            with PILImage.open(BytesIO(data)) as pil_img:
                pil_img.load()
                rgba = pil_img.convert("RGBA")
        except (UnidentifiedImageError, PILImage.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
            raise DecodeError(f"Could not decode PNG data: {exc}") from exc

        width, height = rgba.size
        if width == 0 or height == 0:
            raise DecodeError(f"Decoded image has no area: {width}x{height}")

        pixels = np.array(rgba, dtype=np.uint8)  # copy, (H, W, 4)
        return Image(pixels=pixels)

    @staticmethod
    def encode_png(image: Image) -> bytes:
        """
        Serialize pixels losslessly as RGBA PNG.

        Raises:
            EncodeError: if Pillow reports a failure while writing.
        """
        pixels = image.pixels
        if not pixels.flags['C_CONTIGUOUS']:
            pixels = np.ascontiguousarray(pixels)

        buffer = BytesIO()
        try:
            PILImage.fromarray(pixels).save(buffer, format="PNG")
        except (OSError, ValueError) as exc:
            raise EncodeError(f"Could not encode {image.width}x{image.height} image as PNG: {exc}") from exc
        return buffer.getvalue()

    @staticmethod
    def read_bytes(path: Union[str, Path]) -> bytes:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found or unreadable: {path}")
        return path.read_bytes()

    @staticmethod
    def save(data: bytes, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug(f"Wrote {len(data)} bytes to {path}")
        return path
