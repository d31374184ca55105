from io import BytesIO

import numpy as np
import pytest
from PIL import Image as PILImage

from models.errors import EncodeError
from models.image import Image
from services.encoding_service import EncodingService

WHITE = (255, 255, 255, 255)
RED = (255, 0, 0, 255)


def rgba_array(width, height, color=WHITE, rect=None, rect_color=RED):
    """Solid (H, W, 4) array, optionally with a filled rect=(left, top, right, bottom)."""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :] = color
    if rect is not None:
        left, top, right, bottom = rect
        pixels[top:bottom, left:right] = rect_color
    return pixels


def png_bytes(pixels: np.ndarray) -> bytes:
    buffer = BytesIO()
    PILImage.fromarray(pixels).save(buffer, format="PNG")
    return buffer.getvalue()


def decode_png_pixels(data: bytes) -> np.ndarray:
    with PILImage.open(BytesIO(data)) as pil_img:
        return np.array(pil_img.convert("RGBA"))


@pytest.fixture
def make_image():
    def _make(width, height, color=WHITE, rect=None, rect_color=RED):
        return Image(pixels=rgba_array(width, height, color, rect, rect_color))
    return _make


@pytest.fixture
def make_png():
    def _make(width, height, color=WHITE, rect=None, rect_color=RED):
        return png_bytes(rgba_array(width, height, color, rect, rect_color))
    return _make


@pytest.fixture
def logo_png(make_png):
    """100x50 white banner with a red block in the middle."""
    return make_png(100, 50, rect=(25, 12, 75, 38))


@pytest.fixture
def logo_svg():
    return (
        '<svg xmlns="http://www.w3.org/2000/svg" width="40" height="20">'
        '<rect x="0" y="0" width="40" height="20" fill="#ffffff"/>'
        '<rect x="10" y="5" width="20" height="10" fill="#0000ff"/>'
        '</svg>'
    )


@pytest.fixture
def break_encoding(monkeypatch):
    """Make EncodingService fail for the given target sizes, everywhere."""
    def _break(*sizes):
        original = EncodingService.encode

        def encode(self, img, size=None):
            if size in sizes:
                raise EncodeError("simulated codec failure", size=size)
            return original(self, img, size=size)

        monkeypatch.setattr(EncodingService, "encode", encode)
    return _break
