import numpy as np

from models.image import Image
from services.keying_service import KeyingService, KEY_THRESHOLD


def pixel_image(*rgba):
    return Image(pixels=np.array([list(rgba)], dtype=np.uint8).reshape(1, len(rgba) // 4, 4))


def test_threshold_is_250():
    assert KEY_THRESHOLD == 250


def test_near_white_is_keyed():
    out = KeyingService().key_out_background(pixel_image(251, 251, 251, 255, 255, 255, 255, 128))
    assert out.alpha.tolist() == [[0, 0]]


def test_threshold_is_strict_and_needs_all_channels():
    img = pixel_image(
        250, 255, 255, 255,
        255, 250, 255, 255,
        255, 255, 250, 200,
        10, 20, 30, 77,
    )
    out = KeyingService().key_out_background(img)
    assert out.alpha.tolist() == [[255, 255, 200, 77]]
    assert np.array_equal(out.pixels[:, :, :3], img.pixels[:, :, :3])


def test_interior_white_is_keyed_too(make_image):
    # White square enclosed by a red frame: no flood fill, so it is keyed anyway.
    img = make_image(10, 10, color=(255, 0, 0, 255), rect=(3, 3, 7, 7), rect_color=(255, 255, 255, 255))
    out = KeyingService().key_out_background(img)

    assert np.all(out.alpha[3:7, 3:7] == 0)
    assert out.alpha[0, 0] == 255


def test_keying_is_idempotent(make_image):
    img = make_image(12, 6, rect=(2, 1, 8, 5))
    once = KeyingService().key_out_background(img)
    twice = KeyingService().key_out_background(once)
    assert np.array_equal(once.pixels, twice.pixels)


def test_input_is_not_modified(make_image):
    img = make_image(4, 4)
    KeyingService().key_out_background(img)
    assert np.all(img.alpha == 255)
