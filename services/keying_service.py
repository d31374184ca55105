import numpy as np

from models.image import Image

# A pixel whose R, G and B are all above this is treated as background.
KEY_THRESHOLD = 250


class KeyingService:
    """
    Global near-white colour key.

    Every qualifying pixel is keyed, including enclosed white areas inside the
    artwork; there is no flood fill from the edges.
    """

    threshold: int = KEY_THRESHOLD

    def background_mask(self, img: Image) -> np.ndarray:
        rgb = img.pixels[:, :, :3]
        return np.all(rgb > self.threshold, axis=2)

    def key_out_background(self, img: Image) -> Image:
        pixels = img.pixels.copy()
        pixels[self.background_mask(img), 3] = 0
        return Image(pixels=pixels)
