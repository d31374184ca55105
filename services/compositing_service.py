from typing import Tuple
import logging
import numpy as np
import cv2

from models.image import Image
from models.fit_result import FitResult

logger = logging.getLogger(__name__)


class CompositingService:
    """
    Letterboxing: scale the source to its fitted size and center it on a
    transparent square canvas.
    """

    @staticmethod
    def _premultiply(pixels: np.ndarray) -> np.ndarray:
        out = pixels.astype("float32")
        alpha = out[:, :, 3:4] / 255.0
        out[:, :, :3] *= alpha
        return out

    @staticmethod
    def _unpremultiply(pixels: np.ndarray) -> np.ndarray:
        pixels = np.clip(pixels, 0.0, 255.0)
        alpha = pixels[:, :, 3:4]
        rgb = np.divide(pixels[:, :, :3] * 255.0, alpha,
                        out=np.zeros_like(pixels[:, :, :3]), where=alpha > 0)
        out = np.concatenate([rgb, alpha], axis=2)
        return np.rint(np.clip(out, 0.0, 255.0)).astype("uint8")

    @staticmethod
    def _interpolation(src_w: int, src_h: int, dst_w: int, dst_h: int) -> int:
        # INTER_AREA is the sharpest choice for shrinking; it degrades to
        # nearest-neighbour when enlarging, so use bicubic there.
        if dst_w <= src_w and dst_h <= src_h:
            return cv2.INTER_AREA
        return cv2.INTER_CUBIC

    def resample(self, img: Image, fit: FitResult) -> np.ndarray:
        """
        Resize to the fitted dimensions.
        Works on premultiplied alpha so fully transparent pixels do not
        bleed their (meaningless) colour into visible neighbours.
        """
        if (img.width, img.height) == (fit.width, fit.height):
            return img.pixels.copy()

        interpolation = self._interpolation(img.width, img.height, fit.width, fit.height)
        premultiplied = self._premultiply(img.pixels)
        resized = cv2.resize(premultiplied, (fit.width, fit.height), interpolation=interpolation)
        return self._unpremultiply(resized)

    @staticmethod
    def transparent_canvas(size: int) -> np.ndarray:
        return np.zeros((size, size, 4), dtype=np.uint8)

    @staticmethod
    def offsets(fit: FitResult, target: int) -> Tuple[int, int]:
        """Floor division: an odd pixel of padding goes to the right/bottom."""
        return (target - fit.width) // 2, (target - fit.height) // 2

    @staticmethod
    def _source_over(dst: np.ndarray, src: np.ndarray) -> np.ndarray:
        """
        Straight-alpha source-over: src drawn on top of dst (same shape).
        """
        src_f = src.astype("float32")
        dst_f = dst.astype("float32")
        src_a = src_f[:, :, 3:4] / 255.0
        dst_a = dst_f[:, :, 3:4] / 255.0

        out_a = src_a + dst_a * (1.0 - src_a)
        weighted = src_f[:, :, :3] * src_a + dst_f[:, :, :3] * dst_a * (1.0 - src_a)
        out_rgb = np.divide(weighted, out_a,
                            out=np.zeros_like(weighted), where=out_a > 0)

        out = np.concatenate([out_rgb, out_a * 255.0], axis=2)
        return np.rint(np.clip(out, 0.0, 255.0)).astype("uint8")

    def composite(self, img: Image, fit: FitResult, target: int) -> Image:
        """
        Args:
            img (Image): decoded source pixels.
            fit (FitResult): fitted size, at most `target` on each side.
            target (int): edge length of the output square.

        Returns:
            Image: `target` x `target`, transparent outside the centered fit.
        """
        if fit.width > target or fit.height > target:
            raise ValueError(f"Fitted size {fit.width}x{fit.height} does not fit in {target}x{target}")

        resized = self.resample(img, fit)
        canvas = self.transparent_canvas(target)
        x, y = self.offsets(fit, target)

        region = canvas[y:y + fit.height, x:x + fit.width]
        canvas[y:y + fit.height, x:x + fit.width] = self._source_over(region, resized)

        logger.debug(f"Composited {img.width}x{img.height} -> {fit.width}x{fit.height} at ({x},{y}) on {target}x{target}")
        return Image(pixels=canvas)
