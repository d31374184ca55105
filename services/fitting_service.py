import math

from models.image import Image
from models.fit_result import FitResult


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives; Python's round() would go to even."""
    return int(math.floor(value + 0.5))


class FittingService:
    """
    Aspect-preserving scale-to-fit inside a square.

    Each branch rounds its derived side on its own, so the fitted rectangle can
    differ from the source ratio by a pixel.
    """

    @staticmethod
    def fit(src_width: int, src_height: int, target: int) -> FitResult:
        if src_width <= 0 or src_height <= 0:
            raise ValueError(f"Source dimensions must be positive, got {src_width}x{src_height}")
        if target <= 0:
            raise ValueError(f"Target size must be positive, got {target}")

        ratio = src_width / src_height
        if ratio > 1:
            # Wider than tall
            width = target
            height = round_half_up(target / ratio)
        else:
            # Taller than wide, or square
            height = target
            width = round_half_up(target * ratio)

        # Extreme ratios would otherwise round a side down to zero.
        return FitResult(width=max(1, width), height=max(1, height))

    def fit_image(self, img: Image, target: int) -> FitResult:
        return self.fit(img.width, img.height, target)
