"""
Icon Resizer Pipeline
Decodes one PNG/SVG source and produces a transparent, letterboxed PNG for
every requested square size.
"""

import logging
from enum import Enum
from typing import Dict, Iterable, Optional, Sequence, Tuple

from models.image import Image
from models.source_image import SourceImage
from models.encoded_image import EncodedImage
from models.pipeline_result import PipelineResult
from models.errors import ImageResizerError
from services.decoding_service import DecodingService
from services.fitting_service import FittingService
from services.compositing_service import CompositingService
from services.keying_service import KeyingService
from services.encoding_service import EncodingService

logger = logging.getLogger(__name__)

DEFAULT_TARGET_SIZES: Tuple[int, ...] = (64, 32, 16)


class PipelineState(Enum):
    IDLE = "idle"
    DECODING = "decoding"
    FITTING = "fitting"
    COMPOSITING = "compositing"
    KEYING = "keying"
    ENCODING = "encoding"
    DONE = "done"
    FAILED = "failed"


class FailurePolicy(Enum):
    """What happens to the remaining sizes when one size fails."""

    ABORT = "abort"      # first failure ends the run, nothing is returned
    ISOLATE = "isolate"  # record the failure, keep going with the other sizes

    @classmethod
    def from_name(cls, name: str) -> "FailurePolicy":
        try:
            return cls((name or "").strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown failure policy {name!r} (expected one of: {choices})") from None


def normalize_sizes(sizes: Iterable[int], max_size: Optional[int] = None) -> Tuple[int, ...]:
    """
    Validate target sizes and drop repeats, keeping request order.
    `max_size` caps the edge length callers outside the process may ask for.
    """
    ordered = []
    for size in sizes:
        if isinstance(size, bool) or not isinstance(size, int):
            raise ValueError(f"Target size must be an integer, got {size!r}")
        if size <= 0:
            raise ValueError(f"Target size must be positive, got {size}")
        if max_size is not None and size > max_size:
            raise ValueError(f"Target size {size} exceeds the maximum of {max_size}")
        if size not in ordered:
            ordered.append(size)
    if not ordered:
        raise ValueError("At least one target size is required")
    return tuple(ordered)


class IconResizer:
    """
    Runs decode -> (fit -> composite -> key -> encode) per size.

    The source is decoded once; each size then works on its own arrays, in
    the order the sizes were given. `state` reflects the stage currently
    running (or how the last run ended).
    """

    def __init__(
        self,
        sizes: Sequence[int] = DEFAULT_TARGET_SIZES,
        *,
        failure_policy: FailurePolicy = FailurePolicy.ABORT,
        decoding_service: Optional[DecodingService] = None,
        fitting_service: Optional[FittingService] = None,
        compositing_service: Optional[CompositingService] = None,
        keying_service: Optional[KeyingService] = None,
        encoding_service: Optional[EncodingService] = None,
    ):
        self.sizes = normalize_sizes(sizes)
        self.failure_policy = failure_policy
        self.decoding_service = decoding_service or DecodingService()
        self.fitting_service = fitting_service or FittingService()
        self.compositing_service = compositing_service or CompositingService()
        self.keying_service = keying_service or KeyingService()
        self.encoding_service = encoding_service or EncodingService()
        self.state = PipelineState.IDLE

    def _enter(self, state: PipelineState, size: Optional[int] = None) -> None:
        self.state = state
        if size is None:
            logger.debug(f"Pipeline -> {state.value}")
        else:
            logger.debug(f"Pipeline -> {state.value} ({size}x{size})")

    def process_size(self, img: Image, size: int) -> EncodedImage:
        """Fit, composite, key and encode one square. `img` is left untouched."""
        self._enter(PipelineState.FITTING, size)
        fit = self.fitting_service.fit_image(img, size)

        self._enter(PipelineState.COMPOSITING, size)
        composite = self.compositing_service.composite(img, fit, size)

        self._enter(PipelineState.KEYING, size)
        keyed = self.keying_service.key_out_background(composite)

        self._enter(PipelineState.ENCODING, size)
        return self.encoding_service.encode(keyed, size=size)

    def run(self, source: SourceImage) -> PipelineResult:
        """
        Args:
            source (SourceImage): the one image to resize.

        Returns:
            PipelineResult: encoded squares keyed by size, in request order,
            plus a full-size PNG preview of the decoded source.

        Raises:
            UnsupportedFormatError, DecodeError: decoding failed; no results.
            EncodeError: a size failed under FailurePolicy.ABORT.
        """
        logger.info(f"Resizing {source.mime_type} source to sizes {list(self.sizes)} "
                    f"(policy: {self.failure_policy.value})")
        try:
            self._enter(PipelineState.DECODING)
            decoded = self.decoding_service.decode(source)
            preview = self.encoding_service.encode(decoded)
        except ImageResizerError as exc:
            self._enter(PipelineState.FAILED)
            logger.error(f"Decoding failed: {exc}")
            raise

        images: Dict[int, EncodedImage] = {}
        failures: Dict[int, ImageResizerError] = {}
        for size in self.sizes:
            try:
                images[size] = self.process_size(decoded, size)
            except ImageResizerError as exc:
                logger.error(f"Size {size}x{size} failed: {exc}")
                if self.failure_policy is FailurePolicy.ABORT:
                    self._enter(PipelineState.FAILED)
                    raise
                failures[size] = exc

        self._enter(PipelineState.DONE if images else PipelineState.FAILED)
        logger.info(f"Produced {len(images)}/{len(self.sizes)} sizes from "
                    f"{decoded.width}x{decoded.height} source")
        return PipelineResult(images=images, preview=preview, failures=failures)


def resize_icon(
    source: SourceImage,
    sizes: Sequence[int] = DEFAULT_TARGET_SIZES,
    *,
    failure_policy: FailurePolicy = FailurePolicy.ABORT,
) -> PipelineResult:
    """One-shot helper: build a resizer for `sizes` and run it on `source`."""
    return IconResizer(sizes, failure_policy=failure_policy).run(source)
