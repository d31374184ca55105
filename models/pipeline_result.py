from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from models.encoded_image import EncodedImage
from models.errors import ImageResizerError


@dataclass(frozen=True)
class PipelineResult:
    """
    Everything one resize run produced.
    `images` keeps the order the sizes were requested in.
    `failures` is only ever populated when sizes are processed in isolation.
    """
    images: Mapping[int, EncodedImage]
    preview: EncodedImage
    failures: Mapping[int, ImageResizerError] = field(default_factory=dict)

    def __post_init__(self):
        # Read-only views so callers cannot edit a finished run.
        object.__setattr__(self, "images", MappingProxyType(dict(self.images)))
        object.__setattr__(self, "failures", MappingProxyType(dict(self.failures)))

    @property
    def sizes(self) -> list[int]:
        return list(self.images.keys())

    @property
    def ok(self) -> bool:
        return not self.failures
