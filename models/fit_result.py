from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class FitResult:
    """Width/height of the source after scale-to-fit inside a square."""
    width: int
    height: int
