"""
Calibration models.

A calibration is a single learned threshold: the largest face box the
operator considers acceptable. It lives for one process run only.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Size:
    """Unsigned (width, height) pair, compared component-wise."""
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Size must be non-negative, got {self.width}x{self.height}")

    def exceeds(self, limit: "Size") -> bool:
        """True when either dimension is strictly larger than the limit's."""
        return self.width > limit.width or self.height > limit.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class Calibration:
    """
    Result of the interactive calibration procedure.

    Attributes:
        max_detection_size: The largest face box size before the user is
            deemed to be too close to the camera.
    """
    max_detection_size: Size
