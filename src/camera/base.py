"""
Camera driver interface.

A driver is the thin boundary to the capture hardware:
- open_stream() / stop_stream() manage the hardware stream
- frame() pulls one raw frame payload

Drivers raise on failure; the exception text is the failure reason.
FrameSource turns those into the typed errors in camera.errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


PIXEL_FORMATS = {
    "RGB24": 3,
    "BGR24": 3,
    "GRAY8": 1,
}


class CaptureMode(Enum):
    """How a FrameSource treats the stream between captures."""

    CONTINUOUS = "continuous"  # stream stays open across captures
    DISCRETE = "discrete"  # stream is closed after every capture


@dataclass(frozen=True)
class RawFrame:
    """
    Undecoded frame payload as delivered by a driver.

    Attributes:
        buffer: Packed pixel bytes, row-major, no padding.
        width: Frame width in pixels.
        height: Frame height in pixels.
        pixel_format: One of PIXEL_FORMATS.
    """
    buffer: bytes
    width: int
    height: int
    pixel_format: str = "BGR24"


class CameraDriver:
    def open_stream(self) -> None:
        raise NotImplementedError

    def stop_stream(self) -> None:
        raise NotImplementedError

    def is_stream_open(self) -> bool:
        raise NotImplementedError

    def frame(self) -> RawFrame:
        raise NotImplementedError
