"""
Camera package.

Canonical imports:
- `from camera.camera import create_frame_source`
- `from camera.source import FrameSource`
- `from camera.errors import CameraError` (and the four specific failures)
"""

from .base import CameraDriver, CaptureMode, RawFrame
from .errors import (
    CameraError,
    FrameDecodeError,
    FrameGrabError,
    StreamCloseError,
    StreamOpenError,
)
from .source import FrameSource

__all__ = [
    "CameraDriver",
    "CaptureMode",
    "RawFrame",
    "CameraError",
    "FrameDecodeError",
    "FrameGrabError",
    "StreamCloseError",
    "StreamOpenError",
    "FrameSource",
]
