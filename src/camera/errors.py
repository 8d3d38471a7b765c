"""
Camera failure taxonomy.

Every failure carries the driver's reason string so it can be logged or
shown to the operator as-is.
"""

from __future__ import annotations


class CameraError(RuntimeError):
    """Base class for recoverable camera driver failures."""

    prefix = "Camera error"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"{self.prefix}: {reason}")


class StreamOpenError(CameraError):
    prefix = "Failed to open camera stream"


class StreamCloseError(CameraError):
    prefix = "Failed to close camera stream"


class FrameGrabError(CameraError):
    prefix = "Failed to grab a frame"


class FrameDecodeError(CameraError):
    prefix = "Failed to decode image"
