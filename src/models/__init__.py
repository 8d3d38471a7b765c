"""
Typed models for the posture monitor.
"""

from .frame import FrameData
from .calibration import Size, Calibration
from .detection import BoundingBox
from .config import (
    Config,
    CameraConfig,
    DetectorConfig,
    MonitorConfig,
    OverlayConfig,
)

__all__ = [
    # Frame
    "FrameData",
    # Detection
    "BoundingBox",
    # Calibration
    "Size",
    "Calibration",
    # Config
    "Config",
    "CameraConfig",
    "DetectorConfig",
    "MonitorConfig",
    "OverlayConfig",
]
