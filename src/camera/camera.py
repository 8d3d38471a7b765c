"""
FrameSource factory.

This is the single entrypoint the rest of the project should use to create a
camera-backed frame source.
"""

from __future__ import annotations

from typing import Optional

from models.config import CameraConfig
from .backends.opencv import OpenCVDriver
from .base import CaptureMode, CameraDriver
from .source import FrameSource


def create_driver(camera_cfg: CameraConfig) -> CameraDriver:
    if camera_cfg.backend != "opencv":
        raise ValueError(f"Unsupported camera backend: {camera_cfg.backend}")

    return OpenCVDriver(
        device_id=camera_cfg.device_id,
        resolution=tuple(camera_cfg.resolution),
        fps=int(camera_cfg.fps),
        buffer_size=int(camera_cfg.buffer_size),
    )


def create_frame_source(
    camera_cfg: CameraConfig,
    mode: Optional[CaptureMode] = None,
    source_id: str = "main-camera",
) -> FrameSource:
    """
    Build a FrameSource from the `camera` config section.

    Args:
        camera_cfg: Typed camera configuration.
        mode: Overrides `camera.mode` when given.
        source_id: Identifier used in logs and FrameData.
    """
    if mode is None:
        mode = CaptureMode(camera_cfg.mode)
    return FrameSource(create_driver(camera_cfg), mode=mode, source_id=source_id)
