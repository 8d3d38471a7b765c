"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class CameraConfig:
    """Camera configuration."""
    backend: str = "opencv"
    device_id: Union[int, str] = 0
    resolution: List[int] = field(default_factory=lambda: [640, 480])
    fps: int = 30
    buffer_size: int = 1
    mode: str = "continuous"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CameraConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            backend=d.get("backend", "opencv"),
            device_id=d.get("device_id", 0),
            resolution=d.get("resolution", [640, 480]),
            fps=d.get("fps", 30),
            buffer_size=d.get("buffer_size", 1),
            mode=d.get("mode", "continuous"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "device_id": self.device_id,
            "resolution": self.resolution,
            "fps": self.fps,
            "buffer_size": self.buffer_size,
            "mode": self.mode,
        }


@dataclass
class DetectorConfig:
    """Face detector tuning knobs. Fixed once the detector is built."""
    model_path: Optional[str] = None
    min_face_size: int = 20
    score_threshold: float = 2.0
    pyramid_scale_factor: float = 0.8
    slide_window_step: List[int] = field(default_factory=lambda: [4, 4])
    min_neighbors: int = 3

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectorConfig":
        return cls(
            model_path=d.get("model_path"),
            min_face_size=d.get("min_face_size", 20),
            score_threshold=d.get("score_threshold", 2.0),
            pyramid_scale_factor=d.get("pyramid_scale_factor", 0.8),
            slide_window_step=d.get("slide_window_step", [4, 4]),
            min_neighbors=d.get("min_neighbors", 3),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "min_face_size": self.min_face_size,
            "score_threshold": self.score_threshold,
            "pyramid_scale_factor": self.pyramid_scale_factor,
            "slide_window_step": self.slide_window_step,
            "min_neighbors": self.min_neighbors,
        }
        if self.model_path is not None:
            d["model_path"] = self.model_path
        return d


@dataclass
class MonitorConfig:
    """Sampling cadence and face selection."""
    interval: float = 0.5
    failure_backoff: float = 1.0
    max_consecutive_failures: int = 10
    selection: str = "largest"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MonitorConfig":
        return cls(
            interval=d.get("interval", 0.5),
            failure_backoff=d.get("failure_backoff", 1.0),
            max_consecutive_failures=d.get("max_consecutive_failures", 10),
            selection=d.get("selection", "largest"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interval": self.interval,
            "failure_backoff": self.failure_backoff,
            "max_consecutive_failures": self.max_consecutive_failures,
            "selection": self.selection,
        }


@dataclass
class OverlayConfig:
    """Blocking overlay appearance."""
    message: str = "Too close! Move back from the screen."
    background: str = "black"
    foreground: str = "red"
    font_size: int = 48
    poll_interval_ms: int = 50

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "OverlayConfig":
        return cls(
            message=d.get("message", "Too close! Move back from the screen."),
            background=d.get("background", "black"),
            foreground=d.get("foreground", "red"),
            font_size=d.get("font_size", 48),
            poll_interval_ms=d.get("poll_interval_ms", 50),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "background": self.background,
            "foreground": self.foreground,
            "font_size": self.font_size,
            "poll_interval_ms": self.poll_interval_ms,
        }


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    camera: CameraConfig = field(default_factory=CameraConfig)
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    overlay: OverlayConfig = field(default_factory=OverlayConfig)
    log_path: str = "logs/neck_check.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            camera=CameraConfig.from_dict(d.get("camera", {}) or {}),
            detector=DetectorConfig.from_dict(d.get("detector", {}) or {}),
            monitor=MonitorConfig.from_dict(d.get("monitor", {}) or {}),
            overlay=OverlayConfig.from_dict(d.get("overlay", {}) or {}),
            log_path=d.get("log_path", "logs/neck_check.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "camera": self.camera.to_dict(),
            "detector": self.detector.to_dict(),
            "monitor": self.monitor.to_dict(),
            "overlay": self.overlay.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
