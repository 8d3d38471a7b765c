"""
Pytest configuration and shared fixtures.
"""

import io
import os
import sys

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from camera.base import CameraDriver, CaptureMode, RawFrame  # noqa: E402
from camera.source import FrameSource  # noqa: E402
from detection.base import FaceDetector  # noqa: E402
from models.detection import BoundingBox  # noqa: E402
from monitor.console import OperatorConsole  # noqa: E402


class FakeDriver(CameraDriver):
    """In-memory camera driver that counts stream open/close calls."""

    def __init__(self, width=64, height=48, pixel_format="RGB24"):
        self.width = width
        self.height = height
        self.pixel_format = pixel_format
        self.open_calls = 0
        self.close_calls = 0
        self.frame_calls = 0
        self.fail_open = None
        self.fail_close = None
        self.fail_frame = None
        self.bad_payload = False
        self._open = False

    def open_stream(self):
        self.open_calls += 1
        if self.fail_open:
            raise RuntimeError(self.fail_open)
        self._open = True

    def stop_stream(self):
        self.close_calls += 1
        if self.fail_close:
            raise RuntimeError(self.fail_close)
        self._open = False

    def is_stream_open(self):
        return self._open

    def frame(self):
        self.frame_calls += 1
        if self.fail_frame:
            raise RuntimeError(self.fail_frame)
        channels = 1 if self.pixel_format == "GRAY8" else 3
        pixels = np.full((self.height, self.width, channels), 128, dtype=np.uint8)
        buffer = pixels.tobytes()
        if self.bad_payload:
            buffer = buffer[:-1]
        return RawFrame(buffer=buffer, width=self.width, height=self.height, pixel_format=self.pixel_format)


class ScriptedDetector(FaceDetector):
    """Returns pre-scripted detection results, one list per call."""

    def __init__(self, script=None, default=None):
        self.script = list(script or [])
        self.default = default if default is not None else []
        self.calls = 0
        self.shapes = []

    def detect(self, gray):
        self.calls += 1
        self.shapes.append(gray.shape)
        if self.script:
            return self.script.pop(0)
        return list(self.default)


def face(width, height, x=0, y=0):
    """Create a BoundingBox of the given size."""
    return BoundingBox(x=x, y=y, width=width, height=height)


def make_console(lines=10):
    """Console fed with `lines` Enter presses, capturing output."""
    out = io.StringIO()
    return OperatorConsole(stream_in=io.StringIO("\n" * lines), stream_out=out), out


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def source(driver):
    return FrameSource(driver, mode=CaptureMode.CONTINUOUS, source_id="test")


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "camera": {
            "backend": "opencv",
            "device_id": 0,
            "resolution": [640, 480],
            "fps": 30,
            "mode": "continuous",
        },
        "detector": {
            "min_face_size": 20,
            "score_threshold": 2.0,
            "pyramid_scale_factor": 0.8,
            "slide_window_step": [4, 4],
        },
        "monitor": {
            "interval": 0.5,
            "max_consecutive_failures": 10,
            "selection": "largest",
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
camera:
  backend: "opencv"
  device_id: 0
  resolution: [640, 480]
  fps: 30
  mode: "continuous"

detector:
  min_face_size: 20
  score_threshold: 2.0

monitor:
  interval: 0.5
  selection: "largest"

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir
