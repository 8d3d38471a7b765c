"""
Posture monitoring: calibration state machine and the too-close check.
"""

from .console import OperatorConsole
from .posture import (
    CalibrationError,
    CalibrationRequiredError,
    MonitorState,
    PostureMonitor,
    select_face,
)

__all__ = [
    "OperatorConsole",
    "CalibrationError",
    "CalibrationRequiredError",
    "MonitorState",
    "PostureMonitor",
    "select_face",
]
