"""
Posture monitor: the too-close decision engine.

States:
    UNCALIBRATED --calibrate()--> CALIBRATED

There is no way back to UNCALIBRATED. check() needs a calibration; calling it
without one raises CalibrationRequiredError before the camera is touched.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional

from camera.errors import CameraError
from camera.source import FrameSource
from detection.base import FaceDetector
from models.calibration import Calibration
from models.detection import BoundingBox
from .console import OperatorConsole

SELECTIONS = ("largest", "first")


class MonitorState(Enum):
    UNCALIBRATED = "uncalibrated"
    CALIBRATED = "calibrated"


class CalibrationError(RuntimeError):
    """Calibration was requested on a monitor that already has one."""


class CalibrationRequiredError(RuntimeError):
    """check() was called before calibration. A programming error."""


def select_face(faces: List[BoundingBox], selection: str = "largest") -> BoundingBox:
    """
    Pick the face a check is judged on.

    "largest" takes the box with the biggest area (earliest wins ties);
    "first" takes the detector's first result.
    """
    if not faces:
        raise ValueError("no faces to select from")
    if selection == "first":
        return faces[0]
    return max(faces, key=lambda f: f.area)


class PostureMonitor:
    """
    Owns a FrameSource and a FaceDetector and decides whether the user is
    sitting too close to the screen.

    Not thread-safe: a monitor belongs to whichever thread drives it (the
    main thread while calibrating, the sampling thread afterwards).
    """

    def __init__(
        self,
        source: FrameSource,
        detector: FaceDetector,
        calibration: Optional[Calibration] = None,
        selection: str = "largest",
    ):
        if selection not in SELECTIONS:
            raise ValueError(f"selection must be one of: {', '.join(SELECTIONS)}")
        self.source = source
        self.detector = detector
        self.selection = selection
        self._calibration = calibration

    @classmethod
    def with_calibration(
        cls,
        source: FrameSource,
        detector: FaceDetector,
        calibration: Calibration,
        selection: str = "largest",
    ) -> "PostureMonitor":
        """Create a monitor that starts out CALIBRATED."""
        return cls(source, detector, calibration=calibration, selection=selection)

    @property
    def calibration(self) -> Optional[Calibration]:
        return self._calibration

    @property
    def state(self) -> MonitorState:
        if self._calibration is None:
            return MonitorState.UNCALIBRATED
        return MonitorState.CALIBRATED

    def detect_faces(self) -> List[BoundingBox]:
        """Capture one frame and return the faces found in it."""
        frame_data = self.source.capture()
        return self.detector.detect(frame_data.to_gray())

    def calibrate(self, console: Optional[OperatorConsole] = None) -> Calibration:
        """
        Learn the too-close threshold from one operator-supplied sample.

        Blocks until a sample contains exactly one face. Samples with no face
        or several faces are discarded and the operator is asked again.

        Raises:
            CalibrationError: If the monitor is already calibrated.
            EOFError: If operator input is closed.
        """
        if self._calibration is not None:
            raise CalibrationError("Monitor is already calibrated")

        console = console or OperatorConsole()
        console.write_line("Press Enter to begin calibration...")
        console.read_line()

        face: Optional[BoundingBox] = None
        attempt = 0
        while face is None:
            attempt += 1
            console.write_line(
                "Move to the position that you would consider to be a bad posture and then press Enter."
            )
            console.read_line()

            try:
                faces = self.detect_faces()
            except CameraError as e:
                logging.warning(f"Calibration attempt {attempt}: {e}")
                console.write_line(f"{e}. Please try again.")
                continue

            logging.debug(f"Calibration attempt {attempt}: {len(faces)} face(s)")
            if not faces:
                console.write_line("No face was detected. Please try again.")
            elif len(faces) > 1:
                console.write_line("More than one face was detected. Please try again.")
            else:
                face = faces[0]

        self._calibration = Calibration(max_detection_size=face.size)
        console.write_line(f"Calibration successful. Using max_detection_size: {face.size}")
        logging.info(f"Calibrated after {attempt} attempt(s): max_detection_size={face.size}")
        return self._calibration

    def check(self) -> bool:
        """
        Sample the camera once.

        Returns:
            True if posture is acceptable (or nobody is in view), False if the
            selected face is larger than the calibrated maximum in either
            dimension.

        Raises:
            CalibrationRequiredError: If the monitor is not calibrated.
            CameraError: If capturing the frame fails.
        """
        if self._calibration is None:
            raise CalibrationRequiredError("check() called before calibrate()")

        faces = self.detect_faces()
        if not faces:
            return True

        face = select_face(faces, self.selection)
        return not face.size.exceeds(self._calibration.max_detection_size)
