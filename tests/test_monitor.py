"""
Tests for the PostureMonitor calibration state machine and check().
"""

import io

import pytest

from camera.base import CaptureMode
from camera.source import FrameSource
from models.calibration import Calibration, Size
from monitor.console import OperatorConsole
from monitor.posture import (
    CalibrationError,
    CalibrationRequiredError,
    MonitorState,
    PostureMonitor,
    select_face,
)

from conftest import FakeDriver, ScriptedDetector, face, make_console


def _calibrated(detector, max_size=(100, 100), selection="largest", driver=None):
    source = FrameSource(driver or FakeDriver())
    calibration = Calibration(max_detection_size=Size(*max_size))
    return PostureMonitor.with_calibration(source, detector, calibration, selection=selection)


class TestCheckThreshold:
    def test_no_face_is_acceptable(self):
        monitor = _calibrated(ScriptedDetector(default=[]), max_size=(1, 1))
        assert monitor.check() is True

    def test_equal_size_is_acceptable(self):
        monitor = _calibrated(ScriptedDetector(default=[face(100, 100)]))
        assert monitor.check() is True

    def test_wider_is_too_close(self):
        monitor = _calibrated(ScriptedDetector(default=[face(101, 100)]))
        assert monitor.check() is False

    def test_taller_is_too_close(self):
        monitor = _calibrated(ScriptedDetector(default=[face(100, 101)]))
        assert monitor.check() is False

    def test_smaller_is_acceptable(self):
        monitor = _calibrated(ScriptedDetector(default=[face(40, 60)]))
        assert monitor.check() is True

    def test_detector_receives_grayscale(self):
        detector = ScriptedDetector(default=[])
        monitor = _calibrated(detector)
        monitor.check()
        assert detector.shapes == [(48, 64)]


class TestCheckPrecondition:
    def test_uncalibrated_check_raises(self):
        driver = FakeDriver()
        monitor = PostureMonitor(FrameSource(driver), ScriptedDetector(default=[face(10, 10)]))

        with pytest.raises(CalibrationRequiredError):
            monitor.check()

        # the camera is never touched
        assert driver.frame_calls == 0

    def test_uncalibrated_check_raises_even_without_faces(self):
        monitor = PostureMonitor(FrameSource(FakeDriver()), ScriptedDetector(default=[]))
        with pytest.raises(CalibrationRequiredError):
            monitor.check()


class TestFaceSelection:
    def test_largest_is_default(self):
        faces = [face(10, 10), face(120, 90), face(50, 50)]
        assert select_face(faces) == faces[1]

    def test_largest_tie_keeps_first(self):
        faces = [face(20, 10, x=1), face(10, 20, x=2)]
        assert select_face(faces, "largest").x == 1

    def test_first(self):
        faces = [face(10, 10), face(120, 90)]
        assert select_face(faces, "first") == faces[0]

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            select_face([])

    def test_check_judges_largest_face(self):
        detector = ScriptedDetector(default=[face(10, 10), face(150, 150)])
        assert _calibrated(detector).check() is False

    def test_check_judges_first_face(self):
        detector = ScriptedDetector(default=[face(10, 10), face(150, 150)])
        assert _calibrated(detector, selection="first").check() is True

    def test_invalid_selection(self):
        with pytest.raises(ValueError):
            PostureMonitor(FrameSource(FakeDriver()), ScriptedDetector(), selection="random")


class TestCalibration:
    def test_starts_uncalibrated(self):
        monitor = PostureMonitor(FrameSource(FakeDriver()), ScriptedDetector())
        assert monitor.state is MonitorState.UNCALIBRATED
        assert monitor.calibration is None

    def test_single_face_calibrates(self):
        detector = ScriptedDetector(script=[[face(50, 80)]])
        monitor = PostureMonitor(FrameSource(FakeDriver()), detector)
        console, out = make_console()

        calibration = monitor.calibrate(console)

        assert calibration.max_detection_size == Size(50, 80)
        assert monitor.state is MonitorState.CALIBRATED
        assert monitor.calibration is calibration
        assert "Calibration successful. Using max_detection_size: 50x80" in out.getvalue()

    def test_zero_faces_reprompts(self):
        detector = ScriptedDetector(script=[[], [], [face(30, 40)]])
        monitor = PostureMonitor(FrameSource(FakeDriver()), detector)
        console, out = make_console()

        calibration = monitor.calibrate(console)

        assert detector.calls == 3
        assert out.getvalue().count("No face was detected. Please try again.") == 2
        assert calibration.max_detection_size == Size(30, 40)

    def test_multiple_faces_are_rejected(self):
        detector = ScriptedDetector(script=[[face(90, 90), face(40, 40)], [face(60, 70)]])
        monitor = PostureMonitor(FrameSource(FakeDriver()), detector)
        console, out = make_console()

        calibration = monitor.calibrate(console)

        assert "More than one face was detected. Please try again." in out.getvalue()
        # not resolved by picking the largest of the ambiguous sample
        assert calibration.max_detection_size == Size(60, 70)

    def test_never_completes_without_single_face(self):
        detector = ScriptedDetector(default=[])
        monitor = PostureMonitor(FrameSource(FakeDriver()), detector)
        # one Enter to begin plus three attempts, then input closes
        console, _ = make_console(lines=4)

        with pytest.raises(EOFError):
            monitor.calibrate(console)

        assert detector.calls == 3
        assert monitor.state is MonitorState.UNCALIBRATED

    def test_camera_error_reprompts(self):
        driver = FakeDriver()
        driver.fail_frame = "timeout"
        detector = ScriptedDetector(script=[[face(20, 20)]])
        monitor = PostureMonitor(FrameSource(driver), detector)

        class RecoveringConsole(OperatorConsole):
            reads = 0

            def read_line(self):
                self.reads += 1
                if self.reads == 3:
                    driver.fail_frame = None
                return ""

        out = io.StringIO()
        calibration = monitor.calibrate(RecoveringConsole(stream_out=out))

        assert "Failed to grab a frame: timeout. Please try again." in out.getvalue()
        assert calibration.max_detection_size == Size(20, 20)

    def test_recalibration_is_rejected(self):
        monitor = _calibrated(ScriptedDetector(default=[face(10, 10)]))
        console, _ = make_console()
        with pytest.raises(CalibrationError):
            monitor.calibrate(console)


class TestEndToEnd:
    def test_calibrate_then_check(self):
        detector = ScriptedDetector(script=[
            [face(50, 80)],  # calibration sample
            [face(60, 80)],
            [],
            [face(50, 80)],
        ])
        driver = FakeDriver()
        monitor = PostureMonitor(FrameSource(driver, mode=CaptureMode.CONTINUOUS), detector)
        console, _ = make_console()

        monitor.calibrate(console)
        assert monitor.state is MonitorState.CALIBRATED
        assert monitor.calibration.max_detection_size == Size(50, 80)

        assert monitor.check() is False
        assert monitor.check() is True
        assert monitor.check() is True

        # continuous mode: one open for the whole session
        assert driver.open_calls == 1
        assert driver.close_calls == 0
