"""
FrameSource: lifecycle-managed still-frame capture on top of a CameraDriver.

Lifecycle:
    1. Create with a driver and a CaptureMode
    2. capture() as often as needed (the stream opens lazily)
    3. close() to release the hardware

Can also be used as a context manager:
    with FrameSource(driver) as source:
        frame_data = source.capture()
"""

from __future__ import annotations

import logging
import time

import cv2
import numpy as np

from models.frame import FrameData
from .base import PIXEL_FORMATS, CameraDriver, CaptureMode, RawFrame
from .errors import CameraError, FrameDecodeError, FrameGrabError, StreamCloseError, StreamOpenError


class FrameSource:
    """
    Produces RGB frames on demand from a camera driver.

    In CONTINUOUS mode the stream stays open between captures, which keeps
    per-frame overhead low for the monitoring loop. In DISCRETE mode the
    stream is closed after every capture, for one-off snapshots.

    Not thread-safe; a source belongs to the thread that captures from it.
    """

    def __init__(
        self,
        driver: CameraDriver,
        mode: CaptureMode = CaptureMode.CONTINUOUS,
        source_id: str = "camera",
    ):
        self._driver = driver
        self._mode = mode
        self._source_id = source_id
        self._frame_index = 0

    @property
    def mode(self) -> CaptureMode:
        return self._mode

    @property
    def source_id(self) -> str:
        return self._source_id

    @property
    def is_open(self) -> bool:
        """Whether the underlying hardware stream is open."""
        return self._driver.is_stream_open()

    @property
    def frame_index(self) -> int:
        """Number of frames captured since creation."""
        return self._frame_index

    def open(self) -> None:
        """
        Open the hardware stream. No-op if it is already open.

        Raises:
            StreamOpenError: If the driver cannot open the stream.
        """
        if self.is_open:
            return
        try:
            self._driver.open_stream()
        except Exception as e:
            raise StreamOpenError(str(e)) from e
        logging.info(f"Camera stream opened (source={self._source_id}, mode={self._mode.value})")

    def close(self) -> None:
        """
        Release the hardware stream. Safe to call multiple times.

        Raises:
            StreamCloseError: If the driver fails to stop the stream.
        """
        if not self.is_open:
            return
        try:
            self._driver.stop_stream()
        except Exception as e:
            raise StreamCloseError(str(e)) from e
        logging.debug(f"Camera stream closed (source={self._source_id})")

    def capture(self) -> FrameData:
        """
        Capture a single RGB frame, opening the stream first if needed.

        Blocks until the driver delivers a frame or fails.

        Raises:
            StreamOpenError: If the lazy open fails.
            FrameGrabError: If the driver cannot deliver a frame.
            FrameDecodeError: If the payload cannot be decoded to RGB.
        """
        self.open()
        try:
            try:
                raw = self._driver.frame()
            except Exception as e:
                raise FrameGrabError(str(e)) from e
            logging.debug(f"Captured single frame of {len(raw.buffer)} bytes")
            rgb = decode_rgb(raw)
        except CameraError:
            if self._mode is CaptureMode.DISCRETE:
                # keep the capture error
                try:
                    self.close()
                except StreamCloseError as close_error:
                    logging.warning(f"{close_error} after failed capture")
            raise

        if self._mode is CaptureMode.DISCRETE:
            self.close()

        self._frame_index += 1
        return FrameData.from_numpy(
            rgb,
            timestamp=time.time(),
            frame_index=self._frame_index,
            source=self._source_id,
        )

    def __enter__(self) -> "FrameSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def decode_rgb(raw: RawFrame) -> np.ndarray:
    """
    Decode a raw driver payload into an (h, w, 3) uint8 RGB array.

    Raises:
        FrameDecodeError: On unknown pixel format or inconsistent dimensions.
    """
    channels = PIXEL_FORMATS.get(raw.pixel_format)
    if channels is None:
        raise FrameDecodeError(f"unsupported pixel format {raw.pixel_format!r}")
    if raw.width < 1 or raw.height < 1:
        raise FrameDecodeError(f"invalid frame dimensions {raw.width}x{raw.height}")

    expected = raw.width * raw.height * channels
    if len(raw.buffer) != expected:
        raise FrameDecodeError(
            f"expected {expected} bytes for {raw.width}x{raw.height} {raw.pixel_format}, got {len(raw.buffer)}"
        )

    pixels = np.frombuffer(raw.buffer, dtype=np.uint8)
    if raw.pixel_format == "GRAY8":
        return cv2.cvtColor(pixels.reshape(raw.height, raw.width), cv2.COLOR_GRAY2RGB)

    pixels = pixels.reshape(raw.height, raw.width, 3)
    if raw.pixel_format == "BGR24":
        return cv2.cvtColor(pixels, cv2.COLOR_BGR2RGB)
    return pixels.copy()
