"""
OpenCV camera driver.

Supports:
- USB webcams (device_id as int, e.g. 0)
- IP streams or video files (device_id as str)
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple, Union

import cv2

from ..base import CameraDriver, RawFrame


class OpenCVDriver(CameraDriver):
    """
    cv2.VideoCapture-backed driver.

    Frames are delivered as packed BGR24, which is what OpenCV decodes to.
    """

    def __init__(
        self,
        device_id: Union[int, str] = 0,
        resolution: Tuple[int, int] = (640, 480),
        fps: int = 30,
        buffer_size: int = 1,
    ) -> None:
        self.device_id = device_id
        self.resolution = resolution
        self.fps = fps
        self.buffer_size = buffer_size

        self._cap: Optional[cv2.VideoCapture] = None

    def open_stream(self) -> None:
        if self._cap is not None:
            self.stop_stream()

        cap = cv2.VideoCapture(self.device_id)
        if not cap.isOpened():
            cap.release()
            raise RuntimeError(f"camera device {self.device_id} could not be opened")

        # Only set properties for USB cameras (integers), not IP streams
        if isinstance(self.device_id, int):
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.resolution[0])
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.resolution[1])
            cap.set(cv2.CAP_PROP_FPS, self.fps)
            cap.set(cv2.CAP_PROP_BUFFERSIZE, self.buffer_size)

            actual_width = cap.get(cv2.CAP_PROP_FRAME_WIDTH)
            actual_height = cap.get(cv2.CAP_PROP_FRAME_HEIGHT)
            actual_fps = cap.get(cv2.CAP_PROP_FPS)
            logging.info(f"Camera actual settings - Resolution: ({actual_width}x{actual_height}), FPS: {actual_fps}")
        else:
            logging.info(f"Stream camera opened: {self.device_id}")

        self._cap = cap

    def stop_stream(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logging.debug("Camera released")

    def is_stream_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def frame(self) -> RawFrame:
        if self._cap is None:
            raise RuntimeError("stream is not open")

        ret, frame = self._cap.read()
        if not ret or frame is None:
            raise RuntimeError(f"no frame returned by camera device {self.device_id}")

        h, w = frame.shape[:2]
        if frame.ndim == 2:
            return RawFrame(buffer=frame.tobytes(), width=w, height=h, pixel_format="GRAY8")
        return RawFrame(buffer=frame.tobytes(), width=w, height=h, pixel_format="BGR24")
