"""
Face detection interface.

We keep this lightweight so the monitor can run against any model that turns
a grayscale frame into face boxes.
"""

from __future__ import annotations

from typing import List

import numpy as np

from models.detection import BoundingBox


class DetectorLoadError(RuntimeError):
    """The detection model could not be loaded. Fatal at startup."""


class FaceDetector:
    """Detector interface returning face boxes in pixel-space."""

    def detect(self, gray: np.ndarray) -> List[BoundingBox]:
        """
        Detect faces in a grayscale frame.

        Returns one box per face, in no particular order, or an empty list.
        """
        raise NotImplementedError
