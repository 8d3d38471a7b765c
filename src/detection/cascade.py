"""
OpenCV cascade face detector.

Maps the detector tuning knobs onto cv2.CascadeClassifier.detectMultiScale3:
- min_face_size        -> minSize
- pyramid_scale_factor -> scaleFactor (1 / factor; 0.8 downscale == 1.25 upscale)
- score_threshold      -> filter on the cascade level weights
- slide_window_step    -> advisory only; OpenCV picks its own window stride
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

import cv2
import numpy as np

from models.detection import BoundingBox
from .base import DetectorLoadError, FaceDetector

DEFAULT_MODEL = "haarcascade_frontalface_default.xml"

# Local model directory, checked before the models bundled with OpenCV
CASCADE_DIR = "cascades"


@dataclass(frozen=True)
class CascadeConfig:
    model_path: Optional[str] = None
    min_face_size: int = 20
    score_threshold: float = 2.0
    pyramid_scale_factor: float = 0.8
    slide_window_step: Tuple[int, int] = (4, 4)
    min_neighbors: int = 3

    def validate(self) -> None:
        if self.min_face_size < 1:
            raise ValueError("min_face_size must be at least 1")
        if not 0 < self.pyramid_scale_factor < 1:
            raise ValueError("pyramid_scale_factor must be between 0 and 1 (exclusive)")
        if len(self.slide_window_step) != 2 or min(self.slide_window_step) < 1:
            raise ValueError("slide_window_step must be two positive integers")
        if self.min_neighbors < 0:
            raise ValueError("min_neighbors must be non-negative")


def resolve_model_path(model_path: Optional[str] = None) -> str:
    """
    Locate the cascade model file.

    An explicit path must exist. Otherwise the default model is looked up in
    ./cascades, then in the cascades shipped with opencv-python.
    """
    if model_path:
        if os.path.isfile(model_path):
            return model_path
        raise DetectorLoadError(f"Face model file not found: {model_path}")

    candidates = [os.path.join(CASCADE_DIR, DEFAULT_MODEL)]
    data = getattr(cv2, "data", None)
    if data is not None:
        candidates.append(os.path.join(data.haarcascades, DEFAULT_MODEL))

    for path in candidates:
        if os.path.isfile(path):
            return path
    raise DetectorLoadError(f"Face model '{DEFAULT_MODEL}' not found in ./cascades or the OpenCV data directory")


class CascadeFaceDetector(FaceDetector):
    def __init__(self, cfg: Optional[CascadeConfig] = None):
        self.cfg = cfg or CascadeConfig()
        self.cfg.validate()

        self.model_path = resolve_model_path(self.cfg.model_path)
        self._classifier = cv2.CascadeClassifier(self.model_path)
        if self._classifier.empty():
            raise DetectorLoadError(f"Failed to load face model from {self.model_path}")

        logging.info(
            f"Face detector loaded (model={self.model_path}, min_size={self.cfg.min_face_size}, "
            f"score_threshold={self.cfg.score_threshold}, pyramid={self.cfg.pyramid_scale_factor}, "
            f"step={tuple(self.cfg.slide_window_step)})"
        )

    def detect(self, gray: np.ndarray) -> List[BoundingBox]:
        if gray.ndim != 2 or gray.dtype != np.uint8:
            raise ValueError(f"Expected a 2-D uint8 grayscale frame, got shape={gray.shape} dtype={gray.dtype}")

        size = self.cfg.min_face_size
        rects, _levels, weights = self._classifier.detectMultiScale3(
            gray,
            scaleFactor=1.0 / self.cfg.pyramid_scale_factor,
            minNeighbors=self.cfg.min_neighbors,
            minSize=(size, size),
            outputRejectLevels=True,
        )
        if rects is None or len(rects) == 0:
            return []

        weights = np.asarray(weights, dtype=float).reshape(-1)
        out: List[BoundingBox] = []
        for rect, weight in zip(rects, weights):
            if weight < self.cfg.score_threshold:
                continue
            out.append(BoundingBox.from_tuple(tuple(rect)))
        return out
