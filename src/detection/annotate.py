"""
Debug drawing helpers.
"""

from __future__ import annotations

from typing import Iterable, Tuple

import cv2
import numpy as np

from models.detection import BoundingBox

# RGB
COLOR_FACE = (255, 0, 0)


def draw_faces(
    frame: np.ndarray,
    faces: Iterable[BoundingBox],
    color: Tuple[int, int, int] = COLOR_FACE,
    thickness: int = 2,
) -> np.ndarray:
    """Return a copy of an RGB frame with a hollow rectangle around each face."""
    out = frame.copy()
    for face in faces:
        cv2.rectangle(out, (face.x, face.y), (face.x2, face.y2), color, thickness)
        cv2.putText(
            out,
            f"{face.width}x{face.height}",
            (face.x, max(face.y - 6, 12)),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.5,
            color,
            1,
        )
    return out
