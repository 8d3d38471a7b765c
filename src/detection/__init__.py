"""
Face detection for the posture monitor.
"""

from .base import DetectorLoadError, FaceDetector
from .cascade import CascadeConfig, CascadeFaceDetector

__all__ = ['FaceDetector', 'DetectorLoadError', 'CascadeConfig', 'CascadeFaceDetector']
