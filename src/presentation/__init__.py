"""
Presentation layer: shows or hides the too-close alert.
"""

from .base import AlertPresenter, PresenterUnavailableError
from .headless import HeadlessPresenter
from .overlay import TkAlertOverlay

__all__ = ["AlertPresenter", "PresenterUnavailableError", "HeadlessPresenter", "TkAlertOverlay"]
