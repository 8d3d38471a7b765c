"""
Presenter for machines without a display: reports state changes in the log.
"""

from __future__ import annotations

import logging
import threading

from runtime.alert_state import SharedAlertState
from .base import AlertPresenter


class HeadlessPresenter(AlertPresenter):
    def __init__(self, alert_state: SharedAlertState, poll_interval: float = 0.5):
        self.alert_state = alert_state
        self.poll_interval = poll_interval
        self._closed = threading.Event()
        self._lock = threading.Lock()
        self._last = False

    def notify(self, too_close: bool) -> None:
        current = self.alert_state.is_too_close()
        with self._lock:
            if current == self._last:
                return
            self._last = current
        if current:
            logging.warning("ALERT: too close to the screen")
        else:
            logging.info("Alert cleared")

    def run(self) -> None:
        """Block until close() is called or the user hits Ctrl+C."""
        try:
            while not self._closed.wait(self.poll_interval):
                pass
        except KeyboardInterrupt:
            logging.info("Interrupted by user")

    def close(self) -> None:
        self._closed.set()
