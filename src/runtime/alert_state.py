import threading
import time
from typing import Optional, Tuple


class SharedAlertState:
    """
    The "too close" flag shared between the sampling thread (single writer)
    and the presentation thread (readers).

    Every access goes through an internal lock; callers never see it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._too_close = False
        self._updated_at: Optional[float] = None
        self._sequence = 0

    def set_too_close(self, too_close: bool) -> bool:
        """Record the latest check outcome. Returns True if the flag changed."""
        with self._lock:
            changed = self._too_close != too_close
            self._too_close = too_close
            self._updated_at = time.time()
            self._sequence += 1
            return changed

    def is_too_close(self) -> bool:
        with self._lock:
            return self._too_close

    def snapshot(self) -> Tuple[bool, Optional[float], int]:
        """Return (too_close, updated_at, sequence) read atomically."""
        with self._lock:
            return self._too_close, self._updated_at, self._sequence
