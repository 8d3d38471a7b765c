"""
Sampling loop for the posture monitor.

Runs PostureMonitor.check() on a background thread at a fixed cadence, writes
each outcome into SharedAlertState and notifies listeners (the presentation
layer). Stops when its cancellation event is set or when the camera keeps
failing.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from camera.errors import CameraError
from monitor.posture import PostureMonitor
from .alert_state import SharedAlertState


@dataclass
class SamplingConfig:
    """
    Configuration for the sampling loop.

    Attributes:
        interval: Seconds to wait between samples (0 = run flat out).
        failure_backoff: Seconds to wait after a failed sample.
        max_consecutive_failures: Camera failures in a row before giving up
            (0 = retry forever).
    """
    interval: float = 0.5
    failure_backoff: float = 1.0
    max_consecutive_failures: int = 10


@dataclass
class SamplingStats:
    """Runtime statistics for the sampling loop."""
    samples: int = 0
    too_close_samples: int = 0
    consecutive_failures: int = 0
    total_failures: int = 0
    start_time: float = field(default_factory=time.time)
    last_result: Optional[bool] = None


class SamplingLoop:
    """
    Background activity driving the monitor.

    The monitor (and with it the camera and detector) is only ever touched by
    the loop's own thread once start() has been called.

    Example:
        loop = SamplingLoop(monitor, alert_state, SamplingConfig(interval=0.5))
        loop.add_listener(presenter.notify)
        loop.start()
        ...
        loop.stop()
        loop.join(timeout=5)
    """

    def __init__(
        self,
        monitor: PostureMonitor,
        alert_state: SharedAlertState,
        config: Optional[SamplingConfig] = None,
    ):
        self.monitor = monitor
        self.alert_state = alert_state
        self.config = config or SamplingConfig()
        self.stats = SamplingStats()
        self.failure: Optional[CameraError] = None
        self.error: Optional[BaseException] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._listeners: List[Callable[[bool], None]] = []
        self._exit_callbacks: List[Callable[[], None]] = []

    def add_listener(self, listener: Callable[[bool], None]) -> None:
        """
        Add a callback run after every sample with the too-close flag.

        Listeners run on the sampling thread and must not block.
        """
        self._listeners.append(listener)

    def add_exit_callback(self, callback: Callable[[], None]) -> None:
        """Add a callback run once when the loop ends, for any reason."""
        self._exit_callbacks.append(callback)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Run the loop on a daemon thread."""
        if self.is_running:
            raise RuntimeError("Sampling loop is already running")
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, name="sampling-loop", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Signal the loop to stop after the current sample."""
        self._stop_event.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the loop thread. Returns True if it has finished."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def run(self) -> None:
        """Sample until stopped or the camera failure limit is reached."""
        self.stats = SamplingStats()
        self.failure = None
        self.error = None
        logging.info(f"Sampling loop started (interval={self.config.interval}s)")

        try:
            while not self._stop_event.is_set():
                if not self._sample_once():
                    break
        except BaseException as e:
            self.error = e
            raise
        finally:
            logging.info(
                f"Sampling loop stopped: samples={self.stats.samples}, "
                f"too_close={self.stats.too_close_samples}, failures={self.stats.total_failures}"
            )
            for callback in self._exit_callbacks:
                try:
                    callback()
                except Exception as e:
                    logging.warning(f"Exit callback error: {e}")

    def _sample_once(self) -> bool:
        """Take one sample. Returns False when the loop should end."""
        try:
            acceptable = self.monitor.check()
        except CameraError as e:
            self.stats.consecutive_failures += 1
            self.stats.total_failures += 1
            limit = self.config.max_consecutive_failures
            if limit and self.stats.consecutive_failures >= limit:
                logging.error(f"Too many consecutive camera failures ({self.stats.consecutive_failures}), stopping: {e}")
                self.failure = e
                return False
            logging.warning(f"Sample failed ({self.stats.consecutive_failures}/{limit or 'unlimited'}): {e}")
            self._stop_event.wait(self.config.failure_backoff)
            return True

        self.stats.consecutive_failures = 0
        self.stats.samples += 1
        too_close = not acceptable
        self.stats.last_result = too_close
        changed = self.alert_state.set_too_close(too_close)

        if too_close:
            self.stats.too_close_samples += 1
            if changed:
                logging.info("Too close!")
            else:
                logging.debug("Too close!")
        elif changed:
            logging.info("Posture acceptable again")

        for listener in self._listeners:
            try:
                listener(too_close)
            except Exception as e:
                logging.warning(f"Listener error: {e}")

        if self.config.interval > 0:
            self._stop_event.wait(self.config.interval)
        return True
