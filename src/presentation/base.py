"""
Alert presenter interface.

A presenter owns the foreground thread: run() blocks there until the user or
the program closes it. notify() and close() may be called from any thread.
"""

from __future__ import annotations


class AlertPresenter:
    def notify(self, too_close: bool) -> None:
        """Signal that a new check result is in the shared alert state."""
        raise NotImplementedError

    def run(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


class PresenterUnavailableError(RuntimeError):
    """The presenter cannot start, e.g. there is no display to draw on."""
