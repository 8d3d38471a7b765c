"""
Full-screen blocking overlay built on tkinter.

Tk is single-threaded: the sampling thread never touches widgets. It only
sets a flag through notify(); a poll scheduled with after() on the Tk thread
reads SharedAlertState and shows or hides the window.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from models.config import OverlayConfig
from runtime.alert_state import SharedAlertState
from .base import AlertPresenter, PresenterUnavailableError


class TkAlertOverlay(AlertPresenter):
    """
    Borderless full-screen window shown while the user is too close.

    Closing the window (window manager close request or Escape) ends run().
    `tk` defaults to the tkinter module and is only imported when run.
    """

    def __init__(
        self,
        alert_state: SharedAlertState,
        config: Optional[OverlayConfig] = None,
        tk: Any = None,
    ):
        self.alert_state = alert_state
        self.config = config or OverlayConfig()
        self._tk = tk
        self._root: Any = None
        self._visible = False
        self._dirty = threading.Event()
        self._close_requested = threading.Event()

    @property
    def visible(self) -> bool:
        return self._visible

    def notify(self, too_close: bool) -> None:
        self._dirty.set()

    def close(self) -> None:
        self._close_requested.set()

    def run(self) -> None:
        """
        Show the (initially hidden) overlay and block until close().

        Raises:
            PresenterUnavailableError: If Tk cannot start, e.g. without a display.
        """
        self._root = self._build()
        self._root.after(self.config.poll_interval_ms, self._poll)
        logging.info("Overlay ready")
        try:
            self._root.mainloop()
        finally:
            self._root.destroy()
            self._root = None
            logging.info("Overlay closed")

    def _build(self) -> Any:
        tk = self._tk_module()
        try:
            root = tk.Tk()
        except tk.TclError as e:
            raise PresenterUnavailableError(f"Cannot open the overlay window: {e}") from e

        root.title("neck-check")
        root.configure(background=self.config.background)
        root.attributes("-fullscreen", True)
        root.attributes("-topmost", True)
        self._make_label(tk, root).pack(expand=True, fill="both")

        root.protocol("WM_DELETE_WINDOW", self.close)
        root.bind("<Escape>", lambda _event: self.close())
        root.withdraw()
        return root

    def _tk_module(self) -> Any:
        if self._tk is None:
            import tkinter

            self._tk = tkinter
        return self._tk

    def _make_label(self, tk: Any, root: Any) -> Any:
        return tk.Label(
            root,
            text=self.config.message,
            background=self.config.background,
            foreground=self.config.foreground,
            font=("Helvetica", self.config.font_size, "bold"),
        )

    def _poll(self) -> None:
        if self._close_requested.is_set():
            self._root.quit()
            return

        if self._dirty.is_set():
            self._dirty.clear()
            self._apply(self.alert_state.is_too_close())

        self._root.after(self.config.poll_interval_ms, self._poll)

    def _apply(self, too_close: bool) -> None:
        if too_close and not self._visible:
            self._root.deiconify()
            # some window managers drop these while withdrawn
            self._root.attributes("-fullscreen", True)
            self._root.attributes("-topmost", True)
            self._root.lift()
            self._visible = True
        elif not too_close and self._visible:
            self._root.withdraw()
            self._visible = False
