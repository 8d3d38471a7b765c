"""
Tests for the alert presenters. The Tk overlay runs against a mock tkinter module.
"""

import threading
from unittest.mock import MagicMock

import pytest

from models.config import OverlayConfig
from presentation.base import PresenterUnavailableError
from presentation.headless import HeadlessPresenter
from presentation.overlay import TkAlertOverlay
from runtime.alert_state import SharedAlertState


class FakeTclError(Exception):
    pass


def _tk(root):
    """Stand-in for the tkinter module."""
    tk = MagicMock()
    tk.Tk.return_value = root
    tk.TclError = FakeTclError
    return tk


@pytest.fixture
def overlay():
    root = MagicMock()
    state = SharedAlertState()
    ov = TkAlertOverlay(state, OverlayConfig(poll_interval_ms=20), tk=_tk(root))
    ov._root = ov._build()
    return ov, root, state


class TestTkAlertOverlay:
    def test_build_is_fullscreen_and_hidden(self, overlay):
        ov, root, _ = overlay
        root.attributes.assert_any_call("-fullscreen", True)
        root.attributes.assert_any_call("-topmost", True)
        root.withdraw.assert_called_once()
        root.protocol.assert_called_once_with("WM_DELETE_WINDOW", ov.close)
        assert not ov.visible

    def test_shows_when_too_close(self, overlay):
        ov, root, state = overlay
        state.set_too_close(True)
        ov.notify(True)

        ov._poll()

        root.deiconify.assert_called_once()
        assert ov.visible
        root.after.assert_called_with(20, ov._poll)

    def test_hides_when_backed_away(self, overlay):
        ov, root, state = overlay
        state.set_too_close(True)
        ov.notify(True)
        ov._poll()

        root.withdraw.reset_mock()
        state.set_too_close(False)
        ov.notify(False)
        ov._poll()

        root.withdraw.assert_called_once()
        assert not ov.visible

    def test_reads_latest_state_not_notification(self, overlay):
        ov, root, state = overlay
        ov.notify(True)  # superseded before the poll ran
        state.set_too_close(False)

        ov._poll()

        root.deiconify.assert_not_called()

    def test_no_change_without_notification(self, overlay):
        ov, root, state = overlay
        state.set_too_close(True)

        ov._poll()

        root.deiconify.assert_not_called()

    def test_close_quits_mainloop_from_poll(self, overlay):
        ov, root, _ = overlay
        root.after.reset_mock()

        closer = threading.Thread(target=ov.close)
        closer.start()
        closer.join()
        ov._poll()

        root.quit.assert_called_once()
        root.after.assert_not_called()

    def test_run_destroys_root(self):
        root = MagicMock()
        ov = TkAlertOverlay(SharedAlertState(), tk=_tk(root))

        ov.run()

        root.after.assert_called_once_with(50, ov._poll)
        root.mainloop.assert_called_once()
        root.destroy.assert_called_once()

    def test_label_uses_injected_tk(self):
        root = MagicMock()
        tk = _tk(root)
        ov = TkAlertOverlay(SharedAlertState(), OverlayConfig(message="Back off", font_size=30), tk=tk)

        ov._build()

        args, kwargs = tk.Label.call_args
        assert args == (root,)
        assert kwargs["text"] == "Back off"
        assert kwargs["font"] == ("Helvetica", 30, "bold")

    def test_no_display(self):
        tk = _tk(MagicMock())
        tk.Tk.side_effect = FakeTclError("no display name and no $DISPLAY environment variable")
        ov = TkAlertOverlay(SharedAlertState(), tk=tk)

        with pytest.raises(PresenterUnavailableError, match="DISPLAY"):
            ov.run()


class TestHeadlessPresenter:
    def test_run_returns_after_close(self):
        presenter = HeadlessPresenter(SharedAlertState(), poll_interval=0.01)
        closer = threading.Timer(0.05, presenter.close)
        closer.start()
        presenter.run()
        closer.join()

    def test_logs_transitions_only(self, caplog):
        state = SharedAlertState()
        presenter = HeadlessPresenter(state)

        with caplog.at_level("INFO"):
            state.set_too_close(True)
            presenter.notify(True)
            presenter.notify(True)
            state.set_too_close(False)
            presenter.notify(False)

        messages = [r.getMessage() for r in caplog.records]
        assert messages.count("ALERT: too close to the screen") == 1
        assert messages.count("Alert cleared") == 1
