"""Tests for the application entry point (no display needed)."""

import sys
import tkinter as tk
from unittest.mock import MagicMock

import main


class TestDpiAwareness:

    def test_noop_outside_windows(self, monkeypatch):
        monkeypatch.setattr(main.sys, "platform", "linux")
        assert main.enable_high_dpi_awareness() == ""

    def test_falls_back_to_next_mode(self, monkeypatch):
        fake_ctypes = MagicMock()
        fake_ctypes.windll.user32.SetProcessDpiAwarenessContext.side_effect = AttributeError
        fake_ctypes.windll.shcore.SetProcessDpiAwareness.return_value = 0
        monkeypatch.setattr(main.sys, "platform", "win32")
        monkeypatch.setitem(sys.modules, "ctypes", fake_ctypes)

        assert main.enable_high_dpi_awareness() == "per-monitor"
        fake_ctypes.windll.user32.SetProcessDPIAware.assert_not_called()

    def test_hresult_failure_is_not_success(self):
        fake_ctypes = MagicMock()
        fake_ctypes.windll.shcore.SetProcessDpiAwareness.return_value = -2147024891
        _, apply = main._dpi_strategies(fake_ctypes)[1]
        assert apply() is False


def test_main_without_display(monkeypatch, capsys):
    monkeypatch.setattr(main.tk, "Tk", MagicMock(side_effect=tk.TclError("no display name")))
    gui = MagicMock()
    monkeypatch.setattr(main, "MacroForgeGUI", gui)
    assert main.main() == 1
    assert "graphical display" in capsys.readouterr().err
    gui.assert_not_called()
