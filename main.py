"""
Entry point for MacroForge Studio.

Picked coordinates come from the screenshot's native pixels, so the process
declares itself DPI aware on Windows before any window exists.
"""

import sys
import tkinter as tk
from typing import Callable, List, Tuple

from gui import MacroForgeGUI

# Most capable mode first
_PER_MONITOR_AWARE_V2 = -4


def _dpi_strategies(ctypes_module) -> List[Tuple[str, Callable[[], bool]]]:
    windll = ctypes_module.windll
    # user32 calls return a BOOL, shcore returns an HRESULT (0 is S_OK)
    return [
        ("per-monitor v2", lambda: bool(windll.user32.SetProcessDpiAwarenessContext(ctypes_module.c_void_p(_PER_MONITOR_AWARE_V2)))),
        ("per-monitor", lambda: windll.shcore.SetProcessDpiAwareness(2) == 0),
        ("system", lambda: bool(windll.user32.SetProcessDPIAware())),
    ]


def enable_high_dpi_awareness() -> str:
    """Returns the DPI mode that was applied, or "" if none could be."""
    if not sys.platform.startswith("win"):
        return ""
    import ctypes

    for name, apply in _dpi_strategies(ctypes):
        try:
            if apply():
                return name
        except (AttributeError, OSError):
            continue
    return ""


def main() -> int:
    enable_high_dpi_awareness()
    try:
        root = tk.Tk()
    except tk.TclError as exc:
        print(f"MacroForge Studio needs a graphical display: {exc}", file=sys.stderr)
        return 1
    MacroForgeGUI(root)
    root.mainloop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
