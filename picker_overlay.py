"""Fullscreen overlay that lets the user pick a coordinate on the reference screenshot."""

from __future__ import annotations

import tkinter as tk
from typing import Callable, Optional, Tuple

from PIL import Image, ImageTk

from coordinate_picker import PickResult, PickerSession, fit_within
from screen_capture import ReferenceImage

CommitCallback = Callable[[PickResult], None]
CancelCallback = Callable[[], None]


def monitor_bounds_for(root: tk.Misc) -> Tuple[int, int, int, int]:
    """(x, y, width, height) of the monitor containing the root window."""
    try:
        cx = root.winfo_rootx() + root.winfo_width() // 2
        cy = root.winfo_rooty() + root.winfo_height() // 2
    except tk.TclError:
        cx, cy = 0, 0
    try:
        from screeninfo import get_monitors  # type: ignore

        monitors = get_monitors()
        for m in monitors:
            if m.x <= cx < m.x + m.width and m.y <= cy < m.y + m.height:
                return int(m.x), int(m.y), int(m.width), int(m.height)
        if monitors:
            m = monitors[0]
            return int(m.x), int(m.y), int(m.width), int(m.height)
    except Exception:
        # screeninfo has no backend on this system; Tk knows the primary screen
        pass
    return 0, 0, int(root.winfo_screenwidth()), int(root.winfo_screenheight())


class CoordinatePickerOverlay:
    """Shows the reference image with a crosshair; click commits, Escape cancels."""

    BACKGROUND = "#020617"
    CROSSHAIR = "#ef4444"
    BORDER = "#3b82f6"
    MAX_HEIGHT_RATIO = 0.85
    BANNER_SPACE = 72

    def __init__(
        self,
        root: tk.Tk,
        session: PickerSession,
        on_commit: CommitCallback,
        on_cancel: Optional[CancelCallback] = None,
    ) -> None:
        self._root = root
        self._session = session
        self._on_commit = on_commit
        self._on_cancel = on_cancel
        self._window: Optional[tk.Toplevel] = None
        self._canvas: Optional[tk.Canvas] = None
        self._photo: Optional[ImageTk.PhotoImage] = None
        self._origin = (0, 0)
        self._display_size = (1, 1)
        self._inside = False

    @property
    def is_open(self) -> bool:
        return self._window is not None

    def open(self, reference: ReferenceImage, action_id: str) -> None:
        """Start picking a coordinate for `action_id`."""
        self.close()
        self._session.begin(action_id, reference.width, reference.height)

        mx, my, mw, mh = monitor_bounds_for(self._root)
        window = tk.Toplevel(self._root)
        window.overrideredirect(True)
        window.attributes("-topmost", True)
        window.geometry(f"{mw}x{mh}+{mx}+{my}")
        window.configure(bg=self.BACKGROUND)
        window.protocol("WM_DELETE_WINDOW", self.cancel)
        self._window = window

        canvas = tk.Canvas(window, bg=self.BACKGROUND, highlightthickness=0, cursor="crosshair")
        canvas.pack(fill=tk.BOTH, expand=True)
        self._canvas = canvas

        max_height = int(mh * self.MAX_HEIGHT_RATIO)
        dw, dh = fit_within(reference.width, reference.height, mw - 64, max_height)
        shown = reference.image if (dw, dh) == (reference.width, reference.height) else reference.image.resize(
            (dw, dh), Image.LANCZOS
        )
        self._photo = ImageTk.PhotoImage(shown)
        ox = (mw - dw) // 2
        oy = max(self.BANNER_SPACE, (mh - dh) // 2)
        self._origin = (ox, oy)
        self._display_size = (dw, dh)

        canvas.create_image(ox, oy, image=self._photo, anchor="nw")
        canvas.create_rectangle(ox - 2, oy - 2, ox + dw + 1, oy + dh + 1, outline=self.BORDER, width=2)
        canvas.create_line(ox, oy, ox + dw, oy, fill=self.CROSSHAIR, tags=("h_line",), state="hidden")
        canvas.create_line(ox, oy, ox, oy + dh, fill=self.CROSSHAIR, tags=("v_line",), state="hidden")
        canvas.create_oval(0, 0, 0, 0, outline=self.CROSSHAIR, width=2, tags=("ring",), state="hidden")
        canvas.create_text(
            mw // 2, 24, text=self._banner_text(), fill="#ffffff",
            font=("Segoe UI", 14, "bold"), tags=("banner",),
        )
        canvas.create_text(mw // 2, 50, text="Press ESC to cancel", fill="#94a3b8", font=("Segoe UI", 9))

        canvas.bind("<Motion>", self._on_motion)
        canvas.bind("<Button-1>", self._on_click)
        window.bind("<Escape>", lambda _e: self.cancel())

        window.update_idletasks()
        window.focus_force()
        try:
            window.grab_set()
        except tk.TclError:
            # Another grab is active; Escape still works while focused
            pass

    def cancel(self) -> None:
        if self._session.active:
            self._session.cancel()
            self.close()
            if self._on_cancel:
                self._on_cancel()
        else:
            self.close()

    def close(self) -> None:
        window = self._window
        self._window = None
        self._canvas = None
        self._photo = None
        self._inside = False
        if window is not None:
            try:
                window.grab_release()
                window.destroy()
            except tk.TclError:
                pass

    # Event handlers ---------------------------------------------------

    def _to_display(self, event) -> Tuple[int, int]:
        ox, oy = self._origin
        return event.x - ox, event.y - oy

    def _on_motion(self, event) -> None:
        if self._canvas is None:
            return
        px, py = self._to_display(event)
        dw, dh = self._display_size
        self._inside = 0 <= px <= dw and 0 <= py <= dh
        state = "normal" if self._inside else "hidden"
        for tag in ("h_line", "v_line", "ring"):
            self._canvas.itemconfigure(tag, state=state)
        if not self._inside:
            return

        self._session.track(px, py, dw, dh)
        ox, oy = self._origin
        self._canvas.coords("h_line", ox, event.y, ox + dw, event.y)
        self._canvas.coords("v_line", event.x, oy, event.x, oy + dh)
        self._canvas.coords("ring", event.x - 12, event.y - 12, event.x + 12, event.y + 12)
        self._canvas.itemconfigure("banner", text=self._banner_text())

    def _on_click(self, event) -> None:
        self._on_motion(event)
        if not self._inside:
            return
        result = self._session.commit()
        self.close()
        if result is not None:
            self._on_commit(result)

    def _banner_text(self) -> str:
        x, y = self._session.position
        return f"Click to capture: X={x}, Y={y}"
