"""Capture and manage the reference screenshot used for coordinate picking."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

from PIL import Image

LogCallback = Callable[[str, str], None]
Grabber = Callable[[], Image.Image]


@dataclass
class ReferenceImage:
    """A screenshot plus where it came from."""
    image: Image.Image
    source: str = "screen"
    captured_at: float = field(default_factory=time.time)

    @property
    def width(self) -> int:
        return int(self.image.width)

    @property
    def height(self) -> int:
        return int(self.image.height)

    def __str__(self) -> str:
        return f"{self.source} ({self.width}x{self.height})"


def _pyautogui_grab() -> Image.Image:
    import pyautogui  # local import; pyautogui needs a display at import time

    return pyautogui.screenshot()


class ScreenCaptureService:
    """
    Grabs the desktop through pyautogui and keeps the latest reference image.

    Capture failures are reported through the log callback and result in
    None; they never propagate to the caller.
    """

    HIDE_DELAY_S = 0.25

    def __init__(
        self,
        root=None,
        grabber: Optional[Grabber] = None,
        log: Optional[LogCallback] = None,
        hide_window: bool = True,
    ) -> None:
        self._root = root
        self._grab = grabber or _pyautogui_grab
        self._log = log
        self.hide_window = hide_window
        self._reference: Optional[ReferenceImage] = None

    @property
    def reference(self) -> Optional[ReferenceImage]:
        return self._reference

    @property
    def has_reference(self) -> bool:
        return self._reference is not None

    def capture(self) -> Optional[ReferenceImage]:
        """Take a full screenshot and make it the current reference."""
        hidden = self._hide_root()
        try:
            image = self._grab()
        except Exception as exc:
            self._emit(f"Capture failed: {exc}", "ERROR")
            return None
        finally:
            if hidden:
                self._show_root()

        if image is None:
            self._emit("Capture failed: no image returned", "ERROR")
            return None

        self._reference = ReferenceImage(image=image.convert("RGB"), source="screen")
        self._emit(f"Screen captured: {self._reference}", "INFO")
        return self._reference

    def load_from_file(self, path: Union[str, Path]) -> Optional[ReferenceImage]:
        """Use an image file from disk as the reference."""
        file_path = Path(path)
        try:
            with Image.open(file_path) as img:
                image = img.convert("RGB")
        except (OSError, ValueError) as exc:
            self._emit(f"Could not load image '{file_path}': {exc}", "ERROR")
            return None
        self._reference = ReferenceImage(image=image, source=file_path.name)
        self._emit(f"Reference loaded: {self._reference}", "INFO")
        return self._reference

    def save(self, path: Union[str, Path]) -> bool:
        """Write the current reference image to disk."""
        if self._reference is None:
            self._emit("No reference image to save", "WARNING")
            return False
        try:
            self._reference.image.save(Path(path))
        except (OSError, ValueError) as exc:
            self._emit(f"Could not save image: {exc}", "ERROR")
            return False
        self._emit(f"Reference saved to {path}", "INFO")
        return True

    def clear(self) -> None:
        self._reference = None

    # Internal helpers -------------------------------------------------

    def _hide_root(self) -> bool:
        if not (self.hide_window and self._root is not None):
            return False
        try:
            self._root.withdraw()
            self._root.update()
            time.sleep(self.HIDE_DELAY_S)
            return True
        except Exception as exc:
            self._emit(f"Could not hide window before capture: {exc}", "WARNING")
            return False

    def _show_root(self) -> None:
        try:
            self._root.deiconify()
            self._root.lift()
        except Exception as exc:
            self._emit(f"Could not restore window after capture: {exc}", "WARNING")

    def _emit(self, message: str, level: str) -> None:
        if self._log:
            self._log(message, level)
