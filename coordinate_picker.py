"""
Coordinate picking over a scaled screenshot.

Pure helpers that map pointer positions on a rendered reference image back
to native image pixels, plus the small state machine that tracks which
action is waiting for a coordinate. Nothing here touches Tk.
"""

from __future__ import annotations

import math
from typing import NamedTuple, Optional, Tuple


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def fit_within(image_width: int, image_height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    """
    Size of an image scaled to fit a box, keeping its aspect ratio.

    The image is never upscaled and never shrinks below 1x1.
    """
    if image_width <= 0 or image_height <= 0:
        return 1, 1
    scale = min(max_width / image_width, max_height / image_height, 1.0)
    return max(1, _round_half_up(image_width * scale)), max(1, _round_half_up(image_height * scale))


def to_image_coordinates(
    pointer_x: float,
    pointer_y: float,
    display_width: float,
    display_height: float,
    image_width: int,
    image_height: int,
) -> Tuple[int, int]:
    """
    Convert a pointer offset inside the rendered image to native pixels.

    The offset is taken as a ratio of the displayed size and scaled by the
    image's native resolution. Results are clamped to the image bounds.
    """
    if display_width <= 0 or display_height <= 0:
        return 0, 0
    x_ratio = pointer_x / display_width
    y_ratio = pointer_y / display_height
    real_x = _round_half_up(x_ratio * image_width)
    real_y = _round_half_up(y_ratio * image_height)
    return min(max(real_x, 0), image_width), min(max(real_y, 0), image_height)


class PickResult(NamedTuple):
    """Coordinate picked for an action; unpacks as (action_id, x, y)."""

    action_id: str
    x: int
    y: int


class PickerSession:
    """Tracks the action whose coordinate is currently being picked."""

    def __init__(self) -> None:
        self._action_id: Optional[str] = None
        self._image_size: Optional[Tuple[int, int]] = None
        self._position: Tuple[int, int] = (0, 0)

    @property
    def active(self) -> bool:
        return self._action_id is not None

    @property
    def action_id(self) -> Optional[str]:
        return self._action_id

    @property
    def position(self) -> Tuple[int, int]:
        """Last tracked image coordinate."""
        return self._position

    def begin(self, action_id: str, image_width: int, image_height: int) -> None:
        """Start picking for an action against an image of the given native size."""
        if image_width <= 0 or image_height <= 0:
            raise ValueError("Reference image has no pixels")
        self._action_id = action_id
        self._image_size = (image_width, image_height)
        self._position = (0, 0)

    def track(self, pointer_x: float, pointer_y: float, display_width: float, display_height: float) -> Tuple[int, int]:
        """Update the live coordinate from a pointer move over the rendering."""
        if self._image_size is None:
            return self._position
        image_width, image_height = self._image_size
        self._position = to_image_coordinates(
            pointer_x, pointer_y, display_width, display_height, image_width, image_height
        )
        return self._position

    def commit(self) -> Optional[PickResult]:
        """Finish picking and hand back the coordinate. None if nothing is active."""
        if self._action_id is None:
            return None
        result = PickResult(self._action_id, *self._position)
        self._reset()
        return result

    def cancel(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self._action_id = None
        self._image_size = None
        self._position = (0, 0)
