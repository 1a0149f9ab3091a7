"""
Mapping of model-space boxes onto a display surface.

Three coordinate systems are involved:
- model-space: the square detector canvas (model_size x model_size)
- frame-space: camera pixels as delivered by the sensor (unrotated)
- screen-space: the display the overlay is drawn on, after rotation
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..models.detection import Detection
from .rotation import validate_rotation


@dataclass(frozen=True)
class ScreenRect:
    """An axis-aligned rectangle in screen pixels."""
    x: float
    y: float
    width: float
    height: float

    def as_int_tuple(self) -> Tuple[int, int, int, int]:
        """Return as integer (x1, y1, x2, y2) tuple."""
        return (
            int(self.x),
            int(self.y),
            int(self.x + self.width),
            int(self.y + self.height),
        )


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def clamp_rect(x: float, y: float, w: float, h: float, screen_width: float, screen_height: float) -> ScreenRect:
    """Clamp a box into the screen; width and height use the clamped origin."""
    cx = _clamp(x, 0.0, screen_width)
    cy = _clamp(y, 0.0, screen_height)
    return ScreenRect(
        x=cx,
        y=cy,
        width=_clamp(w, 0.0, screen_width - cx),
        height=_clamp(h, 0.0, screen_height - cy),
    )


def rotate_box(
    x: float,
    y: float,
    w: float,
    h: float,
    frame_width: float,
    frame_height: float,
    rotation_degrees: int,
) -> Tuple[float, float, float, float]:
    """
    Rotate a frame-space box clockwise by rotation_degrees.

    Width and height swap for 90 and 270.

    Raises:
        ConfigurationError: If rotation_degrees is not 0, 90, 180 or 270.
    """
    rotation = validate_rotation(rotation_degrees)
    if rotation == 90:
        return (frame_height - y - h, x, h, w)
    if rotation == 180:
        return (frame_width - x - w, frame_height - y - h, w, h)
    if rotation == 270:
        return (y, frame_width - x - w, h, w)
    return (x, y, w, h)


def map_to_screen(
    detection: Detection,
    frame_width: int,
    frame_height: int,
    rotation_degrees: int,
    screen_width: float,
    screen_height: float,
    model_size: float = 320,
) -> ScreenRect:
    """
    Map a model-space detection to a clamped screen rectangle.

    The screen scale pairs screen_width with frame_height (and screen_height
    with frame_width) because the display is the rotated frame.

    Args:
        detection: Detection in model-space.
        frame_width: Source frame width in pixels.
        frame_height: Source frame height in pixels.
        rotation_degrees: 0, 90, 180 or 270.
        screen_width: Display width in pixels.
        screen_height: Display height in pixels.
        model_size: Side of the square model canvas.

    Returns:
        ScreenRect fully inside [0, screen_width] x [0, screen_height].

    Raises:
        ConfigurationError: If rotation_degrees is not a supported value.
    """
    scale_x = frame_width / model_size
    scale_y = frame_height / model_size
    rx, ry, rw, rh = rotate_box(
        detection.x * scale_x,
        detection.y * scale_y,
        detection.width * scale_x,
        detection.height * scale_y,
        frame_width,
        frame_height,
        rotation_degrees,
    )

    screen_scale_x = screen_width / frame_height
    screen_scale_y = screen_height / frame_width
    return clamp_rect(
        rx * screen_scale_x,
        ry * screen_scale_y,
        rw * screen_scale_x,
        rh * screen_scale_y,
        screen_width,
        screen_height,
    )
