"""
Debug overlay drawing for the OpenCV display window.
"""

from __future__ import annotations

from typing import Optional

import cv2
import numpy as np

from ..announce.formatter import format_overlay_label
from ..geometry.direction import classify_direction
from ..geometry.screen import ScreenRect, clamp_rect, map_to_screen, rotate_box
from ..models.live import LiveDetection, LiveSnapshot

# Colors (BGR)
COLOR_BOX = (0, 0, 255)  # Red
COLOR_LABEL = (0, 255, 255)  # Yellow
COLOR_FPS = (255, 255, 255)  # White

_ROTATE_CODES = {
    90: cv2.ROTATE_90_CLOCKWISE,
    180: cv2.ROTATE_180,
    270: cv2.ROTATE_90_COUNTERCLOCKWISE,
}


def rotate_frame(frame: np.ndarray, rotation_degrees: int) -> np.ndarray:
    """Rotate a frame clockwise so it displays upright."""
    code = _ROTATE_CODES.get(rotation_degrees)
    return cv2.rotate(frame, code) if code is not None else frame


def display_rect(live: LiveDetection, display_width: int, display_height: int, model_size: int) -> ScreenRect:
    """
    Map a live detection onto the upright display image.

    Quarter turns go through map_to_screen, whose crossed scales match a
    display built from the rotated frame. For 0 and 180 the display keeps
    the frame's axes, so each side is scaled against its own frame side.
    """
    det = live.detection
    if live.rotation_degrees in (90, 270):
        return map_to_screen(
            det,
            live.frame_width,
            live.frame_height,
            live.rotation_degrees,
            display_width,
            display_height,
            model_size=model_size,
        )

    scale_x = live.frame_width / model_size
    scale_y = live.frame_height / model_size
    x, y, w, h = rotate_box(
        det.x * scale_x,
        det.y * scale_y,
        det.width * scale_x,
        det.height * scale_y,
        live.frame_width,
        live.frame_height,
        live.rotation_degrees,
    )
    kx = display_width / live.frame_width
    ky = display_height / live.frame_height
    return clamp_rect(x * kx, y * ky, w * kx, h * ky, display_width, display_height)


def draw_overlays(
    frame: np.ndarray,
    snapshot: LiveSnapshot,
    model_size: int,
    fps: Optional[float] = None,
    now: Optional[float] = None,
    lifetime_s: Optional[float] = None,
) -> np.ndarray:
    """
    Draw the live snapshot onto a display image.

    `frame` is the display image, already rotated upright. When `now` and
    `lifetime_s` are given, a snapshot older than the lifetime is not drawn.
    """
    screen_h, screen_w = frame.shape[:2]
    font = cv2.FONT_HERSHEY_SIMPLEX

    stale = now is not None and lifetime_s is not None and snapshot.is_stale(now, lifetime_s)
    visible = () if stale else snapshot.detections
    for live in visible:
        det = live.detection
        x1, y1, x2, y2 = display_rect(live, screen_w, screen_h, model_size).as_int_tuple()
        cv2.rectangle(frame, (x1, y1), (x2, y2), COLOR_BOX, 2)

        direction = classify_direction(det.x, det.width, live.frame_width, model_size)
        label = format_overlay_label(det, direction)
        (_, th), _ = cv2.getTextSize(label, font, 0.5, 1)
        cv2.putText(frame, label, (x1, max(th, y1 - 4)), font, 0.5, COLOR_LABEL, 1)

    if fps is not None:
        cv2.putText(frame, f"FPS: {fps:.0f}", (10, screen_h - 10), font, 0.6, COLOR_FPS, 2)

    return frame
