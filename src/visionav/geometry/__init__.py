"""
Coordinate conversions between model, frame and screen space.
"""

from .rotation import VALID_ROTATIONS, validate_rotation
from .direction import classify_direction, direction_phrase
from .screen import ScreenRect, map_to_screen, rotate_box

__all__ = [
    "VALID_ROTATIONS",
    "validate_rotation",
    "classify_direction",
    "direction_phrase",
    "ScreenRect",
    "map_to_screen",
    "rotate_box",
]
