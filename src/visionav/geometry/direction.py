"""
Horizontal direction of a detection relative to the viewer.
"""

from __future__ import annotations

LEFT = "left"
RIGHT = "right"
AHEAD = ""

# Fractions of the image width bounding the left and right zones
LEFT_ZONE = 0.2
RIGHT_ZONE = 0.8

_PHRASES = {
    LEFT: "on the left",
    RIGHT: "on the right",
    AHEAD: "",
}


def classify_direction(x: float, width: float, image_width: float, model_size: float) -> str:
    """
    Classify a model-space box as left, right or ahead.

    The box is scaled to image-space by image_width / model_size. It is
    "left" only if it ends before 20% of the image width and "right" only if
    it starts after 80%; anything touching the middle band is ahead ("").

    Args:
        x: Left edge in model-space pixels.
        width: Box width in model-space pixels.
        image_width: Width of the camera image in pixels.
        model_size: Side of the square model canvas.

    Returns:
        "left", "right" or "" for ahead.
    """
    scale = image_width / model_size
    object_left = x * scale
    object_right = object_left + width * scale

    if object_right <= image_width * LEFT_ZONE:
        return LEFT
    if object_left >= image_width * RIGHT_ZONE:
        return RIGHT
    return AHEAD


def direction_phrase(direction: str) -> str:
    """Spoken form of a direction ("on the left", "on the right" or "")."""
    return _PHRASES.get(direction, "")
