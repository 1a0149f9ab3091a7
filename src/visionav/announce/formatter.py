"""
Text rendering for announcements and overlay labels.
"""

from __future__ import annotations

from ..geometry.direction import direction_phrase
from ..models.detection import Detection


def format_announcement(detection: Detection, direction: str) -> str:
    """
    Build the spoken phrase for a detection.

    Example: "car detected on the left at 3.2 meters". The direction part is
    omitted when the object is ahead, the distance part when unknown.
    """
    parts = [f"{detection.label} detected"]
    phrase = direction_phrase(direction)
    if phrase:
        parts.append(phrase)
    if detection.distance is not None:
        parts.append(f"at {detection.distance:.1f} meters")
    return " ".join(parts)


def format_overlay_label(detection: Detection, direction: str) -> str:
    """Short label drawn above an overlay box, e.g. "car (on the left) 3.2m"."""
    text = detection.label
    phrase = direction_phrase(direction)
    if phrase:
        text += f" ({phrase})"
    if detection.distance is not None:
        text += f" {detection.distance:.1f}m"
    return text
