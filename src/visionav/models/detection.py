"""
Detection models for decoded object detector output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Detection:
    """
    A single decoded detection in model-space.

    Model-space is the fixed square canvas the detector runs on
    (e.g. 320x320), origin top-left, independent of the camera resolution.

    Attributes:
        label: Class label from the label table.
        confidence: Winning class score (0-1).
        x: Left edge in model-space pixels.
        y: Top edge in model-space pixels.
        width: Box width in model-space pixels.
        height: Box height in model-space pixels.
        distance: Estimated distance in meters, None when unknown.
    """
    label: str
    confidence: float
    x: float
    y: float
    width: float
    height: float
    distance: Optional[float] = None

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height
