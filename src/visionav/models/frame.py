"""
FrameData model for captured video frames.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass
class FrameData:
    """
    Metadata and payload for a captured video frame.

    Attributes:
        frame: The raw frame data as a numpy array (BGR format).
        width: Frame width in pixels.
        height: Frame height in pixels.
        timestamp: Capture time in seconds (monotonic clock).
        frame_index: Sequential frame number since start.
        source: Identifier for the camera/video source.
        rotation_degrees: Clockwise rotation needed to display the frame upright.
        luma: Optional luma (Y) plane, when the source provides one.
    """
    frame: np.ndarray
    width: int
    height: int
    timestamp: float
    frame_index: int = 0
    source: Optional[str] = None
    rotation_degrees: int = 0
    luma: Optional[np.ndarray] = None

    @classmethod
    def from_numpy(
        cls,
        frame: np.ndarray,
        timestamp: float,
        frame_index: int = 0,
        source: Optional[str] = None,
        rotation_degrees: int = 0,
    ) -> "FrameData":
        """Create FrameData from a numpy array."""
        h, w = frame.shape[:2]
        return cls(
            frame=frame,
            width=w,
            height=h,
            timestamp=timestamp,
            frame_index=frame_index,
            source=source,
            rotation_degrees=rotation_degrees,
        )

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)

    @property
    def is_portrait(self) -> bool:
        """True when the frame is displayed taller than wide."""
        if self.rotation_degrees in (90, 270):
            return self.width >= self.height
        return self.height >= self.width
