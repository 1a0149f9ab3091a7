"""
Models owned by the announcement scheduler: live detections and announcements.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..geometry.rotation import validate_rotation
from .detection import Detection


@dataclass(frozen=True)
class LiveDetection:
    """
    A detection tagged with the frame it was observed in.

    Attributes:
        detection: The collapsed per-label detection.
        observed_at: Time the frame was processed (seconds).
        frame_width: Width of the source frame in pixels.
        frame_height: Height of the source frame in pixels.
        rotation_degrees: Frame rotation (0, 90, 180 or 270).
    """
    detection: Detection
    observed_at: float
    frame_width: int
    frame_height: int
    rotation_degrees: int = 0

    def __post_init__(self) -> None:
        validate_rotation(self.rotation_degrees)

    @property
    def label(self) -> str:
        return self.detection.label


@dataclass(frozen=True)
class LiveSnapshot:
    """
    Immutable set of detections from the most recent frame.

    A new snapshot replaces the previous one wholesale; readers holding an
    older reference keep a consistent view.
    """
    detections: Tuple[LiveDetection, ...] = ()
    updated_at: Optional[float] = None
    blanked: bool = False

    def __len__(self) -> int:
        return len(self.detections)

    def __iter__(self):
        return iter(self.detections)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(d.label for d in self.detections)

    def is_stale(self, now: float, lifetime_s: float) -> bool:
        """True when the snapshot is older than lifetime_s (or empty)."""
        if self.updated_at is None:
            return True
        return (now - self.updated_at) > lifetime_s


@dataclass(frozen=True)
class Announcement:
    """A spoken announcement emitted by the scheduler."""
    label: str
    text: str
    spoken_at: float
    direction: str = ""
    distance: Optional[float] = None
