"""
Frame source contract.

Sources hand out unrotated camera frames as FrameData stamped with the
configured rotation, so the portrait check, the overlay and screen mapping
all read the same value from the frame itself.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import numpy as np

from ..geometry.rotation import validate_rotation
from ..models.frame import FrameData


@dataclass
class ObservationConfig:
    """
    Attributes:
        source_id: Name stamped on every frame (e.g. "camera").
        resolution: Requested (width, height); None keeps the device default.
        fps: Requested frame rate; None keeps the device default.
        rotation_degrees: Clockwise rotation that makes frames upright.
    """
    source_id: str = "default"
    resolution: Optional[Tuple[int, int]] = None
    fps: Optional[int] = None
    rotation_degrees: int = 0

    def __post_init__(self) -> None:
        self.rotation_degrees = validate_rotation(self.rotation_degrees)


class ObservationSource(ABC):
    """
    A camera, video file or replay list.

    Use open() / read() / close(), or the context manager. read() returns
    None when no frame is available; the engine counts those as failures.
    """

    def __init__(self, config: ObservationConfig):
        self._config = config
        self._is_open = False
        self._frame_index = 0

    @property
    def source_id(self) -> str:
        return self._config.source_id

    @property
    def rotation_degrees(self) -> int:
        return self._config.rotation_degrees

    @property
    def is_open(self) -> bool:
        return self._is_open

    @abstractmethod
    def open(self) -> None:
        """Raises RuntimeError if the source cannot be opened."""

    @abstractmethod
    def read(self) -> Optional[FrameData]:
        ...

    @abstractmethod
    def close(self) -> None:
        """Idempotent."""

    def _to_frame_data(self, frame: np.ndarray) -> FrameData:
        """Number the frame and stamp it with this source's id and rotation."""
        self._frame_index += 1
        return FrameData.from_numpy(
            frame,
            timestamp=time.monotonic(),
            frame_index=self._frame_index,
            source=self.source_id,
            rotation_degrees=self.rotation_degrees,
        )

    def __enter__(self) -> "ObservationSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[FrameData]:
        """Frames until read() returns None. The source must be open."""
        if not self._is_open:
            raise RuntimeError("Source must be open before iterating")
        return iter(self.read, None)
