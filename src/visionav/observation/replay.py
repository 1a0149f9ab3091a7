"""
Replay source for pre-captured frames.
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from ..models.frame import FrameData
from .base import ObservationConfig, ObservationSource


class FrameListSource(ObservationSource):
    """Replays a fixed list of frames (tests, offline replays)."""

    def __init__(self, config: ObservationConfig, frames: List[np.ndarray]):
        super().__init__(config)
        self._frames = list(frames)
        self._pos = 0

    def open(self) -> None:
        self._is_open = True
        self._pos = 0
        self._frame_index = 0

    def read(self) -> Optional[FrameData]:
        if not self._is_open or self._pos >= len(self._frames):
            return None
        frame = self._frames[self._pos]
        self._pos += 1
        return self._to_frame_data(frame)

    def close(self) -> None:
        self._is_open = False
