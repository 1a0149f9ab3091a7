"""
Frame validity gate.

Runs before inference so useless frames never reach the detector:
- BLANK: mean luma below threshold (covered lens, dark camera). The
  scheduler treats this as a global reset.
- LOW_VARIANCE: flat, featureless frame. Skipped without touching state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from ...models.frame import FrameData

# ITU-R BT.601 luma weights
LUMA_WEIGHTS_RGB = np.array([0.299, 0.587, 0.114], dtype=np.float64)


class FrameVerdict(str, Enum):
    VALID = "valid"
    BLANK = "blank"
    LOW_VARIANCE = "low_variance"


@dataclass(frozen=True)
class FrameGateConfig:
    """
    Attributes:
        blank_luma_threshold: Mean luma (0-255) below which a frame is blank.
        min_variance: Luma variance at or below which a frame is too flat.
        channel_order: Channel order of 3-channel frames ("bgr" or "rgb").
    """
    blank_luma_threshold: float = 20.0
    min_variance: float = 50.0
    channel_order: str = "bgr"


def to_luma(frame: np.ndarray, channel_order: str = "bgr") -> np.ndarray:
    """
    Per-pixel grayscale luma as float64.

    Single-channel frames are returned as-is (converted to float).
    """
    if frame.ndim == 2:
        return frame.astype(np.float64)
    if frame.ndim == 3 and frame.shape[2] == 1:
        return frame[..., 0].astype(np.float64)
    if frame.ndim != 3 or frame.shape[2] < 3:
        raise ValueError(f"Unsupported frame shape {frame.shape}")

    rgb = frame[..., :3].astype(np.float64)
    if channel_order == "bgr":
        rgb = rgb[..., ::-1]
    return rgb @ LUMA_WEIGHTS_RGB


def mean_luma(frame: np.ndarray, channel_order: str = "bgr") -> float:
    luma = to_luma(frame, channel_order)
    return float(luma.mean()) if luma.size else 0.0


def luma_variance(frame: np.ndarray, channel_order: str = "bgr") -> float:
    """Population variance of per-pixel luma."""
    luma = to_luma(frame, channel_order)
    return float(luma.var()) if luma.size else 0.0


class FrameValidityGate:
    """Classifies frames as valid, blank or low-variance."""

    def __init__(self, config: Optional[FrameGateConfig] = None):
        self.config = config or FrameGateConfig()

    def evaluate(self, frame_data: FrameData) -> FrameVerdict:
        frame = frame_data.frame
        if frame is None or frame.size == 0:
            return FrameVerdict.BLANK

        gray = to_luma(frame, self.config.channel_order)
        luma_plane = frame_data.luma if frame_data.luma is not None else gray

        brightness = float(np.mean(luma_plane)) if luma_plane.size else 0.0
        if brightness < self.config.blank_luma_threshold:
            logging.debug(f"Frame {frame_data.frame_index} blank: mean luma {brightness:.1f}")
            return FrameVerdict.BLANK

        variance = float(gray.var())
        if variance <= self.config.min_variance:
            logging.debug(f"Frame {frame_data.frame_index} low variance: {variance:.1f}")
            return FrameVerdict.LOW_VARIANCE

        return FrameVerdict.VALID
