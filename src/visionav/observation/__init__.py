"""
Observation layer for pluggable frame sources.

This layer abstracts the source of frames (camera, video file, replay)
from the processing pipeline. Each source implements the ObservationSource
interface and returns FrameData objects.
"""

from .base import ObservationConfig, ObservationSource
from .opencv_source import OpenCVSource, OpenCVSourceConfig
from .replay import FrameListSource

__all__ = [
    "ObservationSource",
    "ObservationConfig",
    "OpenCVSource",
    "OpenCVSourceConfig",
    "FrameListSource",
]
