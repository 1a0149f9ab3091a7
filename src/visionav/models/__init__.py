"""
Typed models for the VisionAV pipeline.
"""

from .frame import FrameData
from .detection import Detection
from .live import Announcement, LiveDetection, LiveSnapshot
from .config import (
    Config,
    CameraConfig,
    ModelConfig,
    GateConfig,
    AnnounceConfig,
    SpeechConfig,
    WebConfig,
)

__all__ = [
    # Frame
    "FrameData",
    # Detection
    "Detection",
    # Scheduler
    "Announcement",
    "LiveDetection",
    "LiveSnapshot",
    # Config
    "Config",
    "CameraConfig",
    "ModelConfig",
    "GateConfig",
    "AnnounceConfig",
    "SpeechConfig",
    "WebConfig",
]
