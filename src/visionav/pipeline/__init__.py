"""
Pipeline module for the visual assistance loop.

The pipeline orchestrates the full processing flow:
- Frame acquisition from observation sources
- Frame validity gating
- Detection (inference, decoding, suppression)
- Announcement scheduling
"""

from .engine import FrameResult, PipelineConfig, PipelineEngine, PipelineStats
from .stages.detect import DetectStage
from .stages.validity import FrameGateConfig, FrameValidityGate, FrameVerdict

__all__ = [
    "FrameResult",
    "PipelineConfig",
    "PipelineEngine",
    "PipelineStats",
    "DetectStage",
    "FrameGateConfig",
    "FrameValidityGate",
    "FrameVerdict",
]
