"""
Pipeline stages.

Each stage handles a specific part of the processing pipeline:
- validity: reject blank and featureless frames before inference
- detect: inference, decoding and suppression
"""

from .detect import DetectStage
from .validity import FrameGateConfig, FrameValidityGate, FrameVerdict

__all__ = ["DetectStage", "FrameGateConfig", "FrameValidityGate", "FrameVerdict"]
