"""
VisionAV - real-time visual assistance pipeline.

Camera frames are gated, run through an object detector, decoded into
labeled boxes with distance and direction, and throttled into spoken
announcements.
"""

__version__ = "0.3.0"
