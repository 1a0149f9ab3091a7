"""
VisionAV - Detection Module

Decodes raw detector output into labeled boxes and removes duplicates.
"""

from .labels import DEFAULT_OBJECT_WIDTHS_M, LabelSizeTable, load_labels
from .decoder import DecoderConfig, DetectionDecoder
from .suppression import SuppressionEngine, collapse_by_label, iou

__all__ = [
    "DEFAULT_OBJECT_WIDTHS_M",
    "LabelSizeTable",
    "load_labels",
    "DecoderConfig",
    "DetectionDecoder",
    "SuppressionEngine",
    "collapse_by_label",
    "iou",
]
