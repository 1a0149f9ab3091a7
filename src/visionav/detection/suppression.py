"""
Greedy non-maximum suppression and per-label collapse.

These are two separate dedup passes:
- SuppressionEngine removes geometrically overlapping boxes, across all labels.
- collapse_by_label keeps one detection per label after suppression.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from ..models.detection import Detection


def iou(box1: Detection, box2: Detection) -> float:
    """
    Calculate Intersection over Union (IoU) between two model-space boxes.

    Returns:
        IoU value between 0 and 1 (0 when the boxes do not overlap).
    """
    x_left = max(box1.x, box2.x)
    y_top = max(box1.y, box2.y)
    x_right = min(box1.right, box2.right)
    y_bottom = min(box1.bottom, box2.bottom)

    if x_right <= x_left or y_bottom <= y_top:
        return 0.0

    intersection = (x_right - x_left) * (y_bottom - y_top)
    union = box1.area + box2.area - intersection
    if union <= 0:
        return 0.0
    return intersection / union


class SuppressionEngine:
    """
    Greedy NMS over one frame's raw detections.

    Suppression is class-agnostic: a high-confidence "car" removes an
    overlapping "truck".
    """

    def __init__(self, iou_threshold: float = 0.45):
        self.iou_threshold = iou_threshold

    def suppress(self, detections: Sequence[Detection]) -> List[Detection]:
        """
        Args:
            detections: Raw detections in candidate order.

        Returns:
            Survivors in descending confidence order. Ties keep input order.
        """
        remaining = sorted(detections, key=lambda d: d.confidence, reverse=True)
        selected: List[Detection] = []

        while remaining:
            best = remaining.pop(0)
            selected.append(best)
            remaining = [d for d in remaining if iou(best, d) <= self.iou_threshold]

        if len(selected) != len(detections):
            logging.debug(f"NMS kept {len(selected)} of {len(detections)} detections")
        return selected


def collapse_by_label(detections: Sequence[Detection]) -> List[Detection]:
    """
    Keep the highest-confidence detection per label.

    Ties go to the first one seen. Output follows first appearance of
    each label.
    """
    best: Dict[str, Detection] = {}
    for det in detections:
        current = best.get(det.label)
        if current is None or det.confidence > current.confidence:
            best[det.label] = det
    return list(best.values())
