"""
Decoding of raw YOLO-style output tensors into detections.

The detector emits a fixed-shape tensor [1, 4 + K, N]: for each of N
candidate positions, four normalized box parameters (x_center, y_center,
width, height in [0, 1] of the model canvas) followed by K class scores,
one per entry of the label table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ..errors import ConfigurationError
from ..models.detection import Detection
from .labels import LabelSizeTable

BOX_CHANNELS = 4


@dataclass(frozen=True)
class DecoderConfig:
    """
    Attributes:
        model_size: Side of the square model canvas in pixels.
        conf_threshold: Minimum winning class score to keep a candidate (inclusive).
        focal_length_px: Camera focal length in pixels for distance estimates.
        num_classes: Expected number of class channels; checked against the
            label table at construction when given.
    """
    model_size: int = 320
    conf_threshold: float = 0.5
    focal_length_px: float = 400.0
    num_classes: Optional[int] = None


class DetectionDecoder:
    """
    Turns one output tensor into a list of raw detections.

    Output detections may overlap; run them through SuppressionEngine.
    Candidate order is preserved so a stable sort downstream breaks
    confidence ties by candidate index.

    Distances are a pinhole-camera approximation
    (focal_length_px * real_width / box_width), not a calibrated depth.
    """

    def __init__(
        self,
        labels: Sequence[str],
        config: Optional[DecoderConfig] = None,
        size_table: Optional[LabelSizeTable] = None,
    ):
        if not labels:
            raise ConfigurationError("Label table is empty")
        self.config = config or DecoderConfig()
        self.labels = list(labels)
        self.size_table = size_table if size_table is not None else LabelSizeTable()

        if self.config.num_classes is not None and self.config.num_classes != len(self.labels):
            raise ConfigurationError(
                f"Label table has {len(self.labels)} labels, "
                f"but model expects {self.config.num_classes}"
            )

    @property
    def num_classes(self) -> int:
        return len(self.labels)

    def decode(self, output: np.ndarray) -> List[Detection]:
        """
        Decode a raw output tensor.

        Args:
            output: Array of shape (1, 4 + K, N) or (4 + K, N).

        Returns:
            Detections with confidence >= conf_threshold, in candidate order.

        Raises:
            ConfigurationError: If the tensor shape does not match the label table.
        """
        tensor = self._squeeze(np.asarray(output))
        channels, num_candidates = tensor.shape
        if channels - BOX_CHANNELS != self.num_classes:
            raise ConfigurationError(
                f"Label table has {self.num_classes} labels, "
                f"but model output has {channels - BOX_CHANNELS} class channels"
            )
        if num_candidates == 0:
            return []

        scores = tensor[BOX_CHANNELS:, :]
        class_ids = np.argmax(scores, axis=0)
        max_scores = scores[class_ids, np.arange(num_candidates)]
        keep = np.flatnonzero(max_scores >= self.config.conf_threshold)
        if keep.size == 0:
            return []

        size = float(self.config.model_size)
        x_center, y_center, norm_w, norm_h = (tensor[i, keep].astype(np.float64) for i in range(BOX_CHANNELS))
        xs = (x_center - norm_w / 2) * size
        ys = (y_center - norm_h / 2) * size
        ws = norm_w * size
        hs = norm_h * size

        detections: List[Detection] = []
        for j, idx in enumerate(keep):
            label = self.labels[int(class_ids[idx])]
            w = float(ws[j])
            det = Detection(
                label=label,
                confidence=float(max_scores[idx]),
                x=float(xs[j]),
                y=float(ys[j]),
                width=w,
                height=float(hs[j]),
                distance=self.estimate_distance(label, w),
            )
            detections.append(det)

        logging.debug(f"Decoded {len(detections)} candidates above {self.config.conf_threshold}")
        return detections

    def estimate_distance(self, label: str, width_px: float) -> Optional[float]:
        """Distance in meters for a box of width_px model pixels, or None."""
        real_width = self.size_table.width_of(label)
        if real_width is None or width_px <= 0:
            return None
        return self.config.focal_length_px * real_width / width_px

    @staticmethod
    def _squeeze(output: np.ndarray) -> np.ndarray:
        if output.ndim == 3:
            if output.shape[0] != 1:
                raise ConfigurationError(f"Expected batch size 1, got output shape {output.shape}")
            output = output[0]
        if output.ndim != 2:
            raise ConfigurationError(f"Expected output of shape (1, C, N), got {output.shape}")
        return output
