"""
Detect stage: preprocess -> inference -> decode -> suppress.

Stateless apart from the backend; safe to run on any frame independently.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ...detection.decoder import DetectionDecoder
from ...detection.suppression import SuppressionEngine
from ...inference.backend import InferenceBackend, preprocess_frame
from ...models.detection import Detection


@dataclass
class DetectStageStats:
    last_latency_ms: Optional[float] = None
    last_raw_count: int = 0
    last_kept_count: int = 0


class DetectStage:
    """
    Example:
        stage = DetectStage(backend, DetectionDecoder(labels), SuppressionEngine())
        detections = stage.run(frame)
    """

    def __init__(
        self,
        backend: InferenceBackend,
        decoder: DetectionDecoder,
        suppressor: Optional[SuppressionEngine] = None,
        channel_order: str = "bgr",
    ):
        self.backend = backend
        self.decoder = decoder
        self.suppressor = suppressor or SuppressionEngine()
        self.channel_order = channel_order
        self.stats = DetectStageStats()

    @property
    def model_size(self) -> int:
        return self.decoder.config.model_size

    def run(self, frame: np.ndarray) -> List[Detection]:
        """
        Detect objects in one frame.

        Returns:
            Suppressed detections in model-space, highest confidence first.
        """
        tensor = preprocess_frame(frame, self.model_size, self.channel_order)

        start = time.perf_counter()
        output = self.backend.infer(tensor)
        self.stats.last_latency_ms = (time.perf_counter() - start) * 1000.0

        raw = self.decoder.decode(output)
        kept = self.suppressor.suppress(raw)
        self.stats.last_raw_count = len(raw)
        self.stats.last_kept_count = len(kept)

        if not kept:
            logging.debug("No objects detected in this frame")
        return kept
