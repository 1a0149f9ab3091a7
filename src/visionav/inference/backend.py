"""
Inference backend interface.

Backends are opaque, synchronous functions: a normalized RGB input tensor
in, the raw detector output tensor out. Decoding happens in
`detection.decoder`.
"""

from __future__ import annotations

from typing import Protocol

import cv2
import numpy as np


class InferenceBackend(Protocol):
    def infer(self, tensor: np.ndarray) -> np.ndarray:
        """
        Args:
            tensor: float32 array (1, S, S, 3), RGB, values in [0, 1].

        Returns:
            Raw output of shape (1, 4 + K, N).
        """
        ...


def preprocess_frame(frame: np.ndarray, model_size: int, channel_order: str = "bgr") -> np.ndarray:
    """
    Resize a camera frame to the model canvas and normalize it.

    Args:
        frame: HxWx3 uint8 frame.
        model_size: Side of the square model input.
        channel_order: Channel order of `frame` ("bgr" for OpenCV captures).

    Returns:
        float32 array of shape (1, model_size, model_size, 3), RGB in [0, 1].
    """
    resized = cv2.resize(frame, (model_size, model_size), interpolation=cv2.INTER_LINEAR)
    if channel_order == "bgr":
        resized = cv2.cvtColor(resized, cv2.COLOR_BGR2RGB)
    data = resized.astype(np.float32) / 255.0
    return np.expand_dims(data, axis=0)
