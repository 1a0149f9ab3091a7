"""
TFLite inference backend.

Loads a float32 YOLOv8 TFLite export (input (1, S, S, 3), output
(1, 4 + K, N)) with `tflite_runtime`, falling back to `tensorflow.lite`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

import numpy as np

from .backend import InferenceBackend


@dataclass(frozen=True)
class TfliteConfig:
    model_path: str
    num_threads: int = 4


def _load_interpreter_module():
    try:
        import tflite_runtime.interpreter as tflite  # type: ignore
        return tflite
    except ImportError:
        pass
    try:
        import tensorflow.lite as tflite  # type: ignore
        return tflite
    except ImportError as e:
        raise ImportError(
            "No TFLite runtime installed. Install with `pip install tflite-runtime` "
            "(or `pip install tensorflow`)."
        ) from e


class TfliteBackend(InferenceBackend):
    def __init__(self, cfg: TfliteConfig):
        self.cfg = cfg
        model_path = Path(cfg.model_path)
        if not model_path.exists():
            raise FileNotFoundError(f"Model file not found: {model_path}")

        tflite = _load_interpreter_module()
        self._interpreter = tflite.Interpreter(model_path=str(model_path), num_threads=cfg.num_threads)
        self._interpreter.allocate_tensors()
        self._input = self._interpreter.get_input_details()[0]
        self._output = self._interpreter.get_output_details()[0]
        logging.info(
            f"TFLite model loaded: {model_path} input={list(self._input['shape'])} "
            f"output={list(self._output['shape'])}"
        )

    @property
    def input_shape(self) -> Tuple[int, ...]:
        return tuple(int(v) for v in self._input["shape"])

    @property
    def output_shape(self) -> Tuple[int, ...]:
        return tuple(int(v) for v in self._output["shape"])

    @property
    def num_classes(self) -> int:
        """Class channels in the output (channels minus the 4 box parameters)."""
        return self.output_shape[1] - 4

    def infer(self, tensor: np.ndarray) -> np.ndarray:
        self._interpreter.set_tensor(self._input["index"], tensor.astype(self._input["dtype"]))
        self._interpreter.invoke()
        return np.array(self._interpreter.get_tensor(self._output["index"]))
