"""
Inference backends. TFLite lives in `inference.tflite_backend` and is
imported on demand.
"""

from .backend import InferenceBackend, preprocess_frame

__all__ = ["InferenceBackend", "preprocess_frame"]
