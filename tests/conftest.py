"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from visionav.models.detection import Detection  # noqa: E402

LABELS = ["person", "car", "dog", "gizmo"]


class RecordingSpeech:
    """Speech sink that records calls instead of speaking."""

    def __init__(self):
        self.spoken = []
        self.stop_count = 0
        self.shut_down = False

    def enqueue(self, text):
        self.spoken.append(text)

    def stop_all(self):
        self.stop_count += 1

    def shutdown(self):
        self.shut_down = True


class FakeBackend:
    """Inference backend returning a fixed output tensor."""

    def __init__(self, output=None, num_classes=len(LABELS), error=None):
        self.output = output if output is not None else make_output(num_classes, [])
        self.num_classes = num_classes
        self.error = error
        self.calls = 0

    def infer(self, tensor):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.output


def make_output(num_classes, candidates, num_candidates=None):
    """
    Build a (1, 4 + K, N) detector output.

    Args:
        num_classes: K.
        candidates: List of (cx, cy, w, h, class_index, score), normalized box.
        num_candidates: N; padded with all-zero candidates.
    """
    n = num_candidates if num_candidates is not None else max(len(candidates), 1)
    out = np.zeros((1, 4 + num_classes, n), dtype=np.float32)
    for i, (cx, cy, w, h, cls, score) in enumerate(candidates):
        out[0, 0:4, i] = (cx, cy, w, h)
        out[0, 4 + cls, i] = score
    return out


def make_detection(label="car", confidence=0.9, x=0.0, y=0.0, width=50.0, height=50.0, distance=None):
    return Detection(
        label=label,
        confidence=confidence,
        x=x,
        y=y,
        width=width,
        height=height,
        distance=distance,
    )


def noisy_frame(height=120, width=160, seed=0):
    """Random BGR frame that passes the validity gate."""
    rng = np.random.default_rng(seed)
    return rng.integers(40, 256, size=(height, width, 3), dtype=np.uint8)


@pytest.fixture
def labels():
    return list(LABELS)


@pytest.fixture
def speech():
    return RecordingSpeech()


@pytest.fixture
def labels_file(tmp_path):
    path = tmp_path / "labels.txt"
    path.write_text("\n".join(LABELS) + "\n")
    return path


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
camera:
  backend: "opencv"
  device_id: 0
  resolution: [640, 480]
  fps: 30
  rotation_degrees: 0

model:
  path: "assets/model.tflite"
  labels_path: "assets/labels.txt"
  model_size: 320
  conf_threshold: 0.5
  iou_threshold: 0.45

announce:
  cooldown_s: 5.0

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "camera": {
            "backend": "opencv",
            "device_id": 0,
            "resolution": [1280, 720],
            "fps": 30,
            "rotation_degrees": 90,
        },
        "model": {
            "path": "assets/yolov8n_float32.tflite",
            "labels_path": "assets/labels.txt",
            "model_size": 320,
            "conf_threshold": 0.5,
            "iou_threshold": 0.45,
            "focal_length_px": 400.0,
        },
        "announce": {
            "cooldown_s": 5.0,
            "detection_lifetime_s": 1.0,
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }
