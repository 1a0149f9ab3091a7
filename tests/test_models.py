"""
Tests for typed models.
"""

import numpy as np
import pytest

from visionav.errors import ConfigurationError
from visionav.models import (
    Config,
    Detection,
    FrameData,
    LiveDetection,
    LiveSnapshot,
)

from conftest import make_detection


class TestDetection:
    """Tests for the Detection model."""

    def test_edges_and_area(self):
        det = make_detection(x=10, y=20, width=30, height=40)

        assert det.right == 40
        assert det.bottom == 60
        assert det.area == 1200

    def test_distance_defaults_to_unknown(self):
        det = Detection(label="dog", confidence=0.7, x=10, y=20, width=30, height=40)

        assert det.distance is None

    def test_immutable(self):
        det = make_detection()
        with pytest.raises(AttributeError):
            det.confidence = 0.1


class TestFrameData:
    """Tests for FrameData."""

    def test_from_numpy(self):
        frame = np.zeros((480, 640, 3), dtype=np.uint8)

        data = FrameData.from_numpy(frame, timestamp=1.0, frame_index=3, source="cam", rotation_degrees=90)

        assert data.size == (640, 480)
        assert data.rotation_degrees == 90

    @pytest.mark.parametrize(
        "shape, rotation, expected",
        [
            ((480, 640, 3), 0, False),
            ((480, 640, 3), 90, True),
            ((640, 480, 3), 0, True),
            ((640, 480, 3), 270, False),
        ],
    )
    def test_is_portrait(self, shape, rotation, expected):
        data = FrameData.from_numpy(np.zeros(shape, dtype=np.uint8), timestamp=0.0, rotation_degrees=rotation)
        assert data.is_portrait is expected


class TestLiveModels:
    """Tests for the scheduler snapshot models."""

    def test_bad_rotation_rejected(self):
        with pytest.raises(ConfigurationError):
            LiveDetection(make_detection(), observed_at=0.0, frame_width=640, frame_height=480, rotation_degrees=30)

    def test_snapshot_staleness(self):
        snapshot = LiveSnapshot(updated_at=10.0)

        assert snapshot.is_stale(10.5, 1.0) is False
        assert snapshot.is_stale(11.5, 1.0) is True
        assert LiveSnapshot().is_stale(0.0, 1.0) is True


class TestConfig:
    """Tests for the typed Config."""

    def test_defaults(self):
        config = Config.from_dict({})

        assert config.model.model_size == 320
        assert config.model.conf_threshold == 0.5
        assert config.model.iou_threshold == 0.45
        assert config.model.focal_length_px == 400.0
        assert config.gate.blank_luma_threshold == 20.0
        assert config.gate.min_variance == 50.0
        assert config.announce.cooldown_s == 5.0
        assert config.web.enabled is False

    def test_round_trip(self, valid_config):
        config = Config.from_dict(valid_config)

        again = Config.from_dict(config.to_dict())

        assert again == config
        assert again.camera.rotation_degrees == 90
