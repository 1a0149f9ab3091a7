"""
Tests for the frame validity gate.
"""

import numpy as np
import pytest

from visionav.models.frame import FrameData
from visionav.pipeline.stages.validity import (
    FrameGateConfig,
    FrameValidityGate,
    FrameVerdict,
    luma_variance,
    mean_luma,
    to_luma,
)

from conftest import noisy_frame


def _frame(array, **kwargs):
    return FrameData.from_numpy(array, timestamp=0.0, **kwargs)


class TestLuma:
    """Tests for grayscale conversion."""

    def test_bgr_weights(self):
        blue = np.zeros((2, 2, 3), dtype=np.uint8)
        blue[..., 0] = 255

        assert to_luma(blue, "bgr")[0, 0] == pytest.approx(0.114 * 255)
        assert to_luma(blue, "rgb")[0, 0] == pytest.approx(0.299 * 255)

    def test_single_channel_passthrough(self):
        gray = np.full((4, 4), 77, dtype=np.uint8)
        assert mean_luma(gray) == pytest.approx(77.0)

    def test_unsupported_shape(self):
        with pytest.raises(ValueError):
            to_luma(np.zeros((4, 4, 2), dtype=np.uint8))

    def test_population_variance(self):
        gray = np.array([[90, 110], [110, 90]], dtype=np.uint8)
        assert luma_variance(gray) == pytest.approx(100.0)


class TestFrameValidityGate:
    """Tests for the blank / low-variance / valid verdicts."""

    def test_dark_frame_is_blank(self):
        gate = FrameValidityGate()
        frame = np.full((48, 64, 3), 15, dtype=np.uint8)

        assert gate.evaluate(_frame(frame)) == FrameVerdict.BLANK

    def test_dark_noisy_frame_is_blank(self):
        """Blank takes priority over variance."""
        rng = np.random.default_rng(1)
        frame = rng.integers(0, 30, size=(48, 64, 3), dtype=np.uint8)

        assert FrameValidityGate().evaluate(_frame(frame)) == FrameVerdict.BLANK

    def test_flat_gray_is_low_variance(self):
        frame = np.full((48, 64, 3), 128, dtype=np.uint8)

        assert FrameValidityGate().evaluate(_frame(frame)) == FrameVerdict.LOW_VARIANCE

    def test_noisy_frame_is_valid(self):
        assert FrameValidityGate().evaluate(_frame(noisy_frame())) == FrameVerdict.VALID

    def test_variance_threshold_inclusive(self):
        frame = np.tile(np.array([[90, 110], [110, 90]], dtype=np.uint8), (8, 8))

        at_threshold = FrameValidityGate(FrameGateConfig(min_variance=100.0))
        below_threshold = FrameValidityGate(FrameGateConfig(min_variance=99.9))

        assert at_threshold.evaluate(_frame(frame)) == FrameVerdict.LOW_VARIANCE
        assert below_threshold.evaluate(_frame(frame)) == FrameVerdict.VALID

    def test_luma_plane_used_for_blank_check(self):
        data = _frame(noisy_frame())
        data.luma = np.zeros((data.height, data.width), dtype=np.uint8)

        assert FrameValidityGate().evaluate(data) == FrameVerdict.BLANK

    def test_empty_frame_is_blank(self):
        frame = np.zeros((0, 0, 3), dtype=np.uint8)

        assert FrameValidityGate().evaluate(_frame(frame)) == FrameVerdict.BLANK
