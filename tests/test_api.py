"""
Tests for the status API.
"""

import time

import pytest
from fastapi.testclient import TestClient

from visionav.announce import AnnouncementScheduler
from visionav.detection import DetectionDecoder, SuppressionEngine
from visionav.models.frame import FrameData
from visionav.pipeline import DetectStage, FrameValidityGate, PipelineEngine
from visionav.web import create_app
from visionav.web.routes.api import _compute_warnings

from conftest import FakeBackend, make_output, noisy_frame


@pytest.fixture
def clock():
    """Mutable scheduler time; set clock[0] to move it."""
    return [0.0]


@pytest.fixture
def engine(labels, speech, clock):
    output = make_output(len(labels), [(0.1, 0.5, 0.1, 0.2, 1, 0.9)])
    stage = DetectStage(FakeBackend(output), DetectionDecoder(labels), SuppressionEngine())
    return PipelineEngine(
        source=None,
        gate=FrameValidityGate(),
        detect_stage=stage,
        scheduler=AnnouncementScheduler(speech, labels=labels, clock=lambda: clock[0]),
        speech=speech,
    )


@pytest.fixture
def client(engine):
    return TestClient(create_app(engine))


class TestComputeWarnings:
    """Tests for warning computation logic."""

    def test_no_warnings_when_healthy(self):
        assert _compute_warnings(0.5) == []

    def test_camera_stale_warning(self):
        """camera_stale when last_frame_age > 2s but <= 10s."""
        warnings = _compute_warnings(5.0)
        assert "camera_stale" in warnings
        assert "camera_offline" not in warnings

    def test_camera_offline_warning(self):
        warnings = _compute_warnings(15.0)
        assert warnings == ["camera_offline"]

    def test_camera_offline_when_no_timestamp(self):
        assert _compute_warnings(None) == ["camera_offline"]


class TestEndpoints:
    """Tests for the HTTP endpoints."""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_status_before_first_frame(self, client):
        data = client.get("/api/status").json()

        assert data["running"] is False
        assert data["frames"] == 0
        assert data["scheduler_state"] == "idle"
        assert data["last_frame_age_s"] is None
        assert data["warnings"] == ["camera_offline"]

    def test_status_after_frame(self, client, engine):
        engine.process_frame(FrameData.from_numpy(noisy_frame(), timestamp=time.monotonic()))

        data = client.get("/api/status").json()

        assert data["frames"] == 1
        assert data["announcements"] == 1
        assert data["scheduler_state"] == "tracking"
        assert data["warnings"] == []

    def test_detections_without_screen(self, client, engine, clock):
        engine.process_frame(FrameData.from_numpy(noisy_frame(), timestamp=0.0), now=5.0)
        clock[0] = 5.25

        data = client.get("/api/detections").json()

        assert data["age_s"] == 0.25
        assert data["stale"] is False
        assert data["blanked"] is False
        (det,) = data["detections"]
        assert det["label"] == "car"
        assert det["direction"] == "left"
        assert det["overlay_label"].startswith("car (on the left)")
        assert det["screen"] is None

    def test_detections_stale_after_lifetime(self, client, engine, clock):
        engine.process_frame(FrameData.from_numpy(noisy_frame(), timestamp=0.0), now=5.0)
        clock[0] = 7.0

        data = client.get("/api/detections").json()

        assert data["age_s"] == 2.0
        assert data["stale"] is True
        assert [d["label"] for d in data["detections"]] == ["car"]

    def test_detections_before_first_frame(self, client):
        data = client.get("/api/detections").json()

        assert data["age_s"] is None
        assert data["stale"] is True
        assert data["detections"] == []

    def test_detections_mapped_to_screen(self, client, engine):
        engine.process_frame(FrameData.from_numpy(noisy_frame(), timestamp=0.0), now=5.0)

        data = client.get("/api/detections", params={"screen_width": 120, "screen_height": 160}).json()

        screen = data["detections"][0]["screen"]
        assert 0 <= screen["x"] <= 120
        assert 0 <= screen["y"] <= 160
        assert screen["width"] > 0

    def test_detections_need_both_screen_dimensions(self, client):
        response = client.get("/api/detections", params={"screen_width": 120})

        assert response.status_code == 400

    def test_detections_after_blank(self, client, engine):
        engine.scheduler.blank(now=1.0)

        data = client.get("/api/detections").json()

        assert data["blanked"] is True
        assert data["detections"] == []
