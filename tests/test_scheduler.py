"""
Tests for the announcement scheduler and announcement text.
"""

import threading

import pytest

from visionav.announce import (
    AnnouncementScheduler,
    SchedulerConfig,
    SchedulerState,
    format_announcement,
    format_overlay_label,
)
from visionav.errors import ConfigurationError

from conftest import make_detection


@pytest.fixture
def scheduler(speech, labels):
    return AnnouncementScheduler(speech, SchedulerConfig(), labels=labels)


class TestFormatting:
    """Tests for spoken and overlay text."""

    def test_full_announcement(self):
        det = make_detection(label="car", distance=3.24)
        assert format_announcement(det, "left") == "car detected on the left at 3.2 meters"

    def test_ahead_without_distance(self):
        det = make_detection(label="gizmo")
        assert format_announcement(det, "") == "gizmo detected"

    def test_right_without_distance(self):
        det = make_detection(label="dog")
        assert format_announcement(det, "right") == "dog detected on the right"

    def test_overlay_label(self):
        det = make_detection(label="car", distance=3.24)
        assert format_overlay_label(det, "left") == "car (on the left) 3.2m"
        assert format_overlay_label(make_detection(label="car"), "") == "car"


class TestCooldown:
    """Tests for per-label cooldown."""

    def test_cooldown_sequence(self, scheduler, speech):
        """car at t=0 announced, t=2.0 suppressed, t=5.001 announced."""
        car = make_detection(label="car")

        first = scheduler.process_frame([car], 640, 480, now=0.0)
        second = scheduler.process_frame([car], 640, 480, now=2.0)
        third = scheduler.process_frame([car], 640, 480, now=5.001)

        assert len(first) == 1
        assert second == []
        assert len(third) == 1
        assert len(speech.spoken) == 2
        assert scheduler.last_spoken("car") == 5.001

    def test_cooldown_boundary_inclusive(self, scheduler):
        car = make_detection(label="car")
        scheduler.process_frame([car], 640, 480, now=0.0)

        assert len(scheduler.process_frame([car], 640, 480, now=5.0)) == 1

    def test_labels_independent(self, scheduler):
        scheduler.process_frame([make_detection(label="car")], 640, 480, now=0.0)

        announced = scheduler.process_frame(
            [make_detection(label="car"), make_detection(label="dog", x=200)],
            640,
            480,
            now=1.0,
        )

        assert [a.label for a in announced] == ["dog"]

    def test_custom_cooldown(self, speech, labels):
        scheduler = AnnouncementScheduler(speech, SchedulerConfig(cooldown_s=1.0), labels=labels)
        car = make_detection(label="car")

        scheduler.process_frame([car], 640, 480, now=0.0)

        assert len(scheduler.process_frame([car], 640, 480, now=1.0)) == 1

    def test_announcement_fields(self, scheduler, speech):
        det = make_detection(label="car", x=0, width=50, distance=4.0)

        (announcement,) = scheduler.process_frame([det], 1000, 750, now=3.0)

        assert announcement.label == "car"
        assert announcement.direction == "left"
        assert announcement.distance == 4.0
        assert announcement.spoken_at == 3.0
        assert announcement.text == "car detected on the left at 4.0 meters"
        assert speech.spoken == [announcement.text]

    def test_uses_clock_when_now_omitted(self, speech, labels):
        times = iter([10.0, 12.0, 16.0])
        scheduler = AnnouncementScheduler(speech, labels=labels, clock=lambda: next(times))
        car = make_detection(label="car")

        counts = [len(scheduler.process_frame([car], 640, 480)) for _ in range(3)]

        assert counts == [1, 0, 1]


class TestSnapshot:
    """Tests for the live snapshot."""

    def test_duplicate_labels_collapsed(self, scheduler):
        low = make_detection(label="person", confidence=0.6, x=0)
        high = make_detection(label="person", confidence=0.9, x=200)

        announced = scheduler.process_frame([low, high], 640, 480, now=0.0)

        snapshot = scheduler.snapshot()
        assert len(snapshot) == 1
        assert snapshot.detections[0].detection == high
        assert len(announced) == 1

    def test_snapshot_replaced_each_frame(self, scheduler):
        scheduler.process_frame([make_detection(label="car")], 640, 480, now=0.0)
        scheduler.process_frame([make_detection(label="person")], 640, 480, now=0.1)

        assert scheduler.snapshot().labels == ("person",)

    def test_snapshot_carries_frame_geometry(self, scheduler):
        scheduler.process_frame([make_detection(label="car")], 640, 480, rotation_degrees=90, now=1.5)

        (live,) = scheduler.snapshot()
        assert (live.frame_width, live.frame_height, live.rotation_degrees) == (640, 480, 90)
        assert live.observed_at == 1.5
        assert scheduler.snapshot().updated_at == 1.5

    def test_empty_frame_clears_snapshot_but_keeps_cooldown(self, scheduler):
        car = make_detection(label="car")
        scheduler.process_frame([car], 640, 480, now=0.0)
        scheduler.process_frame([], 640, 480, now=1.0)

        assert len(scheduler.snapshot()) == 0
        assert scheduler.process_frame([car], 640, 480, now=2.0) == []

    def test_old_snapshot_reference_unchanged(self, scheduler):
        scheduler.process_frame([make_detection(label="car")], 640, 480, now=0.0)
        held = scheduler.snapshot()

        scheduler.process_frame([make_detection(label="dog")], 640, 480, now=0.1)

        assert held.labels == ("car",)

    def test_staleness_measured_on_scheduler_clock(self, speech, labels):
        times = [0.0]
        scheduler = AnnouncementScheduler(speech, labels=labels, clock=lambda: times[0])
        scheduler.process_frame([make_detection(label="car")], 640, 480)
        lifetime = scheduler.config.detection_lifetime_s

        times[0] = 0.5
        assert scheduler.snapshot().is_stale(scheduler.now(), lifetime) is False
        times[0] = 1.5
        assert scheduler.snapshot().is_stale(scheduler.now(), lifetime) is True


class TestBlankTransition:
    """Tests for the blank-frame reset."""

    def test_blank_clears_state_and_stops_speech(self, scheduler, speech):
        car = make_detection(label="car")
        scheduler.process_frame([car], 640, 480, now=0.0)

        scheduler.blank(now=1.0)

        assert scheduler.state == SchedulerState.BLANKED
        assert len(scheduler.snapshot()) == 0
        assert scheduler.snapshot().blanked is True
        assert scheduler.speech_state() == {}
        assert speech.stop_count == 1

    def test_announce_again_after_blank(self, scheduler):
        car = make_detection(label="car")
        scheduler.process_frame([car], 640, 480, now=0.0)
        scheduler.blank(now=1.0)

        assert len(scheduler.process_frame([car], 640, 480, now=2.0)) == 1
        assert scheduler.state == SchedulerState.TRACKING

    def test_reset_returns_to_idle(self, scheduler):
        scheduler.process_frame([make_detection(label="car")], 640, 480, now=0.0)

        scheduler.reset()

        assert scheduler.state == SchedulerState.IDLE
        assert scheduler.speech_state() == {}
        assert scheduler.snapshot().updated_at is None


class TestContractViolations:
    """Invalid input raises and leaves state untouched."""

    def test_unknown_label_rejected(self, scheduler, speech):
        scheduler.process_frame([make_detection(label="car")], 640, 480, now=0.0)

        with pytest.raises(ConfigurationError):
            scheduler.process_frame([make_detection(label="unicorn")], 640, 480, now=1.0)

        assert scheduler.snapshot().labels == ("car",)
        assert list(scheduler.speech_state()) == ["car"]
        assert len(speech.spoken) == 1

    def test_bad_rotation_rejected(self, scheduler):
        scheduler.process_frame([make_detection(label="car")], 640, 480, now=0.0)
        before = scheduler.snapshot()

        with pytest.raises(ConfigurationError):
            scheduler.process_frame([make_detection(label="dog")], 640, 480, rotation_degrees=45, now=1.0)

        assert scheduler.snapshot() is before
        assert scheduler.last_spoken("dog") is None

    def test_any_label_allowed_without_label_table(self, speech):
        scheduler = AnnouncementScheduler(speech)

        assert len(scheduler.process_frame([make_detection(label="unicorn")], 640, 480, now=0.0)) == 1


class TestConcurrency:
    """Concurrent frames never announce a label twice inside the cooldown."""

    def test_parallel_frames_single_announcement(self, scheduler, speech):
        car = make_detection(label="car")
        barrier = threading.Barrier(8)
        results = []
        results_lock = threading.Lock()

        def worker(offset):
            barrier.wait()
            announced = scheduler.process_frame([car], 640, 480, now=offset * 0.01)
            with results_lock:
                results.extend(announced)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 1
        assert len(speech.spoken) == 1
